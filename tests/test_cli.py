"""Tests for the sipsense CLI."""

import pytest
from typer.testing import CliRunner

from sipsense.cli import app


runner = CliRunner()

# Naive --at values are read in the configured zone (Asia/Kolkata)
LATE_MORNING = "2025-01-01T11:00:00"


def invoke(*args):
    return runner.invoke(app, list(args))


def test_recommend():
    result = invoke("recommend", "--at", LATE_MORNING)
    assert result.exit_code == 0, result.output
    assert "Coconut Water with Lemon" in result.output
    assert "high urgency" in result.output


def test_recommend_with_overrides():
    result = invoke(
        "recommend", "--at", LATE_MORNING, "--set", "heart_rate=120", "--set", "workout_minutes=30"
    )
    assert result.exit_code == 0, result.output
    assert "Electrolyte Sports Drink" in result.output


def test_status():
    result = invoke("status", "--at", LATE_MORNING)
    assert result.exit_code == 0, result.output
    assert "Health score:" in result.output
    assert "45/100" in result.output
    assert "Hydration: 0/2500 ml" in result.output


def test_notifications():
    result = invoke("notifications", "--at", LATE_MORNING)
    assert result.exit_code == 0, result.output
    assert "Hydration" in result.output


def test_no_notifications():
    result = invoke("notifications", "--at", "2025-01-01T20:00:00", "--set", "water_intake=2000")
    assert result.exit_code == 0, result.output
    assert "No notifications right now" in result.output


def test_rejected_override_exits_with_error():
    result = invoke("recommend", "--set", "heart_rate=-5")
    assert result.exit_code == 2
    assert "Rejected" in result.output


def test_malformed_override():
    result = invoke("recommend", "--set", "water_intake")
    assert result.exit_code == 2


@pytest.mark.parametrize("goal, drink", [("energy", "Matcha Latte"), ("Recovery", "Chocolate Milk")])
def test_catalog(goal, drink):
    result = invoke("catalog", "--goal", goal)
    assert result.exit_code == 0, result.output
    assert drink in result.output


def test_catalog_unknown_goal():
    result = invoke("catalog", "--goal", "sleep")
    assert result.exit_code == 2
    assert "Unknown goal" in result.output


def test_short_live_session():
    result = invoke("run", "--seconds", "0.2", "--set", "water_intake=2000")
    assert result.exit_code == 0, result.output
    assert "Final score:" in result.output
