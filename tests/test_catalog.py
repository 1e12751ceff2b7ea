"""Tests for the goal-based drink catalog."""

import pytest

from sipsense.kernel import catalog


def test_goals():
    assert catalog.goals() == ["hydration", "detox", "energy", "recovery"]


@pytest.mark.parametrize("goal", ["hydration", "detox", "energy", "recovery"])
def test_each_goal_has_three_drinks(goal):
    drinks = catalog.alternatives(goal)
    assert len(drinks) == 3
    assert all(d.cost > 0 for d in drinks)


def test_goal_lookup_is_case_insensitive():
    assert catalog.alternatives("Energy") == catalog.alternatives("energy")


def test_alternatives_returns_a_copy():
    catalog.alternatives("detox").clear()
    assert len(catalog.alternatives("detox")) == 3


def test_unknown_goal():
    with pytest.raises(catalog.UnknownGoal, match="sleep"):
        catalog.alternatives("sleep")
    with pytest.raises(KeyError):
        catalog.cheapest("sleep")


def test_cheapest():
    assert catalog.cheapest("hydration").name == "Lemon Water"
    assert catalog.cheapest("recovery").name == "Chocolate Milk"
