"""
Read-only summaries of a snapshot for dashboards and the CLI.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .scoring import score
from .state_model import ActivitySnapshot


DEFAULT_DAILY_GOAL_ML = 2500


@dataclass(frozen=True)
class HydrationProgress:
    intake_ml: int
    goal_ml: int
    percent: float  # capped at 100
    status: str  # "Optimal" from 2000 ml, else "Low"
    level: str  # low / moderate / good

    def to_dict(self) -> dict[str, Any]:
        return {
            "intake_ml": self.intake_ml,
            "goal_ml": self.goal_ml,
            "percent": self.percent,
            "status": self.status,
            "level": self.level,
        }


def hydration_progress(
    snapshot: ActivitySnapshot, goal_ml: int = DEFAULT_DAILY_GOAL_ML
) -> HydrationProgress:
    intake = snapshot.water_intake
    if intake < 1000:
        level = "low"
    elif intake < 2000:
        level = "moderate"
    else:
        level = "good"

    return HydrationProgress(
        intake_ml=intake,
        goal_ml=goal_ml,
        percent=round(min(intake / goal_ml * 100, 100.0), 1),
        status="Optimal" if intake >= 2000 else "Low",
        level=level,
    )


def heart_rate_status(bpm: int) -> str:
    if bpm < 60:
        return "Low"
    if bpm <= 100:
        return "Normal"
    if bpm <= 120:
        return "Elevated"
    return "High"


def score_band(value: int) -> str:
    if value >= 80:
        return "excellent"
    if value >= 60:
        return "fair"
    return "low"


def summarize(snapshot: ActivitySnapshot, goal_ml: int = DEFAULT_DAILY_GOAL_ML) -> dict[str, Any]:
    """One dict with everything a status panel shows besides the recommendation."""
    value = score(snapshot)
    return {
        "score": value,
        "score_band": score_band(value),
        "heart_rate_status": heart_rate_status(snapshot.heart_rate),
        "hydration": hydration_progress(snapshot, goal_ml).to_dict(),
    }
