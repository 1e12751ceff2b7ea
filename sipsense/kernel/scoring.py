"""
Wellness score: a 0-100 integer built from five independently capped parts.
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from typing import Any

from .state_model import ActivitySnapshot


STEPS_CAP = 25.0
HEART_RATE_CAP = 20.0
SLEEP_CAP = 25.0
HYDRATION_CAP = 20.0
WORKOUT_CAP = 10.0


@dataclass(frozen=True)
class ScoreBreakdown:
    steps: float
    heart_rate: float
    sleep: float
    hydration: float
    workout: float

    @property
    def total(self) -> float:
        return self.steps + self.heart_rate + self.sleep + self.hydration + self.workout

    @property
    def score(self) -> int:
        # Halves round up; round() would round half to even.
        return int(math.floor(self.total + 0.5))

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["score"] = self.score
        return data


def heart_rate_points(bpm: int) -> float:
    """Three-tier banding: normal, borderline, everything else."""
    if 60 <= bpm <= 100:
        return 20.0
    if 50 <= bpm <= 110:
        return 15.0
    return 10.0


def sleep_points(hours: float) -> float:
    if 7 <= hours <= 9:
        return 25.0
    if 6 <= hours <= 10:
        return 20.0
    return 10.0


def score_breakdown(snapshot: ActivitySnapshot) -> ScoreBreakdown:
    return ScoreBreakdown(
        steps=min(snapshot.steps / 16, STEPS_CAP),
        heart_rate=heart_rate_points(snapshot.heart_rate),
        sleep=sleep_points(snapshot.sleep_hours),
        hydration=min(snapshot.water_intake / 125, HYDRATION_CAP),
        workout=min(snapshot.workout_minutes / 3, WORKOUT_CAP),
    )


def score(snapshot: ActivitySnapshot) -> int:
    """Wellness score in [0, 100] for the given snapshot."""
    return score_breakdown(snapshot).score
