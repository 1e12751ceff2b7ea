"""
Simulated sensor driver.

Stands in for real wearable ingestion: each tick produces a partial update
for the snapshot store. Nothing in the engines depends on this driver; any
caller of SnapshotStore.update() is an equally valid source.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from .state_model import ActivitySnapshot, Location, StressLevel


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HourWindow:
    """Inclusive range of local hours, e.g. 9-17 covers 09:00 to 17:59."""

    start: int
    end: int

    def __contains__(self, hour: int) -> bool:
        return self.start <= hour <= self.end


class SimulatedSensorDriver:
    def __init__(
        self,
        working_hours: HourWindow = HourWindow(9, 17),
        workout_window: HourWindow = HourWindow(17, 19),
        max_step_increment: int = 50,
        rng: random.Random | None = None,
    ) -> None:
        self.working_hours = working_hours
        self.workout_window = workout_window
        self.max_step_increment = max_step_increment
        self.rng = rng or random.Random()

    def read(self, snapshot: ActivitySnapshot, now: datetime) -> dict[str, Any]:
        """Build the partial update for one tick."""
        hour = now.hour
        working = hour in self.working_hours
        workout = hour in self.workout_window

        if workout:
            heart_rate = 85 + self.rng.randrange(20)
        else:
            heart_rate = 70 + self.rng.randrange(10)

        if working:
            location = Location.OFFICE
        elif workout:
            location = Location.GYM
        else:
            location = Location.HOME

        update = {
            "steps": snapshot.steps + self.rng.randrange(self.max_step_increment),
            "heart_rate": heart_rate,
            "location": location,
            "stress_level": StressLevel.MEDIUM if working else StressLevel.LOW,
        }
        logger.debug(f"Sensor tick at {now.isoformat()}: {update}")
        return update
