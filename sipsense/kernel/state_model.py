"""
Activity snapshot model and its single-writer store.

The snapshot is an immutable pydantic model. SnapshotStore owns the only
reference and replaces it wholesale on each accepted partial update, so a
reader always sees either the previous or the next snapshot, never a mix.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Mapping
from datetime import datetime
from enum import Enum
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .metrics_registry import get_metrics


logger = logging.getLogger(__name__)


class StressLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class Location(str, Enum):
    HOME = "home"
    OFFICE = "office"
    GYM = "gym"
    OUTDOOR = "outdoor"


class Weather(str, Enum):
    HOT = "hot"
    COLD = "cold"
    MODERATE = "moderate"
    HUMID = "humid"


NonNegativeInt = Annotated[int, Field(ge=0, strict=True)]
HeartRate = Annotated[int, Field(gt=0, le=250, strict=True)]
SleepHours = Annotated[float, Field(ge=0, le=24, strict=True, allow_inf_nan=False)]

# Fields cleared by a day rollover.
DAILY_COUNTERS = ("steps", "water_intake", "caffeine_intake", "workout_minutes")


class ActivitySnapshot(BaseModel):
    """Current belief about the user's state."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    steps: NonNegativeInt = 0
    heart_rate: HeartRate = 72  # bpm
    sleep_hours: SleepHours = 7.0
    workout_minutes: NonNegativeInt = 0
    stress_level: StressLevel = StressLevel.LOW
    location: Location = Location.HOME
    weather: Weather = Weather.MODERATE
    last_meal: datetime | None = None
    water_intake: NonNegativeInt = 0  # ml
    caffeine_intake: NonNegativeInt = 0  # mg

    @field_validator("last_meal")
    @classmethod
    def _require_aware(cls, value: datetime | None) -> datetime | None:
        if value is not None and value.tzinfo is None:
            raise ValueError("last_meal must include timezone info")
        return value

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-friendly dict."""
        return self.model_dump(mode="json")


class SnapshotUpdateRejected(ValueError):
    """A partial update failed validation; the previous snapshot is kept."""

    def __init__(self, message: str, errors: list[dict[str, Any]] | None = None) -> None:
        super().__init__(message)
        self.errors = errors or []


SnapshotListener = Callable[[ActivitySnapshot, frozenset[str]], None]


class SnapshotStore:
    """
    Owns the current ActivitySnapshot.

    All mutation goes through update() (merge a partial dict) or
    reset_day(). Listeners are called after a change has been applied.

    Example usage:
        store = SnapshotStore()
        store.update({"water_intake": 250})
        store.snapshot.water_intake  # 250
    """

    def __init__(self, initial: ActivitySnapshot | None = None) -> None:
        self._snapshot = initial or ActivitySnapshot()
        self._lock = threading.Lock()
        self._listeners: list[SnapshotListener] = []
        self._metrics = get_metrics()

    @property
    def snapshot(self) -> ActivitySnapshot:
        return self._snapshot

    def get(self) -> ActivitySnapshot:
        return self._snapshot

    def subscribe(self, listener: SnapshotListener) -> None:
        self._listeners.append(listener)

    def update(self, partial: Mapping[str, Any] | None) -> ActivitySnapshot:
        """
        Merge a partial update into the snapshot.

        Raises:
            SnapshotUpdateRejected: unknown field, wrong type, invalid enum,
                out-of-range value, or a decrease in water intake.
        """
        if not partial:
            return self._snapshot

        with self._lock:
            current = self._snapshot
            merged = {**current.model_dump(), **dict(partial)}
            try:
                candidate = ActivitySnapshot.model_validate(merged)
            except ValidationError as e:
                self._metrics.snapshot_updates.labels(outcome="rejected").inc()
                fields = sorted({".".join(str(p) for p in err["loc"]) for err in e.errors()})
                logger.warning(f"Rejected snapshot update on {fields}")
                raise SnapshotUpdateRejected(
                    f"Invalid snapshot update: {', '.join(fields)}",
                    errors=e.errors(),
                ) from e

            if candidate.water_intake < current.water_intake:
                self._metrics.snapshot_updates.labels(outcome="rejected").inc()
                logger.warning(
                    f"Rejected water_intake decrease {current.water_intake} -> {candidate.water_intake}"
                )
                raise SnapshotUpdateRejected(
                    "water_intake cannot decrease within a day; use reset_day()",
                    errors=[{"loc": ("water_intake",), "type": "monotonic"}],
                )

            self._snapshot = candidate

        self._metrics.snapshot_updates.labels(outcome="applied").inc()
        changed = frozenset(
            name for name in partial if getattr(current, name) != getattr(candidate, name)
        )
        logger.debug(f"Snapshot updated: {sorted(changed)}")
        self._notify(candidate, changed)
        return candidate

    def reset_day(self) -> ActivitySnapshot:
        """Clear the daily counters (the only path that lowers water intake)."""
        defaults = ActivitySnapshot()
        with self._lock:
            current = self._snapshot
            self._snapshot = current.model_copy(
                update={name: getattr(defaults, name) for name in DAILY_COUNTERS}
            )
            snapshot = self._snapshot
        logger.info("Daily counters reset")
        self._notify(snapshot, frozenset(DAILY_COUNTERS))
        return snapshot

    def _notify(self, snapshot: ActivitySnapshot, changed: frozenset[str]) -> None:
        for listener in self._listeners:
            listener(snapshot, changed)
