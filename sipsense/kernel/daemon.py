from __future__ import annotations

import asyncio
import logging
import random
from datetime import datetime
from typing import Any

from .config import KernelConfig, load_config
from .event_bus import EventBus
from .insights import summarize
from .notifications import Notification, NotificationEngine
from .recommender import DrinkSuggestion, recommend
from .scheduler import Scheduler, resolve_cadences
from .scoring import ScoreBreakdown, score, score_breakdown
from .sensors import HourWindow, SimulatedSensorDriver
from .state_model import ActivitySnapshot, SnapshotStore, SnapshotUpdateRejected
from .time_utils import Clock, SystemClock, resolve_tz


logger = logging.getLogger(__name__)


class WellnessDaemon:
    """
    Session-scoped owner of the snapshot store and notification engine.

    Presentation layers talk to this facade only: they read the snapshot,
    score, recommendation and notification feed, and write partial updates.
    Score and recommendation are recomputed on every read.
    """

    def __init__(
        self,
        config: KernelConfig | None = None,
        clock: Clock | None = None,
        store: SnapshotStore | None = None,
        engine: NotificationEngine | None = None,
        sensor: SimulatedSensorDriver | None = None,
        bus: EventBus | None = None,
    ) -> None:
        self.cfg = config or load_config()
        self.tz = resolve_tz(self.cfg.timezone)
        self.clock = clock or SystemClock(self.tz)
        self.store = store or SnapshotStore()
        self.bus = bus or EventBus()

        notif_cfg = self.cfg.notifications
        self.engine = engine or NotificationEngine(
            retention=notif_cfg.retention,
            dedup_window=notif_cfg.dedup_window,
            max_active=notif_cfg.max_active,
        )

        sensor_cfg = self.cfg.sensors
        self.sensor = sensor or SimulatedSensorDriver(
            working_hours=HourWindow(*sensor_cfg.working_hours),
            workout_window=HourWindow(*sensor_cfg.workout_window),
            max_step_increment=sensor_cfg.max_step_increment,
            rng=random.Random(sensor_cfg.seed),
        )

        self.scheduler = Scheduler(self, self.clock, resolve_cadences(self.cfg.cadences))
        self._scheduler_task: asyncio.Task | None = None
        self._day = self.clock.now().date()

        self.store.subscribe(self._on_snapshot_changed)

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    async def start(self) -> None:
        logger.info("Starting wellness daemon")
        await self.evaluate_notifications()
        self.scheduler.start()
        self._scheduler_task = asyncio.create_task(self.scheduler.run_forever())

    async def stop(self) -> None:
        """Gracefully stop the periodic drives."""
        task = self._scheduler_task
        if task and not task.done():
            task.cancel()
            # The task's CancelledError stays in the task; cancelling stop() propagates.
            done, _ = await asyncio.wait({task}, timeout=5.0)
            if not done:
                logger.warning("Scheduler did not stop within 5s")
        self._scheduler_task = None
        logger.info("Wellness daemon stopped")

    @property
    def running(self) -> bool:
        return self._scheduler_task is not None and not self._scheduler_task.done()

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def get_snapshot(self) -> ActivitySnapshot:
        return self.store.snapshot

    def get_score(self) -> int:
        return score(self.store.snapshot)

    def get_score_breakdown(self) -> ScoreBreakdown:
        return score_breakdown(self.store.snapshot)

    def get_recommendation(self) -> DrinkSuggestion:
        return recommend(self.store.snapshot, self.clock.now())

    def get_insights(self) -> dict[str, Any]:
        return summarize(self.store.snapshot, self.cfg.hydration.daily_goal_ml)

    def list_active_notifications(self) -> list[Notification]:
        return self.engine.active()

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    def update_snapshot(self, partial: dict[str, Any]) -> ActivitySnapshot:
        return self.store.update(partial)

    def dismiss_notification(self, notification_id: int) -> None:
        self.engine.dismiss(notification_id)

    def log_water(self, ml: int = 250) -> ActivitySnapshot:
        if ml <= 0:
            raise SnapshotUpdateRejected(f"Water amount must be positive: {ml}")
        return self.store.update({"water_intake": self.store.snapshot.water_intake + ml})

    def log_workout(self, minutes: int = 30) -> ActivitySnapshot:
        if minutes <= 0:
            raise SnapshotUpdateRejected(f"Workout minutes must be positive: {minutes}")
        return self.store.update(
            {"workout_minutes": self.store.snapshot.workout_minutes + minutes}
        )

    def log_caffeine(self, mg: int) -> ActivitySnapshot:
        if mg <= 0:
            raise SnapshotUpdateRejected(f"Caffeine amount must be positive: {mg}")
        return self.store.update({"caffeine_intake": self.store.snapshot.caffeine_intake + mg})

    def log_meal(self, at: datetime | None = None) -> ActivitySnapshot:
        return self.store.update({"last_meal": at or self.clock.now()})

    # -------------------------------------------------------------------------
    # Drive hooks
    # -------------------------------------------------------------------------

    async def evaluate_notifications(self) -> list[Notification]:
        """One notification pass over a single, consistent snapshot read."""
        snapshot = self.store.snapshot
        now = self.clock.now()
        created = self.engine.evaluate(
            snapshot,
            recommend(snapshot, now),
            score(snapshot),
            now,
        )
        for n in created:
            await self.bus.publish("notifications", n.to_dict())
        return created

    def check_day_rollover(self) -> bool:
        today = self.clock.now().date()
        if today == self._day:
            return False
        logger.info(f"Day rollover {self._day} -> {today}")
        self._day = today
        self.store.reset_day()
        return True

    def _on_snapshot_changed(self, snapshot: ActivitySnapshot, changed: frozenset[str]) -> None:
        self.bus.publish_nowait("snapshot", {"changed": sorted(changed), **snapshot.to_dict()})
