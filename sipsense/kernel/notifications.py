"""
Notification Engine
-------------------
Turns the current snapshot, recommendation and score into a bounded,
deduplicated, priority-ranked notification feed.

Each evaluation pass:
1. expires entries older than the retention window,
2. asks every trigger (in fixed order, not mutually exclusive) for a candidate,
3. drops candidates whose title was created within the dedup window,
4. assigns ids/timestamps to the accepted ones and merges them,
5. re-sorts by priority and truncates to the top-K.
"""

from __future__ import annotations

import itertools
import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import Any

from .metrics_registry import get_metrics
from .recommender import DrinkSuggestion
from .state_model import ActivitySnapshot, StressLevel


logger = logging.getLogger(__name__)


DEFAULT_RETENTION = timedelta(hours=1)
DEFAULT_DEDUP_WINDOW = timedelta(minutes=5)
DEFAULT_MAX_ACTIVE = 5


# =============================================================================
# Data Classes
# =============================================================================


class NotificationType(str, Enum):
    URGENT = "urgent"
    SUGGESTION = "suggestion"
    REMINDER = "reminder"
    ACHIEVEMENT = "achievement"


@dataclass(frozen=True)
class DrinkSummary:
    """Drink embedded in a notification card."""

    name: str
    cost: int
    benefits: tuple[str, ...] = ()

    @classmethod
    def from_suggestion(cls, suggestion: DrinkSuggestion) -> DrinkSummary:
        return cls(name=suggestion.drink, cost=suggestion.cost, benefits=suggestion.benefits)

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "cost": self.cost, "benefits": list(self.benefits)}


@dataclass(frozen=True)
class Notification:
    id: int
    title: str
    message: str
    type: NotificationType
    priority: int
    created_at: datetime
    trigger: str = ""
    drink: DrinkSummary | None = None

    def age(self, now: datetime) -> timedelta:
        return now - self.created_at

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "message": self.message,
            "type": self.type.value,
            "priority": self.priority,
            "created_at": self.created_at.isoformat(),
            "trigger": self.trigger,
            "drink": self.drink.to_dict() if self.drink else None,
        }


@dataclass(frozen=True)
class TriggerContext:
    """Everything a trigger may look at during one pass."""

    snapshot: ActivitySnapshot
    suggestion: DrinkSuggestion
    score: int
    now: datetime


def _no_drink(ctx: TriggerContext) -> DrinkSummary | None:
    return None


def _current_drink(ctx: TriggerContext) -> DrinkSummary | None:
    return DrinkSummary.from_suggestion(ctx.suggestion)


@dataclass(frozen=True)
class Trigger:
    """
    A named predicate that proposes one notification candidate.

    A gated trigger stays silent while a notification with its title was
    created within the retention window, on top of the normal dedup check.
    """

    name: str
    title: str
    type: NotificationType
    priority: int
    predicate: Callable[[TriggerContext], bool]
    message: Callable[[TriggerContext], str]
    drink: Callable[[TriggerContext], DrinkSummary | None] = field(default=_no_drink)
    gated: bool = False


# =============================================================================
# Default triggers (checked in this order)
# =============================================================================


DEFAULT_TRIGGERS: list[Trigger] = [
    Trigger(
        name="hydration",
        title="Hydration Alert",
        type=NotificationType.URGENT,
        priority=10,
        predicate=lambda ctx: ctx.snapshot.water_intake < 500 and ctx.now.hour > 10,
        message=lambda ctx: (
            f"You've only had {ctx.snapshot.water_intake}ml of water today. Risk of dehydration!"
        ),
        drink=_current_drink,
    ),
    Trigger(
        name="post_workout",
        title="Post-Workout Recovery",
        type=NotificationType.SUGGESTION,
        priority=8,
        predicate=lambda ctx: ctx.snapshot.heart_rate > 100 and ctx.snapshot.workout_minutes > 0,
        message=lambda ctx: (
            "Great workout! Your heart rate is elevated. Time for recovery hydration."
        ),
        drink=_current_drink,
    ),
    Trigger(
        name="stress",
        title="Stress Management",
        type=NotificationType.SUGGESTION,
        priority=7,
        predicate=lambda ctx: ctx.snapshot.stress_level == StressLevel.HIGH,
        message=lambda ctx: (
            "High stress levels detected. Consider a calming drink to help you relax."
        ),
        drink=lambda ctx: DrinkSummary(
            name="Chamomile Tea with Honey",
            cost=18,
            benefits=("Stress relief", "Better sleep", "Antioxidants"),
        ),
    ),
    Trigger(
        name="achievement",
        title="Health Achievement",
        type=NotificationType.ACHIEVEMENT,
        priority=5,
        predicate=lambda ctx: ctx.score >= 80,
        message=lambda ctx: (
            f"Excellent! Your health score is {ctx.score}/100. "
            "You're crushing your wellness goals!"
        ),
    ),
    Trigger(
        name="morning",
        title="Good Morning",
        type=NotificationType.REMINDER,
        priority=6,
        predicate=lambda ctx: ctx.now.hour == 7,
        message=lambda ctx: "Start your day right with a metabolism-boosting drink!",
        drink=lambda ctx: DrinkSummary(
            name="Warm Lemon Water",
            cost=8,
            benefits=("Metabolism boost", "Detox", "Vitamin C"),
        ),
        gated=True,
    ),
    Trigger(
        name="afternoon",
        title="Afternoon Energy",
        type=NotificationType.REMINDER,
        priority=4,
        predicate=lambda ctx: ctx.now.hour == 15,
        message=lambda ctx: "Beat the afternoon slump with a healthy energy drink!",
        drink=_current_drink,
        gated=True,
    ),
]


# =============================================================================
# Engine
# =============================================================================


class NotificationEngine:
    """
    Owns the active notification list.

    The title -> last-created index outlives the notifications themselves
    (dismissal and eviction do not clear it), so a dismissed alert does not
    come back until its dedup window has passed.
    """

    def __init__(
        self,
        triggers: list[Trigger] | None = None,
        retention: timedelta = DEFAULT_RETENTION,
        dedup_window: timedelta = DEFAULT_DEDUP_WINDOW,
        max_active: int = DEFAULT_MAX_ACTIVE,
    ) -> None:
        if retention <= timedelta(0) or dedup_window <= timedelta(0):
            raise ValueError("retention and dedup_window must be positive")
        if max_active < 1:
            raise ValueError(f"max_active must be at least 1: {max_active}")

        self.triggers = list(triggers if triggers is not None else DEFAULT_TRIGGERS)
        self.retention = retention
        self.dedup_window = dedup_window
        self.max_active = max_active

        self._active: list[Notification] = []
        self._last_created: dict[str, datetime] = {}
        self._ids = itertools.count(1)
        self._lock = threading.Lock()
        self._metrics = get_metrics()

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def active(self) -> list[Notification]:
        """Active notifications, highest priority first."""
        with self._lock:
            return list(self._active)

    def last_created(self, title: str) -> datetime | None:
        return self._last_created.get(title)

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    def dismiss(self, notification_id: int) -> bool:
        """Remove a notification by id. Unknown ids are ignored."""
        with self._lock:
            remaining = [n for n in self._active if n.id != notification_id]
            removed = len(remaining) != len(self._active)
            self._active = remaining
            self._metrics.active_notifications.set(len(remaining))

        if removed:
            self._metrics.notifications_removed.labels(reason="dismissed").inc()
            logger.debug(f"Dismissed notification {notification_id}")
        return removed

    def clear(self) -> None:
        with self._lock:
            self._active = []
            self._last_created.clear()
            self._metrics.active_notifications.set(0)

    def expire(self, now: datetime) -> list[Notification]:
        with self._lock:
            return self._expire_locked(now)

    def evaluate(
        self,
        snapshot: ActivitySnapshot,
        suggestion: DrinkSuggestion,
        score: int,
        now: datetime,
    ) -> list[Notification]:
        """
        Run one evaluation pass.

        Returns:
            Notifications created in this pass that survived truncation
        """
        ctx = TriggerContext(snapshot=snapshot, suggestion=suggestion, score=score, now=now)

        with self._lock:
            self._expire_locked(now)

            accepted: list[Notification] = []
            for trigger in self.triggers:
                if not trigger.predicate(ctx):
                    continue
                if trigger.gated and self._created_within(trigger.title, now, self.retention):
                    self._metrics.notifications_suppressed.labels(reason="gated").inc()
                    continue
                if self._created_within(trigger.title, now, self.dedup_window):
                    self._metrics.notifications_suppressed.labels(reason="duplicate").inc()
                    continue

                notification = Notification(
                    id=next(self._ids),
                    title=trigger.title,
                    message=trigger.message(ctx),
                    type=trigger.type,
                    priority=trigger.priority,
                    created_at=now,
                    trigger=trigger.name,
                    drink=trigger.drink(ctx),
                )
                self._last_created[trigger.title] = now
                accepted.append(notification)
                self._metrics.notifications_created.labels(type=trigger.type.value).inc()

            # Equal priorities: newest first.
            ranked = sorted(self._active + accepted, key=lambda n: (-n.priority, -n.id))
            self._active = ranked[: self.max_active]
            evicted = ranked[self.max_active :]
            self._prune_index(now)
            self._metrics.active_notifications.set(len(self._active))

        if evicted:
            self._metrics.notifications_removed.labels(reason="evicted").inc(len(evicted))
            logger.debug(f"Evicted {[n.title for n in evicted]} over limit {self.max_active}")

        kept = {n.id for n in self._active}
        created = [n for n in accepted if n.id in kept]
        for n in created:
            logger.info(f"Notification #{n.id} [{n.type.value}] {n.title} (priority {n.priority})")
        return created

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _created_within(self, title: str, now: datetime, window: timedelta) -> bool:
        last = self._last_created.get(title)
        return last is not None and now - last < window

    def _expire_locked(self, now: datetime) -> list[Notification]:
        expired = [n for n in self._active if n.age(now) >= self.retention]
        if expired:
            self._active = [n for n in self._active if n.age(now) < self.retention]
            self._metrics.notifications_removed.labels(reason="expired").inc(len(expired))
            self._metrics.active_notifications.set(len(self._active))
            logger.debug(f"Expired {len(expired)} notification(s)")
        return expired

    def _prune_index(self, now: datetime) -> None:
        horizon = max(self.retention, self.dedup_window)
        stale = [t for t, ts in self._last_created.items() if now - ts >= horizon]
        for title in stale:
            del self._last_created[title]
