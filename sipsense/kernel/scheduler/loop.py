"""
Main scheduler loop.

Runs registered drives on their own cadences against an injected clock.
Drives are independent: each keeps its own next-run time and a failing
drive does not stop the others.
"""

from __future__ import annotations

import asyncio
import logging
import os
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any

from ..time_utils import Clock
from . import cadence as cadence_module
from . import drives


logger = logging.getLogger(__name__)


def resolve_cadences(
    cfg_cadences: dict[str, str] | None = None,
    registry: dict[str, dict[str, Any]] | None = None,
) -> dict[str, str]:
    """
    Resolve cadence overrides from env > config > registry defaults.

    Args:
        cfg_cadences: The cadences section of kernel.yaml
        registry: Drive registry, defaults to drives.REGISTRY

    Returns:
        Dict mapping task_id to resolved cadence string
    """
    registry = registry if registry is not None else drives.REGISTRY
    cfg_cadences = cfg_cadences or {}
    resolved = {}

    for task_id, config in registry.items():
        resolved_cadence = cfg_cadences.get(task_id, config["cadence"])

        env_value = os.getenv(f"DRIVE_{task_id.upper()}")
        if env_value:
            resolved_cadence = env_value

        # Fail fast on a bad override rather than on the first tick
        cadence_module.parse(resolved_cadence)
        resolved[task_id] = resolved_cadence

    return resolved


@dataclass
class ScheduledTask:
    task_id: str
    fn: drives.DriveFn
    cadence: str
    next_run: datetime | None = None
    last_run: datetime | None = None
    runs: int = 0
    failures: int = 0


class Scheduler:
    """
    Example usage:
        sched = Scheduler(daemon, clock, resolve_cadences(cfg.cadences))
        sched.start()
        await sched.run_forever()
    """

    def __init__(
        self,
        ctx: Any,
        clock: Clock,
        cadences: dict[str, str] | None = None,
        registry: dict[str, dict[str, Any]] | None = None,
    ) -> None:
        registry = registry if registry is not None else drives.REGISTRY
        cadences = cadences or resolve_cadences(registry=registry)
        self.ctx = ctx
        self.clock = clock
        self.tasks: dict[str, ScheduledTask] = {
            task_id: ScheduledTask(task_id=task_id, fn=config["fn"], cadence=cadences[task_id])
            for task_id, config in registry.items()
            if task_id in cadences
        }

    def start(self, now: datetime | None = None) -> None:
        """Schedule every task one interval from now."""
        now = now or self.clock.now()
        for task in self.tasks.values():
            task.next_run = cadence_module.compute_next_run(None, task.cadence, now)
        logger.info(
            "Scheduler started: "
            + ", ".join(f"{t.task_id}={t.cadence}" for t in self.tasks.values())
        )

    async def run_due(self, now: datetime | None = None) -> list[str]:
        """Run every task whose next run is at or before now, in registry order."""
        now = now or self.clock.now()
        ran = []

        for task in self.tasks.values():
            if task.next_run is None or task.next_run > now:
                continue

            scheduled = task.next_run
            try:
                await task.fn(self.ctx)
                task.runs += 1
            except asyncio.CancelledError:
                raise
            except Exception as e:
                task.failures += 1
                logger.warning(f"Error in {task.task_id}: {e}")

            task.last_run = scheduled
            task.next_run = cadence_module.compute_next_run(scheduled, task.cadence, now)
            ran.append(task.task_id)
            logger.debug(f"tick={task.task_id} next={task.next_run.isoformat()}")

        return ran

    def seconds_until_next(self, now: datetime | None = None) -> float:
        now = now or self.clock.now()
        pending = [t.next_run for t in self.tasks.values() if t.next_run is not None]
        if not pending:
            return 1.0
        return max(0.0, (min(pending) - now) / timedelta(seconds=1))

    async def run_forever(self, until: datetime | None = None) -> None:
        """
        Run until cancelled, or until the clock reaches `until`.

        With a ManualClock, sleeping advances virtual time, so a test can
        run an hour of ticks instantly.
        """
        if any(t.next_run is None for t in self.tasks.values()):
            self.start()

        try:
            while until is None or self.clock.now() < until:
                await self.run_due()
                delay = self.seconds_until_next()
                if until is not None:
                    remaining = (until - self.clock.now()) / timedelta(seconds=1)
                    delay = min(delay, max(0.0, remaining))
                await self.clock.sleep(delay)
        except asyncio.CancelledError:
            logger.info("Scheduler shutdown requested")
            raise
        finally:
            logger.info("Scheduler stopped")
