"""
Clock abstractions for the wellness kernel.

Every component that needs "now" or needs to wait takes a Clock so tests can
drive virtual time instead of waiting on wall-clock timers.
"""

from __future__ import annotations

import asyncio
from datetime import datetime, timedelta, timezone, tzinfo

from dateutil import tz


def utc_now_iso() -> str:
    """Return current UTC time as ISO string with seconds precision."""
    return datetime.now(timezone.utc).isoformat(timespec="seconds")


def resolve_tz(name: str | None) -> tzinfo:
    """Resolve an IANA timezone name, falling back to the host's local zone."""
    if not name:
        return tz.tzlocal()
    zone = tz.gettz(name)
    if zone is None:
        raise ValueError(f"Unknown timezone: {name}")
    return zone


class Clock:
    """Source of local time plus the ability to wait."""

    def now(self) -> datetime:
        raise NotImplementedError

    async def sleep(self, seconds: float) -> None:
        raise NotImplementedError


class SystemClock(Clock):
    def __init__(self, zone: tzinfo | None = None) -> None:
        self.tz = zone or tz.tzlocal()

    def now(self) -> datetime:
        return datetime.now(tz=self.tz)

    async def sleep(self, seconds: float) -> None:
        await asyncio.sleep(seconds)


class ManualClock(Clock):
    """
    Controllable clock for tests and simulations.

    sleep() advances virtual time instead of blocking, then yields once to
    the event loop so other tasks get a turn.
    """

    def __init__(self, start: datetime) -> None:
        if start.tzinfo is None:
            start = start.replace(tzinfo=timezone.utc)
        self._now = start

    def now(self) -> datetime:
        return self._now

    def set(self, when: datetime) -> None:
        if when.tzinfo is None:
            when = when.replace(tzinfo=self._now.tzinfo)
        self._now = when

    def advance(self, delta: timedelta | float) -> datetime:
        if not isinstance(delta, timedelta):
            delta = timedelta(seconds=delta)
        self._now = self._now + delta
        return self._now

    async def sleep(self, seconds: float) -> None:
        self.advance(max(0.0, seconds))
        await asyncio.sleep(0)
