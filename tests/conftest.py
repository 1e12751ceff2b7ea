"""
Test fixtures and helpers for the Sipsense test suite.

Provides a controllable clock, fresh stores/engines and a daemon wired to
default configuration so tests never depend on wall-clock time.
"""

import random
from datetime import datetime, timezone

import pytest
from freezegun import freeze_time

from sipsense.kernel.config import KernelConfig
from sipsense.kernel.daemon import WellnessDaemon
from sipsense.kernel.notifications import NotificationEngine
from sipsense.kernel.sensors import SimulatedSensorDriver
from sipsense.kernel.state_model import ActivitySnapshot, SnapshotStore
from sipsense.kernel.time_utils import ManualClock


# 11:00 UTC: late enough for the dehydration rule, outside every time window.
T0 = datetime(2025, 1, 1, 11, 0, tzinfo=timezone.utc)


@pytest.fixture
def frozen_now():
    """
    Freeze time to a stable UTC timestamp for deterministic tests.

    Uses 2025-01-01T00:00:00Z as the frozen time.
    """
    with freeze_time("2025-01-01T00:00:00Z"):
        yield


@pytest.fixture
def clock():
    return ManualClock(T0)


@pytest.fixture
def store():
    return SnapshotStore()


@pytest.fixture
def engine():
    return NotificationEngine()


@pytest.fixture
def make_snapshot():
    """Factory for snapshots that differ from the defaults in a few fields."""

    def _make(**fields):
        return ActivitySnapshot(**fields)

    return _make


@pytest.fixture
def daemon(clock):
    return WellnessDaemon(
        config=KernelConfig(),
        clock=clock,
        sensor=SimulatedSensorDriver(rng=random.Random(7)),
    )
