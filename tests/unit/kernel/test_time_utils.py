"""Unit tests for time_utils module."""

import asyncio
import re
from datetime import datetime, timedelta, timezone

import pytest

from sipsense.kernel.time_utils import ManualClock, SystemClock, resolve_tz, utc_now_iso


@pytest.mark.unit
def test_utc_now_iso_format(frozen_now):
    """Test that utc_now_iso returns properly formatted ISO string with UTC timezone."""
    s = utc_now_iso()
    assert s == "2025-01-01T00:00:00+00:00"
    assert re.match(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}", s), f"Invalid ISO format: {s}"


@pytest.mark.unit
def test_resolve_tz():
    kolkata = resolve_tz("Asia/Kolkata")
    assert datetime(2025, 1, 1, tzinfo=kolkata).utcoffset() == timedelta(hours=5, minutes=30)
    assert resolve_tz(None) is not None


@pytest.mark.unit
def test_resolve_tz_unknown():
    with pytest.raises(ValueError):
        resolve_tz("Mars/Olympus_Mons")


@pytest.mark.unit
def test_system_clock_is_aware(frozen_now):
    now = SystemClock(timezone.utc).now()
    assert now == datetime(2025, 1, 1, tzinfo=timezone.utc)


@pytest.mark.unit
class TestManualClock:
    def test_naive_start_is_utc(self):
        assert ManualClock(datetime(2025, 1, 1)).now().tzinfo is timezone.utc

    def test_advance(self):
        clock = ManualClock(datetime(2025, 1, 1, tzinfo=timezone.utc))
        clock.advance(30)
        clock.advance(timedelta(minutes=1))
        assert clock.now() == datetime(2025, 1, 1, 0, 1, 30, tzinfo=timezone.utc)

    def test_set(self):
        clock = ManualClock(datetime(2025, 1, 1, tzinfo=timezone.utc))
        clock.set(datetime(2025, 6, 1, 7, 0))
        assert clock.now() == datetime(2025, 6, 1, 7, 0, tzinfo=timezone.utc)

    def test_sleep_advances_virtual_time(self):
        clock = ManualClock(datetime(2025, 1, 1, tzinfo=timezone.utc))
        asyncio.run(clock.sleep(3600))
        assert clock.now() == datetime(2025, 1, 1, 1, 0, tzinfo=timezone.utc)
