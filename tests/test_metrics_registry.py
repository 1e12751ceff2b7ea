"""
Tests for the Prometheus metrics registry guard and the kernel counters.
"""
import threading
from datetime import datetime, timezone

import pytest

from sipsense.kernel.metrics_registry import get_metrics, get_metrics_registry, reset_metrics_registry
from sipsense.kernel.notifications import NotificationEngine
from sipsense.kernel.recommender import recommend
from sipsense.kernel.scoring import score
from sipsense.kernel.state_model import ActivitySnapshot, SnapshotStore, SnapshotUpdateRejected


@pytest.fixture
def registry():
    reset_metrics_registry()
    yield get_metrics_registry()
    reset_metrics_registry()


def test_metrics_registry_singleton():
    """Test that get_metrics_registry returns the same instance."""
    assert get_metrics_registry() is get_metrics_registry()
    assert get_metrics() is get_metrics()


def test_metrics_registry_thread_safe():
    reset_metrics_registry()
    seen = []

    def grab():
        seen.append(id(get_metrics()))

    threads = [threading.Thread(target=grab) for _ in range(10)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(set(seen)) == 1, "All threads should get the same collectors"


def test_metrics_registry_reset():
    registry1 = get_metrics_registry()
    reset_metrics_registry()
    assert get_metrics_registry() is not registry1


def test_snapshot_update_counters(registry):
    store = SnapshotStore()
    store.update({"steps": 10})
    with pytest.raises(SnapshotUpdateRejected):
        store.update({"steps": -10})

    assert registry.get_sample_value("sipsense_snapshot_updates_total", {"outcome": "applied"}) == 1
    assert registry.get_sample_value("sipsense_snapshot_updates_total", {"outcome": "rejected"}) == 1


def test_notification_counters(registry):
    engine = NotificationEngine()
    snap = ActivitySnapshot()
    now = datetime(2025, 1, 1, 11, 0, tzinfo=timezone.utc)
    for _ in range(2):
        engine.evaluate(snap, recommend(snap, now), score(snap), now)

    assert registry.get_sample_value("sipsense_notifications_created_total", {"type": "urgent"}) == 1
    assert (
        registry.get_sample_value("sipsense_notifications_suppressed_total", {"reason": "duplicate"})
        == 1
    )
    assert registry.get_sample_value("sipsense_active_notifications") == 1
