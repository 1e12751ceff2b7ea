"""
Prometheus metrics for the wellness kernel.

A single process-wide CollectorRegistry guarded by a lock, so metric
collectors are created exactly once even when several stores or engines
are instantiated (tests, the CLI and the daemon all do).
"""
from __future__ import annotations

import logging
import threading

from prometheus_client import CollectorRegistry, Counter, Gauge


logger = logging.getLogger(__name__)

# Module-level state
_registry: CollectorRegistry | None = None
_metrics: "KernelMetrics | None" = None
_registry_lock = threading.Lock()


class KernelMetrics:
    """Collectors used by the snapshot store and notification engine."""

    def __init__(self, registry: CollectorRegistry) -> None:
        self.snapshot_updates = Counter(
            "sipsense_snapshot_updates_total",
            "Snapshot partial updates by outcome",
            ["outcome"],
            registry=registry,
        )
        self.notifications_created = Counter(
            "sipsense_notifications_created_total",
            "Notifications accepted into the active feed",
            ["type"],
            registry=registry,
        )
        self.notifications_suppressed = Counter(
            "sipsense_notifications_suppressed_total",
            "Trigger candidates discarded before merge",
            ["reason"],
            registry=registry,
        )
        self.notifications_removed = Counter(
            "sipsense_notifications_removed_total",
            "Notifications leaving the active feed",
            ["reason"],
            registry=registry,
        )
        self.active_notifications = Gauge(
            "sipsense_active_notifications",
            "Size of the active notification feed",
            registry=registry,
        )


def get_metrics_registry() -> CollectorRegistry:
    """
    Get or create the global metrics registry.

    Returns:
        CollectorRegistry instance (shared across all callers)
    """
    global _registry

    with _registry_lock:
        if _registry is None:
            _registry = CollectorRegistry(auto_describe=True)
            logger.debug("Created Prometheus metrics registry")
        return _registry


def get_metrics() -> KernelMetrics:
    global _metrics

    registry = get_metrics_registry()
    with _registry_lock:
        if _metrics is None:
            _metrics = KernelMetrics(registry)
        return _metrics


def reset_metrics_registry() -> None:
    """
    Drop the registry and its collectors.

    Primarily for tests; collectors held by live objects keep counting
    into the old registry.
    """
    global _registry, _metrics

    with _registry_lock:
        _registry = None
        _metrics = None
        logger.debug("Reset metrics registry")
