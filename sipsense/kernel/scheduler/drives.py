"""
Drive functions and registry.

Each drive is a lightweight async function that performs one periodic
kernel task against the daemon passed in as ctx.
"""

from collections.abc import Awaitable, Callable
from typing import Any


# Drive function signature
DriveFn = Callable[[Any], Awaitable[None]]


async def drive_sensor_tick(ctx: Any) -> None:
    """
    Sensor drive: apply one simulated sensor reading to the snapshot.

    Args:
        ctx: Context object (typically WellnessDaemon instance)
    """
    now = ctx.clock.now()
    partial = ctx.sensor.read(ctx.store.snapshot, now)
    ctx.update_snapshot(partial)


async def drive_notification_eval(ctx: Any) -> None:
    """Notification drive: run one evaluation pass on a consistent snapshot."""
    await ctx.evaluate_notifications()


async def drive_day_rollover(ctx: Any) -> None:
    """Reset the daily counters once the local date changes."""
    ctx.check_day_rollover()


# Drive registry with default cadences
REGISTRY: dict[str, dict[str, Any]] = {
    "sensor_tick": {
        "fn": drive_sensor_tick,
        "cadence": "every:30",
    },
    "notification_eval": {
        "fn": drive_notification_eval,
        "cadence": "every:30",
    },
    "day_rollover": {
        "fn": drive_day_rollover,
        "cadence": "every:60",
    },
}
