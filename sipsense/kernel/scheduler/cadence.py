"""
Cadence parsing and next-run calculation.

Cadences are strings of the form every:<seconds>. SIPSENSE_SPEED_FACTOR
scales every interval, which is handy for demos (0.1 = ten times faster).
"""

import os
from datetime import datetime, timedelta


def _speed_factor() -> float:
    """
    Get the speed factor from environment variable.

    Returns speed factor clamped to minimum 0.001.
    Defaults to 1.0 if not set or invalid.
    """
    try:
        return max(0.001, float(os.getenv("SIPSENSE_SPEED_FACTOR", "1.0")))
    except ValueError:
        return 1.0


def parse(cadence_str: str) -> tuple[str, int]:
    """
    Parse a cadence string into a structured format.

    Args:
        cadence_str: Cadence string (e.g., "every:30")

    Returns:
        ("every", N)

    Raises:
        ValueError: If cadence string is malformed

    Examples:
        >>> parse("every:30")
        ('every', 30)
    """
    if not cadence_str:
        raise ValueError("Cadence string cannot be empty")

    parts = cadence_str.split(":")

    if parts[0] != "every":
        raise ValueError(f"Unknown cadence type: {parts[0]}")
    if len(parts) != 2:
        raise ValueError(f"Invalid 'every' cadence: {cadence_str}")

    try:
        seconds = int(parts[1])
    except ValueError as e:
        raise ValueError(f"Invalid 'every' cadence seconds: {parts[1]}") from e
    if seconds <= 0:
        raise ValueError(f"Cadence seconds must be positive: {seconds}")
    return ("every", seconds)


def interval(cadence_str: str) -> timedelta:
    """Interval for a cadence after applying the speed factor."""
    _, seconds = parse(cadence_str)
    return timedelta(seconds=max(1, int(seconds * _speed_factor())))


def compute_next_run(last_run: datetime | None, cadence_str: str, now: datetime) -> datetime:
    """
    Compute the next run time for a task.

    Scheduled relative to the last run (not now) to avoid drift. Slots that
    were missed entirely, e.g. after the clock jumped, are skipped rather
    than replayed.

    Examples:
        first run at 10:00:00 with every:30 -> 10:00:30
        last run 10:00:30, now 10:00:31     -> 10:01:00
        last run 10:00:30, now 10:05:10     -> 10:05:30
    """
    step = interval(cadence_str)

    if last_run is None:
        return now + step

    next_run = last_run + step
    if next_run < now:
        # First slot at or after now.
        slots = -((last_run - now) // step)
        next_run = last_run + step * slots
    return next_run
