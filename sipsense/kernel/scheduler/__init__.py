"""
Sipsense Scheduler

Runs the kernel's periodic drives (simulated sensor ticks, notification
evaluation, day rollover) on independent cadences against an injected clock.
"""

from .drives import REGISTRY
from .loop import Scheduler, resolve_cadences


__all__ = ["Scheduler", "resolve_cadences", "REGISTRY"]
