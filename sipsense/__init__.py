"""Sipsense: drink recommendations and proactive wellness notifications."""

__version__ = "0.1.0"
