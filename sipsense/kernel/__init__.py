"""Wellness decision kernel: snapshot store, scoring, recommendations, notifications."""
