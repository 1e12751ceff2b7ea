"""
Kernel configuration.

Loads config/kernel.yaml once and validates it into a KernelConfig. A
missing file means defaults; a malformed one raises ConfigError.
"""

from __future__ import annotations

import logging
import os
from datetime import timedelta
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator


logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = os.path.join(os.path.dirname(__file__), "..", "..", "config", "kernel.yaml")

# Cache for config to avoid repeated file reads
_config_cache: KernelConfig | None = None


class ConfigError(Exception):
    """Raised when kernel.yaml cannot be parsed or validated."""


class NotificationSettings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    retention_seconds: int = Field(default=3600, gt=0)
    dedup_window_seconds: int = Field(default=300, gt=0)
    max_active: int = Field(default=5, ge=1)

    @property
    def retention(self) -> timedelta:
        return timedelta(seconds=self.retention_seconds)

    @property
    def dedup_window(self) -> timedelta:
        return timedelta(seconds=self.dedup_window_seconds)


class SensorSettings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    working_hours: tuple[int, int] = (9, 17)
    workout_window: tuple[int, int] = (17, 19)
    max_step_increment: int = Field(default=50, gt=0)
    seed: int | None = None

    @model_validator(mode="after")
    def _check_windows(self) -> SensorSettings:
        for name in ("working_hours", "workout_window"):
            start, end = getattr(self, name)
            if not (0 <= start <= end <= 23):
                raise ValueError(f"{name} must be 0 <= start <= end <= 23, got {start}-{end}")
        return self


class HydrationSettings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    daily_goal_ml: int = Field(default=2500, gt=0)


class KernelConfig(BaseModel):
    """Typed settings container for the daemon and CLI."""

    model_config = ConfigDict(extra="forbid")

    timezone: str | None = None
    cadences: dict[str, str] = Field(default_factory=dict)
    notifications: NotificationSettings = Field(default_factory=NotificationSettings)
    sensors: SensorSettings = Field(default_factory=SensorSettings)
    hydration: HydrationSettings = Field(default_factory=HydrationSettings)


def parse_config(data: dict[str, Any] | None) -> KernelConfig:
    try:
        return KernelConfig.model_validate(data or {})
    except ValidationError as e:
        raise ConfigError(f"Invalid kernel config: {e}") from e


def load_config(path: str | None = None) -> KernelConfig:
    """
    Load kernel config from YAML with caching.

    Args:
        path: Path to kernel.yaml. If None, uses default location.

    Returns:
        Validated KernelConfig

    Raises:
        ConfigError: If the file is not valid YAML or fails validation
    """
    global _config_cache

    if _config_cache is not None:
        return _config_cache

    if path is None:
        path = DEFAULT_CONFIG_PATH

    if not os.path.exists(path):
        logger.warning(f"Config file {path} not found, using defaults")
        _config_cache = KernelConfig()
        return _config_cache

    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to parse {path}: {e}") from e

    if data is not None and not isinstance(data, dict):
        raise ConfigError(f"{path} must contain a mapping at the top level")

    _config_cache = parse_config(data)
    logger.debug(f"Loaded kernel config from {path}")
    return _config_cache


def reset_config_cache() -> None:
    global _config_cache
    _config_cache = None
