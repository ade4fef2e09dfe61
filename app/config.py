"""
app/config.py

Application-level configuration helpers.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache

from app.domain.contribution import DateRange
from app.validators.range_validator import parse_custom_ranges_json
from db.config import load_env_files


@lru_cache(maxsize=1)
def _load_env_once() -> None:
    """
    Ensure project `.env` files are loaded once before reading app settings.
    """

    load_env_files()


def _get_int_env(name: str, default: int) -> int:
    """
    Read an integer from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return int(raw_value)
    except ValueError:
        return default


def _get_str_env(name: str, default: str) -> str:
    """
    Read a string from environment variables with fallback.
    """

    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return default
    stripped = value.strip()
    return stripped if stripped else default


@dataclass(frozen=True)
class SpeedSettings:
    """
    Runtime settings for the periodic speed computation.
    """

    lookback_days: int = 365
    custom_ranges: tuple[DateRange, ...] = field(default_factory=tuple)
    progress_log_every: int = 100


@dataclass(frozen=True)
class SchedulerSettings:
    """
    Cron trigger for the speed job (UTC).
    """

    hour: int = 2
    minute: int = 0
    misfire_grace_seconds: int = 3600


@lru_cache(maxsize=1)
def get_speed_settings() -> SpeedSettings:
    """
    Return cached speed settings from environment variables.

    Raises InvalidRangeError when SPEED_CUSTOM_RANGES holds a bad range, so
    misconfiguration is reported at startup instead of mid-run.
    """

    raw_ranges = _get_str_env("SPEED_CUSTOM_RANGES", "[]")
    return SpeedSettings(
        lookback_days=max(1, _get_int_env("SPEED_LOOKBACK_DAYS", 365)),
        custom_ranges=parse_custom_ranges_json(raw_ranges),
        progress_log_every=max(1, _get_int_env("SPEED_PROGRESS_LOG_EVERY", 100)),
    )


@lru_cache(maxsize=1)
def get_scheduler_settings() -> SchedulerSettings:
    """
    Return cached scheduler settings from environment variables.
    """

    return SchedulerSettings(
        hour=min(23, max(0, _get_int_env("SPEED_SCHEDULE_HOUR", 2))),
        minute=min(59, max(0, _get_int_env("SPEED_SCHEDULE_MINUTE", 0))),
        misfire_grace_seconds=max(1, _get_int_env("SPEED_MISFIRE_GRACE_SECONDS", 3600)),
    )


def get_log_level() -> str:
    return _get_str_env("LOG_LEVEL", "INFO").upper()
