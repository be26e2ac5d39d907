"""
Configuration service for runtime settings.
"""
import logging
import os
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError


log = logging.getLogger(__name__)

_TRUTHY = {"1", "true", "yes", "on"}
_DEFAULT_TIMEZONE = "UTC"

_WEEK_STARTS_ON: Optional[int] = None


def get_storage_prefix() -> str:
    """Prefix prepended to every storage slot key (empty by default)."""
    return os.getenv("SHIPSHAPE_STORAGE_PREFIX", "")


def get_timezone() -> ZoneInfo:
    """Return the zone used for report periods and naive timestamps."""
    name = os.getenv("SHIPSHAPE_TIMEZONE", _DEFAULT_TIMEZONE)
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        log.warning("Unknown SHIPSHAPE_TIMEZONE %r, falling back to %s", name, _DEFAULT_TIMEZONE)
        return ZoneInfo(_DEFAULT_TIMEZONE)


def get_week_starts_on() -> int:
    """Return the first weekday of report weeks (0 = Monday ... 6 = Sunday)."""
    if _WEEK_STARTS_ON is not None:
        return _WEEK_STARTS_ON

    env_value = os.getenv("SHIPSHAPE_WEEK_STARTS_ON")
    if env_value:
        try:
            value = int(env_value)
        except ValueError:
            return 0
        return value if 0 <= value <= 6 else 0

    return 0


def set_week_starts_on(weekday: Optional[int]) -> None:
    """Override the first weekday in memory; None restores the environment value."""
    global _WEEK_STARTS_ON
    if weekday is not None and not 0 <= int(weekday) <= 6:
        raise ValueError("weekday must be between 0 (Monday) and 6 (Sunday)")
    _WEEK_STARTS_ON = None if weekday is None else int(weekday)


def seed_demo_data_enabled() -> bool:
    return os.getenv("SHIPSHAPE_SEED_DEMO_DATA", "true").strip().lower() in _TRUTHY


def get_log_level() -> str:
    level = os.getenv("LOG_LEVEL", "INFO").strip().upper()
    return level if level in logging.getLevelNamesMapping() else "INFO"
