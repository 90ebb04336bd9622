"""Timezone helpers."""

from __future__ import annotations

import datetime as dt
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from clubhook.config import settings

DEFAULT_TIMEZONE = "UTC"
DATETIME_FORMAT = "%Y-%m-%d %H:%M %Z"


def load_timezone(name: str, fallback: str = DEFAULT_TIMEZONE) -> tuple[ZoneInfo, str]:
    """Return a ``ZoneInfo`` instance and its canonical name with a fallback."""

    try:
        return ZoneInfo(name), name
    except (ZoneInfoNotFoundError, ValueError):
        return ZoneInfo(fallback), fallback


TZ, TZ_NAME = load_timezone(settings.timezone or DEFAULT_TIMEZONE)


def to_local(value: dt.datetime, tz: dt.tzinfo | None = None) -> dt.datetime:
    """Convert ``value`` to the configured timezone; naive values are taken as UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=dt.timezone.utc)
    return value.astimezone(tz or TZ)


def format_datetime(value: dt.datetime, tz: dt.tzinfo | None = None) -> str:
    """Render ``value`` as ``YYYY-MM-DD HH:MM TZ``."""
    return to_local(value, tz).strftime(DATETIME_FORMAT)
