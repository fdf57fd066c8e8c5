"""Time-zone resolution and civil-local/UTC conversion (pytz)."""

from __future__ import annotations

import logging
from datetime import UTC, date, datetime, time, timedelta

import pytz

DEFAULT_TIMEZONE = "Europe/Athens"

logger = logging.getLogger("solunar_activity.timezones")


def is_known_timezone(name: str) -> bool:
    return name in pytz.all_timezones_set


def resolve_timezone(name: str | None) -> pytz.BaseTzInfo:
    """Return the zone for ``name``; blank means the default zone, unknown means UTC."""
    zone_name = (name or "").strip() or DEFAULT_TIMEZONE
    try:
        return pytz.timezone(zone_name)
    except pytz.UnknownTimeZoneError:
        logger.warning("Unknown time zone %r; falling back to UTC.", zone_name)
        return pytz.utc


def local_to_utc(
    day: date,
    hour: int,
    minute: int,
    tz: pytz.BaseTzInfo,
    offset: timedelta = timedelta(0),
) -> datetime:
    """Convert a civil wall-clock time (plus ``offset``) on ``day`` to UTC.

    Ambiguous wall times resolve to standard time; times skipped by a DST jump
    are read with the standard offset.
    """
    naive = datetime.combine(day, time(hour, minute)) + offset
    return tz.localize(naive, is_dst=False).astimezone(UTC)


def to_local(instant: datetime | None, tz: pytz.BaseTzInfo) -> datetime | None:
    if instant is None:
        return None
    return instant.astimezone(tz)
