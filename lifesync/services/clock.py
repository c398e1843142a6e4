"""Time helpers. All stored datetimes are timezone-aware."""

import logging
from datetime import date, datetime, time, timezone, tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    """Current time in UTC."""
    return datetime.now(timezone.utc)


def local_zone(name: str) -> tzinfo:
    """Resolve an IANA zone name, falling back to UTC for unknown names."""
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning(f"Unknown timezone {name!r}, using UTC")
        return timezone.utc


def ensure_aware(value: datetime, zone: tzinfo = timezone.utc) -> datetime:
    """Attach ``zone`` to naive datetimes; aware ones pass through."""
    if value.tzinfo is None:
        return value.replace(tzinfo=zone)
    return value


def combine_local(day: date, at: time, zone: tzinfo) -> datetime:
    """Combine form date and time fields in the user's zone."""
    return datetime.combine(day, at.replace(tzinfo=None), tzinfo=zone)
