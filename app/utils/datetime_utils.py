"""
Datetime helpers.

All timestamps are stored and returned as timezone-aware UTC values.
SQLite (used in tests) hands back naive datetimes, so values read from the
database pass through ensure_utc before they are compared or serialized.
"""
from datetime import datetime, timezone


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime | None) -> datetime | None:
    """
    Normalize a datetime to aware UTC.

    Naive values are assumed to already be UTC.
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def to_iso_utc(dt: datetime | None) -> str | None:
    """Serialize to ISO 8601 with a trailing 'Z', e.g. ``2026-10-19T09:30:00.123456Z``."""
    if dt is None:
        return None
    return ensure_utc(dt).isoformat().replace("+00:00", "Z")
