"""
UTC datetime utilities for consistent timezone handling.

All datetime values in the system are timezone-aware UTC. Order numbers
are scoped to the UTC calendar day, so the day stamp lives here too.
"""

from datetime import UTC, datetime

from app.core.constants import ORDER_NUMBER_DATE_FORMAT


def utc_now() -> datetime:
    """
    Return the current UTC datetime with timezone info.

    Use this instead of datetime.now() (local, naive) or
    datetime.utcnow() (naive, deprecated in Python 3.12).

    Returns:
        Timezone-aware datetime in UTC
    """
    return datetime.now(UTC)


def ensure_utc(dt: datetime | None) -> datetime | None:
    """
    Ensure a datetime is UTC-aware.

    - If None, returns None
    - If naive, assumes UTC and attaches timezone
    - If aware, converts to UTC

    Use at repository/persistence boundaries to normalize datetimes.
    """
    if dt is None:
        return None

    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)

    return dt.astimezone(UTC)


def utc_day_stamp(dt: datetime) -> str:
    """
    Format the UTC calendar day of dt as YYYYMMDD.

    Args:
        dt: Any datetime; naive values are taken as UTC

    Returns:
        Eight-digit day stamp, e.g. "20260106"
    """
    aware = ensure_utc(dt)
    if aware is None:
        raise ValueError("utc_day_stamp requires a datetime, got None")
    return aware.strftime(ORDER_NUMBER_DATE_FORMAT)
