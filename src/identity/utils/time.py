from __future__ import annotations
from datetime import datetime, timezone


def now_utc() -> datetime:
    """Return timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def to_utc(dt: datetime) -> datetime:
    """Convert any datetime to timezone-aware UTC.

    - Naive datetimes are treated as UTC and marked accordingly.
    - Aware datetimes are converted to UTC.
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def to_db_utc(dt: datetime) -> datetime:
    """Return the naive UTC form used by the TIMESTAMP WITHOUT TIME ZONE columns."""
    return to_utc(dt).replace(tzinfo=None)


def now_db_utc() -> datetime:
    """Return naive UTC time for database columns."""
    return now_utc().replace(tzinfo=None)


def from_timestamp(value: int | float) -> datetime:
    """Convert a JWT NumericDate (seconds since epoch) to aware UTC."""
    return datetime.fromtimestamp(value, tz=timezone.utc)