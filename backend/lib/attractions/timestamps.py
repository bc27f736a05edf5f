"""Timestamp encoding for values stored in DynamoDB.

DynamoDB has no timestamp type, so every point in time is written as a UTC
ISO-8601 string with millisecond precision, e.g. ``2025-12-31T00:00:00.000Z``.
All stored values go through format_timestamp(), which keeps lexicographic
order equal to chronological order for the ``expiryDate <= :now`` filter.
"""

from datetime import datetime, timezone


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes and convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def format_timestamp(value: datetime) -> str:
    """Format a datetime as a stored timestamp string.

    The year is always four digits; strftime("%Y") drops the padding below
    year 1000 on some platforms, which would break string ordering.

    Args:
        value: Naive (assumed UTC) or aware datetime

    Returns:
        String like "2025-12-31T00:00:00.000Z"
    """
    value = ensure_utc(value)
    return value.replace(tzinfo=None).isoformat(timespec="milliseconds") + "Z"
