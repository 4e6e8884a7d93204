"""
Core Utilities.

Shared utility functions used across the package.
"""

from datetime import datetime, timezone


def utc_now() -> datetime:
    """
    Return current UTC time as timezone-naive datetime.

    All datetime values in the application should be timezone-naive
    and assumed to be UTC.
    """
    return datetime.now(timezone.utc).replace(tzinfo=None)


def iso_timestamp(value: datetime | None = None) -> str:
    """
    Format a UTC datetime the way the content backend stores timestamps.

    Millisecond precision with a trailing ``Z``, e.g. ``2024-05-01T08:30:00.000Z``.
    """
    value = value or utc_now()
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"
