"""Timestamp utilities for UTC handling.

Envelope timestamps and log timestamps share one wire format:
ISO-8601 in UTC with millisecond precision and a 'Z' suffix
(e.g. 2025-11-04T10:30:00.123Z).
"""

from datetime import datetime, timezone
from typing import Optional


def utc_now() -> datetime:
    """Get current UTC time as timezone-aware datetime.

    Returns:
        Current UTC time with timezone info
    """
    return datetime.now(timezone.utc)


def format_iso_timestamp(dt: Optional[datetime] = None) -> str:
    """Format a datetime as an ISO-8601 UTC string with millisecond precision.

    Timezone-naive values are treated as UTC; aware values are converted.

    Args:
        dt: Datetime to format (defaults to now)

    Returns:
        ISO-8601 string with 'Z' suffix

    Example:
        >>> format_iso_timestamp(datetime(2025, 11, 4, 10, 30, tzinfo=timezone.utc))
        '2025-11-04T10:30:00.000Z'
    """
    if dt is None:
        dt = utc_now()
    elif dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    else:
        dt = dt.astimezone(timezone.utc)

    return dt.strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z"


def current_year() -> int:
    """Current calendar year in UTC, used in email footers."""
    return utc_now().year
