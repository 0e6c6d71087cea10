"""Shared utilities."""

from .timestamps import current_year, format_iso_timestamp, utc_now

__all__ = [
    "utc_now",
    "format_iso_timestamp",
    "current_year",
]
