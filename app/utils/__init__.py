"""Utility helpers for reusable functionality."""

from .datetime import (
    EPOCH_FLOOR,
    ensure_app_timezone,
    ensure_utc_naive_datetime,
    format_relative_time,
    from_utc_naive_datetime,
    get_app_timezone,
    now_in_app_timezone,
    sort_key_for,
)

__all__ = [
    "EPOCH_FLOOR",
    "ensure_app_timezone",
    "ensure_utc_naive_datetime",
    "format_relative_time",
    "from_utc_naive_datetime",
    "get_app_timezone",
    "now_in_app_timezone",
    "sort_key_for",
]
