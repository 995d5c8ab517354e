"""Helpers for working with timezone-aware datetimes."""

from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone, tzinfo
from functools import lru_cache
from typing import Final

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from app.config import get_settings

_DEFAULT_TIMEZONE: Final[str] = "Asia/Bangkok"
_OFFSET_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"^(?:UTC|GMT)(?P<sign>[+-])(?P<hours>\d{1,2})(?::?(?P<minutes>\d{2}))?$",
    re.IGNORECASE,
)

# Oldest representable instant, used to order events without a timestamp.
EPOCH_FLOOR: Final[datetime] = datetime.min.replace(tzinfo=timezone.utc)


@lru_cache(maxsize=1)
def get_app_timezone() -> tzinfo:
    """Return the configured application timezone.

    The timezone is resolved using the ``APP_TIMEZONE`` environment variable (via
    the ``Settings`` model). If the provided value cannot be resolved, the
    default ``Asia/Bangkok`` timezone is used as a fallback.
    """

    settings = get_settings()
    tz_name = (settings.app_timezone or "").strip() or _DEFAULT_TIMEZONE
    return _resolve_timezone(tz_name)


def now_in_app_timezone() -> datetime:
    """Return the current time localized to the configured timezone."""

    return datetime.now(tz=get_app_timezone())


def ensure_app_timezone(value: datetime | None) -> datetime | None:
    """Normalize ``value`` so it is expressed in the configured timezone."""

    if value is None:
        return None

    tz = get_app_timezone()
    if value.tzinfo is None:
        return value.replace(tzinfo=tz)
    return value.astimezone(tz)


def ensure_utc_naive_datetime(value: datetime | None) -> datetime | None:
    """Return ``value`` converted to UTC without ``tzinfo`` for storage.

    Naive values are assumed to already be expressed in the app timezone.
    """

    localized = ensure_app_timezone(value)
    if localized is None:
        return None
    return localized.astimezone(timezone.utc).replace(tzinfo=None)


def from_utc_naive_datetime(value: datetime | None) -> datetime | None:
    """Inverse of :func:`ensure_utc_naive_datetime`."""

    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(get_app_timezone())


def sort_key_for(value: datetime | None) -> datetime:
    """Return a comparable aware datetime, treating ``None`` as the oldest."""

    if value is None:
        return EPOCH_FLOOR
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


_RELATIVE_UNITS: Final[tuple[tuple[str, int], ...]] = (
    ("year", 365 * 24 * 3600),
    ("month", 30 * 24 * 3600),
    ("day", 24 * 3600),
    ("hour", 3600),
    ("minute", 60),
)


def format_relative_time(value: datetime | None, now: datetime | None = None) -> str:
    """Render ``value`` as a human readable distance to ``now``.

    Future timestamps and anything under a minute old render as ``just now``.
    """

    if value is None:
        return ""
    reference = sort_key_for(now or now_in_app_timezone())
    seconds = int((reference - sort_key_for(value)).total_seconds())
    for unit, size in _RELATIVE_UNITS:
        amount = seconds // size
        if amount >= 1:
            suffix = "" if amount == 1 else "s"
            return f"{amount} {unit}{suffix} ago"
    return "just now"


def _resolve_timezone(tz_name: str) -> tzinfo:
    """Resolve ``tz_name`` into a ``timezone`` instance."""

    try:
        return ZoneInfo(tz_name)
    except ZoneInfoNotFoundError:
        match = _OFFSET_PATTERN.match(tz_name)
        if match:
            sign = -1 if match.group("sign") == "-" else 1
            hours = int(match.group("hours"))
            minutes = int(match.group("minutes") or 0)
            offset = timedelta(hours=hours, minutes=minutes)
            return timezone(sign * offset)
    return ZoneInfo(_DEFAULT_TIMEZONE)
