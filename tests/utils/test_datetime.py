"""Tests for the datetime helpers."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from app.utils import (
    ensure_utc_naive_datetime,
    format_relative_time,
    from_utc_naive_datetime,
    sort_key_for,
)

NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


@pytest.mark.parametrize(
    ("delta", "expected"),
    [
        (timedelta(seconds=30), "just now"),
        (timedelta(minutes=1), "1 minute ago"),
        (timedelta(minutes=5), "5 minutes ago"),
        (timedelta(hours=2), "2 hours ago"),
        (timedelta(days=1), "1 day ago"),
        (timedelta(days=45), "1 month ago"),
        (timedelta(days=800), "2 years ago"),
        (timedelta(minutes=-10), "just now"),
    ],
)
def test_format_relative_time(delta, expected):
    assert format_relative_time(NOW - delta, NOW) == expected


def test_format_relative_time_without_value():
    assert format_relative_time(None, NOW) == ""


def test_utc_naive_round_trip():
    value = datetime(2024, 5, 1, 19, 0, tzinfo=timezone(timedelta(hours=7)))

    stored = ensure_utc_naive_datetime(value)

    assert stored == datetime(2024, 5, 1, 12, 0)
    assert from_utc_naive_datetime(stored) == value


def test_missing_timestamps_sort_as_oldest():
    assert sort_key_for(None) < sort_key_for(datetime(1970, 1, 1))
