"""Unit tests for stored timestamp encoding."""

from datetime import datetime, timedelta, timezone

from backend.lib.attractions.timestamps import ensure_utc, format_timestamp


def test_format_naive_as_utc():
    assert format_timestamp(datetime(2025, 12, 31)) == '2025-12-31T00:00:00.000Z'


def test_format_converts_to_utc():
    value = datetime(2025, 1, 1, 2, 0, tzinfo=timezone(timedelta(hours=2)))
    assert format_timestamp(value) == '2025-01-01T00:00:00.000Z'


def test_format_truncates_to_milliseconds():
    value = datetime(2025, 1, 1, 0, 0, 0, 123999, tzinfo=timezone.utc)
    assert format_timestamp(value) == '2025-01-01T00:00:00.123Z'


def test_format_pads_years_below_1000():
    value = format_timestamp(datetime(999, 1, 1, tzinfo=timezone.utc))

    assert value == '0999-01-01T00:00:00.000Z'
    assert value < '2025-01-01T00:00:00.000Z'


def test_string_order_matches_time_order():
    earlier = datetime(2024, 12, 31, 23, 59, 59, 999000, tzinfo=timezone.utc)
    later = datetime(2025, 1, 1, tzinfo=timezone.utc)
    assert format_timestamp(earlier) < format_timestamp(later)


def test_ensure_utc_keeps_instant():
    value = datetime(2025, 1, 1, 2, 0, tzinfo=timezone(timedelta(hours=2)))
    assert ensure_utc(value) == datetime(2025, 1, 1, tzinfo=timezone.utc)
