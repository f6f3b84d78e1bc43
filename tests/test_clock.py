"""Tests for the tracker clock and timestamp codec."""

from datetime import datetime, timezone

from sleepbot.services.clock import (
    TRACKER_ZONE,
    format_minutes,
    format_timestamp,
    now,
    parse_timestamp,
    split_minutes,
)


def test_format_is_zero_padded_and_in_tracker_zone():
    utc = datetime(2024, 3, 4, 22, 5, tzinfo=timezone.utc)

    assert format_timestamp(utc) == "2024-03-05 07:05"


def test_parse_round_trip():
    parsed = parse_timestamp("2024-01-02 07:00")

    assert parsed.tzinfo is TRACKER_ZONE
    assert format_timestamp(parsed) == "2024-01-02 07:00"


def test_text_order_matches_time_order():
    stamps = ["2024-01-02 07:00", "2023-12-31 23:59", "2024-01-02 06:59", "2024-10-01 00:00"]

    assert sorted(stamps) == sorted(stamps, key=parse_timestamp)


def test_now_has_minute_resolution():
    current = now()

    assert current.second == 0
    assert current.microsecond == 0


def test_minutes_are_floored():
    assert split_minutes(450.9) == (7, 30)
    assert format_minutes(59.99) == "0h 59m"
    assert format_minutes(1440) == "24h 0m"
