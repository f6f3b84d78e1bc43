"""Tracker clock: a fixed civil timezone with minute resolution.

Timestamps are timezone-aware ``datetime`` objects everywhere inside the bot.
Only the storage layer turns them into the ``yyyy-MM-dd HH:mm`` text form,
which sorts lexicographically in chronological order.
"""
from __future__ import annotations

from datetime import datetime, timedelta, tzinfo
from typing import Optional, Tuple
from zoneinfo import ZoneInfo

from sleepbot.config import TRACKER_TZ

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M"

TRACKER_ZONE: tzinfo = ZoneInfo(TRACKER_TZ)


def now() -> datetime:
    """Current time in the tracker zone, truncated to the minute."""
    return datetime.now(TRACKER_ZONE).replace(second=0, microsecond=0)


def to_tracker_zone(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=TRACKER_ZONE)
    return value.astimezone(TRACKER_ZONE)


def format_timestamp(value: datetime) -> str:
    return to_tracker_zone(value).strftime(TIMESTAMP_FORMAT)


def parse_timestamp(text: str) -> datetime:
    return datetime.strptime(text, TIMESTAMP_FORMAT).replace(tzinfo=TRACKER_ZONE)


def week_ago(reference: Optional[datetime] = None) -> datetime:
    return (reference or now()) - timedelta(days=7)


def minutes_between(start: datetime, end: datetime) -> float:
    return (end - start).total_seconds() / 60.0


def split_minutes(minutes: float) -> Tuple[int, int]:
    """Whole hours and leftover whole minutes, both floored."""
    return divmod(int(minutes), 60)


def format_minutes(minutes: float) -> str:
    hours, mins = split_minutes(minutes)
    return f"{hours}h {mins}m"
