"""Interval accounting over ordered sleep/wakeup events.

All functions here are pure: they take events already ordered by timestamp
(and by user, for group-wide sequences) and never touch the store.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Dict, Iterable, List, Optional, Tuple

from sleepbot.models.sleep_record import RecordType
from sleepbot.services.clock import minutes_between
from sleepbot.services.records import SleepEvent

RANKING_SIZE = 10


@dataclass(frozen=True)
class IntervalTotals:
    total_minutes: float = 0.0
    sessions: int = 0

    @property
    def average(self) -> Optional[float]:
        """Average minutes per closed session, ``None`` when nothing closed."""
        if self.sessions == 0:
            return None
        return self.total_minutes / self.sessions


def accumulate(events: Iterable[SleepEvent], opening: RecordType, closing: RecordType) -> IntervalTotals:
    """Pair each closing event with the most recent unmatched opening event.

    A second opening event replaces the pending marker. Non-positive intervals
    are dropped. An opening event with no close yet counts nothing.
    """
    total = 0.0
    sessions = 0
    marker: Optional[datetime] = None
    for event in events:
        if event.record_type == opening.value:
            marker = event.timestamp
        elif event.record_type == closing.value and marker is not None:
            elapsed = minutes_between(marker, event.timestamp)
            if elapsed > 0:
                total += elapsed
                sessions += 1
            marker = None
    return IntervalTotals(total_minutes=total, sessions=sessions)


def sleep_totals(events: Iterable[SleepEvent]) -> IntervalTotals:
    return accumulate(events, RecordType.SLEEP, RecordType.WAKEUP)


def awake_totals(events: Iterable[SleepEvent]) -> IntervalTotals:
    return accumulate(events, RecordType.WAKEUP, RecordType.SLEEP)


def average_sleep_minutes(events: Iterable[SleepEvent]) -> Optional[float]:
    return sleep_totals(events).average


def average_awake_minutes(events: Iterable[SleepEvent]) -> Optional[float]:
    return awake_totals(events).average


def weekly_totals(events: Iterable[SleepEvent]) -> Dict[str, float]:
    """Total sleep minutes per user over an already windowed sequence.

    Users appear in the order their first event is seen, including users
    whose events close no interval (total 0).
    """
    by_user: Dict[str, List[SleepEvent]] = {}
    for event in events:
        by_user.setdefault(event.user_id, []).append(event)
    return {user_id: sleep_totals(user_events).total_minutes for user_id, user_events in by_user.items()}


def weekly_ranking(totals: Dict[str, float], limit: int = RANKING_SIZE) -> List[Tuple[str, float]]:
    """Users by descending total; ties keep their insertion order."""
    return sorted(totals.items(), key=lambda item: item[1], reverse=True)[:limit]


def server_average_minutes(per_user_averages: Iterable[Optional[float]]) -> Optional[float]:
    """Average of per-user averages, skipping users without a closed session.

    Every user weighs the same regardless of how many nights they logged.
    """
    averages = [avg for avg in per_user_averages if avg]
    if not averages:
        return None
    return sum(averages) / len(averages)


def predict_wake_time(sleep_start: datetime, average_sleep: Optional[float]) -> Optional[datetime]:
    """Expected wake-up time for someone who fell asleep at ``sleep_start``."""
    if not average_sleep:
        return None
    return sleep_start + timedelta(minutes=average_sleep)
