from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional, Tuple

from sleepbot.services.clock import week_ago
from sleepbot.services.records import RecordStore
from sleepbot.services.sleep import (
    average_awake_minutes,
    average_sleep_minutes,
    server_average_minutes,
    weekly_ranking,
    weekly_totals,
)


@dataclass(frozen=True)
class PersonalStats:
    average_sleep: Optional[float]
    average_awake: Optional[float]
    server_average_sleep: Optional[float]


def server_average_sleep(store: RecordStore, group_id: str) -> Optional[float]:
    averages = (
        average_sleep_minutes(store.history(user_id, group_id))
        for user_id in sorted(store.distinct_users(group_id))
    )
    return server_average_minutes(averages)


def personal_stats(store: RecordStore, user_id: str, group_id: str) -> PersonalStats:
    history = store.history(user_id, group_id)
    return PersonalStats(
        average_sleep=average_sleep_minutes(history),
        average_awake=average_awake_minutes(history),
        server_average_sleep=server_average_sleep(store, group_id),
    )


def weekly_leaders(store: RecordStore, group_id: str, now: datetime) -> List[Tuple[str, float]]:
    """Top sleepers of the trailing seven days."""
    events = store.all_for_group_since(group_id, week_ago(now))
    return weekly_ranking(weekly_totals(events))
