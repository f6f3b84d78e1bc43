from __future__ import annotations

import enum
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from sleepbot.models.sleep_record import RecordType, SleepStatus
from sleepbot.services.clock import minutes_between
from sleepbot.services.records import RecordStore, SleepEvent
from sleepbot.services.sleep import average_sleep_minutes, predict_wake_time


class UserState(str, enum.Enum):
    AWAKE = "awake"
    ASLEEP = "asleep"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class UserStatus:
    user_id: str
    state: UserState
    last_wake: Optional[datetime] = None
    last_sleep: Optional[datetime] = None
    elapsed_minutes: Optional[float] = None
    previous_minutes: Optional[float] = None
    # True when the state is known but the opposite boundary event was never recorded
    missing_previous: bool = False
    average_sleep_minutes: Optional[float] = None
    predicted_wake: Optional[datetime] = None


def _span(start: Optional[datetime], end: Optional[datetime]) -> Optional[float]:
    if start is None or end is None:
        return None
    minutes = minutes_between(start, end)
    return minutes if minutes >= 0 else None


def project_status(
    user_id: str,
    latest: Optional[SleepEvent],
    last_wake: Optional[SleepEvent],
    last_sleep: Optional[SleepEvent],
    average_sleep: Optional[float],
    now: datetime,
) -> UserStatus:
    """Combine the latest events of one user into a displayable status."""
    wake_at = last_wake.timestamp if last_wake else None
    sleep_at = last_sleep.timestamp if last_sleep else None

    if latest is None:
        return UserStatus(
            user_id=user_id,
            state=UserState.UNKNOWN,
            last_wake=wake_at,
            last_sleep=sleep_at,
            average_sleep_minutes=average_sleep,
        )

    awake = latest.status == SleepStatus.AWAKE.value
    state = UserState.AWAKE if awake else UserState.ASLEEP
    started, previous_start = (wake_at, sleep_at) if awake else (sleep_at, wake_at)

    elapsed = _span(started, now)
    previous = None
    missing_previous = False
    if started is not None:
        if previous_start is None:
            missing_previous = True
        else:
            previous = _span(previous_start, started)

    predicted = None
    if state is UserState.ASLEEP and sleep_at is not None:
        predicted = predict_wake_time(sleep_at, average_sleep)

    return UserStatus(
        user_id=user_id,
        state=state,
        last_wake=wake_at,
        last_sleep=sleep_at,
        elapsed_minutes=elapsed,
        previous_minutes=previous,
        missing_previous=missing_previous,
        average_sleep_minutes=average_sleep,
        predicted_wake=predicted,
    )


def collect_status(store: RecordStore, user_id: str, group_id: str, now: datetime) -> UserStatus:
    return project_status(
        user_id,
        latest=store.latest(user_id, group_id),
        last_wake=store.latest_of_type(user_id, group_id, RecordType.WAKEUP),
        last_sleep=store.latest_of_type(user_id, group_id, RecordType.SLEEP),
        average_sleep=average_sleep_minutes(store.history(user_id, group_id)),
        now=now,
    )
