from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Optional, Set

from aiogram import Bot
from aiogram.exceptions import TelegramAPIError

from sleepbot.models.sleep_record import RecordType, SleepStatus
from sleepbot.services.clock import minutes_between, now as tracker_now
from sleepbot.services.errors import StorageError
from sleepbot.services.i18n import t

if TYPE_CHECKING:
    from sleepbot.services.actions import TrackerContext

logger = logging.getLogger(__name__)


@dataclass
class ReminderState:
    """Users already reminded in this process.

    Entries are only dropped by :meth:`forget`, which the sleep action calls
    when ``REMINDER_REARM_ON_SLEEP`` is enabled; otherwise a user is reminded
    at most once per process lifetime.
    """

    reminded: Set[str] = field(default_factory=set)

    def was_reminded(self, user_id: str) -> bool:
        return str(user_id) in self.reminded

    def mark(self, user_id: str) -> None:
        self.reminded.add(str(user_id))

    def forget(self, user_id: str) -> None:
        self.reminded.discard(str(user_id))


def awake_minutes(tracker: "TrackerContext", user_id: str, group_id: str, now: datetime) -> Optional[float]:
    """Minutes since the last wakeup if the user is currently awake."""
    latest = tracker.store.latest(user_id, group_id)
    if latest is None or latest.status != SleepStatus.AWAKE.value:
        return None
    last_wake = tracker.store.latest_of_type(user_id, group_id, RecordType.WAKEUP)
    if last_wake is None:
        return None
    return minutes_between(last_wake.timestamp, now)


async def remind_awake_users(bot: Bot, tracker: "TrackerContext", now: Optional[datetime] = None) -> int:
    """Send a DM to everyone awake longer than the threshold. Returns reminders sent."""
    now = now or tracker_now()
    threshold = tracker.settings.reminder_threshold_minutes
    lang = tracker.settings.lang
    sent = 0
    try:
        pairs = tracker.store.tracked_pairs()
    except StorageError:
        logger.error("Skipping reminder poll, tracked users unavailable")
        return 0

    for user_id, group_id in pairs:
        if tracker.reminders.was_reminded(user_id):
            continue
        try:
            elapsed = awake_minutes(tracker, user_id, group_id, now)
        except StorageError:
            logger.error("Skipping reminder check for user_id=%s", user_id)
            continue
        if elapsed is None or elapsed < threshold:
            continue
        try:
            await bot.send_message(int(user_id), t(lang, "reminder.awake_too_long", hours=threshold // 60))
        except ValueError:
            logger.warning("Skipping reminder for malformed user_id=%r", user_id)
            continue
        except TelegramAPIError as e:
            logger.error("Failed to send awake reminder to user_id=%s: %s", user_id, e)
            continue
        tracker.reminders.mark(user_id)
        sent += 1
        logger.info("Sent awake reminder to user_id=%s", user_id)
    return sent
