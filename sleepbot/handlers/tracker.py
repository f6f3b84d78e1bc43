from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from aiogram import Bot, F
from aiogram.types import CallbackQuery

from sleepbot.models.sleep_record import SleepStatus
from sleepbot.services import clock
from sleepbot.services.actions import Action, ButtonAction, TrackerContext, action_boundary
from sleepbot.services.board import (
    RANKING_BOARD,
    STATUS_BOARD,
    build_ranking,
    build_status_board,
    drop_boards,
    publish_board,
)
from sleepbot.services.i18n import t
from .start import router

logger = logging.getLogger(__name__)


async def refresh_status(action: Action, tracker: TrackerContext, now: Optional[datetime] = None) -> None:
    text = await build_status_board(action.bot, tracker, action.chat_id, now or clock.now())
    await publish_board(action.bot, tracker, action.chat_id, STATUS_BOARD, text)


async def refresh_ranking(action: Action, tracker: TrackerContext, now: Optional[datetime] = None) -> None:
    text = await build_ranking(
        action.bot,
        tracker,
        action.chat_id,
        now or clock.now(),
        viewer_id=action.actor_id,
        viewer_name=action.actor_name,
    )
    await publish_board(action.bot, tracker, action.chat_id, RANKING_BOARD, text)


def record_status(tracker: TrackerContext, user_id: str, group_id: str, status: SleepStatus) -> None:
    tracker.store.record(user_id, group_id, status, clock.now())
    if status is SleepStatus.ASLEEP and tracker.settings.reminder_rearm_on_sleep:
        tracker.reminders.forget(user_id)


async def wake_up(action: Action, tracker: TrackerContext) -> None:
    record_status(tracker, action.actor_id, action.group_id, SleepStatus.AWAKE)
    await action.acknowledge(t(tracker.lang, "action.woke", user=action.actor_label))
    await refresh_status(action, tracker)


async def fall_asleep(action: Action, tracker: TrackerContext) -> None:
    record_status(tracker, action.actor_id, action.group_id, SleepStatus.ASLEEP)
    await action.acknowledge(t(tracker.lang, "action.slept", user=action.actor_label))
    await refresh_status(action, tracker)


async def reset(action: Action, tracker: TrackerContext) -> None:
    """First press asks for confirmation, a second press within the timeout purges."""
    lang = tracker.lang
    if not tracker.confirmations.press(action.actor_id):
        seconds = int(tracker.confirmations.timeout_seconds)
        await action.acknowledge(t(lang, "action.reset_confirm", user=action.actor_label, seconds=seconds))
        return
    tracker.store.purge(action.actor_id, action.group_id)
    await action.acknowledge(t(lang, "action.reset_done", user=action.actor_label))
    await refresh_status(action, tracker)


async def show_stats(action: Action, tracker: TrackerContext) -> None:
    await refresh_status(action, tracker)
    await refresh_ranking(action, tracker)
    await action.acknowledge(t(tracker.lang, "action.ranking_updated"))


async def repost_boards(action: Action, tracker: TrackerContext) -> None:
    """Delete the current boards and post them again at the bottom of the chat."""
    await drop_boards(action.bot, tracker, action.chat_id)
    await refresh_status(action, tracker)
    await refresh_ranking(action, tracker)


BUTTON_ACTIONS = {
    "wake": wake_up,
    "sleep": fall_asleep,
    "reset": reset,
    "stats": show_stats,
}


@router.callback_query(F.data.startswith("tracker:"))
async def handle_tracker_button(call: CallbackQuery, bot: Bot, tracker: TrackerContext):
    """Handle the four tracker panel buttons."""
    handler = BUTTON_ACTIONS.get(call.data.split(":", 1)[1])
    if handler is None:
        await call.answer()
        return
    action = ButtonAction(call, bot)
    async with action_boundary(action, tracker.lang):
        await handler(action, tracker)
    if not action.answered:
        await call.answer()
