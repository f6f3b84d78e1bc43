from __future__ import annotations

from aiogram import Bot, types
from aiogram.filters import Command

from sleepbot.services.actions import CommandAction, TrackerContext, action_boundary
from sleepbot.services.board import render_stats
from sleepbot.services.i18n import t
from sleepbot.services.stats import personal_stats
from .start import router
from .tracker import refresh_status


@router.message(Command("status"))
async def cmd_status(message: types.Message, bot: Bot, tracker: TrackerContext):
    """Post or refresh the status board of this chat."""
    action = CommandAction(message, bot)
    async with action_boundary(action, tracker.lang, "error.command"):
        await refresh_status(action, tracker)
        await action.acknowledge(t(tracker.lang, "action.status_updated"))


@router.message(Command("stats"))
async def cmd_stats(message: types.Message, bot: Bot, tracker: TrackerContext):
    """Personal averages plus the chat-wide average sleep."""
    action = CommandAction(message, bot)
    async with action_boundary(action, tracker.lang, "error.stats_failed"):
        stats = personal_stats(tracker.store, action.actor_id, action.group_id)
        await message.answer(render_stats(tracker.lang, action.actor_name, stats))
