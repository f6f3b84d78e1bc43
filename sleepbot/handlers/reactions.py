from __future__ import annotations

import logging
from typing import List

from aiogram import Bot
from aiogram.types import MessageReactionUpdated, ReactionTypeEmoji

from sleepbot.services.actions import ReactionAction, TrackerContext, action_boundary
from .start import router
from .tracker import fall_asleep, repost_boards, reset, show_stats, wake_up

logger = logging.getLogger(__name__)

# Telegram only accepts a fixed set of reaction emoji
REACTION_ACTIONS = {
    "⚡": wake_up,
    "😴": fall_asleep,
    "🤯": reset,
    "🏆": show_stats,
    "👀": repost_boards,
}


def added_emoji(update: MessageReactionUpdated) -> List[str]:
    """Emoji present in the new reaction list but not in the old one."""
    old = {r.emoji for r in update.old_reaction if isinstance(r, ReactionTypeEmoji)}
    return [r.emoji for r in update.new_reaction if isinstance(r, ReactionTypeEmoji) and r.emoji not in old]


@router.message_reaction()
async def handle_reaction(update: MessageReactionUpdated, bot: Bot, tracker: TrackerContext):
    if update.user is None or update.user.is_bot:
        return
    if update.chat.title != tracker.settings.chat_title:
        return

    action = ReactionAction(update, bot, notice_ttl=tracker.settings.notice_ttl_seconds)
    for emoji in added_emoji(update):
        handler = REACTION_ACTIONS.get(emoji)
        if handler is None:
            continue
        logger.info("Reaction %s from user=%s in chat=%s", emoji, action.actor_id, action.chat_id)
        async with action_boundary(action, tracker.lang):
            await handler(action, tracker)
