"""The explicit action interface shared by commands, buttons and reactions.

Handlers never reach into module globals: everything process-local lives on a
:class:`TrackerContext` handed to them by the dispatcher.
"""
from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Dict, Optional, Set, Tuple

from aiogram import Bot
from aiogram.exceptions import TelegramAPIError
from aiogram.types import CallbackQuery, Message, MessageReactionUpdated

from sleepbot.config import Settings
from sleepbot.services.board import mention
from sleepbot.services.confirmations import ResetConfirmations
from sleepbot.services.errors import TrackerError
from sleepbot.services.i18n import t
from sleepbot.services.records import RecordStore
from sleepbot.services.reminders import ReminderState

logger = logging.getLogger(__name__)


@dataclass
class TrackerContext:
    settings: Settings
    store: RecordStore
    confirmations: ResetConfirmations
    reminders: ReminderState = field(default_factory=ReminderState)
    # (chat_id, board kind) -> message id of the board we last posted
    boards: Dict[Tuple[int, str], int] = field(default_factory=dict)

    @classmethod
    def create(cls, settings: Settings, store: Optional[RecordStore] = None) -> "TrackerContext":
        return cls(
            settings=settings,
            store=store or RecordStore(),
            confirmations=ResetConfirmations(timeout_seconds=settings.reset_timeout_seconds),
        )

    @property
    def lang(self) -> str:
        return self.settings.lang


class Action(ABC):
    """One user action: who did it, where, and how to answer them."""

    def __init__(self, bot: Bot, actor_id: int, actor_name: str, chat_id: int, chat_title: Optional[str] = None):
        self.bot = bot
        self.actor_id = str(actor_id)
        self.actor_name = actor_name
        self.chat_id = chat_id
        self.chat_title = chat_title

    @property
    def group_id(self) -> str:
        return str(self.chat_id)

    @property
    def actor_label(self) -> str:
        return mention(self.actor_id, self.actor_name)

    @abstractmethod
    async def acknowledge(self, text: str) -> None:
        ...


class CommandAction(Action):
    def __init__(self, message: Message, bot: Bot):
        super().__init__(
            bot,
            actor_id=message.from_user.id,
            actor_name=message.from_user.full_name,
            chat_id=message.chat.id,
            chat_title=message.chat.title,
        )
        self.message = message

    async def acknowledge(self, text: str) -> None:
        await self.message.answer(text)


class ButtonAction(Action):
    """Acknowledges through the callback answer, which Telegram accepts only once.

    Later notices go to the chat as regular messages.
    """

    def __init__(self, call: CallbackQuery, bot: Bot):
        super().__init__(
            bot,
            actor_id=call.from_user.id,
            actor_name=call.from_user.full_name,
            chat_id=call.message.chat.id,
            chat_title=call.message.chat.title,
        )
        self.call = call
        self.answered = False

    @property
    def actor_label(self) -> str:
        # callback answers are plain text
        return self.actor_name

    async def acknowledge(self, text: str) -> None:
        if self.answered:
            await self.bot.send_message(self.chat_id, text)
            return
        self.answered = True
        await self.call.answer(text)


class ReactionAction(Action):
    """Posts a short-lived notice in the chat where the reaction was added."""

    _pending: Set[asyncio.Task] = set()

    def __init__(self, update: MessageReactionUpdated, bot: Bot, notice_ttl: float):
        super().__init__(
            bot,
            actor_id=update.user.id,
            actor_name=update.user.full_name,
            chat_id=update.chat.id,
            chat_title=update.chat.title,
        )
        self.update = update
        self.notice_ttl = notice_ttl

    async def acknowledge(self, text: str) -> None:
        message = await self.bot.send_message(self.chat_id, text)
        task = asyncio.create_task(self._delete_later(message.message_id))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _delete_later(self, message_id: int) -> None:
        await asyncio.sleep(self.notice_ttl)
        try:
            await self.bot.delete_message(self.chat_id, message_id)
        except TelegramAPIError as exc:
            logger.warning("Failed to delete notice %s in chat=%s: %s", message_id, self.chat_id, exc)


@asynccontextmanager
async def action_boundary(action: Action, lang: str, failure_key: str = "error.generic"):
    """Turn any failure inside an action into a notice for the actor; nothing propagates."""
    try:
        yield
    except (TrackerError, TelegramAPIError) as exc:
        logger.exception("Action by user=%s in chat=%s failed: %s", action.actor_id, action.chat_id, exc)
        await _report_failure(action, lang, failure_key)
    except Exception:
        logger.exception("Unexpected error in action by user=%s in chat=%s", action.actor_id, action.chat_id)
        await _report_failure(action, lang, failure_key)


async def _report_failure(action: Action, lang: str, failure_key: str) -> None:
    try:
        await action.acknowledge(t(lang, failure_key))
    except TelegramAPIError as notify_exc:
        logger.error("Failed to report error to user=%s: %s", action.actor_id, notify_exc)
