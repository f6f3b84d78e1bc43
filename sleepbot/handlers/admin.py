from __future__ import annotations

import logging
import re
from typing import List, Optional, Tuple

from aiogram import Bot, types
from aiogram.filters import Command, CommandObject

from sleepbot.models.sleep_record import SleepStatus
from sleepbot.services.actions import CommandAction, TrackerContext, action_boundary
from sleepbot.services.board import mention, resolve_name
from sleepbot.services.errors import ValidationError
from sleepbot.services.i18n import t
from sleepbot.services.privileges import check_privileged
from .start import router
from .tracker import record_status, refresh_status

logger = logging.getLogger(__name__)

# Telegram ids are ASCII integers
_USER_ID = re.compile(r"-?[0-9]+")


def parse_target(args: Optional[str], reply_user: Optional[types.User]) -> Tuple[Optional[str], List[str]]:
    """Target user id from a replied-to message or a leading numeric argument."""
    parts = (args or "").split()
    if reply_user is not None:
        return str(reply_user.id), parts
    if parts and _USER_ID.fullmatch(parts[0]):
        return parts[0], parts[1:]
    return None, parts


def parse_setstatus(args: Optional[str], reply_user: Optional[types.User]) -> Tuple[str, SleepStatus]:
    target, rest = parse_target(args, reply_user)
    if target is None:
        raise ValidationError("error.no_target")
    status = SleepStatus.parse(rest[0]) if rest else None
    if status is None:
        raise ValidationError("error.bad_status")
    return target, status


async def _target_label(bot: Bot, message: types.Message, target_id: str) -> str:
    reply = message.reply_to_message
    if reply is not None and reply.from_user is not None and str(reply.from_user.id) == target_id:
        return mention(target_id, reply.from_user.full_name)
    name = await resolve_name(bot, message.chat.id, target_id)
    return mention(target_id, name or target_id)


def _reply_user(message: types.Message) -> Optional[types.User]:
    return message.reply_to_message.from_user if message.reply_to_message else None


@router.message(Command("setstatus"))
async def cmd_setstatus(message: types.Message, command: CommandObject, bot: Bot, tracker: TrackerContext):
    """Change a member's status (privileged)."""
    lang = tracker.lang
    action = CommandAction(message, bot)
    async with action_boundary(action, lang, "error.setstatus_failed"):
        if not await check_privileged(bot, action.chat_id, action.actor_id, tracker.settings):
            await message.answer(t(lang, "error.denied"))
            return
        try:
            target_id, status = parse_setstatus(command.args, _reply_user(message))
        except ValidationError as exc:
            await message.answer(t(lang, str(exc)))
            return

        record_status(tracker, target_id, action.group_id, status)
        label = t(lang, "status.awake_label" if status is SleepStatus.AWAKE else "status.asleep_label")
        user = await _target_label(bot, message, target_id)
        await message.answer(t(lang, "admin.status_set", user=user, status=label))
        logger.info("user=%s set status of user=%s to %s in chat=%s", action.actor_id, target_id, status.name, action.chat_id)
        await refresh_status(action, tracker)


@router.message(Command("clear"))
async def cmd_clear(message: types.Message, command: CommandObject, bot: Bot, tracker: TrackerContext):
    """Delete every record of a member in this chat (privileged)."""
    lang = tracker.lang
    action = CommandAction(message, bot)
    async with action_boundary(action, lang, "error.clear_failed"):
        if not await check_privileged(bot, action.chat_id, action.actor_id, tracker.settings):
            await message.answer(t(lang, "error.denied"))
            return
        target_id, _ = parse_target(command.args, _reply_user(message))
        if target_id is None:
            await message.answer(t(lang, "error.no_target"))
            return

        tracker.store.purge(target_id, action.group_id)
        user = await _target_label(bot, message, target_id)
        await message.answer(t(lang, "admin.cleared", user=user, executor=action.actor_label))
        await refresh_status(action, tracker)
