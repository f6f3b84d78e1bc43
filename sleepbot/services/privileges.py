from __future__ import annotations

import logging
from typing import Optional

from aiogram import Bot
from aiogram.enums import ChatMemberStatus
from aiogram.exceptions import TelegramBadRequest
from aiogram.types import ChatMember

from sleepbot.config import Settings

logger = logging.getLogger(__name__)


def can_manage_chat(member: Optional[ChatMember]) -> bool:
    if member is None:
        return False
    if member.status == ChatMemberStatus.CREATOR:
        return True
    return member.status == ChatMemberStatus.ADMINISTRATOR and bool(getattr(member, "can_manage_chat", False))


def has_tracker_role(member: Optional[ChatMember], role_title: str) -> bool:
    """Telegram has no roles; an administrator custom title stands in for one."""
    if member is None or not role_title:
        return False
    return (getattr(member, "custom_title", None) or "") == role_title


def is_privileged(user_id: str, member: Optional[ChatMember], settings: Settings) -> bool:
    return (
        can_manage_chat(member)
        or has_tracker_role(member, settings.role_title)
        or str(user_id) in settings.allowed_users
    )


async def check_privileged(bot: Bot, chat_id: int, user_id: str, settings: Settings) -> bool:
    try:
        member = await bot.get_chat_member(chat_id, int(user_id))
    except TelegramBadRequest as exc:
        logger.warning("Could not load member user=%s chat=%s: %s", user_id, chat_id, exc)
        member = None
    allowed = is_privileged(user_id, member, settings)
    if not allowed:
        logger.info("Denied privileged action for user=%s in chat=%s", user_id, chat_id)
    return allowed
