"""Rendering and publishing of the per-chat status board and weekly ranking."""
from __future__ import annotations

import logging
from datetime import datetime
from typing import TYPE_CHECKING, List, Optional, Sequence, Tuple

from aiogram import Bot, html
from aiogram.enums import ChatMemberStatus
from aiogram.exceptions import TelegramAPIError, TelegramBadRequest
from aiogram.utils.keyboard import InlineKeyboardBuilder

from sleepbot.services.clock import format_timestamp, split_minutes
from sleepbot.services.errors import NotFoundError
from sleepbot.services.i18n import t
from sleepbot.services.stats import PersonalStats, personal_stats, weekly_leaders
from sleepbot.services.status import UserState, UserStatus, collect_status

if TYPE_CHECKING:
    from sleepbot.services.actions import TrackerContext

logger = logging.getLogger(__name__)

STATUS_BOARD = "status"
RANKING_BOARD = "ranking"

_GONE = (ChatMemberStatus.LEFT, ChatMemberStatus.KICKED)


def build_tracker_kb(lang: str) -> InlineKeyboardBuilder:
    kb = InlineKeyboardBuilder()
    kb.button(text=t(lang, "btn.wake"), callback_data="tracker:wake")
    kb.button(text=t(lang, "btn.sleep"), callback_data="tracker:sleep")
    kb.button(text=t(lang, "btn.reset"), callback_data="tracker:reset")
    kb.button(text=t(lang, "btn.stats"), callback_data="tracker:stats")
    kb.adjust(2, 2)
    return kb


def mention(user_id: str | int, name: str) -> str:
    return html.link(html.quote(name), f"tg://user?id={user_id}")


def duration_text(lang: str, minutes: Optional[float]) -> str:
    if minutes is None:
        return t(lang, "na")
    hours, mins = split_minutes(minutes)
    return t(lang, "duration", hours=hours, minutes=mins)


def timestamp_text(lang: str, value: Optional[datetime]) -> str:
    return format_timestamp(value) if value is not None else t(lang, "na")


def render_status_entry(lang: str, name: str, status: UserStatus) -> str:
    lines = []
    if status.state is UserState.AWAKE:
        label, previous_key, since_key, missing_key = (
            t(lang, "state.awake"), "board.sleep_duration", "board.since_wake", "board.no_prev_sleep",
        )
    elif status.state is UserState.ASLEEP:
        label, previous_key, since_key, missing_key = (
            t(lang, "state.asleep"), "board.awake_duration", "board.since_sleep", "board.no_prev_wake",
        )
    else:
        label, previous_key, since_key, missing_key = (
            t(lang, "state.unknown"), "board.awake_duration", "board.since_sleep", None,
        )

    if status.missing_previous and missing_key:
        previous = t(lang, missing_key)
    else:
        previous = duration_text(lang, status.previous_minutes)

    lines.append(f"{mention(status.user_id, name)} - {label}")
    lines.append(t(lang, "board.last_wake", value=timestamp_text(lang, status.last_wake)))
    lines.append(t(lang, "board.last_sleep", value=timestamp_text(lang, status.last_sleep)))
    lines.append(t(lang, previous_key, value=previous))
    lines.append(t(lang, since_key, value=duration_text(lang, status.elapsed_minutes)))
    lines.append(t(lang, "board.average", value=duration_text(lang, status.average_sleep_minutes)))
    if status.predicted_wake is not None:
        lines.append(t(lang, "board.predicted", value=format_timestamp(status.predicted_wake)))
    return "\n".join(lines)


def render_status_board(lang: str, entries: Sequence[Tuple[str, UserStatus]]) -> str:
    title = html.bold(t(lang, "board.title"))
    if not entries:
        return f"{title}\n\n{t(lang, 'board.empty')}"
    body = "\n\n".join(render_status_entry(lang, name, status) for name, status in entries)
    return f"{title}\n\n{body}"


def render_stats_lines(lang: str, name: str, stats: PersonalStats) -> List[str]:
    return [
        t(lang, "stats.avg_sleep", name=html.quote(name), value=duration_text(lang, stats.average_sleep)),
        t(lang, "stats.avg_awake", name=html.quote(name), value=duration_text(lang, stats.average_awake)),
        t(lang, "stats.server_avg", value=duration_text(lang, stats.server_average_sleep)),
    ]


def render_stats(lang: str, name: str, stats: PersonalStats) -> str:
    lines = [html.bold(t(lang, "stats.title")), ""]
    lines.extend(render_stats_lines(lang, name, stats))
    lines.extend(["", html.italic(t(lang, "stats.footer"))])
    return "\n".join(lines)


def render_ranking(
    lang: str,
    leaders: Sequence[Tuple[str, str, float]],
    viewer: Optional[Tuple[str, PersonalStats]] = None,
) -> str:
    """Weekly ranking; ``leaders`` holds (user_id, display name, total minutes)."""
    lines = [html.bold(t(lang, "ranking.title")), ""]
    if not leaders:
        lines.append(t(lang, "ranking.empty"))
    for rank, (user_id, name, total) in enumerate(leaders, start=1):
        lines.append(t(lang, "ranking.row", rank=rank, user=mention(user_id, name), total=duration_text(lang, total)))
    if viewer is not None:
        lines.append("")
        lines.extend(render_stats_lines(lang, viewer[0], viewer[1]))
    lines.extend(["", html.italic(t(lang, "ranking.footer"))])
    return "\n".join(lines)


async def resolve_name(bot: Bot, chat_id: int, user_id: str) -> Optional[str]:
    """Display name of a chat member, ``None`` when they are no longer in the chat."""
    try:
        member = await bot.get_chat_member(chat_id, int(user_id))
    except ValueError:
        logger.warning("Skipping malformed user id %r in chat=%s", user_id, chat_id)
        return None
    except TelegramBadRequest:
        logger.info("Member user=%s not found in chat=%s", user_id, chat_id)
        return None
    if member.status in _GONE:
        return None
    return member.user.full_name


async def build_status_board(bot: Bot, tracker: "TrackerContext", chat_id: int, now: datetime) -> str:
    entries = []
    group_id = str(chat_id)
    for user_id in sorted(tracker.store.distinct_users(group_id)):
        name = await resolve_name(bot, chat_id, user_id)
        if name is None:
            continue
        entries.append((name, collect_status(tracker.store, user_id, group_id, now)))
    return render_status_board(tracker.settings.lang, entries)


async def build_ranking(
    bot: Bot,
    tracker: "TrackerContext",
    chat_id: int,
    now: datetime,
    viewer_id: Optional[str] = None,
    viewer_name: Optional[str] = None,
) -> str:
    group_id = str(chat_id)
    leaders = []
    for user_id, total in weekly_leaders(tracker.store, group_id, now):
        name = await resolve_name(bot, chat_id, user_id) or user_id
        leaders.append((user_id, name, total))
    viewer = None
    if viewer_id is not None:
        viewer = (viewer_name or viewer_id, personal_stats(tracker.store, viewer_id, group_id))
    return render_ranking(tracker.settings.lang, leaders, viewer)


async def _edit_board(bot: Bot, chat_id: int, message_id: int, text: str) -> None:
    try:
        await bot.edit_message_text(text=text, chat_id=chat_id, message_id=message_id)
    except TelegramBadRequest as exc:
        if "message is not modified" in str(exc):
            return
        raise NotFoundError(f"board message {message_id} is gone") from exc


async def publish_board(bot: Bot, tracker: "TrackerContext", chat_id: int, kind: str, text: str) -> int:
    """Edit the known board message of this kind, or post a new one."""
    message_id = tracker.boards.get((chat_id, kind))
    if message_id is not None:
        try:
            await _edit_board(bot, chat_id, message_id, text)
            return message_id
        except NotFoundError:
            logger.info("Board %s in chat=%s missing, posting a new one", kind, chat_id)
            tracker.boards.pop((chat_id, kind), None)
    message = await bot.send_message(chat_id, text)
    tracker.boards[(chat_id, kind)] = message.message_id
    return message.message_id


async def drop_boards(bot: Bot, tracker: "TrackerContext", chat_id: int) -> None:
    """Delete the known board messages of a chat so they get re-posted."""
    for kind in (STATUS_BOARD, RANKING_BOARD):
        message_id = tracker.boards.pop((chat_id, kind), None)
        if message_id is None:
            continue
        try:
            await bot.delete_message(chat_id, message_id)
        except TelegramAPIError as exc:
            logger.warning("Failed to delete %s board in chat=%s: %s", kind, chat_id, exc)
