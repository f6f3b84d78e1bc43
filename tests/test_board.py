"""Tests for board rendering and publishing."""

from unittest.mock import MagicMock

import pytest
from aiogram.exceptions import TelegramBadRequest

from sleepbot.services.board import (
    STATUS_BOARD,
    duration_text,
    publish_board,
    render_ranking,
    render_stats,
    render_status_board,
    render_status_entry,
    resolve_name,
)
from sleepbot.services.stats import PersonalStats
from sleepbot.services.status import UserState, UserStatus


def test_duration_text():
    assert duration_text("en", 450.5) == "7h 30m"
    assert duration_text("ja", 61) == "1時間 1分"
    assert duration_text("en", None) == "N/A"
    assert duration_text("ja", None) == "未記録"


def test_empty_board():
    text = render_status_board("en", [])

    assert "Current Status" in text
    assert "No one has recorded yet." in text


def test_awake_entry(ts):
    status = UserStatus(
        user_id="7",
        state=UserState.AWAKE,
        last_wake=ts("2024-01-02 07:00"),
        last_sleep=ts("2024-01-01 23:00"),
        elapsed_minutes=95,
        previous_minutes=480,
        average_sleep_minutes=470,
    )

    text = render_status_entry("en", "Alice", status)

    assert 'href="tg://user?id=7"' in text
    assert "Alice</a> - Awake" in text
    assert "Last Awake: 2024-01-02 07:00" in text
    assert "Last Asleep: 2024-01-01 23:00" in text
    assert "Sleep Duration: 8h 0m" in text
    assert "Time Since Awake: 1h 35m" in text
    assert "Average Sleep: 7h 50m" in text


def test_missing_previous_and_placeholders(ts):
    status = UserStatus(
        user_id="7",
        state=UserState.ASLEEP,
        last_sleep=ts("2024-01-01 23:00"),
        elapsed_minutes=30,
        missing_previous=True,
    )

    text = render_status_entry("en", "Bob", status)

    assert "Last Awake: N/A" in text
    assert "Awake Duration: No previous wake record" in text
    assert "Average Sleep: N/A" in text
    assert "Expected Wake-up" not in text


def test_names_are_escaped(ts):
    status = UserStatus(user_id="7", state=UserState.UNKNOWN)

    text = render_status_entry("en", "<script>", status)

    assert "<script>" not in text
    assert "&lt;script&gt;" in text


def test_ranking_with_viewer():
    stats = PersonalStats(average_sleep=480, average_awake=None, server_average_sleep=420)

    text = render_ranking("en", [("2", "Bea", 900), ("1", "Al", 600)], viewer=("Al", stats))

    assert text.index("Bea") < text.index("Al</a>")
    assert "<b>#1</b>" in text
    assert "15h 0m" in text
    assert "Your Average Sleep Duration (Al): 8h 0m" in text
    assert "Your Average Awake Duration (Al): N/A" in text
    assert "Server Average Sleep Duration: 7h 0m" in text


def test_empty_ranking():
    assert "No sleep data for this week." in render_ranking("en", [])


def test_stats_message_in_japanese():
    text = render_stats("ja", "Al", PersonalStats(None, None, None))

    assert "睡眠統計" in text
    assert "未記録" in text


@pytest.mark.asyncio
async def test_publish_posts_then_edits(tracker, bot):
    first = await publish_board(bot, tracker, -100, STATUS_BOARD, "one")
    second = await publish_board(bot, tracker, -100, STATUS_BOARD, "two")

    assert first == second
    bot.send_message.assert_awaited_once()
    bot.edit_message_text.assert_awaited_once_with(text="two", chat_id=-100, message_id=first)


@pytest.mark.asyncio
async def test_publish_reposts_when_board_was_deleted(tracker, bot):
    first = await publish_board(bot, tracker, -100, STATUS_BOARD, "one")
    bot.edit_message_text.side_effect = TelegramBadRequest(
        method=MagicMock(), message="Bad Request: message to edit not found"
    )

    second = await publish_board(bot, tracker, -100, STATUS_BOARD, "two")

    assert second != first
    assert tracker.boards[(-100, STATUS_BOARD)] == second


@pytest.mark.asyncio
async def test_publish_ignores_unchanged_text(tracker, bot):
    first = await publish_board(bot, tracker, -100, STATUS_BOARD, "same")
    bot.edit_message_text.side_effect = TelegramBadRequest(
        method=MagicMock(), message="Bad Request: message is not modified"
    )

    assert await publish_board(bot, tracker, -100, STATUS_BOARD, "same") == first
    bot.send_message.assert_awaited_once()


@pytest.mark.asyncio
async def test_resolve_name_skips_malformed_ids(bot):
    assert await resolve_name(bot, -100, "²") is None
    bot.get_chat_member.assert_not_awaited()
