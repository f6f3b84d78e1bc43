"""Tests for tracker actions, admin command parsing and reactions."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from aiogram.exceptions import TelegramForbiddenError
from aiogram.types import ReactionTypeEmoji

from sleepbot.handlers import reactions
from sleepbot.handlers.admin import parse_setstatus, parse_target
from sleepbot.handlers.reactions import added_emoji, handle_reaction
from sleepbot.handlers.tracker import fall_asleep, reset, show_stats, wake_up
from sleepbot.models.sleep_record import SleepStatus
from sleepbot.services.actions import Action, ButtonAction, action_boundary
from sleepbot.services.board import RANKING_BOARD, STATUS_BOARD
from sleepbot.services.errors import StorageError, ValidationError


class FakeAction(Action):
    def __init__(self, bot, actor_id=7, chat_id=-100):
        super().__init__(bot, actor_id=actor_id, actor_name="Alice", chat_id=chat_id, chat_title="Sleep Club")
        self.notices = []

    async def acknowledge(self, text):
        self.notices.append(text)


class TestTrackerActions:
    @pytest.mark.asyncio
    async def test_wake_up_records_and_posts_board(self, tracker, store, bot):
        action = FakeAction(bot)

        await wake_up(action, tracker)

        latest = store.latest("7", "-100")
        assert latest.status == SleepStatus.AWAKE.value
        assert latest.record_type == "wakeup"
        assert "woke up!" in action.notices[0]
        assert (-100, STATUS_BOARD) in tracker.boards
        board_text = bot.send_message.await_args.args[1]
        assert "Current Status" in board_text
        assert "User 7" in board_text

    @pytest.mark.asyncio
    async def test_second_action_edits_the_board(self, tracker, bot):
        action = FakeAction(bot)

        await fall_asleep(action, tracker)
        await wake_up(action, tracker)

        assert bot.send_message.await_count == 1
        bot.edit_message_text.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_reset_needs_confirmation(self, tracker, store, bot):
        action = FakeAction(bot)
        await fall_asleep(action, tracker)

        await reset(action, tracker)
        assert store.distinct_users("-100") == {"7"}
        assert "are you sure" in action.notices[-1]
        assert "30 seconds" in action.notices[-1]

        await reset(action, tracker)
        assert store.distinct_users("-100") == set()
        assert "has been reset" in action.notices[-1]

    @pytest.mark.asyncio
    async def test_show_stats_publishes_both_boards(self, tracker, bot):
        action = FakeAction(bot)

        await show_stats(action, tracker)

        assert (-100, STATUS_BOARD) in tracker.boards
        assert (-100, RANKING_BOARD) in tracker.boards
        assert action.notices == ["Weekly statistics updated."]

    @pytest.mark.asyncio
    async def test_members_who_left_are_skipped(self, tracker, store, bot, ts):
        store.record("8", "-100", SleepStatus.ASLEEP, ts("2024-01-01 23:00"))

        async def get_chat_member(chat_id, user_id):
            status = "left" if user_id == 8 else "member"
            return SimpleNamespace(status=status, user=SimpleNamespace(full_name=f"User {user_id}"))

        bot.get_chat_member.side_effect = get_chat_member

        await wake_up(FakeAction(bot), tracker)

        board_text = bot.send_message.await_args.args[1]
        assert "User 7" in board_text
        assert "User 8" not in board_text


class TestActionBoundary:
    def test_action_needs_an_acknowledge_channel(self, bot):
        with pytest.raises(TypeError):
            Action(bot, actor_id=7, actor_name="Alice", chat_id=-100)

    @pytest.mark.asyncio
    async def test_storage_error_becomes_generic_notice(self, bot):
        action = FakeAction(bot)

        async with action_boundary(action, "en"):
            raise StorageError("disk full")

        assert action.notices == ["An error occurred."]

    @pytest.mark.asyncio
    async def test_unexpected_errors_become_generic_notice(self, bot):
        action = FakeAction(bot)

        async with action_boundary(action, "en"):
            int("not a number")

        assert action.notices == ["An error occurred."]

    @pytest.mark.asyncio
    async def test_failure_after_button_answer_goes_to_chat(self, tracker, bot):
        call = SimpleNamespace(
            from_user=SimpleNamespace(id=7, full_name="Alice"),
            message=SimpleNamespace(chat=SimpleNamespace(id=-100, title="Sleep Club")),
            answer=AsyncMock(),
        )
        bot.get_chat_member.side_effect = TelegramForbiddenError(
            method=MagicMock(), message="Forbidden: bot was kicked from the group chat"
        )
        action = ButtonAction(call, bot)

        async with action_boundary(action, "en"):
            await wake_up(action, tracker)

        call.answer.assert_awaited_once_with("Alice woke up!")
        bot.send_message.assert_awaited_once_with(-100, "An error occurred.")


class TestAdminParsing:
    def test_target_from_reply(self):
        reply_user = SimpleNamespace(id=55)

        assert parse_target("asleep", reply_user) == ("55", ["asleep"])

    def test_target_from_argument(self):
        assert parse_target("55 awake", None) == ("55", ["awake"])

    def test_missing_target(self):
        assert parse_target("awake", None) == (None, ["awake"])
        assert parse_target(None, None) == (None, [])

    @pytest.mark.parametrize(
        "raw, expected",
        [("awake", SleepStatus.AWAKE), ("☀️", SleepStatus.AWAKE), ("🌙", SleepStatus.ASLEEP), ("Asleep", SleepStatus.ASLEEP)],
    )
    def test_setstatus_values(self, raw, expected):
        assert parse_setstatus(f"55 {raw}", None) == ("55", expected)

    def test_setstatus_rejects_bad_status(self):
        with pytest.raises(ValidationError) as exc:
            parse_setstatus("55 hungry", None)
        assert str(exc.value) == "error.bad_status"

    def test_setstatus_rejects_missing_target(self):
        with pytest.raises(ValidationError) as exc:
            parse_setstatus("awake", None)
        assert str(exc.value) == "error.no_target"

    @pytest.mark.parametrize("raw", ["² awake", "١٢ awake", "-- awake", "12a awake"])
    def test_setstatus_rejects_non_ascii_ids(self, raw):
        with pytest.raises(ValidationError) as exc:
            parse_setstatus(raw, None)
        assert str(exc.value) == "error.no_target"


def reaction_update(new, old=(), title="Sleep Club", user_id=7, is_bot=False):
    return SimpleNamespace(
        chat=SimpleNamespace(id=-100, title=title),
        user=SimpleNamespace(id=user_id, full_name="Alice", is_bot=is_bot),
        old_reaction=[ReactionTypeEmoji(emoji=e) for e in old],
        new_reaction=[ReactionTypeEmoji(emoji=e) for e in new],
    )


class TestReactions:
    def test_only_newly_added_emoji(self):
        update = reaction_update(new=["😴", "⚡"], old=["😴"])

        assert added_emoji(update) == ["⚡"]

    @pytest.mark.asyncio
    async def test_reaction_in_tracker_chat(self, tracker, bot, monkeypatch):
        handler = AsyncMock()
        monkeypatch.setitem(reactions.REACTION_ACTIONS, "⚡", handler)

        await handle_reaction(reaction_update(new=["⚡"]), bot, tracker)

        handler.assert_awaited_once()
        action = handler.await_args.args[0]
        assert action.actor_id == "7"
        assert action.group_id == "-100"

    @pytest.mark.asyncio
    async def test_reaction_elsewhere_is_ignored(self, tracker, bot, monkeypatch):
        handler = AsyncMock()
        monkeypatch.setitem(reactions.REACTION_ACTIONS, "⚡", handler)

        await handle_reaction(reaction_update(new=["⚡"], title="Random chat"), bot, tracker)
        await handle_reaction(reaction_update(new=["⚡"], is_bot=True), bot, tracker)

        handler.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_sleep_reaction_records_and_posts_notice(self, tracker, store, bot):
        await handle_reaction(reaction_update(new=["😴"]), bot, tracker)

        assert store.latest("7", "-100").record_type == "sleep"
        sent = [call.args[1] for call in bot.send_message.await_args_list]
        assert any("went to sleep!" in text for text in sent)
