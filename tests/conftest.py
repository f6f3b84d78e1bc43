"""Shared test fixtures."""

from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from sleepbot.config import Settings
from sleepbot.database import Base
from sleepbot.models import sleep_record  # noqa: F401  registers the table
from sleepbot.services.actions import TrackerContext
from sleepbot.services.clock import parse_timestamp
from sleepbot.services.records import RecordStore


@pytest.fixture
def engine():
    """In-memory SQLite engine shared across sessions."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def store(engine) -> RecordStore:
    return RecordStore(sessionmaker(bind=engine, autoflush=False, expire_on_commit=False))


@pytest.fixture
def settings() -> Settings:
    return Settings(
        chat_title="Sleep Club",
        role_title="night watch",
        allowed_users=frozenset({"999"}),
        lang="en",
    )


@pytest.fixture
def tracker(settings, store) -> TrackerContext:
    return TrackerContext.create(settings, store)


@pytest.fixture
def ts():
    """Parse ``yyyy-MM-dd HH:mm`` in the tracker zone."""
    return parse_timestamp


@pytest.fixture
def bot():
    """Bot stand-in: every member is present, every send returns a fresh message id."""
    bot = AsyncMock()
    counter = iter(range(100, 10_000))

    async def send_message(chat_id, text, **kwargs):
        return SimpleNamespace(message_id=next(counter), chat_id=chat_id, text=text)

    async def get_chat_member(chat_id, user_id):
        return SimpleNamespace(status="member", user=SimpleNamespace(full_name=f"User {user_id}"))

    bot.send_message.side_effect = send_message
    bot.get_chat_member.side_effect = get_chat_member
    return bot
