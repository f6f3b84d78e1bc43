from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import FrozenSet

from dotenv import load_dotenv

load_dotenv()

TOKEN = os.getenv("BOT_TOKEN")
DB_URL = os.getenv("DB_URL") or "sqlite:///sleep_tracker.db"
TRACKER_TZ = os.getenv("TRACKER_TZ", "Asia/Tokyo")


def _parse_ids(raw: str | None) -> FrozenSet[str]:
    """Parse a comma separated list of user ids."""
    if not raw:
        return frozenset()
    return frozenset(part.strip() for part in raw.split(",") if part.strip())


def _flag(raw: str | None) -> bool:
    return (raw or "").strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    chat_title: str = "Super Automaton Tracker"
    role_title: str = ""
    allowed_users: FrozenSet[str] = field(default_factory=frozenset)
    lang: str = "en"
    reminder_poll_seconds: int = 5
    reminder_threshold_minutes: int = 720
    reminder_rearm_on_sleep: bool = False
    reset_timeout_seconds: int = 30
    notice_ttl_seconds: int = 30


def load_settings() -> Settings:
    return Settings(
        chat_title=os.getenv("TRACKER_CHAT_TITLE", "Super Automaton Tracker"),
        role_title=os.getenv("TRACKER_ROLE_TITLE", ""),
        allowed_users=_parse_ids(os.getenv("TRACKER_ALLOWED_USERS")),
        lang=os.getenv("TRACKER_LANG", "en"),
        reminder_poll_seconds=int(os.getenv("REMINDER_POLL_SECONDS", "5")),
        reminder_threshold_minutes=int(os.getenv("REMINDER_THRESHOLD_MINUTES", "720")),
        reminder_rearm_on_sleep=_flag(os.getenv("REMINDER_REARM_ON_SLEEP")),
    )
