from __future__ import annotations

import enum
from datetime import datetime
from typing import Optional

from sqlalchemy import Column, String
from sqlalchemy.types import TypeDecorator

from sleepbot.database import Base
from sleepbot.services.clock import format_timestamp, parse_timestamp


class RecordType(str, enum.Enum):
    WAKEUP = "wakeup"
    SLEEP = "sleep"


class SleepStatus(str, enum.Enum):
    AWAKE = "☀️"
    ASLEEP = "🌙"

    @property
    def record_type(self) -> RecordType:
        return RecordType.WAKEUP if self is SleepStatus.AWAKE else RecordType.SLEEP

    @classmethod
    def parse(cls, raw: str) -> Optional["SleepStatus"]:
        """Accept the symbol, the word or the record type; ``None`` if unknown."""
        value = (raw or "").strip().lower()
        for status in cls:
            if value in (status.value, status.name.lower(), status.record_type.value):
                return status
        if value in ("☀", "wake", "wake_up"):
            return cls.AWAKE
        return None


class MinuteTimestamp(TypeDecorator):
    """Aware datetime stored as zero-padded ``yyyy-MM-dd HH:mm`` text."""

    impl = String(16)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        if isinstance(value, str):
            return value
        return format_timestamp(value)

    def process_result_value(self, value, dialect) -> Optional[datetime]:
        if value is None:
            return None
        return parse_timestamp(value)


class SleepRecord(Base):
    __tablename__ = "sleep_records"

    user_id = Column(String, primary_key=True)
    guild_id = Column(String, primary_key=True)
    timestamp = Column(MinuteTimestamp, primary_key=True)
    status = Column(String, nullable=False)        # ☀️ / 🌙
    record_type = Column(String, nullable=False)   # wakeup / sleep

    def __repr__(self) -> str:
        return (
            f"SleepRecord(user_id={self.user_id!r}, guild_id={self.guild_id!r}, "
            f"timestamp={format_timestamp(self.timestamp)!r}, record_type={self.record_type!r})"
        )
