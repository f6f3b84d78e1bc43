"""Event store over the ``sleep_records`` table."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, List, Optional, Set, Tuple

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from sleepbot.database import SessionLocal
from sleepbot.models.sleep_record import RecordType, SleepRecord, SleepStatus
from sleepbot.services.clock import format_timestamp, to_tracker_zone
from sleepbot.services.errors import StorageError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SleepEvent:
    user_id: str
    group_id: str
    status: str
    timestamp: datetime
    record_type: str

    @classmethod
    def from_row(cls, row: SleepRecord) -> "SleepEvent":
        return cls(
            user_id=row.user_id,
            group_id=row.guild_id,
            status=row.status,
            timestamp=row.timestamp,
            record_type=row.record_type,
        )


class RecordStore:
    """Append/query interface over timestamped sleep events.

    Every public method opens its own session. Database failures are logged
    and re-raised as :class:`StorageError`.
    """

    def __init__(self, session_factory: Callable[[], Session] = SessionLocal):
        self._session_factory = session_factory

    def record(
        self,
        user_id: str,
        group_id: str,
        status: SleepStatus | str,
        timestamp: datetime,
        record_type: RecordType | str | None = None,
    ) -> SleepEvent:
        """Upsert one event; a second write in the same minute replaces the first."""
        status = SleepStatus(status)
        record_type = RecordType(record_type) if record_type else status.record_type
        row = SleepRecord(
            user_id=str(user_id),
            guild_id=str(group_id),
            timestamp=to_tracker_zone(timestamp).replace(second=0, microsecond=0),
            status=status.value,
            record_type=record_type.value,
        )
        try:
            with self._session_factory() as session:
                session.merge(row)
                session.commit()
        except SQLAlchemyError as exc:
            logger.exception("Failed to record %s for user=%s group=%s", record_type.value, user_id, group_id)
            raise StorageError("could not record sleep event") from exc
        logger.info(
            "Recorded %s for user=%s group=%s at %s",
            record_type.value, user_id, group_id, format_timestamp(row.timestamp),
        )
        return SleepEvent.from_row(row)

    def latest(self, user_id: str, group_id: str) -> Optional[SleepEvent]:
        stmt = (
            select(SleepRecord)
            .where(SleepRecord.user_id == str(user_id), SleepRecord.guild_id == str(group_id))
            .order_by(SleepRecord.timestamp.desc())
            .limit(1)
        )
        return self._first(stmt)

    def latest_of_type(self, user_id: str, group_id: str, record_type: RecordType | str) -> Optional[SleepEvent]:
        stmt = (
            select(SleepRecord)
            .where(
                SleepRecord.user_id == str(user_id),
                SleepRecord.guild_id == str(group_id),
                SleepRecord.record_type == RecordType(record_type).value,
            )
            .order_by(SleepRecord.timestamp.desc())
            .limit(1)
        )
        return self._first(stmt)

    def history(self, user_id: str, group_id: str) -> List[SleepEvent]:
        """All events of one user in one group, oldest first."""
        stmt = (
            select(SleepRecord)
            .where(SleepRecord.user_id == str(user_id), SleepRecord.guild_id == str(group_id))
            .order_by(SleepRecord.timestamp.asc())
        )
        return self._all(stmt)

    def all_for_group_since(self, group_id: str, since: datetime) -> List[SleepEvent]:
        """Events of a group at or after ``since``, ordered by user then time."""
        stmt = (
            select(SleepRecord)
            .where(SleepRecord.guild_id == str(group_id), SleepRecord.timestamp >= since)
            .order_by(SleepRecord.user_id.asc(), SleepRecord.timestamp.asc())
        )
        return self._all(stmt)

    def distinct_users(self, group_id: str) -> Set[str]:
        stmt = select(SleepRecord.user_id).where(SleepRecord.guild_id == str(group_id)).distinct()
        try:
            with self._session_factory() as session:
                return set(session.scalars(stmt).all())
        except SQLAlchemyError as exc:
            logger.exception("Failed to list users for group=%s", group_id)
            raise StorageError("could not list tracked users") from exc

    def tracked_pairs(self) -> List[Tuple[str, str]]:
        """Every (user, group) pair with at least one recorded event."""
        stmt = select(SleepRecord.user_id, SleepRecord.guild_id).distinct()
        try:
            with self._session_factory() as session:
                return [(u, g) for u, g in session.execute(stmt).all()]
        except SQLAlchemyError as exc:
            logger.exception("Failed to list tracked users")
            raise StorageError("could not list tracked users") from exc

    def purge(self, user_id: str, group_id: str) -> int:
        """Delete all events of a user in a group. Returns the number of rows removed."""
        stmt = delete(SleepRecord).where(
            SleepRecord.user_id == str(user_id), SleepRecord.guild_id == str(group_id)
        )
        try:
            with self._session_factory() as session:
                removed = session.execute(stmt).rowcount or 0
                session.commit()
        except SQLAlchemyError as exc:
            logger.exception("Failed to purge records for user=%s group=%s", user_id, group_id)
            raise StorageError("could not clear sleep records") from exc
        logger.info("Purged %s records for user=%s group=%s", removed, user_id, group_id)
        return removed

    def _first(self, stmt) -> Optional[SleepEvent]:
        try:
            with self._session_factory() as session:
                row = session.scalars(stmt).first()
                return SleepEvent.from_row(row) if row else None
        except SQLAlchemyError as exc:
            logger.exception("Sleep record query failed")
            raise StorageError("could not read sleep records") from exc

    def _all(self, stmt) -> List[SleepEvent]:
        try:
            with self._session_factory() as session:
                return [SleepEvent.from_row(row) for row in session.scalars(stmt).all()]
        except SQLAlchemyError as exc:
            logger.exception("Sleep record query failed")
            raise StorageError("could not read sleep records") from exc
