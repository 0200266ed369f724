# app/services/meeting_store.py
"""
Persistence boundary for meetings and the schedule configuration.

The abstract stores describe what the backfill pipeline needs; the SQLAlchemy
implementations translate driver errors into the calendar error types.
"""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from datetime import date as date_type, datetime
from typing import Any

from sqlalchemy import delete, select, update
from sqlalchemy.exc import DBAPIError, IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import MeetingConflictError, StorageUnavailable
from app.models.meeting import Meeting
from app.models.schedule_config import ScheduleConfigRecord
from app.schemas.meeting import MeetingKey, MeetingOccurrence
from app.schemas.schedule import ScheduleConfig, WeeklySlot

logger = logging.getLogger(__name__)

DEFAULT_SLOT1 = WeeklySlot(day_of_week=4, time="19:00")  # Thursday 7 PM
DEFAULT_SLOT2 = WeeklySlot(day_of_week=6, time="13:00")  # Saturday 1 PM
DEFAULT_LINK = "https://zoom.us/j/placeholder123456"

# Fields a bulk update may touch; the natural key date is never rewritten.
UPDATABLE_FIELDS = frozenset({"title", "notes", "link", "time"})

# Backfills and schedule updates run one at a time per process; the
# (date, time) unique constraint catches writers in other processes.
meetings_write_lock = asyncio.Lock()


@contextmanager
def storage_errors(operation: str) -> Iterator[None]:
    """
    Map SQLAlchemy errors raised inside the block onto calendar errors.
    """
    try:
        yield
    except IntegrityError as exc:
        raise MeetingConflictError(
            f"{operation}: a meeting with the same date and time already exists"
        ) from exc
    except DBAPIError as exc:
        raise StorageUnavailable(f"{operation}: storage unavailable ({exc.orig!r})") from exc


class MeetingStore(ABC):
    """Abstract interface for meeting persistence."""

    @abstractmethod
    async def find_all(self) -> list[Meeting]:
        """All meetings ordered by (date, time)."""

    @abstractmethod
    async def existing_keys(self) -> set[MeetingKey]:
        """Natural keys of every stored meeting."""

    @abstractmethod
    async def insert_many(self, occurrences: Iterable[MeetingOccurrence]) -> int:
        """Insert occurrences; returns how many were written."""

    @abstractmethod
    async def delete_all(self) -> int:
        """Remove every meeting; returns how many were removed."""

    @abstractmethod
    async def update_where(self, date_gte: date_type, fields: dict[str, Any]) -> int:
        """Apply `fields` to every meeting dated on/after `date_gte`."""

    @abstractmethod
    async def commit(self) -> None:
        """Make pending writes durable."""

    @abstractmethod
    async def rollback(self) -> None:
        """Discard pending writes."""


class ConfigStore(ABC):
    """Abstract interface for the schedule configuration."""

    @abstractmethod
    async def get(self) -> ScheduleConfig:
        """Current configuration; installs defaults when none exists."""

    @abstractmethod
    async def put(self, config: ScheduleConfig) -> ScheduleConfig:
        """Replace the stored configuration."""


class SqlMeetingStore(MeetingStore):
    """
    MeetingStore backed by the `meetings` table.

    Writes are flushed but not committed; the caller decides transaction
    boundaries through `commit()` / `rollback()`.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_all(self) -> list[Meeting]:
        with storage_errors("find_all"):
            result = await self.db.execute(
                select(Meeting).order_by(Meeting.date.asc(), Meeting.time.asc())
            )
        return list(result.scalars().all())

    async def existing_keys(self) -> set[MeetingKey]:
        with storage_errors("existing_keys"):
            result = await self.db.execute(select(Meeting.date, Meeting.time))
        return {MeetingKey.of(row_date, row_time) for row_date, row_time in result.all()}

    async def insert_many(self, occurrences: Iterable[MeetingOccurrence]) -> int:
        meetings = [
            Meeting(
                date=occ.date,
                time=occ.time,
                title=occ.title,
                notes=occ.notes,
                link=occ.link,
                created_at=occ.created_at,
                updated_at=occ.updated_at,
            )
            for occ in occurrences
        ]
        if not meetings:
            return 0

        self.db.add_all(meetings)
        with storage_errors("insert_many"):
            await self.db.flush()
        return len(meetings)

    async def delete_all(self) -> int:
        with storage_errors("delete_all"):
            result = await self.db.execute(delete(Meeting))
        return result.rowcount or 0

    async def update_where(self, date_gte: date_type, fields: dict[str, Any]) -> int:
        unknown = set(fields) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot bulk-update meeting fields: {sorted(unknown)}")
        if not fields:
            return 0

        stmt = (
            update(Meeting)
            .where(Meeting.date >= date_gte)
            .values(**fields, updated_at=datetime.now())
        )
        with storage_errors("update_where"):
            result = await self.db.execute(stmt)
        return result.rowcount or 0

    async def commit(self) -> None:
        with storage_errors("commit"):
            await self.db.commit()

    async def rollback(self) -> None:
        await self.db.rollback()


class SqlConfigStore(ConfigStore):
    """
    ConfigStore backed by the single-row `schedule_config` table.
    """

    def __init__(self, db: AsyncSession, default_link: str = DEFAULT_LINK):
        self.db = db
        self.default_link = default_link

    def defaults(self) -> ScheduleConfig:
        return ScheduleConfig(
            default_link=self.default_link,
            slot1=DEFAULT_SLOT1,
            slot2=DEFAULT_SLOT2,
            updated_at=datetime.now(),
        )

    async def _load_record(self) -> ScheduleConfigRecord | None:
        with storage_errors("config get"):
            result = await self.db.execute(
                select(ScheduleConfigRecord).order_by(ScheduleConfigRecord.id.asc()).limit(1)
            )
        return result.scalar_one_or_none()

    @staticmethod
    def _to_schema(record: ScheduleConfigRecord) -> ScheduleConfig:
        return ScheduleConfig(
            default_link=record.default_link,
            slot1=WeeklySlot(day_of_week=record.slot1_day, time=record.slot1_time),
            slot2=WeeklySlot(day_of_week=record.slot2_day, time=record.slot2_time),
            updated_at=record.updated_at,
        )

    async def get(self) -> ScheduleConfig:
        """
        Return the stored configuration.

        A missing configuration is not an error: the defaults (Thursday 19:00,
        Saturday 13:00, placeholder link) are installed and committed.
        """
        record = await self._load_record()
        if record is not None:
            return self._to_schema(record)

        logger.info("No schedule configuration found; installing defaults")
        config = await self.put(self.defaults())
        with storage_errors("config install defaults"):
            await self.db.commit()
        return config

    async def put(self, config: ScheduleConfig) -> ScheduleConfig:
        record = await self._load_record()
        if record is None:
            record = ScheduleConfigRecord()
            self.db.add(record)

        record.default_link = config.default_link
        record.slot1_day = config.slot1.day_of_week
        record.slot1_time = config.slot1.time
        record.slot2_day = config.slot2.day_of_week
        record.slot2_time = config.slot2.time
        record.updated_at = datetime.now()

        with storage_errors("config put"):
            await self.db.flush()
        return self._to_schema(record)
