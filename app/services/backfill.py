# app/services/backfill.py
from __future__ import annotations

import logging
from datetime import date as date_type

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.core.exceptions import BackfillError, CalendarError
from app.schemas.backfill import BackfillPolicy, BackfillResult
from app.schemas.meeting import MeetingOccurrence
from app.schemas.schedule import ScheduleConfig
from app.services.meeting_store import (
    MeetingStore,
    SqlConfigStore,
    SqlMeetingStore,
    meetings_write_lock,
)
from app.services.reconciliation import WriteSet, reconcile
from app.services.recurrence_engine import (
    count_without_holiday_filter,
    default_range,
    generate_occurrences,
)

logger = logging.getLogger(__name__)


def _describe(config: ScheduleConfig, created: int, epoch: date_type) -> str:
    return (
        f"Created {created} meetings "
        f"({config.slot1.describe()} & {config.slot2.describe()} since {epoch.isoformat()})"
    )


def _batches(items: list[MeetingOccurrence], size: int):
    for offset in range(0, len(items), size):
        yield items[offset:offset + size]


async def apply_write_set(
    store: MeetingStore,
    write_set: WriteSet,
    batch_size: int,
) -> tuple[int, int]:
    """
    Apply a write-set: deletes first, then inserts in committed batches.

    The deletes share a transaction with the first insert batch, so a
    replace_all that fails on its first batch leaves storage untouched.

    Returns
    -------
    tuple[int, int]
        (created_count, deleted_count)

    Raises
    ------
    BackfillError
        On any storage failure, with `partial_write` telling whether earlier
        batches were already committed. The original error is chained.
    """
    created = 0
    deleted = 0
    committed_delete = False

    try:
        if write_set.to_delete:
            deleted = await store.delete_all()

        for batch in _batches(write_set.to_insert, batch_size):
            await store.insert_many(batch)
            await store.commit()
            created += len(batch)
            committed_delete = committed_delete or bool(write_set.to_delete)

        if not write_set.to_insert and write_set.to_delete:
            await store.commit()
    except CalendarError as exc:
        await store.rollback()
        logger.error(
            "Backfill write failed after %d committed inserts: %s", created, exc
        )
        raise BackfillError(
            f"Backfill failed after creating {created} meetings: {exc}",
            created_count=created,
            deleted=committed_delete,
        ) from exc

    return created, deleted


async def run_backfill(
    db: AsyncSession,
    policy: BackfillPolicy = BackfillPolicy.ADD_MISSING,
    today: date_type | None = None,
    dry_run: bool = False,
) -> BackfillResult:
    """
    Generate all meetings since the epoch and reconcile them with storage.

    Behavior
    --------
    1) Load the schedule configuration (defaults installed if absent).
    2) Generate occurrences for [SCHEDULE_EPOCH, today + 1 year], holidays excluded.
    3) Read the natural keys of stored meetings.
    4) Reconcile under `policy` to get the write-set.
    5) Unless `dry_run`, apply it in batches of BACKFILL_BATCH_SIZE.

    Parameters
    ----------
    db:
        Open AsyncSession used for reads and writes.
    policy:
        ADD_MISSING (idempotent) or REPLACE_ALL (destructive; callers must
        confirm it explicitly).
    today:
        Reference date for the end of the window. Defaults to today's date.
    dry_run:
        Compute counts without writing anything.

    Raises
    ------
    InvalidSlotDefinition
        If the stored schedule is malformed. Nothing is written.
    StorageUnavailable
        If storage could not be read. Nothing is written.
    BackfillError
        If applying the write-set failed (see `partial_write`).
    """
    settings = get_settings()
    start_date, end_date = default_range(today=today, epoch=settings.SCHEDULE_EPOCH)

    async with meetings_write_lock:
        config = await SqlConfigStore(db, default_link=settings.DEFAULT_MEETING_LINK).get()

        generated = generate_occurrences(config, start_date, end_date)
        holidays_excluded = (
            count_without_holiday_filter(config, start_date, end_date) - len(generated)
        )

        store = SqlMeetingStore(db)
        existing = await store.existing_keys()
        write_set = reconcile(generated, existing, policy)

        logger.info(
            "Backfill %s [%s..%s]: %d generated, %d stored, %d to insert, %d to delete%s",
            policy.value,
            start_date,
            end_date,
            len(generated),
            len(existing),
            len(write_set.to_insert),
            len(write_set.to_delete),
            " (dry run)" if dry_run else "",
        )

        if dry_run:
            created, deleted = len(write_set.to_insert), len(write_set.to_delete)
        else:
            created, deleted = await apply_write_set(
                store, write_set, batch_size=settings.BACKFILL_BATCH_SIZE
            )

    return BackfillResult(
        policy=policy,
        start_date=start_date,
        end_date=end_date,
        created_count=created,
        deleted_count=deleted,
        holidays_excluded_count=holidays_excluded,
        dry_run=dry_run,
        message=_describe(config, created, start_date),
    )
