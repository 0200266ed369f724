# app/services/schedule_config.py
from __future__ import annotations

import logging
from datetime import date as date_type

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.schemas.schedule import (
    ScheduleConfig,
    ScheduleConfigUpdate,
    ScheduleConfigUpdateResult,
    apply_config_update,
)
from app.services.meeting_store import SqlConfigStore, SqlMeetingStore, meetings_write_lock
from app.services.recurrence_engine import validate_schedule

logger = logging.getLogger(__name__)


async def get_schedule_config(db: AsyncSession) -> ScheduleConfig:
    settings = get_settings()
    return await SqlConfigStore(db, default_link=settings.DEFAULT_MEETING_LINK).get()


async def update_schedule_config(
    db: AsyncSession,
    update: ScheduleConfigUpdate,
    today: date_type | None = None,
) -> ScheduleConfigUpdateResult:
    """
    Apply an administrator's partial update to the schedule configuration.

    When `default_link` changes, every meeting dated today or later takes the
    new link; past meetings keep the link they were held with. Slot changes
    only affect future backfills.

    Raises
    ------
    InvalidSlotDefinition
        If the merged schedule would make both slots identical.

    Waits for a running backfill, so a link change never lands between two of
    its insert batches.
    """
    today = today or date_type.today()
    settings = get_settings()
    config_store = SqlConfigStore(db, default_link=settings.DEFAULT_MEETING_LINK)

    async with meetings_write_lock:
        current = await config_store.get()
        merged = apply_config_update(current, update)
        validate_schedule(merged)

        saved = await config_store.put(merged)
        meeting_store = SqlMeetingStore(db)

        future_updated = 0
        if update.default_link is not None and update.default_link != current.default_link:
            future_updated = await meeting_store.update_where(today, {"link": update.default_link})
            logger.info(
                "Default link changed; updated %d meetings dated on/after %s",
                future_updated,
                today,
            )

        await meeting_store.commit()

    return ScheduleConfigUpdateResult(config=saved, future_meetings_updated=future_updated)
