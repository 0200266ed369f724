# app/api/routes/admin.py
from http import HTTPStatus

from fastapi import APIRouter, Depends, HTTPException, Path, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.dependencies.admin_auth import verify_admin_api_key
from app.core.exceptions import (
    BackfillError,
    InvalidSlotDefinition,
    MeetingConflictError,
    StorageUnavailable,
)
from app.db.session import get_db
from app.schemas.backfill import BackfillPolicy, BackfillResult
from app.schemas.holiday import HolidayList
from app.schemas.schedule import ScheduleConfig, ScheduleConfigUpdate, ScheduleConfigUpdateResult
from app.services.backfill import run_backfill
from app.services.holiday_calculator import HOLIDAY_REGION, holiday_dates
from app.services.schedule_config import get_schedule_config, update_schedule_config

router = APIRouter(
    prefix="/admin",
    tags=["Admin"],
    dependencies=[Depends(verify_admin_api_key)],
)


@router.get(
    "/config",
    response_model=ScheduleConfig,
    summary="Get the recurring meeting schedule",
    description=(
        "Return the two weekly slots and the default conferencing link.\n\n"
        "If no configuration exists yet, the defaults (Thursday 19:00, "
        "Saturday 13:00, placeholder link) are installed and returned."
    ),
)
async def read_config(db: AsyncSession = Depends(get_db)) -> ScheduleConfig:
    try:
        return await get_schedule_config(db)
    except StorageUnavailable as exc:
        raise HTTPException(status_code=HTTPStatus.SERVICE_UNAVAILABLE, detail=str(exc))


@router.put(
    "/config",
    response_model=ScheduleConfigUpdateResult,
    summary="Update the recurring meeting schedule",
    description=(
        "Partially update the schedule. Only provided fields change.\n\n"
        "Changing `default_link` also updates the link of every meeting dated "
        "today or later; past meetings keep their historical link. Slot changes "
        "take effect on the next backfill."
    ),
    responses={
        400: {"description": "Both slots would share the same weekday and time."},
    },
)
async def write_config(
    payload: ScheduleConfigUpdate,
    db: AsyncSession = Depends(get_db),
) -> ScheduleConfigUpdateResult:
    try:
        return await update_schedule_config(db, payload)
    except InvalidSlotDefinition as exc:
        raise HTTPException(status_code=HTTPStatus.BAD_REQUEST, detail=str(exc))
    except StorageUnavailable as exc:
        raise HTTPException(status_code=HTTPStatus.SERVICE_UNAVAILABLE, detail=str(exc))


@router.post(
    "/backfill",
    response_model=BackfillResult,
    status_code=HTTPStatus.OK,
    summary="Generate meetings since inception",
    description=(
        "Generate every meeting of the configured slots from the schedule epoch "
        "(2019-01-01 by default) through one year from today, skipping Irish "
        "public holidays, and write the ones that are missing.\n\n"
        "- `policy=add_missing` (default): idempotent, existing meetings and their "
        "notes are kept.\n"
        "- `policy=replace_all`: deletes every meeting first and regenerates the "
        "full set. Requires `confirm=true` because all notes are lost.\n"
        "- `dry_run=true`: report the counts without writing."
    ),
    responses={
        400: {"description": "Invalid schedule, or replace_all without confirmation."},
        409: {"description": "Another writer created a meeting with the same date and time."},
        500: {"description": "The write failed; `partial_write` tells whether anything was saved."},
        503: {"description": "Storage unavailable; nothing was changed. Retry later."},
    },
)
async def backfill_meetings(
    policy: BackfillPolicy = Query(
        default=BackfillPolicy.ADD_MISSING,
        description="Reconciliation policy.",
        examples=["add_missing"],
    ),
    confirm: bool = Query(
        default=False,
        description="Must be true for policy=replace_all.",
    ),
    dry_run: bool = Query(
        default=False,
        description="Compute the result without writing anything.",
    ),
    db: AsyncSession = Depends(get_db),
) -> BackfillResult:
    if policy is BackfillPolicy.REPLACE_ALL and not confirm and not dry_run:
        raise HTTPException(
            status_code=HTTPStatus.BAD_REQUEST,
            detail="replace_all deletes every meeting and its notes; pass confirm=true to proceed.",
        )

    try:
        return await run_backfill(db, policy=policy, dry_run=dry_run)
    except InvalidSlotDefinition as exc:
        raise HTTPException(status_code=HTTPStatus.BAD_REQUEST, detail=str(exc))
    except StorageUnavailable as exc:
        raise HTTPException(status_code=HTTPStatus.SERVICE_UNAVAILABLE, detail=str(exc))
    except BackfillError as exc:
        conflict = isinstance(exc.__cause__, MeetingConflictError)
        raise HTTPException(
            status_code=HTTPStatus.CONFLICT if conflict else HTTPStatus.INTERNAL_SERVER_ERROR,
            detail={
                "error": str(exc),
                "partial_write": exc.partial_write,
                "created_count": exc.created_count,
            },
        )


@router.get(
    "/holidays/{year}",
    response_model=HolidayList,
    summary="List the public holidays skipped for a year",
)
async def list_holidays(
    year: int = Path(..., ge=1583, le=9999, description="Gregorian calendar year."),
) -> HolidayList:
    return HolidayList(year=year, region=HOLIDAY_REGION, holidays=holiday_dates(year))
