# app/api/routes/meetings.py
from datetime import date as date_type
from http import HTTPStatus

from fastapi import APIRouter, Depends, HTTPException, Path, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import MeetingConflictError, StorageUnavailable
from app.db.session import get_db
from app.models.meeting import Meeting
from app.schemas.meeting import MeetingCreate, MeetingFilter, MeetingRead, MeetingUpdate
from app.services.holiday_calculator import is_holiday
from app.services.meeting_store import storage_errors
from app.services.recurrence_engine import title_for_schedule
from app.services.schedule_config import get_schedule_config

router = APIRouter(prefix="/meetings", tags=["Meetings"])


async def _get_meeting_or_404(db: AsyncSession, meeting_id: int) -> Meeting:
    result = await db.execute(select(Meeting).where(Meeting.id == meeting_id))
    meeting = result.scalar_one_or_none()
    if meeting is None:
        raise HTTPException(
            status_code=HTTPStatus.NOT_FOUND,
            detail=f"Meeting with id={meeting_id} not found.",
        )
    return meeting


async def _key_taken(db: AsyncSession, meeting_date: date_type, meeting_time: str) -> bool:
    result = await db.execute(
        select(Meeting.id).where(Meeting.date == meeting_date, Meeting.time == meeting_time)
    )
    return result.first() is not None


@router.get(
    "",
    response_model=list[MeetingRead],
    summary="List meetings",
    description=(
        "Return stored meetings.\n\n"
        "- `filter=upcoming`: meetings dated today or later, oldest first.\n"
        "- `filter=previous`: meetings dated before today, newest first.\n"
        "- omitted: every meeting, oldest first."
    ),
)
async def list_meetings(
    time_filter: MeetingFilter | None = Query(
        default=None,
        alias="filter",
        description="Optional time window: `upcoming` or `previous`.",
        examples=["upcoming"],
    ),
    db: AsyncSession = Depends(get_db),
) -> list[MeetingRead]:
    today = date_type.today()
    stmt = select(Meeting)

    if time_filter is MeetingFilter.UPCOMING:
        stmt = stmt.where(Meeting.date >= today)
    elif time_filter is MeetingFilter.PREVIOUS:
        stmt = stmt.where(Meeting.date < today)

    if time_filter is MeetingFilter.PREVIOUS:
        stmt = stmt.order_by(Meeting.date.desc(), Meeting.time.desc())
    else:
        stmt = stmt.order_by(Meeting.date.asc(), Meeting.time.asc())

    result = await db.execute(stmt)
    return [MeetingRead.model_validate(m) for m in result.scalars().all()]


@router.get(
    "/{meeting_id}",
    response_model=MeetingRead,
    summary="Get a meeting by ID",
)
async def get_meeting(
    meeting_id: int = Path(..., description="Numeric ID of the meeting.", ge=1),
    db: AsyncSession = Depends(get_db),
) -> MeetingRead:
    meeting = await _get_meeting_or_404(db, meeting_id)
    return MeetingRead.model_validate(meeting)


@router.post(
    "",
    response_model=MeetingRead,
    status_code=HTTPStatus.CREATED,
    summary="Create a one-off meeting",
    description=(
        "Create a meeting outside of a backfill.\n\n"
        "The date and time must match one of the configured weekly slots, the "
        "date must not be a public holiday, and no meeting may already exist "
        "at the same date and time."
    ),
    responses={
        400: {"description": "Date/time does not match the schedule or falls on a holiday."},
        409: {"description": "A meeting already exists at this date and time."},
        503: {"description": "Storage unavailable; nothing was created. Retry later."},
    },
)
async def create_meeting(
    payload: MeetingCreate,
    db: AsyncSession = Depends(get_db),
) -> MeetingRead:
    try:
        config = await get_schedule_config(db)
    except StorageUnavailable as exc:
        raise HTTPException(status_code=HTTPStatus.SERVICE_UNAVAILABLE, detail=str(exc))

    scheduled_title = title_for_schedule(config, payload.date, payload.time)
    if scheduled_title is None:
        raise HTTPException(
            status_code=HTTPStatus.BAD_REQUEST,
            detail=(
                "Meetings can only be scheduled for "
                f"{config.slot1.describe()} or {config.slot2.describe()}."
            ),
        )

    if is_holiday(payload.date):
        raise HTTPException(
            status_code=HTTPStatus.BAD_REQUEST,
            detail="Cannot schedule meetings on public holidays.",
        )

    if await _key_taken(db, payload.date, payload.time):
        raise HTTPException(
            status_code=HTTPStatus.CONFLICT,
            detail="A meeting already exists at this date and time.",
        )

    meeting = Meeting(
        date=payload.date,
        time=payload.time,
        title=payload.title or scheduled_title,
        notes=payload.notes,
        link=payload.link if payload.link is not None else config.default_link,
    )
    db.add(meeting)
    try:
        with storage_errors("create meeting"):
            await db.commit()
    except MeetingConflictError as exc:
        await db.rollback()
        raise HTTPException(status_code=HTTPStatus.CONFLICT, detail=str(exc))
    except StorageUnavailable as exc:
        await db.rollback()
        raise HTTPException(status_code=HTTPStatus.SERVICE_UNAVAILABLE, detail=str(exc))
    await db.refresh(meeting)

    return MeetingRead.model_validate(meeting)


@router.patch(
    "/{meeting_id}",
    response_model=MeetingRead,
    summary="Edit a meeting's notes, time or link",
    description="Only fields provided in the request body are modified.",
    responses={
        404: {"description": "No meeting exists with the given ID."},
        409: {"description": "The new time collides with another meeting on the same date."},
    },
)
async def update_meeting(
    meeting_id: int = Path(..., description="Numeric ID of the meeting.", ge=1),
    payload: MeetingUpdate | None = None,
    db: AsyncSession = Depends(get_db),
) -> MeetingRead:
    meeting = await _get_meeting_or_404(db, meeting_id)

    if payload is None:
        return MeetingRead.model_validate(meeting)

    update_data = payload.model_dump(exclude_unset=True, exclude_none=True)

    new_time = update_data.get("time")
    if new_time and new_time != meeting.time and await _key_taken(db, meeting.date, new_time):
        raise HTTPException(
            status_code=HTTPStatus.CONFLICT,
            detail="A meeting already exists at this date and time.",
        )

    for field, value in update_data.items():
        setattr(meeting, field, value)

    try:
        with storage_errors("update meeting"):
            await db.commit()
    except MeetingConflictError as exc:
        await db.rollback()
        raise HTTPException(status_code=HTTPStatus.CONFLICT, detail=str(exc))
    await db.refresh(meeting)

    return MeetingRead.model_validate(meeting)
