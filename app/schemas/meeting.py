# app/schemas/meeting.py
from __future__ import annotations

from datetime import date as date_type, datetime
from enum import Enum
from typing import NamedTuple

from pydantic import BaseModel, Field

from app.schemas.schedule import TIME_PATTERN


class MeetingKey(NamedTuple):
    """
    Natural key of a meeting: ISO date string and "HH:MM" time string.

    Compared by value as a tuple; no two persisted meetings share a key.
    """

    date: str
    time: str

    @classmethod
    def of(cls, meeting_date: date_type, meeting_time: str) -> "MeetingKey":
        return cls(meeting_date.isoformat(), meeting_time)


class MeetingOccurrence(BaseModel):
    """
    Represents a single generated occurrence of a recurring meeting.

    Transient until the backfill writes it to the meetings table.
    """

    date: date_type = Field(..., description="Local calendar date of the meeting.")
    time: str = Field(..., description="24-hour meeting time (HH:MM).")
    title: str = Field(..., description="Human-readable title derived from slot and date.")
    notes: str = Field("", description="Free-form notes; owned by the calendar UI.")
    link: str = Field("", description="Conferencing link copied from the schedule config.")
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)

    @property
    def key(self) -> MeetingKey:
        return MeetingKey.of(self.date, self.time)


class MeetingFilter(str, Enum):
    """
    Time window accepted by GET /meetings.
    """

    UPCOMING = "upcoming"
    PREVIOUS = "previous"


class MeetingCreate(BaseModel):
    """
    Schema for creating an ad-hoc meeting (POST /meetings).
    """

    date: date_type = Field(..., examples=["2025-11-13"])
    time: str = Field(..., pattern=TIME_PATTERN, examples=["19:00"])
    title: str | None = Field(default=None)
    notes: str = Field(default="")
    link: str | None = Field(
        default=None,
        description="Defaults to the configured default_link when omitted.",
    )


class MeetingUpdate(BaseModel):
    """
    Schema for editing a meeting (PATCH /meetings/{id}).
    All fields are optional; only provided fields are updated.
    """

    notes: str | None = Field(default=None)
    time: str | None = Field(default=None, pattern=TIME_PATTERN)
    link: str | None = Field(default=None)


class MeetingRead(BaseModel):
    """
    Public representation of a persisted meeting.
    """

    id: int = Field(..., examples=[1], description="Database identifier of the meeting.")
    date: date_type = Field(..., examples=["2025-11-13"])
    time: str = Field(..., examples=["19:00"])
    title: str
    notes: str
    link: str
    created_at: datetime | None = None
    updated_at: datetime | None = None

    class Config:
        from_attributes = True
