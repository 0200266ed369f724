# app/schemas/schedule.py
from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

# Zero-padded 24-hour "HH:MM"; also the time half of the meeting natural key.
TIME_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"

DAY_NAMES = (
    "Sunday",
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
)


class WeeklySlot(BaseModel):
    """
    A weekly recurrence rule: one weekday at one time of day.

    Values are not constrained here because they may come straight from
    storage; the recurrence engine validates them before generating.
    """

    day_of_week: int = Field(
        ...,
        description="Day of week, 0 = Sunday ... 6 = Saturday.",
        examples=[4],
    )
    time: str = Field(
        ...,
        description="24-hour meeting time (HH:MM).",
        examples=["19:00"],
    )

    def describe(self) -> str:
        if 0 <= self.day_of_week <= 6:
            return f"{DAY_NAMES[self.day_of_week]} {self.time}"
        return f"day {self.day_of_week} {self.time}"


class ScheduleConfig(BaseModel):
    """
    Schedule definition read by every generation run.
    """

    default_link: str = Field(
        ...,
        description="Conferencing URL applied to newly generated meetings.",
        examples=["https://zoom.us/j/placeholder123456"],
    )
    slot1: WeeklySlot
    slot2: WeeklySlot
    updated_at: datetime | None = Field(
        None,
        description="Timestamp of the last administrator change (if available).",
    )

    class Config:
        from_attributes = True


class ScheduleConfigUpdate(BaseModel):
    """
    Partial update for the schedule configuration (PUT /admin/config).

    Every field is optional; `apply_config_update` copies only the provided ones.
    """

    default_link: str | None = Field(default=None, min_length=1)
    slot1_day: int | None = Field(default=None, ge=0, le=6)
    slot1_time: str | None = Field(default=None, pattern=TIME_PATTERN)
    slot2_day: int | None = Field(default=None, ge=0, le=6)
    slot2_time: str | None = Field(default=None, pattern=TIME_PATTERN)


class ScheduleConfigUpdateResult(BaseModel):
    """
    Response of PUT /admin/config.
    """

    config: ScheduleConfig
    future_meetings_updated: int = Field(
        ...,
        description=(
            "Number of today-or-future meetings whose link was replaced because "
            "default_link changed."
        ),
        examples=[52],
    )


def apply_config_update(config: ScheduleConfig, update: ScheduleConfigUpdate) -> ScheduleConfig:
    """
    Merge a partial update into `config` and return the new configuration.

    The input config is left untouched.
    """
    slot1 = WeeklySlot(
        day_of_week=update.slot1_day if update.slot1_day is not None else config.slot1.day_of_week,
        time=update.slot1_time if update.slot1_time is not None else config.slot1.time,
    )
    slot2 = WeeklySlot(
        day_of_week=update.slot2_day if update.slot2_day is not None else config.slot2.day_of_week,
        time=update.slot2_time if update.slot2_time is not None else config.slot2.time,
    )
    default_link = (
        update.default_link if update.default_link is not None else config.default_link
    )
    return ScheduleConfig(
        default_link=default_link,
        slot1=slot1,
        slot2=slot2,
        updated_at=config.updated_at,
    )
