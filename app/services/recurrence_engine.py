# app/services/recurrence_engine.py
from __future__ import annotations

import re
from datetime import date as date_type, datetime

from app.core.exceptions import InvalidSlotDefinition
from app.schemas.meeting import MeetingOccurrence
from app.schemas.schedule import DAY_NAMES, TIME_PATTERN, ScheduleConfig, WeeklySlot
from app.services.holiday_calculator import is_holiday
from app.services.slot_generator import generate_slot_dates

# Backfill "since inception" starts here unless the caller says otherwise.
DEFAULT_EPOCH = date_type(2019, 1, 1)

MONTH_ABBREVIATIONS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)

_TIME_RE = re.compile(TIME_PATTERN)


def _short_date(day: date_type) -> str:
    return f"{MONTH_ABBREVIATIONS[day.month - 1]} {day.day}, {day.year}"


def _weekday_name(day: date_type) -> str:
    return DAY_NAMES[(day.weekday() + 1) % 7]


def slot1_title(day: date_type) -> str:
    """e.g. 'Team Meeting - Thursday, Jan 3, 2019'"""
    return f"Team Meeting - {_weekday_name(day)}, {_short_date(day)}"


def slot2_title(day: date_type) -> str:
    """e.g. 'Saturday Team Meeting - Jan 5, 2019'"""
    return f"{_weekday_name(day)} Team Meeting - {_short_date(day)}"


def one_year_after(day: date_type) -> date_type:
    """
    Same calendar date one year later; Feb 29 rolls over to Mar 1.
    """
    try:
        return day.replace(year=day.year + 1)
    except ValueError:
        return date_type(day.year + 1, 3, 1)


def default_range(
    today: date_type | None = None,
    epoch: date_type = DEFAULT_EPOCH,
) -> tuple[date_type, date_type]:
    """
    Backfill window: the fixed epoch through one year from today.
    """
    today = today or date_type.today()
    return epoch, one_year_after(today)


def validate_slot(slot: WeeklySlot, name: str = "slot") -> None:
    if not isinstance(slot.day_of_week, int) or not 0 <= slot.day_of_week <= 6:
        raise InvalidSlotDefinition(
            f"{name}: day_of_week must be between 0 (Sunday) and 6 (Saturday), "
            f"got {slot.day_of_week!r}"
        )
    if not isinstance(slot.time, str) or not _TIME_RE.fullmatch(slot.time):
        raise InvalidSlotDefinition(
            f"{name}: time must be a 24-hour HH:MM string, got {slot.time!r}"
        )


def validate_schedule(config: ScheduleConfig) -> None:
    """
    Reject a schedule that would generate wrong or colliding meetings.

    Raises
    ------
    InvalidSlotDefinition
        If either slot is malformed, or both slots share (day_of_week, time).
    """
    validate_slot(config.slot1, "slot1")
    validate_slot(config.slot2, "slot2")
    if (config.slot1.day_of_week, config.slot1.time) == (
        config.slot2.day_of_week,
        config.slot2.time,
    ):
        raise InvalidSlotDefinition(
            f"slot1 and slot2 are both {config.slot1.describe()}; "
            "slots on the same weekday need different times"
        )


def _slot_plan(config: ScheduleConfig):
    return ((config.slot1, slot1_title), (config.slot2, slot2_title))


def title_for_schedule(config: ScheduleConfig, day: date_type, time: str) -> str | None:
    """
    Title a meeting on (day, time) would get from the schedule, or None if
    neither slot covers that weekday and time.
    """
    weekday = (day.weekday() + 1) % 7
    for slot, title_for in _slot_plan(config):
        if slot.day_of_week == weekday and slot.time == time:
            return title_for(day)
    return None


def _resolve_range(
    start: date_type | None,
    end: date_type | None,
) -> tuple[date_type, date_type]:
    default_start, default_end = default_range()
    return start or default_start, end or default_end


def generate_occurrences(
    config: ScheduleConfig,
    start: date_type | None = None,
    end: date_type | None = None,
) -> list[MeetingOccurrence]:
    """
    Generate every meeting of both slots in [start, end], holidays excluded.

    Parameters
    ----------
    config:
        Schedule to expand. Validated first.
    start, end:
        Inclusive bounds. Default to 2019-01-01 and today + 1 year.

    Returns
    -------
    list[MeetingOccurrence]
        Sorted ascending by (date, time), with empty notes and the config's
        default link.
    """
    validate_schedule(config)
    start, end = _resolve_range(start, end)

    now = datetime.now()
    occurrences: list[MeetingOccurrence] = []

    for slot, title_for in _slot_plan(config):
        for day in generate_slot_dates(slot, start, end):
            if is_holiday(day):
                continue
            occurrences.append(
                MeetingOccurrence(
                    date=day,
                    time=slot.time,
                    title=title_for(day),
                    notes="",
                    link=config.default_link,
                    created_at=now,
                    updated_at=now,
                )
            )

    occurrences.sort(key=lambda occ: (occ.date, occ.time))
    return occurrences


def count_without_holiday_filter(
    config: ScheduleConfig,
    start: date_type | None = None,
    end: date_type | None = None,
) -> int:
    """
    Number of slot occurrences in [start, end] before holidays are removed.

    Only used to report how many holidays a backfill skipped:
    `count_without_holiday_filter(...) - len(generate_occurrences(...))`.
    """
    validate_schedule(config)
    start, end = _resolve_range(start, end)
    return sum(
        1
        for slot, _ in _slot_plan(config)
        for _ in generate_slot_dates(slot, start, end)
    )
