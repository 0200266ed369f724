# app/services/slot_generator.py
from __future__ import annotations

from collections.abc import Iterator
from datetime import date as date_type

from dateutil.relativedelta import relativedelta
from dateutil.rrule import FR, MO, SA, SU, TH, TU, WE, WEEKLY, rrule

from app.schemas.schedule import WeeklySlot

# Indexed by slot day_of_week (0 = Sunday)
SLOT_WEEKDAYS = (SU, MO, TU, WE, TH, FR, SA)


def sunday_based_weekday(day: date_type) -> int:
    """
    Weekday of `day` with 0 = Sunday ... 6 = Saturday (slot convention).
    """
    return (day.weekday() + 1) % 7


def first_occurrence(day_of_week: int, start: date_type) -> date_type:
    """
    First date on or after `start` that falls on `day_of_week`.
    """
    return start + relativedelta(weekday=SLOT_WEEKDAYS[day_of_week](+1))


def generate_slot_dates(
    slot: WeeklySlot,
    start: date_type,
    end: date_type,
) -> Iterator[date_type]:
    """
    Yield every date in [start, end] that falls on the slot's weekday.

    Dates are ascending and exactly seven days apart. Each call returns an
    independent generator, so the sequence can be recomputed at will.
    `start` itself is yielded when it matches the weekday; an empty range
    (start > end) yields nothing.
    """
    if start > end:
        return

    rule = rrule(
        WEEKLY,
        byweekday=SLOT_WEEKDAYS[slot.day_of_week],
        dtstart=start,
        until=end,
    )
    for occurrence in rule:
        yield occurrence.date()
