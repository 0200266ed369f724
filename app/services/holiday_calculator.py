# app/services/holiday_calculator.py
from __future__ import annotations

from datetime import date as date_type, timedelta
from functools import lru_cache

from dateutil.easter import EASTER_WESTERN, easter
from dateutil.relativedelta import MO, relativedelta

# Irish public holidays on a fixed calendar date: (month, day)
FIXED_HOLIDAYS: tuple[tuple[int, int], ...] = (
    (1, 1),    # New Year's Day
    (3, 17),   # St. Patrick's Day
    (12, 25),  # Christmas Day
    (12, 26),  # St. Stephen's Day
)

# Bank holidays falling on the first Monday of these months
FIRST_MONDAY_MONTHS: tuple[int, ...] = (5, 6, 8)

# Bank holidays falling on the last Monday of these months
LAST_MONDAY_MONTHS: tuple[int, ...] = (10,)

HOLIDAY_REGION = "IE"


def easter_sunday(year: int) -> date_type:
    """
    Western (Gregorian) Easter Sunday.
    """
    return easter(year, EASTER_WESTERN)


def first_monday_of_month(year: int, month: int) -> date_type:
    """
    Smallest day of the month that falls on a Monday.
    """
    return date_type(year, month, 1) + relativedelta(weekday=MO(+1))


def last_monday_of_month(year: int, month: int) -> date_type:
    """
    Largest day of the month that falls on a Monday.
    """
    # day=31 clamps to the month's last day
    return date_type(year, month, 1) + relativedelta(day=31, weekday=MO(-1))


@lru_cache(maxsize=None)
def holidays_for_year(year: int) -> frozenset[tuple[int, int]]:
    """
    Return the Irish public holidays of `year` as (month, day) pairs.

    Composition
    -----------
    - Fixed dates: Jan 1, Mar 17, Dec 25, Dec 26
    - Easter Monday (Easter Sunday + 1 day)
    - First Monday of May, June and August
    - Last Monday of October

    The rules are static per year, so memoizing per year never goes stale.
    """
    holidays: set[tuple[int, int]] = set(FIXED_HOLIDAYS)

    easter_monday = easter_sunday(year) + timedelta(days=1)
    holidays.add((easter_monday.month, easter_monday.day))

    for month in FIRST_MONDAY_MONTHS:
        holidays.add((month, first_monday_of_month(year, month).day))
    for month in LAST_MONDAY_MONTHS:
        holidays.add((month, last_monday_of_month(year, month).day))

    return frozenset(holidays)


def holiday_dates(year: int) -> list[date_type]:
    """
    Holidays of `year` as sorted dates.
    """
    return sorted(date_type(year, month, day) for month, day in holidays_for_year(year))


def is_holiday(day: date_type) -> bool:
    return (day.month, day.day) in holidays_for_year(day.year)
