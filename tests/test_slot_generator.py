# tests/test_slot_generator.py
from datetime import date, timedelta

from app.schemas.schedule import WeeklySlot
from app.services.slot_generator import (
    first_occurrence,
    generate_slot_dates,
    sunday_based_weekday,
)


def test_sunday_based_weekday_convention():
    assert sunday_based_weekday(date(2024, 6, 2)) == 0  # Sunday
    assert sunday_based_weekday(date(2024, 6, 3)) == 1  # Monday
    assert sunday_based_weekday(date(2024, 6, 6)) == 4  # Thursday
    assert sunday_based_weekday(date(2024, 6, 8)) == 6  # Saturday


def test_first_occurrence_is_inclusive_of_start():
    thursday = date(2019, 1, 3)
    assert first_occurrence(4, thursday) == thursday
    assert first_occurrence(4, date(2019, 1, 1)) == thursday
    assert first_occurrence(6, date(2019, 1, 1)) == date(2019, 1, 5)


def test_generate_thursdays_in_january_2019():
    slot = WeeklySlot(day_of_week=4, time="19:00")
    dates = list(generate_slot_dates(slot, date(2019, 1, 1), date(2019, 1, 31)))
    assert dates == [date(2019, 1, d) for d in (3, 10, 17, 24, 31)]


def test_end_bound_is_inclusive():
    slot = WeeklySlot(day_of_week=6, time="13:00")
    dates = list(generate_slot_dates(slot, date(2019, 1, 5), date(2019, 1, 12)))
    assert dates == [date(2019, 1, 5), date(2019, 1, 12)]


def test_empty_when_start_after_end():
    slot = WeeklySlot(day_of_week=4, time="19:00")
    assert list(generate_slot_dates(slot, date(2020, 1, 10), date(2020, 1, 1))) == []


def test_range_without_matching_weekday_is_empty():
    slot = WeeklySlot(day_of_week=0, time="10:00")
    # Monday..Saturday
    assert list(generate_slot_dates(slot, date(2024, 6, 3), date(2024, 6, 8))) == []


def test_generated_dates_match_weekday_bounds_and_weekly_step():
    starts = [date(2019, 1, 1), date(2020, 2, 27), date(2023, 12, 31)]
    for day_of_week in range(7):
        slot = WeeklySlot(day_of_week=day_of_week, time="09:30")
        for start in starts:
            end = start + timedelta(days=120)
            dates = list(generate_slot_dates(slot, start, end))

            assert dates, (day_of_week, start)
            for d in dates:
                assert sunday_based_weekday(d) == day_of_week
                assert start <= d <= end
            for earlier, later in zip(dates, dates[1:]):
                assert later - earlier == timedelta(days=7)


def test_each_call_is_independent():
    slot = WeeklySlot(day_of_week=4, time="19:00")
    first = generate_slot_dates(slot, date(2019, 1, 1), date(2019, 1, 31))
    second = generate_slot_dates(slot, date(2019, 1, 1), date(2019, 1, 31))

    assert next(first) == date(2019, 1, 3)
    assert next(first) == date(2019, 1, 10)
    # Advancing one generator does not move the other
    assert list(second)[0] == date(2019, 1, 3)


def test_yields_plain_dates_across_leap_day():
    slot = WeeklySlot(day_of_week=4, time="19:00")
    dates = list(generate_slot_dates(slot, date(2024, 2, 22), date(2024, 3, 7)))

    assert dates == [date(2024, 2, 22), date(2024, 2, 29), date(2024, 3, 7)]
    assert all(type(d) is date for d in dates)
