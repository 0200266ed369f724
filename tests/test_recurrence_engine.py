# tests/test_recurrence_engine.py
from datetime import date

import pytest

from app.core.exceptions import InvalidSlotDefinition
from app.schemas.schedule import ScheduleConfig, WeeklySlot
from app.services.recurrence_engine import (
    count_without_holiday_filter,
    default_range,
    generate_occurrences,
    one_year_after,
    slot1_title,
    slot2_title,
    title_for_schedule,
    validate_schedule,
)


def _config(
    slot1=(4, "19:00"),
    slot2=(6, "13:00"),
    link: str = "https://x",
) -> ScheduleConfig:
    return ScheduleConfig(
        default_link=link,
        slot1=WeeklySlot(day_of_week=slot1[0], time=slot1[1]),
        slot2=WeeklySlot(day_of_week=slot2[0], time=slot2[1]),
    )


def test_january_2019_thursdays_and_saturdays():
    config = _config()
    start, end = date(2019, 1, 1), date(2019, 1, 31)

    occurrences = generate_occurrences(config, start, end)

    assert [(o.date.isoformat(), o.time) for o in occurrences] == [
        ("2019-01-03", "19:00"),
        ("2019-01-05", "13:00"),
        ("2019-01-10", "19:00"),
        ("2019-01-12", "13:00"),
        ("2019-01-17", "19:00"),
        ("2019-01-19", "13:00"),
        ("2019-01-24", "19:00"),
        ("2019-01-26", "13:00"),
        ("2019-01-31", "19:00"),
    ]
    assert count_without_holiday_filter(config, start, end) - len(occurrences) == 0


def test_generated_fields():
    occurrences = generate_occurrences(_config(), date(2019, 1, 1), date(2019, 1, 6))
    thursday, saturday = occurrences

    assert thursday.title == "Team Meeting - Thursday, Jan 3, 2019"
    assert saturday.title == "Saturday Team Meeting - Jan 5, 2019"
    for occ in occurrences:
        assert occ.notes == ""
        assert occ.link == "https://x"
    assert thursday.key == ("2019-01-03", "19:00")


def test_titles_distinguish_slots():
    day = date(2024, 3, 9)
    assert slot1_title(day) == "Team Meeting - Saturday, Mar 9, 2024"
    assert slot2_title(day) == "Saturday Team Meeting - Mar 9, 2024"


def test_holidays_are_excluded_around_new_year():
    # Dec 25 2025 and Jan 1 2026 are both Thursdays
    config = _config()
    start, end = date(2025, 12, 20), date(2026, 1, 10)

    occurrences = generate_occurrences(config, start, end)

    assert [o.date for o in occurrences] == [
        date(2025, 12, 20),
        date(2025, 12, 27),
        date(2026, 1, 3),
        date(2026, 1, 8),
        date(2026, 1, 10),
    ]
    assert count_without_holiday_filter(config, start, end) == 7


def test_jan_first_never_generated():
    config = _config()
    for year in range(2019, 2031):
        occurrences = generate_occurrences(
            config, date(year - 1, 12, 20), date(year, 1, 10)
        )
        assert all(o.date != date(year, 1, 1) for o in occurrences)


def test_st_patricks_day_thursday_skipped():
    occurrences = generate_occurrences(_config(), date(2022, 3, 14), date(2022, 3, 20))
    assert [o.date for o in occurrences] == [date(2022, 3, 19)]


def test_output_sorted_by_date_then_time():
    # Same weekday, different times
    config = _config(slot1=(2, "18:00"), slot2=(2, "09:00"))
    occurrences = generate_occurrences(config, date(2024, 6, 1), date(2024, 6, 30))

    keys = [(o.date, o.time) for o in occurrences]
    assert keys == sorted(keys)
    assert keys[0] == (date(2024, 6, 4), "09:00")
    assert keys[1] == (date(2024, 6, 4), "18:00")
    assert len(keys) == 8


def test_same_weekday_and_time_rejected():
    with pytest.raises(InvalidSlotDefinition):
        generate_occurrences(_config(slot1=(4, "19:00"), slot2=(4, "19:00")))


@pytest.mark.parametrize(
    "slot1",
    [(7, "19:00"), (-1, "19:00"), (4, "7pm"), (4, "24:00"), (4, "9:00"), (4, "19:60"), (4, "19:00\n")],
)
def test_malformed_slots_rejected(slot1):
    config = _config(slot1=slot1)
    with pytest.raises(InvalidSlotDefinition):
        validate_schedule(config)
    with pytest.raises(InvalidSlotDefinition):
        count_without_holiday_filter(config, date(2019, 1, 1), date(2019, 2, 1))


def test_default_range_starts_at_epoch_and_ends_a_year_out():
    assert default_range(today=date(2025, 11, 14)) == (date(2019, 1, 1), date(2026, 11, 14))
    assert one_year_after(date(2024, 2, 29)) == date(2025, 3, 1)


def test_default_range_used_when_bounds_omitted():
    occurrences = generate_occurrences(_config())
    assert occurrences[0].date == date(2019, 1, 3)
    assert occurrences[-1].date > date.today()


def test_title_for_schedule_matches_slots():
    config = _config()
    assert title_for_schedule(config, date(2030, 1, 3), "19:00") == (
        "Team Meeting - Thursday, Jan 3, 2030"
    )
    assert title_for_schedule(config, date(2030, 1, 5), "13:00") == (
        "Saturday Team Meeting - Jan 5, 2030"
    )
    assert title_for_schedule(config, date(2030, 1, 3), "13:00") is None
    assert title_for_schedule(config, date(2030, 1, 4), "19:00") is None
