# tests/test_meeting_store.py
import asyncio
from datetime import date

import pytest

from app.core.exceptions import InvalidSlotDefinition, MeetingConflictError
from app.db.session import AsyncSessionLocal, init_db
from app.schemas.meeting import MeetingKey, MeetingOccurrence
from app.schemas.schedule import ScheduleConfigUpdate
from app.services.meeting_store import SqlConfigStore, SqlMeetingStore, meetings_write_lock
from app.services.schedule_config import update_schedule_config


def _occurrence(day: date, time: str = "19:00", link: str = "A") -> MeetingOccurrence:
    return MeetingOccurrence(date=day, time=time, title=f"Meeting {day}", link=link)


@pytest.mark.asyncio
async def test_config_defaults_installed_on_first_access():
    await init_db()

    async with AsyncSessionLocal() as session:
        store = SqlConfigStore(session, default_link="https://zoom.us/j/placeholder123456")
        config = await store.get()

        assert config.slot1.day_of_week == 4
        assert config.slot1.time == "19:00"
        assert config.slot2.day_of_week == 6
        assert config.slot2.time == "13:00"
        assert config.default_link == "https://zoom.us/j/placeholder123456"

    # Persisted, not just returned
    async with AsyncSessionLocal() as session:
        again = await SqlConfigStore(session, default_link="other").get()
        assert again.default_link == "https://zoom.us/j/placeholder123456"


@pytest.mark.asyncio
async def test_insert_and_read_keys():
    await init_db()

    async with AsyncSessionLocal() as session:
        store = SqlMeetingStore(session)
        written = await store.insert_many(
            [_occurrence(date(2019, 1, 3)), _occurrence(date(2019, 1, 5), "13:00")]
        )
        await store.commit()

        assert written == 2
        assert await store.existing_keys() == {
            MeetingKey("2019-01-03", "19:00"),
            MeetingKey("2019-01-05", "13:00"),
        }
        assert await store.insert_many([]) == 0


@pytest.mark.asyncio
async def test_duplicate_natural_key_is_a_conflict():
    await init_db()

    async with AsyncSessionLocal() as session:
        store = SqlMeetingStore(session)
        await store.insert_many([_occurrence(date(2019, 1, 3))])
        await store.commit()

        with pytest.raises(MeetingConflictError):
            await store.insert_many([_occurrence(date(2019, 1, 3))])
        await store.rollback()

        assert len(await store.find_all()) == 1


@pytest.mark.asyncio
async def test_delete_all_returns_count():
    await init_db()

    async with AsyncSessionLocal() as session:
        store = SqlMeetingStore(session)
        await store.insert_many([_occurrence(date(2019, 1, d)) for d in (3, 10, 17)])
        await store.commit()

        assert await store.delete_all() == 3
        await store.commit()
        assert await store.find_all() == []


@pytest.mark.asyncio
async def test_update_where_rejects_unknown_fields():
    await init_db()

    async with AsyncSessionLocal() as session:
        with pytest.raises(ValueError):
            await SqlMeetingStore(session).update_where(date(2020, 1, 1), {"date": "x"})


@pytest.mark.asyncio
async def test_link_change_only_reaches_today_and_future_meetings():
    await init_db()
    today = date(2025, 6, 1)

    async with AsyncSessionLocal() as session:
        store = SqlMeetingStore(session)
        await SqlConfigStore(session, default_link="A").get()
        await store.insert_many(
            [
                _occurrence(date(2025, 5, 29), link="A"),  # past
                _occurrence(today, "13:00", link="A"),     # today counts as future
                _occurrence(date(2025, 6, 5), link="A"),   # future
            ]
        )
        await store.commit()

        result = await update_schedule_config(
            session, ScheduleConfigUpdate(default_link="B"), today=today
        )

        assert result.config.default_link == "B"
        assert result.future_meetings_updated == 2

    async with AsyncSessionLocal() as session:
        links = {m.date: m.link for m in await SqlMeetingStore(session).find_all()}
        assert links == {
            date(2025, 5, 29): "A",
            today: "B",
            date(2025, 6, 5): "B",
        }


@pytest.mark.asyncio
async def test_slot_change_does_not_touch_meetings():
    await init_db()

    async with AsyncSessionLocal() as session:
        store = SqlMeetingStore(session)
        await SqlConfigStore(session, default_link="A").get()
        await store.insert_many([_occurrence(date(2030, 1, 3), link="A")])
        await store.commit()

        result = await update_schedule_config(
            session, ScheduleConfigUpdate(slot2_day=3, slot2_time="18:30")
        )

        assert result.future_meetings_updated == 0
        assert result.config.slot2.day_of_week == 3
        assert result.config.slot2.time == "18:30"
        assert (await store.find_all())[0].link == "A"


@pytest.mark.asyncio
async def test_update_making_slots_identical_is_rejected():
    await init_db()

    async with AsyncSessionLocal() as session:
        await SqlConfigStore(session, default_link="A").get()

        with pytest.raises(InvalidSlotDefinition):
            await update_schedule_config(
                session, ScheduleConfigUpdate(slot2_day=4, slot2_time="19:00")
            )

    async with AsyncSessionLocal() as session:
        config = await SqlConfigStore(session).get()
        assert config.slot2.day_of_week == 6


@pytest.mark.asyncio
async def test_schedule_update_waits_for_running_backfill():
    await init_db()
    today = date(2025, 6, 1)

    async with AsyncSessionLocal() as session:
        await SqlConfigStore(session, default_link="A").get()
        await session.commit()

        async with meetings_write_lock:
            pending = asyncio.create_task(
                update_schedule_config(session, ScheduleConfigUpdate(default_link="B"), today=today)
            )
            await asyncio.sleep(0.05)
            # Lock held: the update has not started writing
            assert not pending.done()

        result = await pending

    assert result.config.default_link == "B"
    assert not meetings_write_lock.locked()
