"""
Tests for weekly schedule and day-off management.
"""

from datetime import timedelta
from unittest.mock import AsyncMock, patch

import pytest

from app.core.errors import Conflict, InvalidInput
from app.models import Barber, DayOffCreate, DayOfWeek, WeeklyScheduleEntry
from app.services.schedule_service import (
    create_day_off,
    delete_day_off,
    get_weekly_schedule,
    has_day_off,
    initialize_weekly_schedule,
    list_days_off,
    list_weekly_schedule,
    upsert_weekly_schedule,
)
from conftest import MONDAY


@pytest.fixture
async def bare_barber(session):
    barber = Barber(name="New barber")
    session.add(barber)
    await session.commit()
    return barber


class TestWeeklySchedule:
    async def test_default_week_created_on_first_read(self, session, bare_barber):
        rows = await list_weekly_schedule(session, bare_barber.id)
        assert [r.day_of_week for r in rows] == list(DayOfWeek)
        assert all((r.start_time, r.end_time) == ("09:00", "18:00") for r in rows)
        assert [r.is_available for r in rows] == [True] * 6 + [False]

        again = await list_weekly_schedule(session, bare_barber.id)
        assert [r.id for r in again] == [r.id for r in rows]

    async def test_unavailable_day_is_not_returned(self, session, make_barber):
        barber = await make_barber(closed=(DayOfWeek.SUNDAY, DayOfWeek.WEDNESDAY))
        assert await get_weekly_schedule(session, barber.id, DayOfWeek.WEDNESDAY) is None
        tuesday = await get_weekly_schedule(session, barber.id, DayOfWeek.TUESDAY)
        assert tuesday is not None
        assert tuesday.start_time == "09:00"

    async def test_upsert_updates_in_place_and_normalizes_times(self, session, make_barber):
        barber = await make_barber()
        before = await get_weekly_schedule(session, barber.id, DayOfWeek.MONDAY)
        rows = await upsert_weekly_schedule(
            session,
            barber.id,
            [WeeklyScheduleEntry(day_of_week=DayOfWeek.MONDAY, start_time="10:00 AM", end_time="4:30 PM")],
        )
        assert len(rows) == 7
        monday = rows[0]
        assert monday.id == before.id
        assert (monday.start_time, monday.end_time) == ("10:00", "16:30")

    async def test_upsert_rejects_unparseable_time(self, session, make_barber):
        barber = await make_barber()
        with pytest.raises(InvalidInput):
            await upsert_weekly_schedule(
                session,
                barber.id,
                [WeeklyScheduleEntry(day_of_week=DayOfWeek.MONDAY, start_time="25:00", end_time="18:00")],
            )

    async def test_upsert_rejects_start_after_end(self, session, make_barber):
        barber = await make_barber()
        with pytest.raises(InvalidInput):
            await upsert_weekly_schedule(
                session,
                barber.id,
                [WeeklyScheduleEntry(day_of_week=DayOfWeek.FRIDAY, start_time="18:00", end_time="09:00")],
            )

    async def test_initialize_refuses_existing_without_reset(self, session, make_barber):
        barber = await make_barber(start="07:00", end="12:00")
        with pytest.raises(InvalidInput):
            await initialize_weekly_schedule(session, barber.id)

    async def test_initialize_with_reset_restores_defaults(self, session, make_barber):
        barber = await make_barber(start="07:00", end="12:00", closed=())
        rows = await initialize_weekly_schedule(session, barber.id, reset_existing=True)
        await session.commit()
        assert len(rows) == 7
        assert rows[0].start_time == "09:00"
        assert await get_weekly_schedule(session, barber.id, DayOfWeek.SUNDAY) is None


class TestDaysOff:
    async def test_create_and_lookup(self, session, make_barber):
        barber = await make_barber()
        day_off = await create_day_off(session, barber.id, DayOffCreate(off_date=MONDAY, reason="Vacation"))
        assert day_off.reason == "Vacation"
        assert await has_day_off(session, barber.id, MONDAY)
        assert not await has_day_off(session, barber.id, MONDAY + timedelta(days=1))

    async def test_duplicate_date_conflicts(self, session, make_barber):
        barber = await make_barber()
        await create_day_off(session, barber.id, DayOffCreate(off_date=MONDAY))
        with pytest.raises(Conflict):
            await create_day_off(session, barber.id, DayOffCreate(off_date=MONDAY))

    async def test_concurrent_duplicate_conflicts(self, session, make_barber, add_day_off):
        barber = await make_barber()
        # Another request inserted the same date after our existence check
        await add_day_off(barber, MONDAY)
        with patch("app.services.schedule_service.has_day_off", AsyncMock(return_value=False)):
            with pytest.raises(Conflict):
                await create_day_off(session, barber.id, DayOffCreate(off_date=MONDAY))

    async def test_list_is_ordered_and_filtered(self, session, make_barber, add_day_off):
        barber = await make_barber()
        await add_day_off(barber, MONDAY + timedelta(days=7))
        await add_day_off(barber, MONDAY)
        await add_day_off(barber, MONDAY - timedelta(days=7))
        days = await list_days_off(session, barber.id, from_date=MONDAY)
        assert [d.off_date for d in days] == [MONDAY, MONDAY + timedelta(days=7)]

    async def test_delete_only_own_day_off(self, session, make_barber, add_day_off):
        barber = await make_barber()
        other = await make_barber(name="Luis")
        day_off = await add_day_off(barber, MONDAY)
        assert not await delete_day_off(session, other.id, day_off.id)
        assert await delete_day_off(session, barber.id, day_off.id)
        assert not await has_day_off(session, barber.id, MONDAY)
