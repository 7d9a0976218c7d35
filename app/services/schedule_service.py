import logging
from datetime import date

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.errors import Conflict, InvalidInput, TimeParseError
from app.core.time_format import normalize_time_to_hhmm, parse_time_to_minutes
from app.models.schedule import WEEK, DayOff, DayOffCreate, DayOfWeek, WeeklySchedule, WeeklyScheduleEntry

logger = logging.getLogger(__name__)

DUPLICATE_DAY_OFF_MESSAGE = "A day off is already registered for this date."


def _week_order(row: WeeklySchedule) -> int:
    return WEEK.index(DayOfWeek(row.day_of_week))


def _validated(entry: WeeklyScheduleEntry) -> tuple[str, str]:
    """Return the entry's start/end as HH:mm, rejecting bad or inverted times."""
    try:
        start = normalize_time_to_hhmm(entry.start_time)
        end = normalize_time_to_hhmm(entry.end_time)
    except TimeParseError as e:
        raise InvalidInput(f"{entry.day_of_week.value}: {e}") from e
    if parse_time_to_minutes(start) > parse_time_to_minutes(end):
        raise InvalidInput(f"{entry.day_of_week.value}: start_time must not be after end_time")
    return start, end


def default_week() -> list[WeeklyScheduleEntry]:
    """Open Monday to Saturday, closed on Sunday."""
    return [
        WeeklyScheduleEntry(
            day_of_week=day,
            start_time=settings.default_schedule_start,
            end_time=settings.default_schedule_end,
            is_available=day != DayOfWeek.SUNDAY,
        )
        for day in WEEK
    ]


async def get_weekly_schedule(
    session: AsyncSession, barber_id: str, day: DayOfWeek
) -> WeeklySchedule | None:
    result = await session.execute(
        select(WeeklySchedule).where(
            WeeklySchedule.barber_id == barber_id,
            WeeklySchedule.day_of_week == day,
            WeeklySchedule.is_available == True,  # noqa: E712
        )
    )
    return result.scalar_one_or_none()


async def has_day_off(session: AsyncSession, barber_id: str, day: date) -> bool:
    result = await session.execute(
        select(DayOff.id).where(DayOff.barber_id == barber_id, DayOff.off_date == day)
    )
    return result.first() is not None


async def _rows_for_barber(session: AsyncSession, barber_id: str) -> list[WeeklySchedule]:
    result = await session.execute(select(WeeklySchedule).where(WeeklySchedule.barber_id == barber_id))
    return sorted(result.scalars().all(), key=_week_order)


async def upsert_weekly_schedule(
    session: AsyncSession, barber_id: str, entries: list[WeeklyScheduleEntry]
) -> list[WeeklySchedule]:
    existing = {DayOfWeek(row.day_of_week): row for row in await _rows_for_barber(session, barber_id)}
    for entry in entries:
        start, end = _validated(entry)
        row = existing.get(entry.day_of_week)
        if row is None:
            row = WeeklySchedule(barber_id=barber_id, day_of_week=entry.day_of_week)
            existing[entry.day_of_week] = row
        row.start_time = start
        row.end_time = end
        row.is_available = entry.is_available
        session.add(row)
    await session.flush()
    return sorted(existing.values(), key=_week_order)


async def list_weekly_schedule(session: AsyncSession, barber_id: str) -> list[WeeklySchedule]:
    """Weekly schedule in Monday-first order; barbers with none get the default week."""
    rows = await _rows_for_barber(session, barber_id)
    if rows:
        return rows
    logger.info("No weekly schedule for barber %s, creating default week", barber_id)
    return await upsert_weekly_schedule(session, barber_id, default_week())


async def initialize_weekly_schedule(
    session: AsyncSession, barber_id: str, reset_existing: bool = False
) -> list[WeeklySchedule]:
    rows = await _rows_for_barber(session, barber_id)
    if rows and not reset_existing:
        raise InvalidInput(
            "This barber already has schedules configured. Use reset_existing=true to re-initialize."
        )
    if rows:
        await session.execute(delete(WeeklySchedule).where(WeeklySchedule.barber_id == barber_id))
        logger.info("Deleted %d existing schedules for barber %s", len(rows), barber_id)
    return await upsert_weekly_schedule(session, barber_id, default_week())


async def list_days_off(
    session: AsyncSession, barber_id: str, from_date: date | None = None
) -> list[DayOff]:
    q = select(DayOff).where(DayOff.barber_id == barber_id).order_by(DayOff.off_date)
    if from_date:
        q = q.where(DayOff.off_date >= from_date)
    result = await session.execute(q)
    return list(result.scalars().all())


async def create_day_off(session: AsyncSession, barber_id: str, data: DayOffCreate) -> DayOff:
    if await has_day_off(session, barber_id, data.off_date):
        raise Conflict(DUPLICATE_DAY_OFF_MESSAGE)
    day_off = DayOff(barber_id=barber_id, off_date=data.off_date, reason=data.reason or None)
    session.add(day_off)
    try:
        await session.flush()
    except IntegrityError as e:
        # A concurrent request registered the same date after the check above
        raise Conflict(DUPLICATE_DAY_OFF_MESSAGE) from e
    await session.refresh(day_off)
    return day_off


async def delete_day_off(session: AsyncSession, barber_id: str, day_off_id: str) -> bool:
    result = await session.execute(
        select(DayOff).where(DayOff.id == day_off_id, DayOff.barber_id == barber_id)
    )
    day_off = result.scalar_one_or_none()
    if not day_off:
        return False
    await session.delete(day_off)
    await session.flush()
    return True
