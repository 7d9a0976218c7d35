import asyncio
import logging
import re
from collections.abc import Awaitable
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import TypeVar

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.errors import InvalidInput, UpstreamDataUnavailable
from app.models.appointment import ACTIVE_STATUSES, Appointment
from app.models.barber import Service
from app.models.schedule import WEEK, DayOfWeek
from app.services.availability_engine import (
    BookedSlot,
    SchedulingRules,
    WorkingHours,
    compute_available_slots,
    rules_from_settings,
    validate_duration,
)
from app.services.schedule_service import get_weekly_schedule, has_day_off

logger = logging.getLogger(__name__)

NON_WORKING_DAY_MESSAGE = "This barber does not work on this day of the week"
DAY_OFF_MESSAGE = "Day off"

T = TypeVar("T")

_DATE_RE = re.compile(r"\d{4}-\d{2}-\d{2}", re.ASCII)
_INT_RE = re.compile(r"[+-]?\d+", re.ASCII)


@dataclass
class AvailabilityResult:
    service_duration: int
    buffer_minutes: int
    available_times: list[str] = field(default_factory=list)
    # Set only when the day is closed (non-working weekday or day off)
    message: str | None = None
    unparsed_bookings: int = 0


def parse_availability_query(
    provider_id: str | None, date_value: str | None, service_duration: str | None
) -> tuple[str, date, int]:
    """Validate raw query values. Every failure is an InvalidInput; nothing is defaulted."""
    if not provider_id or not provider_id.strip() or not date_value:
        raise InvalidInput("providerId and date are required")
    date_value = date_value.strip()
    if not _DATE_RE.fullmatch(date_value):
        raise InvalidInput("date must be in yyyy-MM-dd format")
    try:
        day = datetime.strptime(date_value, "%Y-%m-%d").date()
    except ValueError as e:
        raise InvalidInput("date must be in yyyy-MM-dd format") from e
    if service_duration is None or not service_duration.strip():
        raise InvalidInput("serviceDurationMinutes is required")
    service_duration = service_duration.strip()
    if not _INT_RE.fullmatch(service_duration):
        raise InvalidInput("serviceDurationMinutes must be a positive number")
    duration = int(service_duration)
    return provider_id.strip(), day, validate_duration(duration)


def day_of_week_for(d: date) -> DayOfWeek:
    return WEEK[d.weekday()]


async def _fetch(what: str, awaitable: Awaitable[T]) -> T:
    """Await a store lookup under the upstream timeout; store failures become retryable errors."""
    try:
        return await asyncio.wait_for(awaitable, timeout=settings.upstream_timeout_seconds)
    except (SQLAlchemyError, OSError, TimeoutError) as e:
        logger.exception("Availability lookup failed (%s): %s", what, e)
        raise UpstreamDataUnavailable(f"Could not load {what}; please retry") from e


async def list_active_bookings(session: AsyncSession, barber_id: str, day: date) -> list[BookedSlot]:
    """Bookings that occupy the barber's time on `day` (PENDING or CONFIRMED), with service length."""
    result = await session.execute(
        select(Appointment.time, Service.duration_minutes)
        .join(Service, Service.id == Appointment.service_id, isouter=True)
        .where(
            Appointment.barber_id == barber_id,
            Appointment.appointment_date == day,
            Appointment.status.in_(ACTIVE_STATUSES),
        )
    )
    return [BookedSlot(start_time=t, service_duration_minutes=d) for t, d in result.all()]


async def get_availability(
    session: AsyncSession,
    barber_id: str,
    day: date,
    service_duration_minutes: int,
    rules: SchedulingRules | None = None,
) -> AvailabilityResult:
    rules = rules or rules_from_settings()
    duration = validate_duration(service_duration_minutes)
    result = AvailabilityResult(service_duration=duration, buffer_minutes=rules.buffer_minutes)

    weekday = day_of_week_for(day)
    schedule = await _fetch("weekly schedule", get_weekly_schedule(session, barber_id, weekday))
    if schedule is None:
        logger.debug("Barber %s does not work on %s", barber_id, weekday.value)
        result.message = NON_WORKING_DAY_MESSAGE
        return result

    if await _fetch("days off", has_day_off(session, barber_id, day)):
        logger.debug("Barber %s has %s off", barber_id, day.isoformat())
        result.message = DAY_OFF_MESSAGE
        return result

    bookings = await _fetch("bookings", list_active_bookings(session, barber_id, day))
    hours = WorkingHours.from_strings(schedule.start_time, schedule.end_time)
    computed = compute_available_slots(hours, bookings, duration, rules)
    result.available_times = computed.available_times
    result.unparsed_bookings = computed.unparsed_bookings
    logger.info(
        "%d slots available for barber %s on %s (%d bookings, %dmin service, %dmin buffer)",
        len(computed.available_times),
        barber_id,
        day.isoformat(),
        len(bookings),
        duration,
        rules.buffer_minutes,
    )
    return result
