import logging
from datetime import date, timedelta

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.errors import InvalidInput, NotFound, SlotUnavailable, TimeParseError
from app.core.time_format import format_minutes_12h, normalize_time_to_hhmm, parse_time_to_minutes
from app.models.appointment import (
    ACTIVE_STATUSES,
    FINISHED_STATUSES,
    Appointment,
    AppointmentCreate,
    AppointmentStatus,
)
from app.services.catalog_service import get_barber, get_service
from app.services.slot_service import get_availability

logger = logging.getLogger(__name__)

RESCHEDULED_REASON = "Rescheduled"


def active_slot_key(barber_id: str, day: date, time_hhmm: str) -> str:
    return f"{barber_id}|{day.isoformat()}|{time_hhmm}"


def display_time(value: str) -> str:
    """12-hour form for clients; legacy values that don't parse are shown as stored."""
    try:
        return format_minutes_12h(parse_time_to_minutes(value))
    except TimeParseError:
        return value.strip()


async def _flush_holding_slot(session: AsyncSession) -> None:
    try:
        await session.flush()
    except IntegrityError as e:
        # Another request took the same slot between the availability check and now
        raise SlotUnavailable("This time slot is already booked") from e


def _normalized_time(value: str) -> str:
    try:
        return normalize_time_to_hhmm(value)
    except TimeParseError as e:
        raise InvalidInput("Invalid time format") from e


async def _ensure_offered(
    session: AsyncSession, barber_id: str, day: date, duration_minutes: int, time_hhmm: str
) -> None:
    """Raise SlotUnavailable unless `time_hhmm` is among the times currently offered.

    Only PENDING/CONFIRMED rows are read, so a booking being moved or reactivated
    must already be inactive in the session for it not to block itself.
    """
    availability = await get_availability(session, barber_id, day, duration_minutes)
    if display_time(time_hhmm) not in availability.available_times:
        raise SlotUnavailable(availability.message or "This time slot is not available")


def _initial_status() -> AppointmentStatus:
    if settings.require_booking_confirmation:
        return AppointmentStatus.PENDING
    return AppointmentStatus.CONFIRMED


async def _hold(session: AsyncSession, appointment: Appointment) -> Appointment:
    appointment.active_slot_key = active_slot_key(
        appointment.barber_id, appointment.appointment_date, appointment.time
    )
    session.add(appointment)
    await _flush_holding_slot(session)
    await session.refresh(appointment)
    return appointment


async def create_appointment(session: AsyncSession, data: AppointmentCreate) -> Appointment:
    barber = await get_barber(session, data.barber_id)
    if not barber or not barber.is_active:
        raise NotFound("Barber not found")
    service = await get_service(session, data.service_id)
    if not service or not service.is_active:
        raise NotFound("Service not found")
    time_hhmm = _normalized_time(data.time)

    await _ensure_offered(session, barber.id, data.appointment_date, service.duration_minutes, time_hhmm)

    status = _initial_status()
    appointment = Appointment(
        barber_id=barber.id,
        service_id=service.id,
        client_name=data.client_name,
        client_phone=data.client_phone,
        appointment_date=data.appointment_date,
        time=time_hhmm,
        status=status,
        notes=data.notes,
    )
    await _hold(session, appointment)
    logger.info(
        "Booked %s with barber %s on %s at %s (%s)",
        service.name,
        barber.id,
        data.appointment_date.isoformat(),
        time_hhmm,
        status.value,
    )
    return appointment


async def get_appointment(session: AsyncSession, appointment_id: str) -> Appointment | None:
    result = await session.execute(select(Appointment).where(Appointment.id == appointment_id))
    return result.scalar_one_or_none()


async def list_appointments(
    session: AsyncSession, barber_id: str | None = None, day: date | None = None
) -> list[Appointment]:
    q = select(Appointment).order_by(Appointment.appointment_date, Appointment.time)
    if barber_id:
        q = q.where(Appointment.barber_id == barber_id)
    if day:
        q = q.where(Appointment.appointment_date == day)
    result = await session.execute(q)
    return list(result.scalars().all())


async def _service_duration(session: AsyncSession, service_id: str) -> int:
    service = await get_service(session, service_id)
    if service is None:
        return settings.default_booking_duration_minutes
    return service.duration_minutes


async def update_appointment_status(
    session: AsyncSession,
    appointment_id: str,
    status: AppointmentStatus,
    reason: str | None = None,
) -> Appointment | None:
    """Change status. Moving an inactive appointment back to PENDING/CONFIRMED
    re-checks its slot against current bookings first."""
    appointment = await get_appointment(session, appointment_id)
    if not appointment:
        return None
    if status in ACTIVE_STATUSES:
        try:
            time_hhmm = normalize_time_to_hhmm(appointment.time)
        except TimeParseError:
            time_hhmm = appointment.time.strip()
        if appointment.status not in ACTIVE_STATUSES:
            duration = await _service_duration(session, appointment.service_id)
            await _ensure_offered(
                session, appointment.barber_id, appointment.appointment_date, duration, time_hhmm
            )
            appointment.cancellation_reason = None
        appointment.status = status
        appointment.active_slot_key = active_slot_key(appointment.barber_id, appointment.appointment_date, time_hhmm)
    else:
        appointment.status = status
        appointment.active_slot_key = None
        if status == AppointmentStatus.CANCELLED and reason:
            appointment.cancellation_reason = reason
    session.add(appointment)
    await _flush_holding_slot(session)
    await session.refresh(appointment)
    return appointment


async def cancel_appointment(session: AsyncSession, appointment_id: str, reason: str | None = None) -> bool:
    updated = await update_appointment_status(session, appointment_id, AppointmentStatus.CANCELLED, reason)
    return updated is not None


async def reschedule_appointment(
    session: AsyncSession, appointment_id: str, new_date: date, new_time: str
) -> Appointment | None:
    """Cancel the booking and book the same client and service at a new date and time.

    The old row is released before the new slot is checked, so a booking can move
    to a time that overlaps its own previous slot. Both writes belong to the
    caller's transaction; a rejected move raises and the caller rolls back.
    """
    original = await get_appointment(session, appointment_id)
    if not original:
        return None
    if original.status not in ACTIVE_STATUSES:
        raise InvalidInput("Only pending or confirmed appointments can be rescheduled")
    time_hhmm = _normalized_time(new_time)

    original.status = AppointmentStatus.CANCELLED
    original.active_slot_key = None
    original.cancellation_reason = RESCHEDULED_REASON
    session.add(original)
    await session.flush()

    duration = await _service_duration(session, original.service_id)
    await _ensure_offered(session, original.barber_id, new_date, duration, time_hhmm)

    moved = Appointment(
        barber_id=original.barber_id,
        service_id=original.service_id,
        client_name=original.client_name,
        client_phone=original.client_phone,
        appointment_date=new_date,
        time=time_hhmm,
        status=_initial_status(),
        notes=original.notes,
        rescheduled_from_id=original.id,
    )
    await _hold(session, moved)
    logger.info(
        "Rescheduled appointment %s to %s at %s as %s",
        original.id,
        new_date.isoformat(),
        time_hhmm,
        moved.id,
    )
    return moved


async def delete_finished_appointments_older_than(session: AsyncSession, days: int) -> int:
    """Delete completed/cancelled appointments dated more than `days` ago. Returns count deleted."""
    cutoff = date.today() - timedelta(days=days)
    result = await session.execute(
        delete(Appointment).where(
            Appointment.appointment_date < cutoff,
            Appointment.status.in_(FINISHED_STATUSES),
        )
    )
    await session.flush()
    return result.rowcount or 0
