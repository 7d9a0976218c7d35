import logging
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_session
from app.models.appointment import (
    Appointment,
    AppointmentCreate,
    AppointmentPublic,
    AppointmentReschedule,
    AppointmentStatusUpdate,
)
from app.services.appointment_service import (
    cancel_appointment,
    create_appointment,
    display_time,
    list_appointments,
    reschedule_appointment,
    update_appointment_status,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/appointments", tags=["appointments"])


def _to_public(a: Appointment) -> AppointmentPublic:
    return AppointmentPublic(
        id=a.id,
        barber_id=a.barber_id,
        service_id=a.service_id,
        client_name=a.client_name,
        client_phone=a.client_phone,
        appointment_date=a.appointment_date,
        time=a.time,
        time_display=display_time(a.time),
        status=a.status,
        notes=a.notes,
        cancellation_reason=a.cancellation_reason,
        rescheduled_from_id=a.rescheduled_from_id,
        created_at=a.created_at,
    )


@router.post("", response_model=AppointmentPublic, status_code=status.HTTP_201_CREATED)
async def book_appointment(
    body: AppointmentCreate,
    session: AsyncSession = Depends(get_session),
) -> AppointmentPublic:
    """Book a slot. The time must be one the availability endpoint currently offers."""
    appointment = await create_appointment(session, body)
    return _to_public(appointment)


@router.get("", response_model=list[AppointmentPublic])
async def list_booked(
    barber_id: str | None = Query(None),
    date_param: date | None = Query(None, alias="date"),
    session: AsyncSession = Depends(get_session),
) -> list[AppointmentPublic]:
    appointments = await list_appointments(session, barber_id=barber_id, day=date_param)
    return [_to_public(a) for a in appointments]


@router.patch("/{appointment_id}/status", response_model=AppointmentPublic)
async def change_status(
    appointment_id: str,
    body: AppointmentStatusUpdate,
    session: AsyncSession = Depends(get_session),
) -> AppointmentPublic:
    appointment = await update_appointment_status(session, appointment_id, body.status)
    if not appointment:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Appointment not found",
        )
    logger.info("Appointment %s is now %s", appointment_id, body.status.value)
    return _to_public(appointment)


@router.post("/{appointment_id}/reschedule", response_model=AppointmentPublic, status_code=status.HTTP_201_CREATED)
async def reschedule_booked(
    appointment_id: str,
    body: AppointmentReschedule,
    session: AsyncSession = Depends(get_session),
) -> AppointmentPublic:
    """Move a booking. The old one is kept as CANCELLED and the new one links back to it."""
    appointment = await reschedule_appointment(session, appointment_id, body.appointment_date, body.time)
    if not appointment:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Appointment not found",
        )
    return _to_public(appointment)


@router.delete("/{appointment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def cancel_booked(
    appointment_id: str,
    reason: str | None = Query(None),
    session: AsyncSession = Depends(get_session),
) -> None:
    ok = await cancel_appointment(session, appointment_id, reason)
    if not ok:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Appointment not found",
        )
