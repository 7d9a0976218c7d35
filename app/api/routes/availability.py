from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_session
from app.api.schemas.availability import AvailabilityResponse
from app.services.slot_service import get_availability, parse_availability_query

router = APIRouter(prefix="/availability", tags=["availability"])


@router.get("", response_model=AvailabilityResponse, response_model_exclude_none=True)
async def available_times(
    provider_id: str | None = Query(None, alias="providerId"),
    date_param: str | None = Query(None, alias="date"),
    service_duration: str | None = Query(None, alias="serviceDurationMinutes"),
    session: AsyncSession = Depends(get_session),
) -> AvailabilityResponse:
    """Bookable start times for a barber on a date (yyyy-MM-dd) for a service of the given length.

    Closed days return an empty list with a message rather than an error.
    """
    barber_id, day, duration = parse_availability_query(provider_id, date_param, service_duration)
    result = await get_availability(session, barber_id, day, duration)
    return AvailabilityResponse(
        available_times=result.available_times,
        service_duration=result.service_duration,
        buffer_minutes=result.buffer_minutes,
        message=result.message,
        unparsed_bookings=result.unparsed_bookings or None,
    )
