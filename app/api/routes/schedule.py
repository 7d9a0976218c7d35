import logging
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_barber_or_404, get_session
from app.api.schemas.schedule import (
    InitializeScheduleRequest,
    WeeklyScheduleResponse,
    WeeklyScheduleUpdate,
)
from app.models.barber import Barber
from app.models.schedule import DayOff, DayOffCreate, DayOffPublic, WeeklySchedule, WeeklySchedulePublic
from app.services.schedule_service import (
    create_day_off,
    delete_day_off,
    initialize_weekly_schedule,
    list_days_off,
    list_weekly_schedule,
    upsert_weekly_schedule,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/barbers/{barber_id}", tags=["schedule"])


def _schedule_public(rows: list[WeeklySchedule]) -> list[WeeklySchedulePublic]:
    return [WeeklySchedulePublic.model_validate(r, from_attributes=True) for r in rows]


def _day_off_public(d: DayOff) -> DayOffPublic:
    return DayOffPublic.model_validate(d, from_attributes=True)


@router.get("/availability", response_model=WeeklyScheduleResponse, response_model_exclude_none=True)
async def get_schedule(
    barber: Barber = Depends(get_barber_or_404),
    session: AsyncSession = Depends(get_session),
) -> WeeklyScheduleResponse:
    rows = await list_weekly_schedule(session, barber.id)
    return WeeklyScheduleResponse(availability=_schedule_public(rows))


@router.put("/availability", response_model=WeeklyScheduleResponse)
async def update_schedule(
    body: WeeklyScheduleUpdate,
    barber: Barber = Depends(get_barber_or_404),
    session: AsyncSession = Depends(get_session),
) -> WeeklyScheduleResponse:
    rows = await upsert_weekly_schedule(session, barber.id, body.availability)
    return WeeklyScheduleResponse(
        availability=_schedule_public(rows),
        message="Availability updated successfully.",
    )


@router.post(
    "/availability/initialize",
    response_model=WeeklyScheduleResponse,
    status_code=status.HTTP_201_CREATED,
)
async def initialize_schedule(
    body: InitializeScheduleRequest,
    barber: Barber = Depends(get_barber_or_404),
    session: AsyncSession = Depends(get_session),
) -> WeeklyScheduleResponse:
    rows = await initialize_weekly_schedule(session, barber.id, reset_existing=body.reset_existing)
    logger.info("Initialized %d schedule rows for barber %s", len(rows), barber.id)
    return WeeklyScheduleResponse(
        availability=_schedule_public(rows),
        message="Schedules initialized successfully",
    )


@router.get("/days-off", response_model=list[DayOffPublic])
async def get_days_off(
    from_date: date | None = Query(None),
    barber: Barber = Depends(get_barber_or_404),
    session: AsyncSession = Depends(get_session),
) -> list[DayOffPublic]:
    """Days off on or after `from_date` (today when omitted)."""
    days = await list_days_off(session, barber.id, from_date=from_date or date.today())
    return [_day_off_public(d) for d in days]


@router.post("/days-off", response_model=DayOffPublic, status_code=status.HTTP_201_CREATED)
async def add_day_off(
    body: DayOffCreate,
    barber: Barber = Depends(get_barber_or_404),
    session: AsyncSession = Depends(get_session),
) -> DayOffPublic:
    day_off = await create_day_off(session, barber.id, body)
    return _day_off_public(day_off)


@router.delete("/days-off/{day_off_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_day_off(
    day_off_id: str,
    barber: Barber = Depends(get_barber_or_404),
    session: AsyncSession = Depends(get_session),
) -> None:
    ok = await delete_day_off(session, barber.id, day_off_id)
    if not ok:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Day off not found.",
        )
