from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_barber_or_404, get_session
from app.models.barber import Barber, BarberCreate, BarberPublic, ServiceCreate, ServicePublic
from app.services.catalog_service import create_barber, create_service, list_barbers, list_services

router = APIRouter(tags=["catalog"])


@router.post("/barbers", response_model=BarberPublic, status_code=status.HTTP_201_CREATED)
async def add_barber(
    body: BarberCreate,
    session: AsyncSession = Depends(get_session),
) -> BarberPublic:
    barber = await create_barber(session, body)
    return BarberPublic.model_validate(barber, from_attributes=True)


@router.get("/barbers", response_model=list[BarberPublic])
async def all_barbers(session: AsyncSession = Depends(get_session)) -> list[BarberPublic]:
    return [BarberPublic.model_validate(b, from_attributes=True) for b in await list_barbers(session)]


@router.get("/barbers/{barber_id}", response_model=BarberPublic)
async def one_barber(barber: Barber = Depends(get_barber_or_404)) -> BarberPublic:
    return BarberPublic.model_validate(barber, from_attributes=True)


@router.post("/services", response_model=ServicePublic, status_code=status.HTTP_201_CREATED)
async def add_service(
    body: ServiceCreate,
    session: AsyncSession = Depends(get_session),
) -> ServicePublic:
    service = await create_service(session, body)
    return ServicePublic.model_validate(service, from_attributes=True)


@router.get("/services", response_model=list[ServicePublic])
async def all_services(session: AsyncSession = Depends(get_session)) -> list[ServicePublic]:
    return [ServicePublic.model_validate(s, from_attributes=True) for s in await list_services(session)]
