from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.barber import Barber, BarberCreate, Service, ServiceCreate


async def create_barber(session: AsyncSession, data: BarberCreate) -> Barber:
    barber = Barber(name=data.name)
    session.add(barber)
    await session.flush()
    await session.refresh(barber)
    return barber


async def get_barber(session: AsyncSession, barber_id: str) -> Barber | None:
    result = await session.execute(select(Barber).where(Barber.id == barber_id))
    return result.scalar_one_or_none()


async def list_barbers(session: AsyncSession) -> list[Barber]:
    result = await session.execute(
        select(Barber).where(Barber.is_active == True).order_by(Barber.name)  # noqa: E712
    )
    return list(result.scalars().all())


async def create_service(session: AsyncSession, data: ServiceCreate) -> Service:
    service = Service(name=data.name, duration_minutes=data.duration_minutes)
    session.add(service)
    await session.flush()
    await session.refresh(service)
    return service


async def get_service(session: AsyncSession, service_id: str) -> Service | None:
    result = await session.execute(select(Service).where(Service.id == service_id))
    return result.scalar_one_or_none()


async def list_services(session: AsyncSession) -> list[Service]:
    result = await session.execute(
        select(Service).where(Service.is_active == True).order_by(Service.name)  # noqa: E712
    )
    return list(result.scalars().all())
