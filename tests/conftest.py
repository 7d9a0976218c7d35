"""
Shared fixtures: an in-memory SQLite database per test and an HTTP client
wired to it through the get_session dependency.
"""

import os

# Settings are read at import time, so the environment must be in place first
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("ENV", "testing")

from datetime import date

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel

from app.core.db import get_session
from app.main import app
from app.models import Appointment, AppointmentStatus, Barber, DayOff, DayOfWeek, Service, WeeklySchedule

TEST_DATABASE_URL = "sqlite+aiosqlite://"

# 2026-10-19 is a Monday, 2026-10-25 the following Sunday
MONDAY = date(2026, 10, 19)
SUNDAY = date(2026, 10, 25)


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(
        TEST_DATABASE_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_maker(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def session(session_maker):
    async with session_maker() as session:
        yield session


@pytest_asyncio.fixture
async def client(session_maker):
    """HTTP client against the app, each request getting its own session on the test database."""

    async def _get_session():
        async with session_maker() as s:
            try:
                yield s
                await s.commit()
            except Exception:
                await s.rollback()
                raise

    app.dependency_overrides[get_session] = _get_session
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def make_barber(session):
    """Factory for a barber with one schedule row per weekday (Sunday closed by default)."""

    async def _make(
        name: str = "Jose",
        start: str = "09:00",
        end: str = "18:00",
        closed: tuple[DayOfWeek, ...] = (DayOfWeek.SUNDAY,),
    ) -> Barber:
        barber = Barber(name=name)
        session.add(barber)
        await session.flush()
        for day in DayOfWeek:
            session.add(
                WeeklySchedule(
                    barber_id=barber.id,
                    day_of_week=day,
                    start_time=start,
                    end_time=end,
                    is_available=day not in closed,
                )
            )
        await session.commit()
        return barber

    return _make


@pytest_asyncio.fixture
async def make_service(session):
    async def _make(name: str = "Haircut", duration_minutes: int = 30) -> Service:
        service = Service(name=name, duration_minutes=duration_minutes)
        session.add(service)
        await session.commit()
        return service

    return _make


@pytest_asyncio.fixture
async def make_appointment(session):
    """Factory that writes an appointment row directly, bypassing availability checks."""

    async def _make(
        barber: Barber,
        service: Service,
        time: str,
        day: date = MONDAY,
        status: AppointmentStatus = AppointmentStatus.CONFIRMED,
        active_slot_key: str | None = None,
    ) -> Appointment:
        appointment = Appointment(
            barber_id=barber.id,
            service_id=service.id,
            client_name="Client",
            appointment_date=day,
            time=time,
            status=status,
            active_slot_key=active_slot_key,
        )
        session.add(appointment)
        await session.commit()
        return appointment

    return _make


@pytest_asyncio.fixture
async def add_day_off(session):
    async def _add(barber: Barber, day: date, reason: str | None = None) -> DayOff:
        day_off = DayOff(barber_id=barber.id, off_date=day, reason=reason)
        session.add(day_off)
        await session.commit()
        return day_off

    return _add
