from datetime import UTC, datetime
from uuid import uuid4

from sqlmodel import Field, SQLModel


def new_id() -> str:
    return uuid4().hex


def _utc_naive_now() -> datetime:
    """Naive UTC for TIMESTAMP WITHOUT TIME ZONE columns."""
    return datetime.now(UTC).replace(tzinfo=None)


class Barber(SQLModel, table=True):
    __tablename__ = "barbers"
    id: str = Field(default_factory=new_id, primary_key=True)
    name: str
    is_active: bool = True
    created_at: datetime = Field(default_factory=_utc_naive_now)


class BarberCreate(SQLModel):
    name: str = Field(min_length=1)


class BarberPublic(SQLModel):
    id: str
    name: str
    is_active: bool


class Service(SQLModel, table=True):
    __tablename__ = "services"
    id: str = Field(default_factory=new_id, primary_key=True)
    name: str
    duration_minutes: int
    is_active: bool = True


class ServiceCreate(SQLModel):
    name: str = Field(min_length=1)
    duration_minutes: int = Field(gt=0)


class ServicePublic(SQLModel):
    id: str
    name: str
    duration_minutes: int
    is_active: bool
