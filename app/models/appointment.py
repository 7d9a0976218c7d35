from datetime import UTC, date, datetime
from enum import Enum

from sqlmodel import Field, SQLModel

from app.models.barber import new_id


def _utc_naive_now() -> datetime:
    """Naive UTC for TIMESTAMP WITHOUT TIME ZONE columns."""
    return datetime.now(UTC).replace(tzinfo=None)


class AppointmentStatus(str, Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"
    NO_SHOW = "NO_SHOW"


# Only these occupy a barber's time
ACTIVE_STATUSES = (AppointmentStatus.PENDING, AppointmentStatus.CONFIRMED)
FINISHED_STATUSES = (AppointmentStatus.COMPLETED, AppointmentStatus.CANCELLED)


class Appointment(SQLModel, table=True):
    __tablename__ = "appointments"
    id: str = Field(default_factory=new_id, primary_key=True)
    barber_id: str = Field(foreign_key="barbers.id", index=True)
    service_id: str = Field(foreign_key="services.id", index=True)
    client_name: str
    client_phone: str | None = None
    appointment_date: date = Field(index=True)
    # "HH:mm" for new rows; legacy rows may hold "h:mm AM"
    time: str
    status: AppointmentStatus = Field(default=AppointmentStatus.PENDING, index=True)
    notes: str | None = None
    # barber|date|HH:mm while PENDING/CONFIRMED, NULL otherwise; unique so two
    # concurrent inserts for the same slot cannot both commit
    active_slot_key: str | None = Field(default=None, unique=True)
    cancellation_reason: str | None = None
    # Set on the booking a reschedule creates; the old row stays CANCELLED for history
    rescheduled_from_id: str | None = None
    created_at: datetime = Field(default_factory=_utc_naive_now)


class AppointmentCreate(SQLModel):
    barber_id: str
    service_id: str
    appointment_date: date
    time: str
    client_name: str = Field(min_length=1)
    client_phone: str | None = None
    notes: str | None = None


class AppointmentPublic(SQLModel):
    id: str
    barber_id: str
    service_id: str
    client_name: str
    client_phone: str | None = None
    appointment_date: date
    time: str
    time_display: str
    status: AppointmentStatus
    notes: str | None = None
    cancellation_reason: str | None = None
    rescheduled_from_id: str | None = None
    created_at: datetime


class AppointmentStatusUpdate(SQLModel):
    status: AppointmentStatus


class AppointmentReschedule(SQLModel):
    appointment_date: date
    time: str
