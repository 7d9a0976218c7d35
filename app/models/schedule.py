from datetime import date
from enum import Enum

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel

from app.models.barber import new_id


class DayOfWeek(str, Enum):
    MONDAY = "MONDAY"
    TUESDAY = "TUESDAY"
    WEDNESDAY = "WEDNESDAY"
    THURSDAY = "THURSDAY"
    FRIDAY = "FRIDAY"
    SATURDAY = "SATURDAY"
    SUNDAY = "SUNDAY"


# Indexed by date.weekday() (Monday == 0)
WEEK: tuple[DayOfWeek, ...] = tuple(DayOfWeek)


class WeeklySchedule(SQLModel, table=True):
    __tablename__ = "weekly_schedules"
    __table_args__ = (UniqueConstraint("barber_id", "day_of_week", name="uq_weekly_schedules_barber_day"),)
    id: str = Field(default_factory=new_id, primary_key=True)
    barber_id: str = Field(foreign_key="barbers.id", index=True)
    day_of_week: DayOfWeek
    start_time: str  # HH:mm, 24h
    end_time: str  # HH:mm, 24h
    is_available: bool = True


class WeeklyScheduleEntry(SQLModel):
    day_of_week: DayOfWeek
    start_time: str
    end_time: str
    is_available: bool = True


class WeeklySchedulePublic(SQLModel):
    id: str
    barber_id: str
    day_of_week: DayOfWeek
    start_time: str
    end_time: str
    is_available: bool


class DayOff(SQLModel, table=True):
    __tablename__ = "days_off"
    __table_args__ = (UniqueConstraint("barber_id", "off_date", name="uq_days_off_barber_date"),)
    id: str = Field(default_factory=new_id, primary_key=True)
    barber_id: str = Field(foreign_key="barbers.id", index=True)
    off_date: date = Field(index=True)
    reason: str | None = None


class DayOffCreate(SQLModel):
    off_date: date
    reason: str | None = None


class DayOffPublic(SQLModel):
    id: str
    barber_id: str
    off_date: date
    reason: str | None = None
