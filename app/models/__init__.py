from app.models.barber import Barber, BarberCreate, BarberPublic, Service, ServiceCreate, ServicePublic
from app.models.schedule import (
    DayOff,
    DayOffCreate,
    DayOffPublic,
    DayOfWeek,
    WeeklySchedule,
    WeeklyScheduleEntry,
    WeeklySchedulePublic,
)
from app.models.appointment import (
    Appointment,
    AppointmentCreate,
    AppointmentPublic,
    AppointmentReschedule,
    AppointmentStatus,
    AppointmentStatusUpdate,
)

__all__ = [
    "Barber",
    "BarberCreate",
    "BarberPublic",
    "Service",
    "ServiceCreate",
    "ServicePublic",
    "DayOff",
    "DayOffCreate",
    "DayOffPublic",
    "DayOfWeek",
    "WeeklySchedule",
    "WeeklyScheduleEntry",
    "WeeklySchedulePublic",
    "Appointment",
    "AppointmentCreate",
    "AppointmentPublic",
    "AppointmentReschedule",
    "AppointmentStatus",
    "AppointmentStatusUpdate",
]
