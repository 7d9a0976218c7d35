from pydantic import BaseModel

from app.models.schedule import WeeklyScheduleEntry, WeeklySchedulePublic


class WeeklyScheduleUpdate(BaseModel):
    availability: list[WeeklyScheduleEntry]


class WeeklyScheduleResponse(BaseModel):
    availability: list[WeeklySchedulePublic]
    message: str | None = None


class InitializeScheduleRequest(BaseModel):
    reset_existing: bool = False
