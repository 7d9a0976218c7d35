from pydantic import BaseModel, ConfigDict, Field


class AvailabilityResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    available_times: list[str] = Field(alias="availableTimes")  # "9:00 AM", ascending
    service_duration: int = Field(alias="serviceDuration")
    buffer_minutes: int = Field(alias="bufferMinutes")
    message: str | None = None  # why the day is closed, when it is
    # Bookings whose stored time could not be read; present only when non-zero
    unparsed_bookings: int | None = Field(default=None, alias="unparsedBookings")
