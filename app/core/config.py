from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Resolve .env from backend project root so it loads regardless of cwd
_BACKEND_ROOT = Path(__file__).resolve().parent.parent.parent
_ENV_FILE = _BACKEND_ROOT / ".env"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=(str(_ENV_FILE), ".env", "../.env"),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Database
    database_url: str
    database_ssl: bool = True

    # CORS
    cors_origins: str = "http://localhost:3000"

    # Availability rules
    buffer_minutes: int = Field(default=5, ge=0)
    slot_interval_minutes: int = Field(default=15, gt=0)
    # Used when a booked service has no usable duration
    default_booking_duration_minutes: int = Field(default=30, gt=0)
    # What to do with a booking whose stored time cannot be parsed
    unparseable_booking_policy: Literal["fail_open", "fail_closed"] = "fail_open"
    upstream_timeout_seconds: float = Field(default=5.0, gt=0)

    # Weekly schedule created for barbers with none configured
    default_schedule_start: str = "09:00"
    default_schedule_end: str = "18:00"

    # Bookings start as PENDING (awaiting client confirmation) instead of CONFIRMED
    require_booking_confirmation: bool = False
    # Completed/cancelled appointments are purged this many days after their date
    appointment_retention_days: int = 1

    # Env
    env: str = "development"

    @property
    def cors_origins_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


settings = Settings()
