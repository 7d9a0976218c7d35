"""Times of day as minute-of-day integers.

Bookings store their start time as text. Current records use 24-hour "HH:mm",
older ones were saved in the 12-hour "h:mm AM" form shown to clients, so
parsing tries each known format in order.
"""

import re
from collections.abc import Callable

from app.core.errors import TimeParseError

MINUTES_PER_DAY = 24 * 60

_TWELVE_HOUR = re.compile(r"^\s*(\d{1,2})(?::(\d{2}))?\s*(AM|PM)\s*$", re.IGNORECASE)
_TWENTY_FOUR_HOUR = re.compile(r"^\s*(\d{1,2}):(\d{2})\s*$")


def _parse_12h(value: str) -> int | None:
    match = _TWELVE_HOUR.match(value)
    if not match:
        return None
    hours = int(match.group(1))
    minutes = int(match.group(2) or "0")
    if not 1 <= hours <= 12 or not 0 <= minutes <= 59:
        return None
    if match.group(3).upper() == "AM":
        hours = 0 if hours == 12 else hours
    elif hours != 12:
        hours += 12
    return hours * 60 + minutes


def _parse_24h(value: str) -> int | None:
    match = _TWENTY_FOUR_HOUR.match(value)
    if not match:
        return None
    hours, minutes = int(match.group(1)), int(match.group(2))
    if not 0 <= hours <= 23 or not 0 <= minutes <= 59:
        return None
    return hours * 60 + minutes


TIME_FORMATS: tuple[tuple[str, Callable[[str], int | None]], ...] = (
    ("h:mm a", _parse_12h),
    ("HH:mm", _parse_24h),
)


def parse_time_to_minutes(value: str | None) -> int:
    """Return the minute of day for a 12-hour or 24-hour time string."""
    raw = (value or "").strip()
    if raw:
        for _name, parser in TIME_FORMATS:
            minutes = parser(raw)
            if minutes is not None:
                return minutes
    raise TimeParseError(f"Unrecognized time: {value!r}")


def format_minutes_12h(minutes: int) -> str:
    hours24, mm = divmod(minutes % MINUTES_PER_DAY, 60)
    meridiem = "PM" if hours24 >= 12 else "AM"
    hours12 = hours24 % 12 or 12
    return f"{hours12}:{mm:02d} {meridiem}"


def format_minutes_24h(minutes: int) -> str:
    hours, mm = divmod(minutes % MINUTES_PER_DAY, 60)
    return f"{hours:02d}:{mm:02d}"


def normalize_time_to_hhmm(value: str | None) -> str:
    return format_minutes_24h(parse_time_to_minutes(value))

