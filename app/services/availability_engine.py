"""Bookable start times for one barber on one day.

Candidates are generated every `slot_interval_minutes` from the start of
working hours, independent of the requested service length, so slot alignment
is the same for every service. The requested duration only filters: a
candidate survives when [start, start + duration + buffer) fits inside
working hours and does not touch any booking's occupied interval.
"""

import logging
from dataclasses import dataclass, field
from typing import Literal

from app.core.config import Settings, settings
from app.core.errors import InvalidInput, TimeParseError
from app.core.time_format import format_minutes_12h, parse_time_to_minutes

logger = logging.getLogger(__name__)

FAIL_OPEN = "fail_open"
FAIL_CLOSED = "fail_closed"


@dataclass(frozen=True)
class SchedulingRules:
    buffer_minutes: int = 5
    slot_interval_minutes: int = 15
    default_booking_duration_minutes: int = 30
    unparseable_booking_policy: Literal["fail_open", "fail_closed"] = FAIL_OPEN


def rules_from_settings(s: Settings = settings) -> SchedulingRules:
    return SchedulingRules(
        buffer_minutes=s.buffer_minutes,
        slot_interval_minutes=s.slot_interval_minutes,
        default_booking_duration_minutes=s.default_booking_duration_minutes,
        unparseable_booking_policy=s.unparseable_booking_policy,
    )


@dataclass(frozen=True)
class Interval:
    """Occupied range in minutes of day. Edges are compared inclusively, so an
    interval ending exactly where another starts still conflicts."""

    start: int
    end: int

    def overlaps(self, other: "Interval") -> bool:
        return self.start <= other.end and other.start <= self.end


@dataclass(frozen=True)
class WorkingHours:
    start: int
    end: int

    @classmethod
    def from_strings(cls, start_time: str, end_time: str) -> "WorkingHours":
        return cls(parse_time_to_minutes(start_time), parse_time_to_minutes(end_time))


@dataclass(frozen=True)
class BookedSlot:
    start_time: str
    service_duration_minutes: int | None = None


@dataclass
class SlotComputation:
    available_times: list[str] = field(default_factory=list)
    unparsed_bookings: int = 0


def validate_duration(value: object) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise InvalidInput("serviceDurationMinutes must be a positive number")
    return value


def generate_candidate_starts(hours: WorkingHours, slot_interval_minutes: int) -> list[int]:
    return list(range(hours.start, hours.end, slot_interval_minutes))


def occupied_interval(start: int, duration_minutes: int, buffer_minutes: int) -> Interval:
    return Interval(start, start + duration_minutes + buffer_minutes)


def booking_interval(booking: BookedSlot, hours: WorkingHours, rules: SchedulingRules) -> tuple[Interval, bool]:
    """Occupied interval of an existing booking, and whether its time had to be defaulted."""
    duration = booking.service_duration_minutes or rules.default_booking_duration_minutes
    try:
        start = parse_time_to_minutes(booking.start_time)
    except TimeParseError:
        if rules.unparseable_booking_policy == FAIL_CLOSED:
            logger.warning(
                "Unparseable booking time %r; blocking the whole working day", booking.start_time
            )
            return Interval(hours.start, hours.end), True
        logger.warning(
            "Unparseable booking time %r; treating it as starting at opening time", booking.start_time
        )
        return occupied_interval(hours.start, duration, rules.buffer_minutes), True
    return occupied_interval(start, duration, rules.buffer_minutes), False


def compute_available_slots(
    hours: WorkingHours,
    bookings: list[BookedSlot],
    service_duration_minutes: int,
    rules: SchedulingRules,
) -> SlotComputation:
    duration = validate_duration(service_duration_minutes)
    result = SlotComputation()

    blocked: list[Interval] = []
    for booking in bookings:
        interval, defaulted = booking_interval(booking, hours, rules)
        blocked.append(interval)
        if defaulted:
            result.unparsed_bookings += 1

    for start in generate_candidate_starts(hours, rules.slot_interval_minutes):
        candidate = occupied_interval(start, duration, rules.buffer_minutes)
        if candidate.end > hours.end:
            continue
        if any(candidate.overlaps(b) for b in blocked):
            continue
        result.available_times.append(format_minutes_12h(start))
    return result
