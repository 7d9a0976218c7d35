"""
Tests for slot generation and conflict filtering.

Default rules throughout: 15 minute slot step, 5 minute buffer.
"""

import logging

import pytest

from app.core.errors import InvalidInput
from app.core.time_format import parse_time_to_minutes
from app.services.availability_engine import (
    FAIL_CLOSED,
    BookedSlot,
    Interval,
    SchedulingRules,
    WorkingHours,
    compute_available_slots,
    generate_candidate_starts,
    occupied_interval,
    rules_from_settings,
)

RULES = SchedulingRules()


def hours(start: str, end: str) -> WorkingHours:
    return WorkingHours.from_strings(start, end)


class TestInterval:
    def test_overlapping(self):
        assert Interval(540, 575).overlaps(Interval(560, 600))

    def test_disjoint(self):
        assert not Interval(540, 575).overlaps(Interval(576, 600))
        assert not Interval(576, 600).overlaps(Interval(540, 575))

    def test_touching_edges_conflict(self):
        assert Interval(540, 600).overlaps(Interval(600, 630))
        assert Interval(600, 630).overlaps(Interval(540, 600))

    def test_occupied_interval_includes_buffer(self):
        assert occupied_interval(540, 30, 5) == Interval(540, 575)


class TestCandidates:
    def test_step_is_slot_interval_not_duration(self):
        assert generate_candidate_starts(hours("09:00", "10:00"), 15) == [540, 555, 570, 585]

    def test_zero_width_window(self):
        assert generate_candidate_starts(hours("09:00", "09:00"), 15) == []

    def test_inverted_window(self):
        assert generate_candidate_starts(hours("18:00", "09:00"), 15) == []


class TestComputeAvailableSlots:
    def test_one_hour_window_without_bookings(self):
        # 9:30 needs until 10:05 with buffer, past closing
        result = compute_available_slots(hours("09:00", "10:00"), [], 30, RULES)
        assert result.available_times == ["9:00 AM", "9:15 AM"]
        assert result.unparsed_bookings == 0

    def test_booking_at_opening_fills_short_window(self):
        bookings = [BookedSlot("9:00 AM", 30)]
        result = compute_available_slots(hours("09:00", "10:00"), bookings, 30, RULES)
        assert result.available_times == []

    def test_slots_touching_a_booking_are_rejected(self):
        # Booking occupies 10:00-10:30 including buffer; 9:30 would end exactly at 10:00
        # and 10:30 would start exactly at 10:30
        bookings = [BookedSlot("10:00 AM", 25)]
        result = compute_available_slots(hours("09:00", "12:00"), bookings, 25, RULES)
        assert result.available_times == [
            "9:00 AM",
            "9:15 AM",
            "10:45 AM",
            "11:00 AM",
            "11:15 AM",
            "11:30 AM",
        ]

    def test_legacy_24h_booking_blocks_like_12h(self):
        window = hours("09:00", "12:00")
        legacy = compute_available_slots(window, [BookedSlot("10:00", 30)], 30, RULES)
        current = compute_available_slots(window, [BookedSlot("10:00 AM", 30)], 30, RULES)
        assert legacy.available_times == current.available_times
        assert "10:00 AM" not in legacy.available_times

    def test_missing_service_duration_uses_default(self):
        window = hours("09:00", "12:00")
        without = compute_available_slots(window, [BookedSlot("10:00", None)], 15, RULES)
        explicit = compute_available_slots(window, [BookedSlot("10:00", 30)], 15, RULES)
        assert without.available_times == explicit.available_times

    def test_afternoon_slots_use_pm(self):
        result = compute_available_slots(hours("11:30", "13:00"), [], 15, RULES)
        assert result.available_times == ["11:30 AM", "11:45 AM", "12:00 PM", "12:15 PM", "12:30 PM"]

    def test_zero_width_day_has_no_slots(self):
        assert compute_available_slots(hours("09:00", "09:00"), [], 15, RULES).available_times == []

    def test_custom_rules(self):
        rules = SchedulingRules(buffer_minutes=0, slot_interval_minutes=30)
        result = compute_available_slots(hours("09:00", "10:00"), [], 30, rules)
        assert result.available_times == ["9:00 AM", "9:30 AM"]

    def test_repeated_calls_are_identical(self):
        window = hours("09:00", "18:00")
        bookings = [BookedSlot("11:00 AM", 45), BookedSlot("14:30", 60)]
        first = compute_available_slots(window, bookings, 30, RULES)
        second = compute_available_slots(window, bookings, 30, RULES)
        assert first.available_times == second.available_times

    @pytest.mark.parametrize("duration", [0, -15, True, "30", 12.5, None])
    def test_rejects_bad_duration(self, duration):
        with pytest.raises(InvalidInput):
            compute_available_slots(hours("09:00", "18:00"), [], duration, RULES)


class TestUnparseableBookingTime:
    def test_fail_open_defaults_to_opening_time(self, caplog):
        bookings = [BookedSlot("garbage", 30)]
        with caplog.at_level(logging.WARNING, logger="app.services.availability_engine"):
            result = compute_available_slots(hours("09:00", "11:00"), bookings, 30, RULES)
        assert result.available_times == ["9:45 AM", "10:00 AM", "10:15 AM"]
        assert result.unparsed_bookings == 1
        assert "garbage" in caplog.text

    def test_fail_closed_blocks_whole_day(self):
        rules = SchedulingRules(unparseable_booking_policy=FAIL_CLOSED)
        bookings = [BookedSlot("garbage", 30)]
        result = compute_available_slots(hours("09:00", "18:00"), bookings, 30, rules)
        assert result.available_times == []
        assert result.unparsed_bookings == 1


BOOKING_SETS = [
    [],
    [BookedSlot("9:00 AM", 30)],
    [BookedSlot("10:10", 20), BookedSlot("1:00 PM", 90)],
    [BookedSlot("9:50 AM", 15), BookedSlot("10:40 AM", 15), BookedSlot("17:30", 30)],
    [BookedSlot("12:00 PM", 240)],
]


@pytest.mark.parametrize("bookings", BOOKING_SETS)
@pytest.mark.parametrize("duration", [15, 30, 45, 120])
def test_returned_slots_are_ordered_fit_and_conflict_free(bookings, duration):
    window = hours("09:00", "18:00")
    buffer = RULES.buffer_minutes
    result = compute_available_slots(window, bookings, duration, RULES)
    starts = [parse_time_to_minutes(t) for t in result.available_times]

    assert starts == sorted(set(starts))
    for start in starts:
        end = start + duration + buffer
        assert end <= window.end
        for booking in bookings:
            b_start = parse_time_to_minutes(booking.start_time)
            b_end = b_start + booking.service_duration_minutes + buffer
            assert end < b_start or start > b_end


def test_rules_from_settings_reads_configuration(monkeypatch):
    from app.core.config import settings

    monkeypatch.setattr(settings, "buffer_minutes", 10)
    monkeypatch.setattr(settings, "slot_interval_minutes", 20)
    rules = rules_from_settings(settings)
    assert rules.buffer_minutes == 10
    assert rules.slot_interval_minutes == 20
