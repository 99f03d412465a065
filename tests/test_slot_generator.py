"""
Unit tests for slot generation.
"""

import pytest

from salon_api.domain.scheduling.slot_generator import generate_slots
from salon_api.domain.scheduling.time_calculator import Interval, format_time, parse_time


def hhmm(slots):
    return [format_time(t) for t in slots]


def test_lunch_gap_grid():
    """Test the 30 minute grid over split hours with no bookings."""
    working = [Interval(parse_time("10:00"), parse_time("12:00")), Interval(parse_time("13:00"), parse_time("19:00"))]

    slots = hhmm(generate_slots(working, [], total_duration=30, granularity=30))

    assert slots[:5] == ["10:00", "10:30", "11:00", "11:30", "13:00"]
    assert slots[-1] == "18:30"
    assert len(slots) == 4 + 12
    assert "12:00" not in slots and "12:30" not in slots


def test_slot_never_runs_into_the_gap():
    working = [Interval(600, 720), Interval(780, 1140)]
    slots = generate_slots(working, [], total_duration=45, granularity=15)

    for start in slots:
        assert any(w.start <= start and start + 45 <= w.end for w in working)
    assert "11:15" in hhmm(slots)
    assert "11:30" not in hhmm(slots)


@pytest.mark.parametrize("granularity,expected", [(10, "10:40"), (30, "11:00")])
def test_buffered_booking_pushes_next_slot(granularity, expected):
    """Test the first start after a [10:00, 10:30) booking padded by 10 minutes each side."""
    working = [Interval(parse_time("09:00"), parse_time("18:00"))]
    occupied = [Interval(parse_time("09:50"), parse_time("10:40"))]

    slots = generate_slots(working, occupied, total_duration=30, granularity=granularity)

    assert parse_time("10:00") not in slots
    assert hhmm(s for s in slots if s >= parse_time("10:00"))[0] == expected


def test_processing_time_is_part_of_the_duration():
    working = [Interval(540, 720)]
    # 30 minutes of work + 15 of processing must end by 12:00
    slots = generate_slots(working, [], total_duration=45, granularity=15)
    assert hhmm(slots)[-1] == "11:15"


def test_no_working_hours_means_no_slots():
    assert generate_slots([], [], total_duration=30) == []


def test_fully_booked_day_has_no_slots():
    working = [Interval(540, 720)]
    assert generate_slots(working, [Interval(500, 800)], total_duration=30) == []


def test_generator_is_idempotent():
    working = [Interval(540, 720), Interval(840, 1080)]
    occupied = [Interval(590, 640)]
    assert generate_slots(working, occupied, 30, 15) == generate_slots(working, occupied, 30, 15)


def test_invalid_duration_is_rejected():
    with pytest.raises(ValueError):
        generate_slots([Interval(540, 720)], [], total_duration=0)
