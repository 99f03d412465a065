"""
Unit tests for the working-hours resolver and legacy schedule normalization.
"""

from datetime import date, datetime
from types import SimpleNamespace

import pytest

from salon_api.domain.scheduling.errors import InvalidTimeFormat, OverlappingScheduleSlots
from salon_api.domain.scheduling.legacy_schedule import (
    DaySchedule,
    SlotRange,
    from_schedule_row,
    merge_staff_rows,
    normalize_schedule,
)
from salon_api.domain.scheduling.time_calculator import Interval
from salon_api.domain.scheduling.working_hours import resolve_working_hours

MONDAY = date(2030, 6, 3)

SPLIT_DAY = DaySchedule(1, False, (SlotRange("09:00", "12:00"), SlotRange("14:00", "18:00", 1)))


def test_non_overlapping_slots_are_returned_verbatim():
    assert resolve_working_hours(SPLIT_DAY, MONDAY) == [Interval(540, 720), Interval(840, 1080)]


def test_slots_are_sorted_by_start():
    day = DaySchedule(1, False, (SlotRange("14:00", "18:00"), SlotRange("09:00", "12:00", 1)))
    assert resolve_working_hours(day, MONDAY) == [Interval(540, 720), Interval(840, 1080)]


def test_closed_day_ignores_slot_rows():
    closed = DaySchedule(1, True, (SlotRange("09:00", "12:00"),))
    assert resolve_working_hours(closed, MONDAY) == []


def test_missing_schedule_is_closed():
    assert resolve_working_hours(None, MONDAY) == []


def test_overlapping_slots_are_rejected():
    day = DaySchedule(1, False, (SlotRange("09:00", "12:00"), SlotRange("11:00", "13:00")))
    with pytest.raises(OverlappingScheduleSlots) as exc_info:
        resolve_working_hours(day, MONDAY)
    assert exc_info.value.message == "Overlapping time slots on day 1: 09:00-12:00 and 11:00-13:00"


def test_inverted_slot_is_rejected():
    day = DaySchedule(1, False, (SlotRange("12:00", "09:00"),))
    with pytest.raises(OverlappingScheduleSlots):
        resolve_working_hours(day, MONDAY)


def test_back_to_back_slots_are_allowed():
    day = DaySchedule(1, False, (SlotRange("09:00", "12:00"), SlotRange("12:00", "13:00")))
    assert resolve_working_hours(day, MONDAY) == [Interval(540, 720), Interval(720, 780)]


def test_closed_date_removes_the_whole_day():
    assert resolve_working_hours(SPLIT_DAY, MONDAY, closed_days=[MONDAY]) == []
    assert resolve_working_hours(SPLIT_DAY, MONDAY, closed_days=[date(2030, 6, 4)]) != []


def test_absence_splits_working_hours():
    absence = (datetime(2030, 6, 3, 10, 0), datetime(2030, 6, 3, 11, 0))
    assert resolve_working_hours(SPLIT_DAY, MONDAY, absences=[absence]) == [
        Interval(540, 600),
        Interval(660, 720),
        Interval(840, 1080),
    ]


def test_multi_day_absence_covers_the_day():
    absence = (datetime(2030, 6, 1, 0, 0), datetime(2030, 6, 5, 0, 0))
    assert resolve_working_hours(SPLIT_DAY, MONDAY, absences=[absence]) == []


def test_resolver_is_idempotent():
    first = resolve_working_hours(SPLIT_DAY, MONDAY)
    second = resolve_working_hours(SPLIT_DAY, MONDAY)
    assert first == second


# ----------------------------------------------------------------------------
# Legacy shapes
# ----------------------------------------------------------------------------


def test_normalize_time_slots_shape():
    day = normalize_schedule(
        {
            "dayOfWeek": 2,
            "isClosed": False,
            "timeSlots": [{"startTime": "09:00", "endTime": "12:00"}],
        }
    )
    assert day == DaySchedule(2, False, (SlotRange("09:00", "12:00", 0),))


def test_normalize_open_close_shape():
    day = normalize_schedule({"day_of_week": 3, "open_time": "10:00", "close_time": "19:00"})
    assert day.time_slots == (SlotRange("10:00", "19:00", 0),)
    assert resolve_working_hours(day, date(2030, 6, 5)) == [Interval(600, 1140)]


def test_normalize_open_day_without_hours():
    assert normalize_schedule({"dayOfWeek": 4, "isClosed": False}).time_slots == ()


def test_normalize_rejects_bad_times():
    with pytest.raises(InvalidTimeFormat):
        normalize_schedule({"dayOfWeek": 1, "openTime": "9h", "closeTime": "18:00"})


def test_normalize_requires_a_day():
    with pytest.raises(ValueError):
        normalize_schedule({"openTime": "09:00", "closeTime": "18:00"})


def test_merge_staff_rows():
    rows = [
        {"dayOfWeek": 1, "startTime": "09:00", "endTime": "12:00"},
        {"dayOfWeek": 1, "startTime": "13:00", "endTime": "17:00"},
        {"dayOfWeek": 2, "startTime": "10:00", "endTime": "16:00"},
    ]
    monday = merge_staff_rows(rows, 1)
    assert monday.time_slots == (SlotRange("09:00", "12:00", 0), SlotRange("13:00", "17:00", 1))
    assert merge_staff_rows(rows, 0) is None


def test_from_schedule_row_closed_ignores_invalid_slots():
    row = SimpleNamespace(
        day_of_week=0,
        is_closed=True,
        time_slots=[SimpleNamespace(start_time="bad", end_time="worse", order=0)],
    )
    assert from_schedule_row(row) == DaySchedule(0, True, ())


def test_from_schedule_row_orders_slots():
    row = SimpleNamespace(
        day_of_week=1,
        is_closed=False,
        time_slots=[
            SimpleNamespace(start_time="14:00", end_time="18:00", order=1),
            SimpleNamespace(start_time="09:00", end_time="12:00", order=0),
        ],
    )
    assert from_schedule_row(row).time_slots == (
        SlotRange("09:00", "12:00", 0),
        SlotRange("14:00", "18:00", 1),
    )
