"""Normalize every stored schedule shape into a single ``DaySchedule``.

Schedules have been stored three ways over time:

* the current shape: ``is_closed`` plus a ``time_slots`` collection
* the salon legacy shape: a single ``open_time`` / ``close_time`` pair per day
* the staff legacy shape: one ``start_time`` / ``end_time`` row per working day

Everything past this module only sees ``DaySchedule``.
"""

from typing import Any, NamedTuple, Optional

from .errors import InvalidTimeFormat
from .time_calculator import parse_time


class SlotRange(NamedTuple):
    start_time: str
    end_time: str
    order: int = 0


class DaySchedule(NamedTuple):
    day_of_week: int
    is_closed: bool
    time_slots: tuple[SlotRange, ...] = ()


def _pick(record: dict[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in record and record[key] not in (None, ""):
            return record[key]
    return None


def _slot(start: Any, end: Any, order: int) -> SlotRange:
    if not isinstance(start, str) or not isinstance(end, str):
        raise InvalidTimeFormat(f"Invalid time range {start!r}-{end!r}, expected HH:MM")
    # Validate early so a bad row is reported at the boundary
    parse_time(start)
    parse_time(end)
    return SlotRange(start.strip(), end.strip(), order)


def from_schedule_row(schedule) -> DaySchedule:
    """Build a DaySchedule from a ``models.Schedule`` row"""
    if schedule.is_closed:
        return DaySchedule(schedule.day_of_week, True, ())
    slots = tuple(
        _slot(slot.start_time, slot.end_time, slot.order or 0)
        for slot in sorted(schedule.time_slots, key=lambda s: (s.order or 0, s.start_time))
    )
    return DaySchedule(schedule.day_of_week, bool(schedule.is_closed), slots)


def normalize_schedule(record: dict[str, Any]) -> DaySchedule:
    """Build a DaySchedule from any known serialized shape (camelCase or snake_case)"""
    day = _pick(record, "day_of_week", "dayOfWeek")
    if day is None:
        raise ValueError("Schedule record has no day of week")
    day = int(day)

    is_closed = bool(_pick(record, "is_closed", "isClosed") or False)

    raw_slots = _pick(record, "time_slots", "timeSlots")
    if raw_slots is not None:
        slots = tuple(
            _slot(
                _pick(slot, "start_time", "startTime"),
                _pick(slot, "end_time", "endTime"),
                int(_pick(slot, "order") or index),
            )
            for index, slot in enumerate(raw_slots)
        )
        return DaySchedule(day, is_closed, slots)

    start = _pick(record, "open_time", "openTime", "start_time", "startTime")
    end = _pick(record, "close_time", "closeTime", "end_time", "endTime")
    if start is None and end is None:
        # An open day without any hours has nothing bookable
        return DaySchedule(day, is_closed, ())
    return DaySchedule(day, is_closed, (_slot(start, end, 0),))


def merge_staff_rows(rows: list[dict[str, Any]], day: int) -> Optional[DaySchedule]:
    """Combine legacy per-row staff hours for one weekday into a DaySchedule"""
    matching = [row for row in rows if int(_pick(row, "day_of_week", "dayOfWeek")) == day]
    if not matching:
        return None
    slots = tuple(
        _slot(
            _pick(row, "start_time", "startTime"),
            _pick(row, "end_time", "endTime"),
            index,
        )
        for index, row in enumerate(matching)
    )
    return DaySchedule(day, False, slots)
