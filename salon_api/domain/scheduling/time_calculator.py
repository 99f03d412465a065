"""Time-of-day arithmetic for the availability engine.

All calculations are done in integer minutes. A time of day is minutes since
midnight; a point in time relative to a calendar date is minutes since that
date's midnight, which may be negative (previous day) or past 1440 (next day).
Intervals are half-open: ``[start, end)``.
"""

import re
from datetime import date, datetime, time, timedelta
from typing import NamedTuple

from .errors import InvalidTimeFormat

MINUTES_PER_DAY = 24 * 60

_TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")


class Interval(NamedTuple):
    start: int
    end: int

    def is_empty(self) -> bool:
        return self.end <= self.start

    def contains(self, other: "Interval") -> bool:
        return self.start <= other.start and other.end <= self.end


def parse_time(value: str) -> int:
    """Convert "HH:MM" to minutes since midnight"""
    if not isinstance(value, str):
        raise InvalidTimeFormat(f"Invalid time {value!r}, expected HH:MM")
    match = _TIME_PATTERN.match(value.strip())
    if not match:
        raise InvalidTimeFormat(f"Invalid time {value!r}, expected HH:MM")
    return int(match.group(1)) * 60 + int(match.group(2))


def format_time(minutes: int) -> str:
    """Convert minutes since midnight to "HH:MM" (wraps past midnight)"""
    minutes = minutes % MINUTES_PER_DAY
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def add_minutes(value: str, minutes: int) -> str:
    return format_time(parse_time(value) + minutes)


def has_overlap(a: Interval, b: Interval) -> bool:
    """Half-open overlap test; back-to-back and zero-length intervals never overlap"""
    if a.is_empty() or b.is_empty():
        return False
    return a.start < b.end and b.start < a.end


def day_start(day: date) -> datetime:
    return datetime.combine(day, time.min)


def to_day_minutes(moment: datetime, day: date) -> int:
    """Minutes between ``day`` midnight and ``moment``"""
    return int((moment - day_start(day)).total_seconds() // 60)


def from_day_minutes(day: date, minutes: int) -> datetime:
    return day_start(day) + timedelta(minutes=minutes)


def interval_for(start: datetime, end: datetime, day: date) -> Interval:
    return Interval(to_day_minutes(start, day), to_day_minutes(end, day))


def subtract(intervals: list[Interval], removed: Interval) -> list[Interval]:
    """Remove ``removed`` from each interval, splitting where needed"""
    result = []
    for interval in intervals:
        if not has_overlap(interval, removed):
            result.append(interval)
            continue
        if interval.start < removed.start:
            result.append(Interval(interval.start, removed.start))
        if removed.end < interval.end:
            result.append(Interval(removed.end, interval.end))
    return result


def day_of_week(day: date) -> int:
    """0 = Sunday ... 6 = Saturday"""
    return (day.weekday() + 1) % 7
