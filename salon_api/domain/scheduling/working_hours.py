"""Working-hours resolver: the open intervals of one owner on one calendar date"""

import logging
from datetime import date, datetime
from typing import Iterable, Optional

from .errors import OverlappingScheduleSlots
from .legacy_schedule import DaySchedule
from .time_calculator import Interval, format_time, interval_for, parse_time, subtract

logger = logging.getLogger(__name__)


def schedule_intervals(schedule: DaySchedule) -> list[Interval]:
    """Return a schedule's time slots as sorted intervals, rejecting overlaps.

    Overlapping or inverted slots are a configuration error for an admin to
    fix; they are never merged.
    """
    intervals = []
    for slot in schedule.time_slots:
        interval = Interval(parse_time(slot.start_time), parse_time(slot.end_time))
        if interval.is_empty():
            raise OverlappingScheduleSlots(
                f"Time slot {slot.start_time}-{slot.end_time} must start before it ends"
            )
        intervals.append(interval)

    intervals.sort()
    for current, following in zip(intervals, intervals[1:]):
        if current.end > following.start:
            raise OverlappingScheduleSlots(
                f"Overlapping time slots on day {schedule.day_of_week}: "
                f"{format_time(current.start)}-{format_time(current.end)} and "
                f"{format_time(following.start)}-{format_time(following.end)}"
            )
    return intervals


def resolve_working_hours(
    schedule: Optional[DaySchedule],
    day: date,
    closed_days: Iterable[date] = (),
    absences: Iterable[tuple[datetime, datetime]] = (),
) -> list[Interval]:
    """Resolve the bookable open intervals for ``day``.

    Args:
        schedule: The owner's normalized schedule for the weekday of ``day``,
            or None when no schedule row exists.
        day: The calendar date the intervals are anchored to.
        closed_days: One-off closure dates of the salon.
        absences: Approved staff absences as (start, end) datetimes.

    Returns:
        Sorted, non-overlapping intervals in minutes since ``day`` midnight.
        An empty list means closed all day.

    Raises:
        OverlappingScheduleSlots: If the schedule's slots overlap.
    """
    if schedule is None or schedule.is_closed:
        return []

    if day in set(closed_days):
        logger.debug(f"{day} is a closed day")
        return []

    intervals = schedule_intervals(schedule)
    for start, end in absences:
        intervals = subtract(intervals, interval_for(start, end, day))
    return intervals
