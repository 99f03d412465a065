"""Booking conflict index: the occupied, buffer-padded intervals of one staff member"""

import logging
from datetime import date, datetime
from itertools import combinations
from typing import Iterable, NamedTuple, Optional

from .time_calculator import Interval, has_overlap, interval_for

logger = logging.getLogger(__name__)


class BookedInterval(NamedTuple):
    booking_id: int
    start: datetime
    end: datetime


class ConflictIndex(NamedTuple):
    intervals: list[Interval]
    booking_ids: list[int]
    integrity_warnings: list[tuple[int, int]]

    def conflicts_with(self, candidate: Interval) -> list[int]:
        """Booking ids whose padded interval overlaps ``candidate``"""
        return [
            booking_id
            for interval, booking_id in zip(self.intervals, self.booking_ids)
            if has_overlap(candidate, interval)
        ]


def build_conflict_index(
    bookings: Iterable[BookedInterval],
    day: date,
    buffer_before: int = 0,
    buffer_after: int = 0,
    exclude_booking_id: Optional[int] = None,
) -> ConflictIndex:
    """Pad every booking with the salon buffers and sort by start.

    A new booking is accepted when its active interval misses every padded
    interval, so a stored pair is only inconsistent when each booking's
    active interval hits the other's padded one. Such pairs are reported, not
    merged. Segments of one multi-service booking are never compared.
    """
    entries = []
    for booking in bookings:
        if exclude_booking_id is not None and booking.booking_id == exclude_booking_id:
            continue
        active = interval_for(booking.start, booking.end, day)
        padded = Interval(active.start - buffer_before, active.end + buffer_after)
        entries.append((padded, booking.booking_id, active))

    entries.sort()

    warnings = []
    for first_entry, second_entry in combinations(entries, 2):
        first, first_id, first_active = first_entry
        second, second_id, second_active = second_entry
        if first_id == second_id:
            continue
        if has_overlap(first_active, second) and has_overlap(second_active, first):
            logger.warning(
                f"⚠️ Data integrity: bookings {first_id} and {second_id} overlap on {day}"
            )
            warnings.append((first_id, second_id))

    return ConflictIndex(
        intervals=[interval for interval, _, _ in entries],
        booking_ids=[booking_id for _, booking_id, _ in entries],
        integrity_warnings=warnings,
    )
