"""Conflict validator: authoritative check of a proposed booking window"""

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from ...models import Salon
from .conflict_index import ConflictIndex
from .errors import InvalidBookingRequest, OutsideWorkingHours, SlotConflict
from .repository import SchedulingRepository
from .time_calculator import Interval, format_time, interval_for

logger = logging.getLogger(__name__)


def check_interval(proposed: Interval, working: list[Interval], index: ConflictIndex) -> None:
    """Raise unless ``proposed`` fits one working interval and hits no padded booking"""
    if proposed.is_empty():
        raise InvalidBookingRequest("Booking must end after it starts")

    if not any(interval.contains(proposed) for interval in working):
        raise OutsideWorkingHours(
            f"{format_time(proposed.start)}-{format_time(proposed.end)} is outside working hours"
        )

    conflicts = index.conflicts_with(proposed)
    if conflicts:
        raise SlotConflict(
            f"{format_time(proposed.start)}-{format_time(proposed.end)} is no longer available"
        )


def validate_booking_window(
    db: Session,
    salon: Salon,
    staff_id: int,
    start: datetime,
    end: datetime,
    exclude_booking_id: Optional[int] = None,
) -> None:
    """Re-read working hours and bookings for ``staff_id`` and validate ``[start, end)``.

    Must run inside the booking transaction so the insert that follows is
    judged against the same committed state.
    """
    day = start.date()
    proposed = interval_for(start, end, day)
    working = SchedulingRepository.load_working_hours(db, salon, staff_id, day)
    index = SchedulingRepository.load_conflict_index(db, salon, staff_id, day, exclude_booking_id)
    try:
        check_interval(proposed, working, index)
    except SlotConflict:
        logger.info(f"🚫 Staff {staff_id} already booked around {start:%Y-%m-%d %H:%M}")
        raise
