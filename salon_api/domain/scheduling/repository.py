"""Scheduling repository - Database reads and writes behind the availability engine"""

from datetime import date, datetime, timedelta
from typing import Optional

from sqlalchemy.orm import Session

from ...models import (
    ACTIVE_BOOKING_STATUSES,
    Absence,
    Booking,
    BookingService,
    ClosedDay,
    Salon,
    Schedule,
    Service,
    Staff,
)
from .conflict_index import BookedInterval, ConflictIndex, build_conflict_index
from .legacy_schedule import DaySchedule, from_schedule_row
from .time_calculator import Interval, day_of_week, day_start
from .working_hours import resolve_working_hours


class SchedulingRepository:
    """Repository for the availability engine's database access"""

    @staticmethod
    def get_salon(db: Session, salon_id: int) -> Optional[Salon]:
        return db.query(Salon).filter(Salon.id == salon_id).first()

    @staticmethod
    def get_staff(db: Session, staff_id: int, salon_id: Optional[int] = None) -> Optional[Staff]:
        query = db.query(Staff).filter(Staff.id == staff_id)
        if salon_id is not None:
            query = query.filter(Staff.salon_id == salon_id)
        return query.first()

    @staticmethod
    def get_active_staff(db: Session, salon_id: int) -> list[Staff]:
        return (
            db.query(Staff)
            .filter(Staff.salon_id == salon_id, Staff.is_active.is_(True))
            .order_by(Staff.id)
            .all()
        )

    @staticmethod
    def get_service(db: Session, service_id: int, salon_id: Optional[int] = None) -> Optional[Service]:
        query = db.query(Service).filter(Service.id == service_id)
        if salon_id is not None:
            query = query.filter(Service.salon_id == salon_id)
        return query.first()

    @staticmethod
    def get_schedule_for_day(
        db: Session, salon_id: int, staff_id: Optional[int], weekday: int
    ) -> Optional[DaySchedule]:
        """Staff schedule first, then the salon's.

        A staff member with any schedule rows of their own is on a personal
        schedule, and a missing row for ``weekday`` means not working.
        """
        if staff_id is not None:
            staff_rows = db.query(Schedule).filter(Schedule.staff_id == staff_id).all()
            if staff_rows:
                for row in staff_rows:
                    if row.day_of_week == weekday:
                        return from_schedule_row(row)
                return None

        row = (
            db.query(Schedule)
            .filter(Schedule.salon_id == salon_id, Schedule.day_of_week == weekday)
            .first()
        )
        return from_schedule_row(row) if row else None

    @staticmethod
    def get_closed_days(db: Session, salon_id: int, start_date: date, end_date: date) -> list[date]:
        rows = (
            db.query(ClosedDay.date)
            .filter(
                ClosedDay.salon_id == salon_id,
                ClosedDay.date >= start_date,
                ClosedDay.date <= end_date,
            )
            .all()
        )
        return [row.date for row in rows]

    @staticmethod
    def get_absences(db: Session, staff_id: int, start: datetime, end: datetime) -> list[tuple[datetime, datetime]]:
        """Approved absences intersecting ``[start, end)``"""
        rows = (
            db.query(Absence)
            .filter(
                Absence.staff_id == staff_id,
                Absence.status == "APPROVED",
                Absence.start_date < end,
                Absence.end_date > start,
            )
            .order_by(Absence.start_date)
            .all()
        )
        return [(row.start_date, row.end_date) for row in rows]

    @staticmethod
    def get_active_bookings(db: Session, staff_id: int, start: datetime, end: datetime) -> list[BookedInterval]:
        """Active bookings and multi-service segments of a staff member intersecting ``[start, end)``"""
        bookings = (
            db.query(Booking.id, Booking.start_time, Booking.end_time)
            .filter(
                Booking.staff_id == staff_id,
                Booking.status.in_(ACTIVE_BOOKING_STATUSES),
                Booking.start_time < end,
                Booking.end_time > start,
            )
            .all()
        )
        segments = (
            db.query(BookingService.booking_id, BookingService.start_time, BookingService.end_time)
            .join(Booking, Booking.id == BookingService.booking_id)
            .filter(
                BookingService.staff_id == staff_id,
                Booking.status.in_(ACTIVE_BOOKING_STATUSES),
                BookingService.start_time < end,
                BookingService.end_time > start,
            )
            .all()
        )
        return sorted(
            (BookedInterval(row[0], row[1], row[2]) for row in [*bookings, *segments]),
            key=lambda booked: booked.start,
        )

    @staticmethod
    def insert_booking(db: Session, booking: Booking) -> Booking:
        """Stage a booking inside the caller's transaction"""
        db.add(booking)
        db.flush()
        return booking

    # Composed reads used by slot generation and validation
    @staticmethod
    def load_working_hours(db: Session, salon: Salon, staff_id: Optional[int], day: date) -> list[Interval]:
        """Resolved open intervals of a staff member (or the salon) on ``day``"""
        schedule = SchedulingRepository.get_schedule_for_day(db, salon.id, staff_id, day_of_week(day))
        closed_days = SchedulingRepository.get_closed_days(db, salon.id, day, day)
        absences = []
        if staff_id is not None:
            start = day_start(day)
            absences = SchedulingRepository.get_absences(db, staff_id, start, start + timedelta(days=1))
        return resolve_working_hours(schedule, day, closed_days, absences)

    @staticmethod
    def load_conflict_index(
        db: Session,
        salon: Salon,
        staff_id: int,
        day: date,
        exclude_booking_id: Optional[int] = None,
    ) -> ConflictIndex:
        """Buffer-padded occupied intervals of a staff member around ``day``"""
        # Widen the window by the buffers so a padded neighbour still blocks
        start = day_start(day) - timedelta(minutes=salon.buffer_after or 0)
        end = day_start(day) + timedelta(days=1, minutes=salon.buffer_before or 0)
        bookings = SchedulingRepository.get_active_bookings(db, staff_id, start, end)
        return build_conflict_index(
            bookings,
            day,
            buffer_before=salon.buffer_before or 0,
            buffer_after=salon.buffer_after or 0,
            exclude_booking_id=exclude_booking_id,
        )
