"""Booking service - Creating, rescheduling and moving bookings through their lifecycle"""

import logging
from datetime import datetime, timedelta
from typing import Callable, Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from ...models import (
    ACTIVE_BOOKING_STATUSES,
    BOOKING_STATUSES,
    Booking,
    BookingService as BookingSegment,
    Client,
    Salon,
    Service,
    Staff,
)
from .conflict_validator import validate_booking_window
from .errors import (
    InvalidBookingRequest,
    OutsideWorkingHours,
    SchedulingNotFound,
    SlotConflict,
)
from .repository import SchedulingRepository
from .schemas import BookingCreate, BookingReschedule
from .transaction import run_booking_transaction

logger = logging.getLogger(__name__)

# Allowed status transitions; terminal statuses have none
STATUS_TRANSITIONS = {
    "PENDING": {"CONFIRMED", "CANCELED"},
    "CONFIRMED": {"IN_PROGRESS", "CANCELED", "NO_SHOW"},
    "IN_PROGRESS": {"COMPLETED"},
    "COMPLETED": set(),
    "CANCELED": set(),
    "NO_SHOW": set(),
}


class BookingService:
    """Service layer for booking business logic"""

    def __init__(self, db: Session, now: Callable[[], datetime] = datetime.now):
        self.db = db
        self.repo = SchedulingRepository()
        self.now = now

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def get_booking(self, booking_id: int) -> Booking:
        booking = self.db.query(Booking).filter(Booking.id == booking_id).first()
        if not booking:
            raise SchedulingNotFound("Booking not found")
        return booking

    def list_bookings(
        self,
        salon_id: Optional[int] = None,
        staff_id: Optional[int] = None,
        status: Optional[str] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> list[Booking]:
        """List bookings, optionally by salon, staff (segments included), status and window"""
        query = self.db.query(Booking)
        if salon_id is not None:
            query = query.filter(Booking.salon_id == salon_id)
        if staff_id is not None:
            query = query.filter(
                or_(
                    Booking.staff_id == staff_id,
                    Booking.booking_services.any(BookingSegment.staff_id == staff_id),
                )
            )
        if status:
            query = query.filter(Booking.status == status.upper())
        if start is not None:
            query = query.filter(Booking.end_time > start)
        if end is not None:
            query = query.filter(Booking.start_time < end)
        return query.order_by(Booking.start_time).all()

    # ------------------------------------------------------------------
    # Creation
    # ------------------------------------------------------------------

    def _get_salon(self, db: Session, salon_id: int) -> Salon:
        salon = self.repo.get_salon(db, salon_id)
        if not salon:
            raise SchedulingNotFound("Salon not found")
        if not salon.is_active:
            raise InvalidBookingRequest("Salon is not accepting bookings")
        return salon

    def _get_service(self, db: Session, salon: Salon, service_id: int) -> Service:
        service = self.repo.get_service(db, service_id, salon.id)
        if not service:
            raise SchedulingNotFound(f"Service {service_id} not found")
        if not service.is_active:
            raise InvalidBookingRequest(f"Service {service.name} is not available")
        return service

    def _assign_staff(
        self,
        db: Session,
        salon: Salon,
        staff_id: Optional[int],
        start: datetime,
        end: datetime,
        exclude_booking_id: Optional[int] = None,
    ) -> Staff:
        """Validate the window for the requested staff member, or find the first free one"""
        if staff_id is not None:
            staff = self.repo.get_staff(db, staff_id, salon.id)
            if not staff:
                raise SchedulingNotFound("Staff member not found")
            if not staff.is_active:
                raise InvalidBookingRequest("Staff member is not available")
            validate_booking_window(db, salon, staff.id, start, end, exclude_booking_id)
            return staff

        for staff in self.repo.get_active_staff(db, salon.id):
            try:
                validate_booking_window(db, salon, staff.id, start, end, exclude_booking_id)
            except (OutsideWorkingHours, SlotConflict):
                continue
            return staff
        raise SlotConflict("No staff member is available at this time")

    def _check_client_overlap(
        self,
        db: Session,
        client_id: int,
        start: datetime,
        end: datetime,
        exclude_booking_id: Optional[int] = None,
    ) -> None:
        query = db.query(Booking.id).filter(
            Booking.client_id == client_id,
            Booking.status.in_(ACTIVE_BOOKING_STATUSES),
            Booking.start_time < end,
            Booking.end_time > start,
        )
        if exclude_booking_id is not None:
            query = query.filter(Booking.id != exclude_booking_id)
        if query.first():
            raise SlotConflict("You already have a booking at this time")

    def create_booking(self, data: BookingCreate) -> Booking:
        """Create a single- or multi-service booking.

        Services are chained back to back from ``data.startTime``; each segment
        lasts its service duration plus the salon's processing time and is
        validated against its own staff member. The whole check-then-insert
        runs in one serializable transaction.
        """
        if not data.services:
            raise InvalidBookingRequest("At least one service is required")
        if data.startTime < self.now():
            raise InvalidBookingRequest("Cannot book a time in the past")

        logger.info(f"📥 Creating booking for client {data.clientId} at salon {data.salonId}")

        def operation(db: Session) -> Booking:
            salon = self._get_salon(db, data.salonId)
            client = db.query(Client).filter(Client.id == data.clientId).first()
            if not client:
                raise SchedulingNotFound("Client not found")

            segments = []
            cursor = data.startTime
            for item in data.services:
                service = self._get_service(db, salon, item.serviceId)
                segment_end = cursor + timedelta(
                    minutes=service.duration + (salon.processing_time or 0)
                )
                staff = self._assign_staff(db, salon, item.staffId, cursor, segment_end)
                segments.append((service, staff, cursor, segment_end))
                cursor = segment_end

            self._check_client_overlap(db, client.id, data.startTime, cursor)

            booking = Booking(
                salon_id=salon.id,
                client_id=client.id,
                start_time=data.startTime,
                end_time=cursor,
                duration=int((cursor - data.startTime).total_seconds() // 60),
                price=sum(service.price or 0 for service, _, _, _ in segments),
                status=data.status,
                notes=data.notes,
                created_at=self.now(),
            )
            if len(segments) == 1:
                service, staff, _, _ = segments[0]
                booking.staff_id = staff.id
                booking.service_id = service.id
            else:
                booking.is_multi_service = True
                booking.booking_services = [
                    BookingSegment(
                        service_id=service.id,
                        staff_id=staff.id,
                        start_time=start,
                        end_time=end,
                        duration=int((end - start).total_seconds() // 60),
                        price=service.price or 0,
                        order=order,
                    )
                    for order, (service, staff, start, end) in enumerate(segments, start=1)
                ]
            return self.repo.insert_booking(db, booking)

        booking = run_booking_transaction(self.db, operation)
        self.db.refresh(booking)
        logger.info(
            f"✅ Booking {booking.id} {booking.status.lower()}: {booking.start_time:%Y-%m-%d %H:%M}-{booking.end_time:%H:%M}"
        )
        return booking

    # ------------------------------------------------------------------
    # Changes
    # ------------------------------------------------------------------

    def update_status(self, booking_id: int, status: str) -> Booking:
        """Move a booking to ``status`` if the lifecycle allows it"""
        status = status.upper()
        if status not in BOOKING_STATUSES:
            raise InvalidBookingRequest(f"Unknown booking status: {status}")

        booking = self.get_booking(booking_id)
        if status not in STATUS_TRANSITIONS[booking.status]:
            raise InvalidBookingRequest(f"Cannot change booking from {booking.status} to {status}")

        booking.status = status
        if status == "CANCELED":
            booking.canceled_at = self.now()
        self.db.commit()
        self.db.refresh(booking)
        logger.info(f"🔄 Booking {booking.id} is now {status}")
        return booking

    def cancel_by_client(self, booking_id: int, client_id: int) -> Booking:
        booking = self.get_booking(booking_id)
        if booking.client_id != client_id:
            raise SchedulingNotFound("Booking not found")
        if booking.status in ("COMPLETED", "CANCELED"):
            raise InvalidBookingRequest(f"A {booking.status.lower()} booking cannot be canceled")
        return self.update_status(booking_id, "CANCELED")

    def reschedule(self, booking_id: int, data: BookingReschedule) -> Booking:
        """Move a booking to a new start (and optionally staff member), revalidating every segment"""
        if data.startTime < self.now():
            raise InvalidBookingRequest("Cannot move a booking into the past")

        def operation(db: Session) -> Booking:
            booking = db.query(Booking).filter(Booking.id == booking_id).first()
            if not booking:
                raise SchedulingNotFound("Booking not found")
            if booking.status not in ("PENDING", "CONFIRMED"):
                raise InvalidBookingRequest(f"A {booking.status.lower()} booking cannot be rescheduled")
            if booking.is_multi_service and data.staffId is not None:
                raise InvalidBookingRequest("Staff of a multi-service booking is set per service")

            salon = self._get_salon(db, booking.salon_id)
            shift = data.startTime - booking.start_time
            new_end = booking.end_time + shift

            if booking.is_multi_service:
                for segment in booking.booking_services:
                    self._assign_staff(
                        db, salon, segment.staff_id,
                        segment.start_time + shift, segment.end_time + shift,
                        exclude_booking_id=booking.id,
                    )
                for segment in booking.booking_services:
                    segment.start_time += shift
                    segment.end_time += shift
            else:
                staff_id = data.staffId if data.staffId is not None else booking.staff_id
                staff = self._assign_staff(
                    db, salon, staff_id, data.startTime, new_end, exclude_booking_id=booking.id
                )
                booking.staff_id = staff.id

            self._check_client_overlap(
                db, booking.client_id, data.startTime, new_end, exclude_booking_id=booking.id
            )
            booking.start_time = data.startTime
            booking.end_time = new_end
            db.flush()
            return booking

        booking = run_booking_transaction(self.db, operation)
        self.db.refresh(booking)
        logger.info(f"📆 Booking {booking.id} moved to {booking.start_time:%Y-%m-%d %H:%M}")
        return booking


def expire_pending_bookings(db: Session, now: datetime, hold_minutes: int) -> int:
    """Cancel PENDING bookings created more than ``hold_minutes`` before ``now``"""
    cutoff = now - timedelta(minutes=hold_minutes)
    stale = (
        db.query(Booking)
        .filter(Booking.status == "PENDING", Booking.created_at < cutoff)
        .all()
    )
    for booking in stale:
        booking.status = "CANCELED"
        booking.canceled_at = now
    db.commit()
    if stale:
        logger.info(f"⏰ Released {len(stale)} expired pending booking(s)")
    return len(stale)
