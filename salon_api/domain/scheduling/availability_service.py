"""Availability service - Bookable slots and working hours for the booking site"""

import logging
from datetime import date, datetime
from typing import Callable, Optional

from sqlalchemy.orm import Session

from ...config import SLOT_GRANULARITY_MINUTES
from ...models import Salon, Service
from .errors import InvalidBookingRequest, SchedulingNotFound
from .repository import SchedulingRepository
from .slot_generator import generate_slots
from .time_calculator import Interval, format_time, from_day_minutes, interval_for

logger = logging.getLogger(__name__)


class AvailabilityService:
    """Service layer for slot generation and availability checks"""

    def __init__(
        self,
        db: Session,
        granularity: int = SLOT_GRANULARITY_MINUTES,
        now: Callable[[], datetime] = datetime.now,
    ):
        self.db = db
        self.repo = SchedulingRepository()
        self.granularity = granularity
        self.now = now

    def get_salon(self, salon_id: int) -> Salon:
        salon = self.repo.get_salon(self.db, salon_id)
        if not salon:
            raise SchedulingNotFound("Salon not found")
        return salon

    def get_services(self, salon: Salon, service_ids: list[int]) -> list[Service]:
        """Resolve the requested services, all of which must be active in this salon"""
        if not service_ids:
            raise InvalidBookingRequest("At least one service is required")
        services = []
        for service_id in service_ids:
            service = self.repo.get_service(self.db, service_id, salon.id)
            if not service:
                raise SchedulingNotFound(f"Service {service_id} not found")
            if not service.is_active:
                raise InvalidBookingRequest(f"Service {service.name} is not available")
            services.append(service)
        return services

    @staticmethod
    def total_duration(salon: Salon, services: list[Service]) -> int:
        """Minutes a chain of services occupies, processing time included"""
        return sum(service.duration + (salon.processing_time or 0) for service in services)

    def _staff_ids(self, salon: Salon, staff_id: Optional[int]) -> list[int]:
        if staff_id is None:
            return [staff.id for staff in self.repo.get_active_staff(self.db, salon.id)]
        staff = self.repo.get_staff(self.db, staff_id, salon.id)
        if not staff:
            raise SchedulingNotFound("Staff member not found")
        if not staff.is_active:
            return []
        return [staff.id]

    def staff_slots(self, salon: Salon, staff_id: int, day: date, total_duration: int) -> list[int]:
        """Start times (minutes since midnight) one staff member can take on ``day``"""
        working = self.repo.load_working_hours(self.db, salon, staff_id, day)
        if not working:
            return []
        index = self.repo.load_conflict_index(self.db, salon, staff_id, day)
        return generate_slots(working, index.intervals, total_duration, self.granularity)

    def get_available_slots(
        self,
        salon_id: int,
        staff_id: Optional[int],
        service_ids: list[int],
        day: date,
    ) -> list[str]:
        """Bookable "HH:MM" start times; ``staff_id=None`` means any staff member"""
        salon = self.get_salon(salon_id)
        services = self.get_services(salon, service_ids)
        duration = self.total_duration(salon, services)

        now = self.now()
        if day < now.date():
            return []

        starts: set[int] = set()
        for candidate_staff_id in self._staff_ids(salon, staff_id):
            starts.update(self.staff_slots(salon, candidate_staff_id, day, duration))

        if day == now.date():
            starts = {t for t in starts if from_day_minutes(day, t) > now}

        slots = [format_time(t) for t in sorted(starts)]
        logger.debug(
            f"📅 {len(slots)} slots for salon {salon_id}, staff {staff_id or 'any'} on {day}"
        )
        return slots

    def get_working_hours(self, salon_id: int, staff_id: Optional[int], day: date) -> list[Interval]:
        salon = self.get_salon(salon_id)
        if staff_id is not None:
            self._staff_ids(salon, staff_id)
        return self.repo.load_working_hours(self.db, salon, staff_id, day)

    def check_availability(
        self,
        staff_id: int,
        start: datetime,
        end: datetime,
        exclude_booking_id: Optional[int] = None,
    ) -> dict:
        """Report whether ``[start, end)`` is free for a staff member, without booking it"""
        if end <= start:
            raise InvalidBookingRequest("End time must be after start time")

        staff = self.repo.get_staff(self.db, staff_id)
        if not staff:
            raise SchedulingNotFound("Staff member not found")
        salon = self.get_salon(staff.salon_id)

        day = start.date()
        proposed = interval_for(start, end, day)
        working = self.repo.load_working_hours(self.db, salon, staff.id, day)
        index = self.repo.load_conflict_index(self.db, salon, staff.id, day, exclude_booking_id)
        conflicting_ids = index.conflicts_with(proposed)
        absence = bool(self.repo.get_absences(self.db, staff.id, start, end))
        within_hours = any(interval.contains(proposed) for interval in working)

        if absence:
            reason = "absence"
        elif not within_hours:
            reason = "outside_working_hours"
        elif conflicting_ids:
            reason = "conflict"
        else:
            reason = None

        return {
            "available": reason is None,
            "reason": reason,
            "conflictingBookingIds": conflicting_ids,
            "absence": absence,
        }
