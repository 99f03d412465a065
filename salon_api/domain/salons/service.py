"""Salon service - Business logic for salon configuration"""

import logging
from datetime import date, datetime
from typing import Callable, Optional

from sqlalchemy.orm import Session

from ...models import Absence, ClosedDay, Salon, Schedule, Service, Staff, TimeSlot
from ..scheduling.errors import (
    ConfigurationConflict,
    InvalidBookingRequest,
    SchedulingNotFound,
)
from ..scheduling.legacy_schedule import normalize_schedule
from ..scheduling.working_hours import schedule_intervals
from .repository import SalonRepository
from .schemas import (
    AbsenceCreate,
    ClosedDayCreate,
    SalonCreate,
    SalonUpdate,
    ScheduleUpsert,
    ServiceCreate,
    ServiceUpdate,
    StaffCreate,
    StaffUpdate,
)

logger = logging.getLogger(__name__)

# Weekly hours a new salon starts with (0 = Sunday, closed)
DEFAULT_WEEKLY_HOURS = {
    0: [],
    1: [("09:00", "12:00"), ("14:00", "18:00")],
    2: [("09:00", "12:00"), ("14:00", "18:00")],
    3: [("09:00", "12:00"), ("14:00", "18:00")],
    4: [("09:00", "12:00"), ("14:00", "18:00")],
    5: [("09:00", "12:00"), ("14:00", "18:00")],
    6: [("09:00", "17:00")],
}


def default_schedules() -> list[Schedule]:
    return [
        Schedule(
            day_of_week=day,
            is_closed=not slots,
            time_slots=[
                TimeSlot(start_time=start, end_time=end, order=order)
                for order, (start, end) in enumerate(slots)
            ],
        )
        for day, slots in DEFAULT_WEEKLY_HOURS.items()
    ]


def validate_day_slots(day_of_week: int, data: ScheduleUpsert) -> list[tuple[str, str]]:
    """Check a day's time slots and return them sorted by start time.

    Raises InvalidTimeFormat for malformed times and OverlappingScheduleSlots
    for overlapping or inverted ranges.
    """
    if data.isClosed:
        return []
    if not data.timeSlots:
        raise InvalidBookingRequest("An open day needs at least one time slot")

    day = normalize_schedule(
        {
            "dayOfWeek": day_of_week,
            "isClosed": False,
            "timeSlots": [
                {"startTime": slot.startTime, "endTime": slot.endTime} for slot in data.timeSlots
            ],
        }
    )
    schedule_intervals(day)
    return sorted((slot.start_time, slot.end_time) for slot in day.time_slots)


def purge_past_closed_days(db: Session, today: date) -> int:
    """Delete closed days dated before ``today``"""
    count = SalonRepository.delete_closed_days_before(db, today)
    if count:
        logger.info(f"🧹 Removed {count} past closed day(s)")
    return count


class SalonService:
    """Service layer for salon, staff, service and calendar configuration"""

    def __init__(self, db: Session, now: Callable[[], datetime] = datetime.now):
        self.db = db
        self.repo = SalonRepository()
        self.now = now

    # Salons
    def get_salon(self, salon_id: int) -> Salon:
        salon = self.repo.get_salon(self.db, salon_id)
        if not salon:
            raise SchedulingNotFound("Salon not found")
        return salon

    def create_salon(self, data: SalonCreate) -> Salon:
        """Create a salon with the default weekly schedule"""
        if self.repo.get_salon_by_slug(self.db, data.slug):
            raise ConfigurationConflict(f"Slug '{data.slug}' is already taken")

        salon = self.repo.create_salon(
            self.db,
            default_schedules(),
            name=data.name,
            slug=data.slug,
            address=data.address,
            city=data.city,
            phone=data.phone,
            buffer_before=data.bufferBefore,
            buffer_after=data.bufferAfter,
            processing_time=data.processingTime,
        )
        logger.info(f"✅ Salon {salon.id} ({salon.slug}) created with default schedules")
        return salon

    def update_salon(self, salon_id: int, data: SalonUpdate) -> Salon:
        salon = self.get_salon(salon_id)
        return self.repo.update(
            self.db,
            salon,
            name=data.name,
            address=data.address,
            city=data.city,
            phone=data.phone,
            buffer_before=data.bufferBefore,
            buffer_after=data.bufferAfter,
            processing_time=data.processingTime,
            is_active=data.isActive,
        )

    # Staff
    def get_staff(self, salon_id: int, staff_id: int) -> Staff:
        staff = self.repo.get_staff(self.db, staff_id, salon_id)
        if not staff:
            raise SchedulingNotFound("Staff member not found")
        return staff

    def list_staff(self, salon_id: int, include_inactive: bool = False) -> list[Staff]:
        self.get_salon(salon_id)
        return self.repo.list_staff(self.db, salon_id, include_inactive)

    def create_staff(self, salon_id: int, data: StaffCreate) -> Staff:
        self.get_salon(salon_id)
        return self.repo.create_staff(
            self.db,
            salon_id,
            first_name=data.firstName,
            last_name=data.lastName,
            email=data.email,
            specialties=data.specialties,
            role=data.role,
        )

    def update_staff(self, salon_id: int, staff_id: int, data: StaffUpdate) -> Staff:
        staff = self.get_staff(salon_id, staff_id)
        return self.repo.update(
            self.db,
            staff,
            first_name=data.firstName,
            last_name=data.lastName,
            email=data.email,
            specialties=data.specialties,
            is_active=data.isActive,
        )

    # Services
    def list_services(self, salon_id: int, include_inactive: bool = False) -> list[Service]:
        self.get_salon(salon_id)
        return self.repo.list_services(self.db, salon_id, include_inactive)

    def create_service(self, salon_id: int, data: ServiceCreate) -> Service:
        self.get_salon(salon_id)
        return self.repo.create_service(
            self.db,
            salon_id,
            name=data.name,
            duration=data.duration,
            price=data.price,
            category=data.category,
            description=data.description,
        )

    def update_service(self, salon_id: int, service_id: int, data: ServiceUpdate) -> Service:
        service = self.repo.get_service(self.db, service_id, salon_id)
        if not service:
            raise SchedulingNotFound("Service not found")
        return self.repo.update(
            self.db,
            service,
            name=data.name,
            duration=data.duration,
            price=data.price,
            category=data.category,
            description=data.description,
            is_active=data.isActive,
        )

    # Schedules
    def list_schedules(self, salon_id: int, staff_id: Optional[int] = None) -> list[Schedule]:
        self.get_salon(salon_id)
        if staff_id is not None:
            self.get_staff(salon_id, staff_id)
        return self.repo.list_schedules(self.db, salon_id=salon_id, staff_id=staff_id)

    def upsert_schedule(
        self,
        salon_id: int,
        day_of_week: int,
        data: ScheduleUpsert,
        staff_id: Optional[int] = None,
    ) -> Schedule:
        """Replace the salon's (or a staff member's) hours for one weekday"""
        self.get_salon(salon_id)
        if staff_id is not None:
            self.get_staff(salon_id, staff_id)

        slots = validate_day_slots(day_of_week, data)
        schedule = self.repo.replace_schedule(
            self.db,
            day_of_week,
            data.isClosed,
            slots,
            salon_id=None if staff_id is not None else salon_id,
            staff_id=staff_id,
        )
        owner = f"staff {staff_id}" if staff_id is not None else f"salon {salon_id}"
        logger.info(f"🗓️ Schedule for {owner} on day {day_of_week} updated")
        return schedule

    def reset_staff_schedules(self, salon_id: int, staff_id: int) -> int:
        """Drop a staff member's own hours so they follow the salon schedule again"""
        self.get_staff(salon_id, staff_id)
        return self.repo.delete_staff_schedules(self.db, staff_id)

    # Closed days
    def list_closed_days(self, salon_id: int, from_date: Optional[date] = None) -> list[ClosedDay]:
        self.get_salon(salon_id)
        return self.repo.list_closed_days(self.db, salon_id, from_date)

    def create_closed_day(self, salon_id: int, data: ClosedDayCreate) -> ClosedDay:
        self.get_salon(salon_id)
        if data.date < self.now().date():
            raise InvalidBookingRequest("Cannot close a day in the past")
        if self.repo.find_closed_day(self.db, salon_id, data.date):
            raise ConfigurationConflict(f"{data.date} is already a closed day")
        closed_day = self.repo.create_closed_day(self.db, salon_id, data.date, data.reason)
        logger.info(f"🚪 Salon {salon_id} closed on {data.date}")
        return closed_day

    def delete_closed_day(self, salon_id: int, closed_day_id: int) -> None:
        closed_day = self.repo.get_closed_day(self.db, closed_day_id, salon_id)
        if not closed_day:
            raise SchedulingNotFound("Closed day not found")
        self.repo.delete(self.db, closed_day)

    def purge_past_closed_days(self) -> int:
        return purge_past_closed_days(self.db, self.now().date())

    # Absences
    def list_absences(
        self, salon_id: int, staff_id: Optional[int] = None, status: Optional[str] = None
    ) -> list[Absence]:
        self.get_salon(salon_id)
        return self.repo.list_absences(self.db, salon_id, staff_id, status)

    def create_absence(self, salon_id: int, data: AbsenceCreate) -> Absence:
        """Request an absence; it blocks the calendar once approved"""
        staff = self.get_staff(salon_id, data.staffId)
        if data.endDate < data.startDate:
            raise InvalidBookingRequest("Absence end must not be before its start")
        if self.repo.find_overlapping_absence(self.db, staff.id, data.startDate, data.endDate):
            raise ConfigurationConflict("This absence overlaps an existing one")

        return self.repo.create_absence(
            self.db,
            staff_id=staff.id,
            salon_id=salon_id,
            type=data.type,
            start_date=data.startDate,
            end_date=data.endDate,
            reason=data.reason,
            notes=data.notes,
        )

    def decide_absence(
        self, salon_id: int, absence_id: int, approve: bool, decided_by: Optional[str] = None
    ) -> Absence:
        absence = self.repo.get_absence(self.db, absence_id, salon_id)
        if not absence:
            raise SchedulingNotFound("Absence not found")
        if absence.status != "PENDING":
            raise InvalidBookingRequest(f"Absence is already {absence.status.lower()}")

        status = "APPROVED" if approve else "REJECTED"
        absence = self.repo.update(
            self.db, absence, status=status, approved_by=decided_by, approved_at=self.now()
        )
        logger.info(f"📝 Absence {absence.id} {status.lower()}")
        return absence
