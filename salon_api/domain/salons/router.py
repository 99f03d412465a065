"""Salon router - FastAPI endpoints for salon configuration"""

import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.orm import Session

from ...database import get_db
from .schemas import (
    AbsenceCreate,
    AbsenceDecision,
    AbsenceResponse,
    ClosedDayCreate,
    ClosedDayResponse,
    SalonCreate,
    SalonResponse,
    SalonUpdate,
    ScheduleResponse,
    ScheduleUpsert,
    ServiceCreate,
    ServiceResponse,
    ServiceUpdate,
    StaffCreate,
    StaffResponse,
    StaffUpdate,
    TimeSlotResponse,
)
from .service import SalonService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/salons", tags=["Salons"])


def get_salon_service(db: Session = Depends(get_db)) -> SalonService:
    """Dependency injection for SalonService"""
    return SalonService(db)


def _salon(s) -> SalonResponse:
    return SalonResponse(
        id=s.id,
        name=s.name,
        slug=s.slug,
        address=s.address,
        city=s.city,
        phone=s.phone,
        bufferBefore=s.buffer_before,
        bufferAfter=s.buffer_after,
        processingTime=s.processing_time,
        isActive=s.is_active,
    )


def _staff(s) -> StaffResponse:
    return StaffResponse(
        id=s.id,
        salonId=s.salon_id,
        firstName=s.first_name,
        lastName=s.last_name,
        email=s.email,
        specialties=s.specialties,
        role=s.role,
        isActive=s.is_active,
    )


def _service(s) -> ServiceResponse:
    return ServiceResponse(
        id=s.id,
        salonId=s.salon_id,
        name=s.name,
        category=s.category,
        description=s.description,
        duration=s.duration,
        price=s.price,
        isActive=s.is_active,
    )


def _schedule(s) -> ScheduleResponse:
    return ScheduleResponse(
        id=s.id,
        salonId=s.salon_id,
        staffId=s.staff_id,
        dayOfWeek=s.day_of_week,
        isClosed=s.is_closed,
        timeSlots=[
            TimeSlotResponse(startTime=t.start_time, endTime=t.end_time, order=t.order)
            for t in s.time_slots
        ],
    )


def _absence(a) -> AbsenceResponse:
    return AbsenceResponse(
        id=a.id,
        staffId=a.staff_id,
        salonId=a.salon_id,
        type=a.type,
        startDate=a.start_date,
        endDate=a.end_date,
        status=a.status,
        reason=a.reason,
        notes=a.notes,
        approvedBy=a.approved_by,
        approvedAt=a.approved_at,
    )


# ============================================================================
# SALONS
# ============================================================================


@router.post("", response_model=SalonResponse, status_code=201)
async def create_salon(data: SalonCreate, service: SalonService = Depends(get_salon_service)):
    """Create a salon; it starts with the default weekly hours"""
    return _salon(service.create_salon(data))


@router.get("/{salon_id}", response_model=SalonResponse)
async def get_salon(salon_id: int, service: SalonService = Depends(get_salon_service)):
    return _salon(service.get_salon(salon_id))


@router.patch("/{salon_id}", response_model=SalonResponse)
async def update_salon(
    salon_id: int, data: SalonUpdate, service: SalonService = Depends(get_salon_service)
):
    return _salon(service.update_salon(salon_id, data))


# ============================================================================
# SCHEDULES
# ============================================================================


@router.get("/{salon_id}/schedules", response_model=list[ScheduleResponse])
async def list_schedules(salon_id: int, service: SalonService = Depends(get_salon_service)):
    return [_schedule(s) for s in service.list_schedules(salon_id)]


@router.put("/{salon_id}/schedules/{day_of_week}", response_model=ScheduleResponse)
async def upsert_schedule(
    salon_id: int,
    data: ScheduleUpsert,
    day_of_week: int = Path(..., ge=0, le=6),
    service: SalonService = Depends(get_salon_service),
):
    """Set the salon's hours for one weekday (0 = Sunday)"""
    return _schedule(service.upsert_schedule(salon_id, day_of_week, data))


# ============================================================================
# STAFF
# ============================================================================


@router.get("/{salon_id}/staff", response_model=list[StaffResponse])
async def list_staff(
    salon_id: int,
    includeInactive: bool = Query(False),
    service: SalonService = Depends(get_salon_service),
):
    return [_staff(s) for s in service.list_staff(salon_id, includeInactive)]


@router.post("/{salon_id}/staff", response_model=StaffResponse, status_code=201)
async def create_staff(
    salon_id: int, data: StaffCreate, service: SalonService = Depends(get_salon_service)
):
    return _staff(service.create_staff(salon_id, data))


@router.patch("/{salon_id}/staff/{staff_id}", response_model=StaffResponse)
async def update_staff(
    salon_id: int,
    staff_id: int,
    data: StaffUpdate,
    service: SalonService = Depends(get_salon_service),
):
    """Update a staff member, including activating or deactivating them"""
    return _staff(service.update_staff(salon_id, staff_id, data))


@router.get("/{salon_id}/staff/{staff_id}/schedules", response_model=list[ScheduleResponse])
async def list_staff_schedules(
    salon_id: int, staff_id: int, service: SalonService = Depends(get_salon_service)
):
    return [_schedule(s) for s in service.list_schedules(salon_id, staff_id)]


@router.put("/{salon_id}/staff/{staff_id}/schedules/{day_of_week}", response_model=ScheduleResponse)
async def upsert_staff_schedule(
    salon_id: int,
    staff_id: int,
    data: ScheduleUpsert,
    day_of_week: int = Path(..., ge=0, le=6),
    service: SalonService = Depends(get_salon_service),
):
    """Give a staff member their own hours for one weekday"""
    return _schedule(service.upsert_schedule(salon_id, day_of_week, data, staff_id=staff_id))


@router.delete("/{salon_id}/staff/{staff_id}/schedules")
async def reset_staff_schedules(
    salon_id: int, staff_id: int, service: SalonService = Depends(get_salon_service)
):
    """Make a staff member follow the salon hours again"""
    deleted = service.reset_staff_schedules(salon_id, staff_id)
    return {"message": "Staff schedule reset to salon hours", "deletedCount": deleted}


# ============================================================================
# SERVICES
# ============================================================================


@router.get("/{salon_id}/services", response_model=list[ServiceResponse])
async def list_services(
    salon_id: int,
    includeInactive: bool = Query(False),
    service: SalonService = Depends(get_salon_service),
):
    return [_service(s) for s in service.list_services(salon_id, includeInactive)]


@router.post("/{salon_id}/services", response_model=ServiceResponse, status_code=201)
async def create_service(
    salon_id: int, data: ServiceCreate, service: SalonService = Depends(get_salon_service)
):
    return _service(service.create_service(salon_id, data))


@router.patch("/{salon_id}/services/{service_id}", response_model=ServiceResponse)
async def update_service(
    salon_id: int,
    service_id: int,
    data: ServiceUpdate,
    service: SalonService = Depends(get_salon_service),
):
    return _service(service.update_service(salon_id, service_id, data))


# ============================================================================
# CLOSED DAYS
# ============================================================================


@router.get("/{salon_id}/closed-days", response_model=list[ClosedDayResponse])
async def list_closed_days(
    salon_id: int,
    fromDate: Optional[date] = Query(None),
    service: SalonService = Depends(get_salon_service),
):
    return [
        ClosedDayResponse(id=c.id, salonId=c.salon_id, date=c.date, reason=c.reason)
        for c in service.list_closed_days(salon_id, fromDate)
    ]


@router.post("/{salon_id}/closed-days", response_model=ClosedDayResponse, status_code=201)
async def create_closed_day(
    salon_id: int, data: ClosedDayCreate, service: SalonService = Depends(get_salon_service)
):
    c = service.create_closed_day(salon_id, data)
    return ClosedDayResponse(id=c.id, salonId=c.salon_id, date=c.date, reason=c.reason)


@router.delete("/{salon_id}/closed-days/{closed_day_id}")
async def delete_closed_day(
    salon_id: int, closed_day_id: int, service: SalonService = Depends(get_salon_service)
):
    service.delete_closed_day(salon_id, closed_day_id)
    return {"message": "Closed day deleted"}


# ============================================================================
# ABSENCES
# ============================================================================


@router.get("/{salon_id}/absences", response_model=list[AbsenceResponse])
async def list_absences(
    salon_id: int,
    staffId: Optional[int] = Query(None),
    status: Optional[str] = Query(None),
    service: SalonService = Depends(get_salon_service),
):
    return [_absence(a) for a in service.list_absences(salon_id, staffId, status)]


@router.post("/{salon_id}/absences", response_model=AbsenceResponse, status_code=201)
async def create_absence(
    salon_id: int, data: AbsenceCreate, service: SalonService = Depends(get_salon_service)
):
    return _absence(service.create_absence(salon_id, data))


@router.post("/{salon_id}/absences/{absence_id}/decision", response_model=AbsenceResponse)
async def decide_absence(
    salon_id: int,
    absence_id: int,
    data: AbsenceDecision,
    service: SalonService = Depends(get_salon_service),
):
    """Approve or reject a pending absence"""
    return _absence(service.decide_absence(salon_id, absence_id, data.approve, data.decidedBy))
