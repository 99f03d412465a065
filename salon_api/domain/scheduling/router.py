"""Scheduling routers - Availability and booking endpoints"""

import logging
from datetime import date, datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...config import (
    BOOKINGS_RATE_LIMIT,
    RATE_LIMIT_WINDOW_SECONDS,
    SLOTS_RATE_LIMIT,
)
from ...database import get_db
from ...rate_limiter import create_rate_limiter
from .availability_service import AvailabilityService
from .booking_service import BookingService
from .errors import InvalidBookingRequest
from .schemas import (
    AvailabilityCheckRequest,
    AvailabilityCheckResponse,
    BookingCreate,
    BookingReschedule,
    BookingResponse,
    BookingStatusUpdate,
    SlotsResponse,
    WorkingHoursResponse,
    WorkingInterval,
    booking_response,
)
from .time_calculator import format_time

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/availability", tags=["Availability"])
bookings_router = APIRouter(prefix="/bookings", tags=["Bookings"])

slots_rate_limit = create_rate_limiter(SLOTS_RATE_LIMIT, RATE_LIMIT_WINDOW_SECONDS, "slots")
bookings_rate_limit = create_rate_limiter(BOOKINGS_RATE_LIMIT, RATE_LIMIT_WINDOW_SECONDS, "bookings")


def get_availability_service(db: Session = Depends(get_db)) -> AvailabilityService:
    """Dependency injection for AvailabilityService"""
    return AvailabilityService(db)


def get_booking_service(db: Session = Depends(get_db)) -> BookingService:
    """Dependency injection for BookingService"""
    return BookingService(db)


def parse_staff_id(value: Optional[str]) -> Optional[int]:
    """``None`` or "any" mean any staff member"""
    if value is None or value.strip().lower() in ("", "any"):
        return None
    try:
        return int(value)
    except ValueError:
        raise InvalidBookingRequest(f"Invalid staffId: {value}")


def parse_service_ids(value: str) -> list[int]:
    try:
        return [int(part) for part in value.split(",") if part.strip()]
    except ValueError:
        raise InvalidBookingRequest(f"Invalid serviceIds: {value}")


# ============================================================================
# AVAILABILITY
# ============================================================================


@router.get("/slots", response_model=SlotsResponse)
async def get_available_slots(
    salonId: int = Query(...),
    serviceIds: str = Query(..., description="Comma separated service ids"),
    day: date = Query(..., alias="date"),
    staffId: Optional[str] = Query(None, description='Staff id or "any"'),
    service: AvailabilityService = Depends(get_availability_service),
    _: None = Depends(slots_rate_limit),
):
    """Bookable start times for the requested services on one date"""
    slots = service.get_available_slots(
        salonId, parse_staff_id(staffId), parse_service_ids(serviceIds), day
    )
    return SlotsResponse(date=day.isoformat(), slots=slots, count=len(slots))


@router.get("/working-hours", response_model=WorkingHoursResponse)
async def get_working_hours(
    salonId: int = Query(...),
    day: date = Query(..., alias="date"),
    staffId: Optional[int] = Query(None),
    service: AvailabilityService = Depends(get_availability_service),
):
    """Resolved open intervals of the salon or a staff member"""
    intervals = service.get_working_hours(salonId, staffId, day)
    return WorkingHoursResponse(
        date=day.isoformat(),
        salonId=salonId,
        staffId=staffId,
        intervals=[
            WorkingInterval(startTime=format_time(i.start), endTime=format_time(i.end))
            for i in intervals
        ],
    )


@router.post("/check", response_model=AvailabilityCheckResponse)
async def check_availability(
    data: AvailabilityCheckRequest,
    service: AvailabilityService = Depends(get_availability_service),
):
    """Check a window for a staff member without booking it"""
    return service.check_availability(
        data.staffId, data.startTime, data.endTime, data.excludeBookingId
    )


# ============================================================================
# BOOKINGS
# ============================================================================


@bookings_router.post("", response_model=BookingResponse, status_code=201)
async def create_booking(
    data: BookingCreate,
    service: BookingService = Depends(get_booking_service),
    _: None = Depends(bookings_rate_limit),
):
    """Book one or more chained services"""
    return booking_response(service.create_booking(data))


@bookings_router.get("", response_model=list[BookingResponse])
async def list_bookings(
    salonId: Optional[int] = Query(None),
    staffId: Optional[int] = Query(None),
    status: Optional[str] = Query(None),
    start: Optional[datetime] = Query(None),
    end: Optional[datetime] = Query(None),
    service: BookingService = Depends(get_booking_service),
):
    bookings = service.list_bookings(salonId, staffId, status, start, end)
    return [booking_response(b) for b in bookings]


@bookings_router.get("/{booking_id}", response_model=BookingResponse)
async def get_booking(
    booking_id: int,
    service: BookingService = Depends(get_booking_service),
):
    return booking_response(service.get_booking(booking_id))


@bookings_router.patch("/{booking_id}/status", response_model=BookingResponse)
async def update_booking_status(
    booking_id: int,
    data: BookingStatusUpdate,
    service: BookingService = Depends(get_booking_service),
):
    """Move a booking through its lifecycle (confirm, start, complete, cancel, no-show)"""
    return booking_response(service.update_status(booking_id, data.status))


@bookings_router.patch("/{booking_id}/reschedule", response_model=BookingResponse)
async def reschedule_booking(
    booking_id: int,
    data: BookingReschedule,
    service: BookingService = Depends(get_booking_service),
):
    return booking_response(service.reschedule(booking_id, data))


@bookings_router.post("/{booking_id}/cancel", response_model=BookingResponse)
async def cancel_booking(
    booking_id: int,
    clientId: int = Query(...),
    service: BookingService = Depends(get_booking_service),
):
    """Client-side cancellation of their own booking"""
    return booking_response(service.cancel_by_client(booking_id, clientId))
