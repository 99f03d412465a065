"""Scheduling domain schemas - Pydantic models for availability and bookings"""

from datetime import datetime
from typing import Optional, Union

from pydantic import BaseModel, field_validator


def _naive(value: datetime) -> datetime:
    # Booking times are salon local time
    if value.tzinfo is not None:
        raise ValueError("Use local salon time without a timezone offset")
    return value


class SlotsResponse(BaseModel):
    date: str
    slots: list[str]
    count: int


class WorkingInterval(BaseModel):
    startTime: str
    endTime: str


class WorkingHoursResponse(BaseModel):
    date: str
    salonId: int
    staffId: Optional[int] = None
    intervals: list[WorkingInterval]


class AvailabilityCheckRequest(BaseModel):
    staffId: int
    startTime: datetime
    endTime: datetime
    excludeBookingId: Optional[int] = None

    @field_validator("startTime", "endTime")
    @classmethod
    def validate_naive(cls, v):
        return _naive(v)


class AvailabilityCheckResponse(BaseModel):
    available: bool
    reason: Optional[str] = None
    conflictingBookingIds: list[int]
    absence: bool


class BookingServiceItem(BaseModel):
    """One requested service; ``staffId`` of "any" lets the salon pick"""

    serviceId: int
    staffId: Optional[Union[int, str]] = None

    @field_validator("staffId")
    @classmethod
    def validate_staff(cls, v):
        if v is None or v == "any":
            return None
        try:
            return int(v)
        except (TypeError, ValueError):
            raise ValueError('staffId must be a staff id or "any"')


class BookingCreate(BaseModel):
    salonId: int
    clientId: int
    startTime: datetime
    services: list[BookingServiceItem]
    notes: Optional[str] = None
    # PENDING holds are released by the worker unless confirmed in time
    status: str = "CONFIRMED"

    @field_validator("startTime")
    @classmethod
    def validate_start(cls, v):
        return _naive(v)

    @field_validator("services")
    @classmethod
    def validate_services(cls, v):
        if not v:
            raise ValueError("At least one service is required")
        return v

    @field_validator("status")
    @classmethod
    def validate_status(cls, v):
        v = v.upper()
        if v not in ("PENDING", "CONFIRMED"):
            raise ValueError("A new booking must be PENDING or CONFIRMED")
        return v


class BookingReschedule(BaseModel):
    startTime: datetime
    staffId: Optional[int] = None

    @field_validator("startTime")
    @classmethod
    def validate_start(cls, v):
        return _naive(v)


class BookingStatusUpdate(BaseModel):
    status: str


class BookingSegmentResponse(BaseModel):
    serviceId: int
    staffId: int
    startTime: datetime
    endTime: datetime
    duration: int
    price: float
    order: int


class BookingResponse(BaseModel):
    id: int
    salonId: int
    clientId: int
    staffId: Optional[int] = None
    serviceId: Optional[int] = None
    startTime: datetime
    endTime: datetime
    duration: int
    price: float
    status: str
    notes: Optional[str] = None
    isMultiService: bool
    canceledAt: Optional[datetime] = None
    createdAt: Optional[datetime] = None
    services: list[BookingSegmentResponse] = []


def booking_response(booking) -> BookingResponse:
    return BookingResponse(
        id=booking.id,
        salonId=booking.salon_id,
        clientId=booking.client_id,
        staffId=booking.staff_id,
        serviceId=booking.service_id,
        startTime=booking.start_time,
        endTime=booking.end_time,
        duration=booking.duration,
        price=booking.price,
        status=booking.status,
        notes=booking.notes,
        isMultiService=booking.is_multi_service,
        canceledAt=booking.canceled_at,
        createdAt=booking.created_at,
        services=[
            BookingSegmentResponse(
                serviceId=s.service_id,
                staffId=s.staff_id,
                startTime=s.start_time,
                endTime=s.end_time,
                duration=s.duration,
                price=s.price,
                order=s.order,
            )
            for s in booking.booking_services
        ],
    )
