"""Salon domain schemas - Pydantic models for salon configuration"""

from datetime import date as Date, datetime
from typing import Optional

from pydantic import BaseModel, field_validator

from ...models import ABSENCE_TYPES, STAFF_ROLES
from ...shared.validators import validate_email, validate_phone, validate_slug


def _non_negative(v):
    if v is not None and v < 0:
        raise ValueError("Must be zero or more minutes")
    return v


class SalonCreate(BaseModel):
    name: str
    slug: str
    address: Optional[str] = None
    city: Optional[str] = None
    phone: Optional[str] = None
    bufferBefore: int = 0
    bufferAfter: int = 0
    processingTime: int = 0

    @field_validator("slug")
    @classmethod
    def check_slug(cls, v):
        return validate_slug(v)

    @field_validator("phone")
    @classmethod
    def check_phone(cls, v):
        return validate_phone(v)

    @field_validator("bufferBefore", "bufferAfter", "processingTime")
    @classmethod
    def check_minutes(cls, v):
        return _non_negative(v)


class SalonUpdate(BaseModel):
    name: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    phone: Optional[str] = None
    bufferBefore: Optional[int] = None
    bufferAfter: Optional[int] = None
    processingTime: Optional[int] = None
    isActive: Optional[bool] = None

    @field_validator("phone")
    @classmethod
    def check_phone(cls, v):
        return validate_phone(v)

    @field_validator("bufferBefore", "bufferAfter", "processingTime")
    @classmethod
    def check_minutes(cls, v):
        return _non_negative(v)


class SalonResponse(BaseModel):
    id: int
    name: str
    slug: str
    address: Optional[str] = None
    city: Optional[str] = None
    phone: Optional[str] = None
    bufferBefore: int
    bufferAfter: int
    processingTime: int
    isActive: bool


class TimeSlotInput(BaseModel):
    startTime: str
    endTime: str


class ScheduleUpsert(BaseModel):
    isClosed: bool = False
    timeSlots: list[TimeSlotInput] = []


class TimeSlotResponse(BaseModel):
    startTime: str
    endTime: str
    order: int


class ScheduleResponse(BaseModel):
    id: int
    salonId: Optional[int] = None
    staffId: Optional[int] = None
    dayOfWeek: int
    isClosed: bool
    timeSlots: list[TimeSlotResponse]


class StaffCreate(BaseModel):
    firstName: str
    lastName: str
    email: Optional[str] = None
    specialties: Optional[str] = None
    role: str = "EMPLOYEE"

    @field_validator("email")
    @classmethod
    def check_email(cls, v):
        return validate_email(v)

    @field_validator("role")
    @classmethod
    def check_role(cls, v):
        v = v.upper()
        if v not in STAFF_ROLES:
            raise ValueError(f"role must be one of {', '.join(STAFF_ROLES)}")
        return v


class StaffUpdate(BaseModel):
    firstName: Optional[str] = None
    lastName: Optional[str] = None
    email: Optional[str] = None
    specialties: Optional[str] = None
    isActive: Optional[bool] = None

    @field_validator("email")
    @classmethod
    def check_email(cls, v):
        return validate_email(v)


class StaffResponse(BaseModel):
    id: int
    salonId: int
    firstName: str
    lastName: str
    email: Optional[str] = None
    specialties: Optional[str] = None
    role: str
    isActive: bool


class ServiceCreate(BaseModel):
    name: str
    duration: int
    price: float = 0
    category: Optional[str] = None
    description: Optional[str] = None

    @field_validator("duration")
    @classmethod
    def check_duration(cls, v):
        if v <= 0:
            raise ValueError("duration must be a positive number of minutes")
        return v

    @field_validator("price")
    @classmethod
    def check_price(cls, v):
        if v < 0:
            raise ValueError("price cannot be negative")
        return v


class ServiceUpdate(BaseModel):
    name: Optional[str] = None
    duration: Optional[int] = None
    price: Optional[float] = None
    category: Optional[str] = None
    description: Optional[str] = None
    isActive: Optional[bool] = None

    @field_validator("duration")
    @classmethod
    def check_duration(cls, v):
        if v is not None and v <= 0:
            raise ValueError("duration must be a positive number of minutes")
        return v


class ServiceResponse(BaseModel):
    id: int
    salonId: int
    name: str
    category: Optional[str] = None
    description: Optional[str] = None
    duration: int
    price: float
    isActive: bool


class ClosedDayCreate(BaseModel):
    date: Date
    reason: Optional[str] = None


class ClosedDayResponse(BaseModel):
    id: int
    salonId: int
    date: Date
    reason: Optional[str] = None


class AbsenceCreate(BaseModel):
    staffId: int
    type: str
    startDate: datetime
    endDate: datetime
    reason: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("type")
    @classmethod
    def check_type(cls, v):
        v = v.upper()
        if v not in ABSENCE_TYPES:
            raise ValueError(f"type must be one of {', '.join(ABSENCE_TYPES)}")
        return v


class AbsenceDecision(BaseModel):
    approve: bool
    decidedBy: Optional[str] = None


class AbsenceResponse(BaseModel):
    id: int
    staffId: int
    salonId: int
    type: str
    startDate: datetime
    endDate: datetime
    status: str
    reason: Optional[str] = None
    notes: Optional[str] = None
    approvedBy: Optional[str] = None
    approvedAt: Optional[datetime] = None
