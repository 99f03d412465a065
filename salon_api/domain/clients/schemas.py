"""Client domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator

from ...shared.validators import validate_email, validate_phone


class ClientCreate(BaseModel):
    """Schema for creating a new client"""

    firstName: str
    lastName: str
    email: str
    phone: Optional[str] = None
    salonId: Optional[int] = None
    notes: Optional[str] = None

    @field_validator("email")
    @classmethod
    def check_email(cls, v):
        return validate_email(v)

    @field_validator("phone")
    @classmethod
    def check_phone(cls, v):
        if v:
            return validate_phone(v)
        return v

    @field_validator("firstName", "lastName")
    @classmethod
    def check_name(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("Name cannot be empty")
        return v


class ClientResponse(BaseModel):
    """Schema for client response"""

    id: int
    firstName: str
    lastName: str
    email: str
    phone: Optional[str] = None
    salonId: Optional[int] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
