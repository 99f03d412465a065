"""Client router - FastAPI endpoints for client operations"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...database import get_db
from ..scheduling.schemas import BookingResponse, booking_response
from .schemas import ClientCreate, ClientResponse
from .service import ClientService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/clients", tags=["Clients"])


def get_client_service(db: Session = Depends(get_db)) -> ClientService:
    """Dependency injection for ClientService"""
    return ClientService(db)


def _client(c) -> ClientResponse:
    return ClientResponse(
        id=c.id,
        firstName=c.first_name,
        lastName=c.last_name,
        email=c.email,
        phone=c.phone,
        salonId=c.salon_id,
        notes=c.notes,
        created_at=c.created_at,
    )


@router.post("", response_model=ClientResponse, status_code=201)
async def create_client(data: ClientCreate, service: ClientService = Depends(get_client_service)):
    """Create a new client"""
    return _client(service.create_client(data))


@router.get("/{client_id}", response_model=ClientResponse)
async def get_client(client_id: int, service: ClientService = Depends(get_client_service)):
    return _client(service.get_client(client_id))


@router.get("/{client_id}/bookings", response_model=list[BookingResponse])
async def get_client_bookings(
    client_id: int,
    status: Optional[str] = Query(None),
    service: ClientService = Depends(get_client_service),
):
    """A client's booking history, most recent first"""
    return [booking_response(b) for b in service.get_bookings(client_id, status)]
