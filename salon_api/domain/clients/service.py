"""Client service - Business logic for client operations"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from ...models import Booking, Client
from ..scheduling.errors import ConfigurationConflict, SchedulingNotFound
from .repository import ClientRepository
from .schemas import ClientCreate

logger = logging.getLogger(__name__)


class ClientService:
    """Service layer for client business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = ClientRepository()

    def get_client(self, client_id: int) -> Client:
        client = self.repo.get_client_by_id(self.db, client_id)
        if not client:
            raise SchedulingNotFound("Client not found")
        return client

    def create_client(self, data: ClientCreate) -> Client:
        """Create a new client; emails are unique across salons"""
        logger.info(f"📥 Creating client {data.email}")
        if self.repo.get_client_by_email(self.db, data.email):
            raise ConfigurationConflict("A client with this email already exists")

        return self.repo.create_client(
            self.db,
            first_name=data.firstName,
            last_name=data.lastName,
            email=data.email,
            phone=data.phone,
            salon_id=data.salonId,
            notes=data.notes,
        )

    def get_bookings(self, client_id: int, status: Optional[str] = None) -> list[Booking]:
        self.get_client(client_id)
        return self.repo.get_bookings(self.db, client_id, status)
