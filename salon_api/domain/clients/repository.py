"""Client repository - Database operations for clients"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import Booking, Client


class ClientRepository:
    """Repository for client database operations"""

    @staticmethod
    def get_client_by_id(db: Session, client_id: int) -> Optional[Client]:
        return db.query(Client).filter(Client.id == client_id).first()

    @staticmethod
    def get_client_by_email(db: Session, email: str) -> Optional[Client]:
        return db.query(Client).filter(Client.email == email).first()

    @staticmethod
    def create_client(db: Session, **client_data) -> Client:
        """Create a new client"""
        client = Client(**client_data)
        db.add(client)
        db.commit()
        db.refresh(client)
        return client

    @staticmethod
    def get_bookings(db: Session, client_id: int, status: Optional[str] = None) -> list[Booking]:
        """A client's bookings, most recent first"""
        query = db.query(Booking).filter(Booking.client_id == client_id)
        if status:
            query = query.filter(Booking.status == status.upper())
        return query.order_by(Booking.start_time.desc()).all()
