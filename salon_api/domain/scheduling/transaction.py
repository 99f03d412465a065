"""Serializable unit of work for booking writes"""

import logging
from typing import Callable, TypeVar

from sqlalchemy.exc import DBAPIError, IntegrityError
from sqlalchemy.orm import Session

from ...config import BOOKING_TRANSACTION_RETRIES
from .errors import SlotConflict

logger = logging.getLogger(__name__)

T = TypeVar("T")

# serialization_failure, deadlock_detected
RETRYABLE_SQLSTATES = {"40001", "40P01"}


def is_serialization_failure(error: DBAPIError) -> bool:
    code = getattr(error.orig, "pgcode", None) or getattr(error.orig, "sqlstate", None)
    return code in RETRYABLE_SQLSTATES


def run_booking_transaction(
    db: Session,
    operation: Callable[[Session], T],
    retries: int = BOOKING_TRANSACTION_RETRIES,
) -> T:
    """Run ``operation`` (check then insert) atomically and commit.

    PostgreSQL runs the unit at SERIALIZABLE and replays it after a
    serialization failure. SQLite engines begin every transaction with
    BEGIN IMMEDIATE, which serializes writers on their own.
    """
    serializable = db.get_bind().dialect.name == "postgresql"

    # The isolation level only applies to a transaction that has not begun yet
    if db.in_transaction():
        db.rollback()

    attempt = 0
    while True:
        attempt += 1
        try:
            if serializable:
                db.connection(execution_options={"isolation_level": "SERIALIZABLE"})
            result = operation(db)
            db.commit()
            return result
        except IntegrityError as e:
            db.rollback()
            logger.warning(f"⚠️ Booking insert rejected by a constraint: {e.orig}")
            raise SlotConflict("This time slot was just taken, please choose another") from e
        except DBAPIError as e:
            db.rollback()
            if not is_serialization_failure(e):
                raise
            if attempt < retries:
                logger.warning(f"🔁 Serialization failure, retrying booking ({attempt}/{retries})")
                continue
            logger.error(f"❌ Booking still contended after {retries} attempts")
            raise SlotConflict("This time slot is being booked by someone else, please retry") from e
        except Exception:
            db.rollback()
            raise
