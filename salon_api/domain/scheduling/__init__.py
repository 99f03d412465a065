"""
Scheduling Domain

Availability engine and booking workflow.

Structure:
```
salon_api/domain/scheduling/
├── time_calculator.py      # HH:MM parsing, half-open minute intervals
├── legacy_schedule.py      # Normalizes every stored schedule shape
├── working_hours.py        # Open intervals of an owner on a date
├── conflict_index.py       # Buffer-padded occupied intervals
├── slot_generator.py       # Bookable start times
├── conflict_validator.py   # Authoritative check of a proposed booking
├── transaction.py          # Serializable check-then-insert unit
├── repository.py           # Database access
├── availability_service.py # Slots, working hours, availability check
├── booking_service.py      # Booking creation and lifecycle
├── schemas.py
└── router.py               # /availability and /bookings endpoints
```

The engine modules (time_calculator through slot_generator) are pure and
never touch the database; the repository feeds them.
"""

from .router import bookings_router, router

__all__ = ["router", "bookings_router"]
