"""Scheduling errors raised by the availability engine and booking flow"""


class SchedulingError(Exception):
    """Base class for every scheduling failure mapped to an HTTP response"""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidTimeFormat(SchedulingError):
    """Raised when a time of day is not a valid HH:MM string"""

    status_code = 422


class OverlappingScheduleSlots(SchedulingError):
    """Raised when a day's opening hours overlap or are inverted"""

    status_code = 409


class SlotConflict(SchedulingError):
    """Raised when a proposed booking collides with an existing one"""

    status_code = 409


class OutsideWorkingHours(SchedulingError):
    """Raised when a proposed booking is not inside the staff member's open hours"""

    status_code = 409


class SchedulingNotFound(SchedulingError):
    status_code = 404


class InvalidBookingRequest(SchedulingError):
    pass


class ConfigurationConflict(SchedulingError):
    """Raised when salon configuration collides with existing data (slug, closed day, absence)"""

    status_code = 409
