"""Failure kinds raised by the booking core.

Every kind maps to a distinct, user-displayable reason. Route handlers turn
them into HTTP errors with :func:`http_error`; nothing in the core retries.
"""
from fastapi import HTTPException


class BookingError(ValueError):
    code = "booking_error"
    status_code = 400

    def __init__(self, message: str = ""):
        super().__init__(message or self.code.replace("_", " "))

    @property
    def message(self) -> str:
        return str(self)


class NotFound(BookingError):
    code = "not_found"
    status_code = 404


class SeatUnavailable(BookingError):
    code = "seat_unavailable"
    status_code = 409


class Forbidden(BookingError):
    code = "forbidden"
    status_code = 403


class AlreadyCheckedIn(BookingError):
    code = "already_checked_in"
    status_code = 409


class AlreadyCancelled(BookingError):
    code = "already_cancelled"
    status_code = 409


class CheckInWindowClosed(BookingError):
    code = "check_in_window_closed"
    status_code = 400


class FlightDeparted(BookingError):
    code = "flight_departed"
    status_code = 400


class ValidationError(BookingError):
    code = "validation_error"
    status_code = 400


class ResourceInUse(ValidationError):
    """Row is still referenced (e.g. a flight or passenger with tickets)."""

    code = "resource_in_use"
    status_code = 409


def http_error(exc: BookingError) -> HTTPException:
    return HTTPException(status_code=exc.status_code, detail={"code": exc.code, "message": exc.message})
