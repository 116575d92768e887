"""Typed outcomes for the booking flow.

Every condition the reservation engine can detect is an expected result, not a
fault. Each subclass carries the HTTP status the request handlers translate it
to and a message that is safe to show to the caller.
"""

from __future__ import annotations

from fastapi import status


class ReservationError(Exception):
    """Base class for booking outcomes surfaced to API callers."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    message: str = "An unexpected error occurred. Please try again."

    def __init__(self, message: str | None = None) -> None:
        if message is not None:
            self.message = message
        super().__init__(self.message)

    @property
    def code(self) -> str:
        return type(self).__name__

    def to_payload(self) -> dict[str, object]:
        return {"success": False, "error": self.message}


class UnauthenticatedError(ReservationError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "User not authenticated"


class BadRequestError(ReservationError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Malformed request"


class SlotNotFoundError(ReservationError):
    status_code = status.HTTP_404_NOT_FOUND
    message = "Availability slot not found or not active."


class DeveloperMismatchError(SlotNotFoundError):
    """Slot exists but belongs to another developer.

    Reported exactly like a missing slot so callers cannot map out other
    developers' calendars.
    """


class SlotAlreadyBookedError(ReservationError):
    status_code = status.HTTP_409_CONFLICT
    message = "This slot has already been booked."


class BookingNotFoundError(ReservationError):
    status_code = status.HTTP_404_NOT_FOUND
    message = "Booking not found."


class NotAuthorizedError(ReservationError):
    status_code = status.HTTP_403_FORBIDDEN
    message = "You are not authorized to modify this booking."


class AlreadyCancelledError(ReservationError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Booking is already cancelled."


class BookingNotCancelledError(ReservationError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Only cancelled bookings can be deleted."


class InternalError(ReservationError):
    pass


__all__ = [
    "AlreadyCancelledError",
    "BadRequestError",
    "BookingNotCancelledError",
    "BookingNotFoundError",
    "DeveloperMismatchError",
    "InternalError",
    "NotAuthorizedError",
    "ReservationError",
    "SlotAlreadyBookedError",
    "SlotNotFoundError",
    "UnauthenticatedError",
]
