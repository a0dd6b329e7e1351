"""Error taxonomy of the reservation engine.

Every error raised to callers derives from `BookingError` and carries the
HTTP status the API answers with. `booking_exception_handler` plugs the
hierarchy into Django Rest Framework.
"""

from __future__ import annotations

from rest_framework import status  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import exception_handler  # type: ignore


class BookingError(Exception):
    """Base class for reservation engine errors."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_code = "booking_error"

    def __init__(self, message: str = "", *, code: str | None = None):
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code

    def as_payload(self) -> dict[str, str]:
        return {"detail": self.message, "code": self.code}


class BookingValidationError(BookingError):
    """Malformed request: bad interval, outside opening hours, missing guest contact."""

    default_code = "invalid"


class ConflictError(BookingError):
    """The interval is no longer free; the caller should re-fetch slots."""

    status_code = status.HTTP_409_CONFLICT
    default_code = "slot_unavailable"


class StoreContentionError(ConflictError):
    """The store stayed busy for every commit attempt."""

    default_code = "store_busy"


class InvalidStatusTransition(BookingError):
    """Requested status change is not allowed from the current status."""

    status_code = status.HTTP_409_CONFLICT
    default_code = "invalid_transition"


class ReservationNotFound(BookingError):
    """Reservation does not exist, or the lookup credentials do not match."""

    status_code = status.HTTP_404_NOT_FOUND
    default_code = "not_found"


def booking_exception_handler(exc, context):  # type: ignore
    """DRF exception handler that also understands `BookingError`."""

    if isinstance(exc, BookingError):
        return Response(exc.as_payload(), status=exc.status_code)
    return exception_handler(exc, context)
