"""
Booking error taxonomy.

Business-rule errors are raised inside the booking core and turned into a
failed ``ServiceResult`` at the service boundary. ``InfrastructureError`` is the
only kind that escapes the service: it wraps storage/lookup failures so the
delivery layer can tell "try again" apart from "this is not allowed".
"""

from dataclasses import dataclass, field
from typing import Any, Generic, Optional, TypeVar

T = TypeVar("T")


class BookingError(Exception):
    """Base class for expected, caller-recoverable booking failures."""

    kind = "BookingError"
    status_code = 400

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(message)


class NotFoundError(BookingError):
    kind = "NotFound"
    status_code = 404


class UnauthorizedError(BookingError):
    """Caller is not a party to the booking (or lacks the admin role)."""

    kind = "Unauthorized"
    status_code = 403


class InvalidTransitionError(BookingError):
    kind = "InvalidTransition"
    status_code = 409

    def __init__(self, current: str, target: str, message: Optional[str] = None) -> None:
        super().__init__(
            message or f"Invalid status transition: {current} -> {target}",
            {"current": current, "target": target},
        )
        self.current = current
        self.target = target


class UnavailableError(BookingError):
    kind = "Unavailable"
    status_code = 409


class OutOfBoundsError(BookingError):
    kind = "OutOfBounds"
    status_code = 422


class AlreadyRatedError(BookingError):
    kind = "AlreadyRated"
    status_code = 409


class SelfBookingError(BookingError):
    kind = "SelfBooking"
    status_code = 422


class InvalidInputError(BookingError):
    kind = "InvalidInput"
    status_code = 400


class InfrastructureError(Exception):
    """Storage or collaborator failure. Never converted into a business result."""

    kind = "Infrastructure"
    status_code = 500


@dataclass
class ServiceResult(Generic[T]):
    success: bool
    data: Optional[T] = None
    error: Optional[str] = None
    code: Optional[str] = None
    status_code: int = 200
    details: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def ok(cls, data: T) -> "ServiceResult[T]":
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, err: BookingError) -> "ServiceResult[T]":
        return cls(
            success=False,
            error=err.message,
            code=err.kind,
            status_code=err.status_code,
            details=err.details,
        )
