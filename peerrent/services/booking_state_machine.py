"""
Booking status graph.

    pending    -> confirmed (lender) | cancelled (lender, borrower)
    confirmed  -> inProgress | cancelled (lender, borrower)
    inProgress -> completed | disputed (lender, borrower)
    disputed   -> completed | cancelled (admin)
    completed, cancelled: terminal

There are no self-edges: asking for the status a booking already holds is an
invalid transition, so repeated calls never silently succeed.
"""

from datetime import datetime, timezone
from typing import Optional, Union

from peerrent.core.config import settings
from peerrent.core.enums import BookingRole, BookingStatus, ItemStatus
from peerrent.core.errors import InvalidInputError, InvalidTransitionError, UnauthorizedError
from peerrent.models.booking import Booking

_PARTIES = frozenset({BookingRole.LENDER, BookingRole.BORROWER})
_ADMIN = frozenset({BookingRole.ADMIN})

TRANSITIONS: dict[BookingStatus, dict[BookingStatus, frozenset[BookingRole]]] = {
    BookingStatus.PENDING: {
        BookingStatus.CONFIRMED: frozenset({BookingRole.LENDER}),
        BookingStatus.CANCELLED: _PARTIES,
    },
    BookingStatus.CONFIRMED: {
        BookingStatus.IN_PROGRESS: _PARTIES,
        BookingStatus.CANCELLED: _PARTIES,
    },
    BookingStatus.IN_PROGRESS: {
        BookingStatus.COMPLETED: _PARTIES,
        BookingStatus.DISPUTED: _PARTIES,
    },
    BookingStatus.DISPUTED: {
        BookingStatus.COMPLETED: _ADMIN,
        BookingStatus.CANCELLED: _ADMIN,
    },
    BookingStatus.COMPLETED: {},
    BookingStatus.CANCELLED: {},
}

ITEM_STATUS_FOR_BOOKING: dict[BookingStatus, ItemStatus] = {
    BookingStatus.CONFIRMED: ItemStatus.BOOKED,
    BookingStatus.IN_PROGRESS: ItemStatus.IN_TRANSIT,
    BookingStatus.COMPLETED: ItemStatus.AVAILABLE,
    BookingStatus.CANCELLED: ItemStatus.AVAILABLE,
}

_TIMESTAMP_FIELDS = {
    BookingStatus.CONFIRMED: "confirmed_at",
    BookingStatus.COMPLETED: "completed_at",
    BookingStatus.CANCELLED: "cancelled_at",
}


def coerce_status(value: Union[str, BookingStatus]) -> BookingStatus:
    try:
        return BookingStatus(value)
    except ValueError:
        raise InvalidInputError(f"Unknown booking status: {value}")


def resolve_roles(booking: Booking, requester_id: str, caller_role: str = "user") -> frozenset[BookingRole]:
    roles = set()
    if requester_id == booking.lender_user_id:
        roles.add(BookingRole.LENDER)
    if requester_id == booking.borrower_user_id:
        roles.add(BookingRole.BORROWER)
    if caller_role in settings.admin_roles:
        roles.add(BookingRole.ADMIN)
    return frozenset(roles)


def allowed_targets(current: BookingStatus) -> set[BookingStatus]:
    return set(TRANSITIONS.get(current, {}))


def validate_transition(current: BookingStatus, target: BookingStatus, roles: frozenset[BookingRole]) -> None:
    edges = TRANSITIONS.get(current, {})
    if target not in edges:
        raise InvalidTransitionError(current.value, target.value)
    if not edges[target] & roles:
        permitted = ", ".join(sorted(r.value for r in edges[target]))
        raise InvalidTransitionError(
            current.value,
            target.value,
            f"Only {permitted} may move a booking from {current.value} to {target.value}",
        )


def check_transition(
    booking: Booking,
    requester_id: str,
    target: Union[str, BookingStatus],
    caller_role: str = "user",
) -> BookingStatus:
    """Validate without mutating; returns the coerced target status."""
    target = coerce_status(target)
    roles = resolve_roles(booking, requester_id, caller_role)
    if not roles:
        raise UnauthorizedError("You are not authorized to update this booking")
    validate_transition(coerce_status(booking.booking_status), target, roles)
    return target


def transition(
    booking: Booking,
    requester_id: str,
    target: Union[str, BookingStatus],
    reason: Optional[str] = None,
    caller_role: str = "user",
    now: Optional[datetime] = None,
) -> Booking:
    """Apply a status change in place. Raises on an illegal edge or role; never partially applies."""
    target = check_transition(booking, requester_id, target, caller_role)
    now = now or datetime.now(timezone.utc)

    booking.booking_status = target.value
    stamp = _TIMESTAMP_FIELDS.get(target)
    if stamp and getattr(booking, stamp) is None:
        setattr(booking, stamp, now)
    if target is BookingStatus.CANCELLED and reason:
        booking.cancellation_reason = reason
    booking.updated_at = now
    return booking


def item_status_for(status: Union[str, BookingStatus]) -> Optional[ItemStatus]:
    """Item availability that follows a booking status; None means leave the item alone."""
    return ITEM_STATUS_FOR_BOOKING.get(coerce_status(status))
