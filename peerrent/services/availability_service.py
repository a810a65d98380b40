import logging
from dataclasses import dataclass
from datetime import date
from typing import Optional

from peerrent.core.enums import BLOCKING_STATUSES
from peerrent.core.errors import InvalidInputError
from peerrent.repositories.base import BookingRepository

logger = logging.getLogger(__name__)

UNAVAILABLE_MESSAGE = "Item is not available for the selected dates"


@dataclass(frozen=True)
class Availability:
    available: bool
    reason: Optional[str] = None
    conflicting_booking_ids: tuple[str, ...] = ()


def ranges_overlap(a_start: date, a_end: date, b_start: date, b_end: date) -> bool:
    """Closed-interval overlap: a range ending on the day another starts overlaps it."""
    return a_start <= b_end and a_end >= b_start


class AvailabilityChecker:
    """
    Answers whether an item can be reserved for a date range.

    Only confirmed and in-progress bookings reserve the calendar; pending and
    disputed ones never block a request. Repository failures are not caught
    here, so an infrastructure error stays distinct from an "unavailable" answer.
    """

    def __init__(self, bookings: BookingRepository):
        self.bookings = bookings

    def is_available(
        self,
        item_id: str,
        start_date: date,
        end_date: date,
        exclude_booking_id: Optional[str] = None,
    ) -> Availability:
        if end_date < start_date:
            raise InvalidInputError("End date must be greater than or equal to start date")

        blocking = self.bookings.list_for_item(item_id, sorted(BLOCKING_STATUSES, key=lambda s: s.value))
        conflicts = tuple(
            b.id
            for b in blocking
            if b.id != exclude_booking_id and ranges_overlap(b.start_date, b.end_date, start_date, end_date)
        )
        if conflicts:
            logger.info(
                "item %s unavailable for %s..%s, %d conflicting booking(s)",
                item_id, start_date, end_date, len(conflicts),
            )
            return Availability(available=False, reason=UNAVAILABLE_MESSAGE, conflicting_booking_ids=conflicts)
        return Availability(available=True)
