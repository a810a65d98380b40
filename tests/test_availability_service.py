"""
Tests for AvailabilityChecker: closed-interval overlap and blocking statuses.
"""

from datetime import date, timedelta

import pytest

from peerrent.core.enums import BookingStatus
from peerrent.core.errors import InfrastructureError, InvalidInputError
from peerrent.services.availability_service import UNAVAILABLE_MESSAGE, AvailabilityChecker, ranges_overlap
from tests.helpers import ITEM, LENDER, START


def _set_status(bookings, booking_id, status: BookingStatus):
    row = bookings.get(booking_id)
    row.booking_status = status.value
    bookings.save(row)


@pytest.mark.parametrize(
    "a, b, expected",
    [
        ((date(2025, 3, 1), date(2025, 3, 3)), (date(2025, 3, 3), date(2025, 3, 5)), True),
        ((date(2025, 3, 1), date(2025, 3, 3)), (date(2025, 3, 4), date(2025, 3, 5)), False),
        ((date(2025, 3, 1), date(2025, 3, 10)), (date(2025, 3, 4), date(2025, 3, 5)), True),
        ((date(2025, 3, 4), date(2025, 3, 4)), (date(2025, 3, 1), date(2025, 3, 4)), True),
    ],
)
def test_ranges_overlap_is_closed_interval(a, b, expected):
    assert ranges_overlap(*a, *b) is expected
    assert ranges_overlap(*b, *a) is expected


def test_pending_bookings_do_not_block(make_booking, bookings):
    make_booking(start=START, days=3)

    result = AvailabilityChecker(bookings).is_available(ITEM, START, START + timedelta(days=2))
    assert result.available is True


@pytest.mark.parametrize("status", [BookingStatus.CONFIRMED, BookingStatus.IN_PROGRESS])
def test_blocking_statuses_reserve_the_calendar(make_booking, bookings, status):
    booking = make_booking(start=START, days=3)
    _set_status(bookings, booking.id, status)

    result = AvailabilityChecker(bookings).is_available(ITEM, START + timedelta(days=2), START + timedelta(days=4))

    assert result.available is False
    assert result.reason == UNAVAILABLE_MESSAGE
    assert result.conflicting_booking_ids == (booking.id,)


@pytest.mark.parametrize("status", [BookingStatus.DISPUTED, BookingStatus.CANCELLED, BookingStatus.COMPLETED])
def test_non_blocking_statuses_leave_dates_free(make_booking, bookings, status):
    booking = make_booking(start=START, days=3)
    _set_status(bookings, booking.id, status)

    assert AvailabilityChecker(bookings).is_available(ITEM, START, START).available is True


def test_adjacent_day_after_end_is_free(make_booking, bookings):
    booking = make_booking(start=START, days=3)
    _set_status(bookings, booking.id, BookingStatus.CONFIRMED)

    day_after = START + timedelta(days=3)
    assert AvailabilityChecker(bookings).is_available(ITEM, day_after, day_after).available is True


def test_excluded_booking_does_not_conflict_with_itself(make_booking, bookings):
    booking = make_booking(start=START, days=3)
    _set_status(bookings, booking.id, BookingStatus.CONFIRMED)

    result = AvailabilityChecker(bookings).is_available(
        ITEM, START, START + timedelta(days=2), exclude_booking_id=booking.id
    )
    assert result.available is True


def test_other_items_are_independent(make_booking, bookings, items):
    items.add_item("item-2", owner_id=LENDER)
    booking = make_booking(start=START, days=3)
    _set_status(bookings, booking.id, BookingStatus.CONFIRMED)

    assert AvailabilityChecker(bookings).is_available("item-2", START, START).available is True


def test_inverted_range_is_invalid_input(bookings):
    with pytest.raises(InvalidInputError):
        AvailabilityChecker(bookings).is_available(ITEM, START, START - timedelta(days=1))


def test_lookup_failure_propagates_as_infrastructure_error(bookings):
    bookings.fail_reads = True
    with pytest.raises(InfrastructureError):
        AvailabilityChecker(bookings).is_available(ITEM, START, START)
