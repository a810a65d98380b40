"""
Booking lifecycle orchestration.

Every public method returns a ``ServiceResult``: business-rule failures come
back as ``success=False`` with an error kind, while ``InfrastructureError``
raised by a collaborator propagates untouched for the delivery layer to log.
Each mutating operation runs as one repository transaction, so a failure at
any step leaves no partial write behind.
"""

import logging
import uuid
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Callable, Optional, Union

from peerrent.core.enums import BookingRole, BookingStatus, DeliveryMode, ItemStatus
from peerrent.core.errors import (
    AlreadyRatedError,
    BookingError,
    InvalidInputError,
    InvalidTransitionError,
    NotFoundError,
    SelfBookingError,
    ServiceResult,
    UnauthorizedError,
    UnavailableError,
)
from peerrent.models.booking import Booking
from peerrent.repositories.base import BookingRepository, ItemDirectory, UserDirectory
from peerrent.services import booking_state_machine as machine
from peerrent.services.availability_service import Availability, AvailabilityChecker
from peerrent.services.booking_query_service import BookingFilters, BookingQueryService, BookingStats, Page
from peerrent.services.event_service import BookingEvent, EventPublisher, LoggingEventPublisher
from peerrent.services.pricing_service import compute_terms

logger = logging.getLogger(__name__)

# Items in these states cannot take new requests regardless of calendar
_UNBOOKABLE_ITEM_STATUSES = {ItemStatus.INACTIVE.value, ItemStatus.MAINTENANCE.value}


@dataclass
class BookingRequest:
    item_id: str
    start_date: date
    end_date: date
    delivery_mode: Optional[str] = None
    pickup_location: Optional[str] = None
    delivery_location: Optional[str] = None
    special_instructions: Optional[str] = None


class BookingService:
    def __init__(
        self,
        bookings: BookingRepository,
        items: ItemDirectory,
        users: UserDirectory,
        events: Optional[EventPublisher] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.bookings = bookings
        self.items = items
        self.users = users
        self.events = events or LoggingEventPublisher()
        self.clock = clock or (lambda: datetime.now(timezone.utc))
        self.availability = AvailabilityChecker(bookings)
        self.queries = BookingQueryService(bookings)

    # -------------------------
    # CREATE
    # -------------------------
    def create_booking(self, borrower_id: str, request: BookingRequest) -> ServiceResult[Booking]:
        try:
            if request.end_date < request.start_date:
                raise InvalidInputError("End date must be greater than or equal to start date")
            mode = request.delivery_mode or DeliveryMode.NONE.value
            if mode not in {m.value for m in DeliveryMode}:
                raise InvalidInputError(f"Unknown delivery mode: {mode}")
            if not self.users.exists(borrower_id):
                raise UnauthorizedError("User not found or inactive")

            with self.bookings.item_lock(request.item_id):
                item = self.items.get_item_terms(request.item_id)
                if item is None:
                    raise NotFoundError("Item not found")
                if not item.is_active or item.status in _UNBOOKABLE_ITEM_STATUSES:
                    raise UnavailableError("Item is not available for booking")
                if item.owner_id == borrower_id:
                    raise SelfBookingError("You cannot book your own item")

                availability = self.availability.is_available(item.item_id, request.start_date, request.end_date)
                if not availability.available:
                    raise UnavailableError(availability.reason, {"conflicts": list(availability.conflicting_booking_ids)})

                terms = compute_terms(item, request.start_date, request.end_date)
                now = self.clock()
                booking = Booking(
                    id=str(uuid.uuid4()),
                    item_id=item.item_id,
                    lender_user_id=item.owner_id,
                    borrower_user_id=borrower_id,
                    start_date=request.start_date,
                    end_date=request.end_date,
                    total_days=terms.total_days,
                    daily_rate=terms.daily_rate,
                    total_rent=terms.total_rent,
                    security_amount=terms.security_amount,
                    platform_fee=terms.platform_fee,
                    booking_status=BookingStatus.PENDING.value,
                    delivery_mode=mode,
                    pickup_location=request.pickup_location,
                    delivery_location=request.delivery_location,
                    special_instructions=request.special_instructions,
                    created_at=now,
                    updated_at=now,
                )
                self.bookings.add(booking)
        except BookingError as e:
            logger.info("create_booking rejected for item %s: %s %s", request.item_id, e.kind, e.message)
            return ServiceResult.fail(e)

        logger.info("booking %s created for item %s by %s", booking.id, booking.item_id, borrower_id)
        self._publish("booking.created", booking, borrower_id, {"itemId": booking.item_id})
        return ServiceResult.ok(booking)

    # -------------------------
    # STATUS
    # -------------------------
    def update_status(
        self,
        booking_id: str,
        requester_id: str,
        target: Union[str, BookingStatus],
        reason: Optional[str] = None,
        caller_role: str = "user",
    ) -> ServiceResult[Booking]:
        try:
            target = machine.coerce_status(target)
            existing = self.bookings.get(booking_id)
            if existing is None:
                raise NotFoundError("Booking not found")

            with self.bookings.item_lock(existing.item_id):
                # Re-read under the lock: another request may have moved it meanwhile
                booking = self.bookings.get(booking_id, for_update=True)
                if booking is None:
                    raise NotFoundError("Booking not found")
                current = machine.coerce_status(booking.booking_status)
                machine.check_transition(booking, requester_id, target, caller_role)

                if current is BookingStatus.PENDING and target is BookingStatus.CONFIRMED:
                    availability = self.availability.is_available(
                        booking.item_id, booking.start_date, booking.end_date, exclude_booking_id=booking.id
                    )
                    if not availability.available:
                        raise UnavailableError(
                            availability.reason, {"conflicts": list(availability.conflicting_booking_ids)}
                        )

                machine.transition(booking, requester_id, target, reason, caller_role, now=self.clock())
                self.bookings.save(booking)

                item_status = machine.item_status_for(target)
                if item_status is not None:
                    self.items.set_item_status(booking.item_id, item_status)
                if target is BookingStatus.CONFIRMED:
                    self.bookings.record_payment_placeholder(booking)
        except BookingError as e:
            logger.info("update_status %s -> %s rejected: %s %s", booking_id, target, e.kind, e.message)
            return ServiceResult.fail(e)

        logger.info("booking %s moved %s -> %s by %s", booking_id, current.value, target.value, requester_id)
        self._publish(f"booking.{target.value}", booking, requester_id, {"from": current.value, "reason": reason})
        return ServiceResult.ok(booking)

    # -------------------------
    # RATING
    # -------------------------
    def add_rating(
        self,
        booking_id: str,
        requester_id: str,
        rating: int,
        feedback: Optional[str] = None,
    ) -> ServiceResult[Booking]:
        try:
            if isinstance(rating, bool) or not isinstance(rating, int) or not 1 <= rating <= 5:
                raise InvalidInputError("Rating must be an integer between 1 and 5")

            with self.bookings.transaction():
                booking = self.bookings.get(booking_id, for_update=True)
                if booking is None:
                    raise NotFoundError("Booking not found")

                if requester_id == booking.lender_user_id:
                    role, rated_user_id = BookingRole.LENDER, booking.borrower_user_id
                elif requester_id == booking.borrower_user_id:
                    role, rated_user_id = BookingRole.BORROWER, booking.lender_user_id
                else:
                    raise UnauthorizedError("You are not authorized to rate this booking")

                if booking.booking_status != BookingStatus.COMPLETED.value:
                    raise InvalidTransitionError(
                        booking.booking_status, "rated", "Can only rate completed bookings"
                    )

                rating_field, feedback_field = f"rating_by_{role.value}", f"feedback_by_{role.value}"
                if getattr(booking, rating_field) is not None:
                    raise AlreadyRatedError("You have already rated this booking")

                setattr(booking, rating_field, rating)
                setattr(booking, feedback_field, feedback)
                booking.updated_at = self.clock()
                self.bookings.save(booking)

                # Placeholder trust policy: running mean of every rating received
                score = self.queries.received_rating_average(rated_user_id)
                self.users.set_trust_score(rated_user_id, score)
        except BookingError as e:
            logger.info("add_rating on %s rejected: %s %s", booking_id, e.kind, e.message)
            return ServiceResult.fail(e)

        self._publish("booking.rated", booking, requester_id, {"role": role.value, "rating": rating})
        return ServiceResult.ok(booking)

    # -------------------------
    # READS
    # -------------------------
    def get_booking(self, booking_id: str, requester_id: str, caller_role: str = "user") -> ServiceResult[Booking]:
        try:
            booking = self.bookings.get(booking_id)
            if booking is None:
                raise NotFoundError("Booking not found")
            if not machine.resolve_roles(booking, requester_id, caller_role):
                raise UnauthorizedError("You are not authorized to view this booking")
        except BookingError as e:
            return ServiceResult.fail(e)
        return ServiceResult.ok(booking)

    def check_availability(self, item_id: str, start_date: date, end_date: date) -> ServiceResult[Availability]:
        try:
            if self.items.get_item_terms(item_id) is None:
                raise NotFoundError("Item not found")
            return ServiceResult.ok(self.availability.is_available(item_id, start_date, end_date))
        except BookingError as e:
            return ServiceResult.fail(e)

    def get_user_bookings(self, user_id: str, filters: BookingFilters) -> ServiceResult[Page[Booking]]:
        try:
            return ServiceResult.ok(self.queries.user_bookings(user_id, filters))
        except BookingError as e:
            return ServiceResult.fail(e)

    def list_all_bookings(self, filters: BookingFilters) -> ServiceResult[Page[Booking]]:
        try:
            return ServiceResult.ok(self.queries.all_bookings(filters))
        except BookingError as e:
            return ServiceResult.fail(e)

    def get_user_booking_stats(self, user_id: str) -> ServiceResult[BookingStats]:
        return ServiceResult.ok(self.queries.user_stats(user_id))

    def _publish(self, event_type: str, booking: Booking, actor_id: str, payload: dict) -> None:
        self.events.publish(
            BookingEvent(
                event_type=event_type,
                booking_id=booking.id,
                actor_user_id=actor_id,
                payload={"status": booking.booking_status, **payload},
                occurred_at=self.clock(),
            )
        )
