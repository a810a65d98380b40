"""
Collaborator contracts consumed by the booking core.

The booking services never talk to a database session directly; they receive
implementations of these protocols. The ``Sql*`` classes in this package are the
SQLAlchemy-backed implementations; tests use in-memory fakes.
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import ContextManager, Optional, Protocol, Sequence

from peerrent.core.enums import BookingStatus, ItemStatus
from peerrent.models.booking import Booking


@dataclass(frozen=True)
class ItemTerms:
    item_id: str
    owner_id: str
    is_active: bool
    status: str
    daily_rate: Decimal
    security_amount: Optional[Decimal]
    min_rental_days: int
    max_rental_days: int


@dataclass
class BookingQuery:
    """Storage-level filter; ``role`` is one of lender, borrower, both."""

    user_id: Optional[str] = None
    role: str = "both"
    statuses: Sequence[str] = field(default_factory=tuple)
    date_from: Optional[date] = None
    date_to: Optional[date] = None
    item_id: Optional[str] = None
    offset: int = 0
    limit: int = 20


class ItemDirectory(Protocol):
    def get_item_terms(self, item_id: str) -> Optional[ItemTerms]: ...

    def set_item_status(self, item_id: str, status: ItemStatus) -> None: ...


class UserDirectory(Protocol):
    def exists(self, user_id: str) -> bool: ...

    def set_trust_score(self, user_id: str, score: Decimal) -> None: ...


class BookingRepository(Protocol):
    def get(self, booking_id: str, for_update: bool = False) -> Optional[Booking]: ...

    def add(self, booking: Booking) -> None: ...

    def save(self, booking: Booking) -> None: ...

    def list_for_item(self, item_id: str, statuses: Sequence[BookingStatus]) -> list[Booking]: ...

    def list_for_lender(self, user_id: str) -> list[Booking]: ...

    def list_for_borrower(self, user_id: str) -> list[Booking]: ...

    def search(self, query: BookingQuery) -> tuple[list[Booking], int]: ...

    def record_payment_placeholder(self, booking: Booking) -> None: ...

    def transaction(self) -> ContextManager[None]:
        """Atomic unit: commit on normal exit, roll back on any exception."""
        ...

    def item_lock(self, item_id: str) -> ContextManager[None]:
        """Like ``transaction`` but also serializes work on one item's booking set."""
        ...
