import math
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Generic, Optional, Sequence, TypeVar

from peerrent.core.config import settings
from peerrent.core.enums import BookingStatus
from peerrent.core.errors import InvalidInputError
from peerrent.models.booking import Booking
from peerrent.repositories.base import BookingQuery, BookingRepository

T = TypeVar("T")

ROLES = ("lender", "borrower", "both")
RECENT_BOOKINGS_LIMIT = 5


@dataclass
class BookingFilters:
    statuses: Sequence[str] = field(default_factory=tuple)
    date_from: Optional[date] = None
    date_to: Optional[date] = None
    role: str = "both"
    item_id: Optional[str] = None
    page: int = 1
    limit: int = settings.DEFAULT_PAGE_LIMIT


@dataclass
class Page(Generic[T]):
    items: list[T]
    page: int
    limit: int
    total: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    @property
    def has_prev(self) -> bool:
        return self.page > 1


@dataclass
class RoleStats:
    total_bookings: int = 0
    completed_bookings: int = 0
    pending_bookings: int = 0
    total_rent: Decimal = Decimal("0.00")
    average_rating: float = 0.0


@dataclass
class BookingStats:
    as_lender: RoleStats
    as_borrower: RoleStats
    recent_bookings: list[Booking]


def average_rating(ratings: Sequence[Optional[int]]) -> float:
    rated = [r for r in ratings if r is not None]
    if not rated:
        return 0.0
    return sum(rated) / len(rated)


def _role_stats(bookings: list[Booking], rating_field: str) -> RoleStats:
    return RoleStats(
        total_bookings=len(bookings),
        completed_bookings=sum(1 for b in bookings if b.booking_status == BookingStatus.COMPLETED.value),
        pending_bookings=sum(1 for b in bookings if b.booking_status == BookingStatus.PENDING.value),
        total_rent=sum((b.total_rent or Decimal("0") for b in bookings), Decimal("0.00")),
        average_rating=average_rating([getattr(b, rating_field) for b in bookings]),
    )


class BookingQueryService:
    def __init__(self, bookings: BookingRepository):
        self.bookings = bookings

    def _validate(self, filters: BookingFilters) -> None:
        if filters.role not in ROLES:
            raise InvalidInputError(f"role must be one of {', '.join(ROLES)}")
        if filters.page < 1:
            raise InvalidInputError("page must be >= 1")
        if not 1 <= filters.limit <= settings.MAX_PAGE_LIMIT:
            raise InvalidInputError(f"limit must be between 1 and {settings.MAX_PAGE_LIMIT}")
        for s in filters.statuses:
            if s not in {st.value for st in BookingStatus}:
                raise InvalidInputError(f"Unknown booking status: {s}")
        if filters.date_from and filters.date_to and filters.date_to < filters.date_from:
            raise InvalidInputError("dateRange end must not be before start")

    def _search(self, user_id: Optional[str], filters: BookingFilters) -> Page[Booking]:
        self._validate(filters)
        rows, total = self.bookings.search(
            BookingQuery(
                user_id=user_id,
                role=filters.role,
                statuses=tuple(filters.statuses),
                date_from=filters.date_from,
                date_to=filters.date_to,
                item_id=filters.item_id,
                offset=(filters.page - 1) * filters.limit,
                limit=filters.limit,
            )
        )
        return Page(items=rows, page=filters.page, limit=filters.limit, total=total)

    def user_bookings(self, user_id: str, filters: BookingFilters) -> Page[Booking]:
        """Bookings where the user is lender and/or borrower, newest first."""
        return self._search(user_id, filters)

    def all_bookings(self, filters: BookingFilters) -> Page[Booking]:
        return self._search(None, filters)

    def user_stats(self, user_id: str) -> BookingStats:
        # A lender is rated by borrowers and vice versa
        as_lender = _role_stats(self.bookings.list_for_lender(user_id), "rating_by_borrower")
        as_borrower = _role_stats(self.bookings.list_for_borrower(user_id), "rating_by_lender")
        recent, _ = self.bookings.search(BookingQuery(user_id=user_id, role="both", limit=RECENT_BOOKINGS_LIMIT))
        return BookingStats(as_lender=as_lender, as_borrower=as_borrower, recent_bookings=recent)

    def received_rating_average(self, user_id: str) -> Decimal:
        """Mean of every rating the user received in either role; 0 when none."""
        received = [b.rating_by_borrower for b in self.bookings.list_for_lender(user_id)]
        received += [b.rating_by_lender for b in self.bookings.list_for_borrower(user_id)]
        return Decimal(str(average_rating(received))).quantize(Decimal("0.01"))
