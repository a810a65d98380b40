import functools
import logging
import uuid
from contextlib import contextmanager
from typing import Iterator, Optional, Sequence

from sqlalchemy import func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from peerrent.core.enums import BookingStatus
from peerrent.core.errors import InfrastructureError
from peerrent.models.booking import Booking
from peerrent.models.item import Item
from peerrent.models.payment import Payment
from peerrent.repositories.base import BookingQuery

logger = logging.getLogger(__name__)


def translate_db_errors(fn):
    """Surface SQLAlchemy failures as InfrastructureError, never as a business result."""

    @functools.wraps(fn)
    def wrapper(*args, **kwargs):
        try:
            return fn(*args, **kwargs)
        except SQLAlchemyError as e:
            logger.exception("database error in %s", fn.__qualname__)
            raise InfrastructureError(f"{fn.__name__} failed") from e

    return wrapper


class SqlBookingRepository:
    def __init__(self, db: Session):
        self.db = db

    @translate_db_errors
    def get(self, booking_id: str, for_update: bool = False) -> Optional[Booking]:
        stmt = select(Booking).where(Booking.id == booking_id)
        if for_update:
            # populate_existing: the identity map may hold a copy read before the lock
            stmt = stmt.with_for_update().execution_options(populate_existing=True)
        return self.db.execute(stmt).scalar_one_or_none()

    @translate_db_errors
    def add(self, booking: Booking) -> None:
        self.db.add(booking)
        self.db.flush()

    @translate_db_errors
    def save(self, booking: Booking) -> None:
        self.db.add(booking)
        self.db.flush()

    @translate_db_errors
    def list_for_item(self, item_id: str, statuses: Sequence[BookingStatus]) -> list[Booking]:
        stmt = (
            select(Booking)
            .where(Booking.item_id == item_id, Booking.booking_status.in_([s.value for s in statuses]))
            .execution_options(populate_existing=True)
        )
        return list(self.db.execute(stmt).scalars())

    @translate_db_errors
    def list_for_lender(self, user_id: str) -> list[Booking]:
        return list(self.db.execute(select(Booking).where(Booking.lender_user_id == user_id)).scalars())

    @translate_db_errors
    def list_for_borrower(self, user_id: str) -> list[Booking]:
        return list(self.db.execute(select(Booking).where(Booking.borrower_user_id == user_id)).scalars())

    @translate_db_errors
    def search(self, query: BookingQuery) -> tuple[list[Booking], int]:
        stmt = select(Booking)
        if query.user_id:
            if query.role == "lender":
                stmt = stmt.where(Booking.lender_user_id == query.user_id)
            elif query.role == "borrower":
                stmt = stmt.where(Booking.borrower_user_id == query.user_id)
            else:
                stmt = stmt.where(or_(Booking.lender_user_id == query.user_id, Booking.borrower_user_id == query.user_id))
        if query.statuses:
            stmt = stmt.where(Booking.booking_status.in_(list(query.statuses)))
        if query.item_id:
            stmt = stmt.where(Booking.item_id == query.item_id)
        # date range keeps bookings overlapping [date_from, date_to]
        if query.date_from:
            stmt = stmt.where(Booking.end_date >= query.date_from)
        if query.date_to:
            stmt = stmt.where(Booking.start_date <= query.date_to)

        total = self.db.execute(select(func.count()).select_from(stmt.subquery())).scalar_one()
        rows = self.db.execute(
            stmt.order_by(Booking.created_at.desc(), Booking.id.desc()).offset(query.offset).limit(query.limit)
        ).scalars()
        return list(rows), int(total)

    @translate_db_errors
    def record_payment_placeholder(self, booking: Booking) -> None:
        self.db.add(Payment(
            id=str(uuid.uuid4()),
            booking_id=booking.id,
            user_id=booking.borrower_user_id,
            amount=booking.total_amount,
            platform_fee=booking.platform_fee,
            payment_status="pending",
        ))
        self.db.flush()

    @contextmanager
    def transaction(self) -> Iterator[None]:
        try:
            yield
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.exception("transaction rolled back")
            raise InfrastructureError("transaction failed") from e
        except Exception:
            self.db.rollback()
            raise

    @contextmanager
    def item_lock(self, item_id: str) -> Iterator[None]:
        with self.transaction():
            # Row lock on Postgres; on SQLite the BEGIN IMMEDIATE transaction already holds the write lock
            try:
                self.db.execute(select(Item.id).where(Item.id == item_id).with_for_update())
            except SQLAlchemyError as e:
                raise InfrastructureError("could not lock item") from e
            yield
