from datetime import datetime, timedelta, timezone
from decimal import Decimal
from itertools import count

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from peerrent.db.session import Base, create_db_engine, get_db
from peerrent.main import app
from peerrent.models.booking import Booking  # noqa: F401
from peerrent.models.booking_event import BookingEventRecord  # noqa: F401
from peerrent.models.item import Item
from peerrent.models.payment import Payment  # noqa: F401
from peerrent.models.user import User
from peerrent.services.booking_service import BookingRequest, BookingService
from tests.fakes import (
    FakeItemDirectory,
    FakeUserDirectory,
    InMemoryBookingRepository,
    InMemoryStore,
    RecordingEventPublisher,
)
from tests.helpers import ADMIN, BORROWER, ITEM, LENDER, START, STRANGER


class TickingClock:
    """Deterministic clock: each call is one second after the previous one."""

    def __init__(self, start: datetime):
        self._start = start
        self._ticks = count()

    def __call__(self) -> datetime:
        return self._start + timedelta(seconds=next(self._ticks))


# -------------------------
# Service-level fixtures (in-memory collaborators)
# -------------------------
@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def items(store):
    directory = FakeItemDirectory(store)
    directory.add_item(ITEM, owner_id=LENDER, daily_rate="25.00", security_amount="100.00")
    return directory


@pytest.fixture
def users(store):
    directory = FakeUserDirectory(store)
    for user_id in (LENDER, BORROWER, STRANGER):
        directory.add_user(user_id)
    return directory


@pytest.fixture
def bookings(store):
    return InMemoryBookingRepository(store)


@pytest.fixture
def events():
    return RecordingEventPublisher()


@pytest.fixture
def service(bookings, items, users, events):
    return BookingService(
        bookings=bookings,
        items=items,
        users=users,
        events=events,
        clock=TickingClock(datetime(2030, 1, 1, 9, 0, tzinfo=timezone.utc)),
    )


@pytest.fixture
def make_booking(service):
    """Create a booking through the service and return it; fails the test on rejection."""

    def _make(start=START, days=3, borrower=BORROWER, item_id=ITEM):
        result = service.create_booking(
            borrower,
            BookingRequest(item_id=item_id, start_date=start, end_date=start + timedelta(days=days - 1)),
        )
        assert result.success, result.error
        return result.data

    return _make


# -------------------------
# HTTP fixtures (SQLite in memory)
# -------------------------
@pytest.fixture
def db_session():
    engine = create_db_engine("sqlite://", poolclass=StaticPool)
    Base.metadata.create_all(bind=engine)
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    db = TestingSession()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def client(db_session):
    def _override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = _override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def seeded(db_session):
    """Users lender/borrower/stranger/admin and one item owned by the lender."""
    db_session.add_all([
        User(id=LENDER, email="lender@example.com", full_name="Lena Lender"),
        User(id=BORROWER, email="borrower@example.com", full_name="Bo Borrower"),
        User(id=STRANGER, email="stranger@example.com", full_name="Sam Stranger"),
        User(id=ADMIN, email="admin@example.com", full_name="Ada Admin", role="admin"),
        Item(
            id=ITEM,
            user_id=LENDER,
            title="Cordless drill",
            rent_price_per_day=Decimal("25.00"),
            security_amount=Decimal("100.00"),
            min_rental_days=1,
            max_rental_days=30,
        ),
    ])
    db_session.commit()
    return db_session

