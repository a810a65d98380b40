"""
HTTP tests for the booking routes against an in-memory SQLite database.
"""

from datetime import date, timedelta

from peerrent.models.item import Item
from peerrent.models.payment import Payment
from peerrent.models.user import User
from tests.helpers import ADMIN, BORROWER, ITEM, LENDER, STRANGER, auth_headers

API = "/api/v1"


def _dates(offset=10, days=3):
    start = date.today() + timedelta(days=offset)
    return start.isoformat(), (start + timedelta(days=days - 1)).isoformat()


def _create(client, user=BORROWER, offset=10, days=3, **extra):
    start, end = _dates(offset, days)
    return client.post(
        f"{API}/bookings",
        json={"itemId": ITEM, "startDate": start, "endDate": end, **extra},
        headers=auth_headers(user),
    )


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_create_booking_returns_camel_case(client, seeded):
    res = _create(client, deliveryMode="pickup", specialInstructions="Ring twice")

    assert res.status_code == 201
    body = res.json()
    assert body["success"] is True
    data = body["data"]
    assert data["bookingStatus"] == "pending"
    assert data["lenderUserId"] == LENDER
    assert data["borrowerUserId"] == BORROWER
    assert data["totalDays"] == 3
    assert data["totalRent"] == "75.00"
    assert data["platformFee"] == "10.00"
    assert data["totalAmount"] == "185.00"
    assert data["dailyRate"] == "25.00"
    assert data["securityAmount"] == "100.00"
    assert data["deliveryMode"] == "pickup"


def test_requires_token(client, seeded):
    start, end = _dates()
    res = client.post(f"{API}/bookings", json={"itemId": ITEM, "startDate": start, "endDate": end})
    assert res.status_code == 401


def test_invalid_token(client, seeded):
    res = client.get(f"{API}/bookings/my", headers={"Authorization": "Bearer not-a-jwt"})
    assert res.status_code == 401


def test_start_date_in_past_is_validation_error(client, seeded):
    yesterday = (date.today() - timedelta(days=1)).isoformat()
    res = client.post(
        f"{API}/bookings",
        json={"itemId": ITEM, "startDate": yesterday, "endDate": yesterday},
        headers=auth_headers(BORROWER),
    )
    assert res.status_code == 400
    assert res.json()["error"] == "Validation error"
    assert res.json()["code"] == "InvalidInput"


def test_self_booking_is_rejected(client, seeded):
    res = _create(client, user=LENDER)
    assert res.status_code == 422
    assert res.json()["code"] == "SelfBooking"


def test_out_of_bounds(client, seeded):
    res = _create(client, days=31)
    assert res.status_code == 422
    assert res.json()["error"] == "Maximum rental period is 30 days"


def test_lifecycle_over_http(client, seeded, db_session):
    booking_id = _create(client).json()["data"]["id"]

    res = client.put(f"{API}/bookings/{booking_id}/confirm", headers=auth_headers(BORROWER))
    assert res.status_code == 409
    assert res.json()["code"] == "InvalidTransition"

    res = client.put(f"{API}/bookings/{booking_id}/confirm", headers=auth_headers(LENDER))
    assert res.status_code == 200
    assert res.json()["data"]["bookingStatus"] == "confirmed"
    assert res.json()["data"]["confirmedAt"] is not None
    assert db_session.get(Item, ITEM).status == "booked"
    assert db_session.query(Payment).filter(Payment.booking_id == booking_id).count() == 1

    res = client.put(f"{API}/bookings/{booking_id}/start", headers=auth_headers(BORROWER))
    assert res.json()["data"]["bookingStatus"] == "inProgress"
    assert db_session.get(Item, ITEM).status == "inTransit"

    res = client.put(f"{API}/bookings/{booking_id}/complete", headers=auth_headers(LENDER))
    assert res.json()["data"]["bookingStatus"] == "completed"
    assert db_session.get(Item, ITEM).status == "available"

    res = client.post(f"{API}/bookings/{booking_id}/rating", json={"rating": 5}, headers=auth_headers(BORROWER))
    assert res.status_code == 200
    assert res.json()["data"]["ratingByBorrower"] == 5
    db_session.expire_all()
    assert float(db_session.get(User, LENDER).trust_score) == 5.0

    res = client.post(f"{API}/bookings/{booking_id}/rating", json={"rating": 4}, headers=auth_headers(BORROWER))
    assert res.status_code == 409
    assert res.json()["code"] == "AlreadyRated"


def test_overlapping_confirm_over_http(client, seeded, db_session):
    db_session.add(User(id="borrower-2", email="b2@example.com"))
    db_session.commit()

    first = _create(client, offset=10).json()["data"]["id"]
    second = _create(client, user="borrower-2", offset=11).json()["data"]["id"]

    assert client.put(f"{API}/bookings/{first}/confirm", headers=auth_headers(LENDER)).status_code == 200
    res = client.put(f"{API}/bookings/{second}/confirm", headers=auth_headers(LENDER))

    assert res.status_code == 409
    assert res.json()["code"] == "Unavailable"
    assert res.json()["error"] == "Item is not available for the selected dates"


def test_cancel_with_and_without_reason(client, seeded):
    first = _create(client, offset=10).json()["data"]["id"]
    second = _create(client, offset=20).json()["data"]["id"]

    res = client.put(f"{API}/bookings/{first}/cancel", json={"reason": "No longer needed"}, headers=auth_headers(BORROWER))
    assert res.json()["data"]["cancellationReason"] == "No longer needed"

    res = client.put(f"{API}/bookings/{second}/cancel", headers=auth_headers(LENDER))
    assert res.status_code == 200
    assert res.json()["data"]["bookingStatus"] == "cancelled"
    assert res.json()["data"]["cancellationReason"] is None


def test_generic_status_route(client, seeded):
    booking_id = _create(client).json()["data"]["id"]

    res = client.put(f"{API}/bookings/{booking_id}/status", json={"status": "confirmed"}, headers=auth_headers(LENDER))
    assert res.json()["data"]["bookingStatus"] == "confirmed"

    res = client.put(f"{API}/bookings/{booking_id}/status", json={"status": "shipped"}, headers=auth_headers(LENDER))
    assert res.status_code == 400


def test_get_booking_visibility(client, seeded):
    booking_id = _create(client).json()["data"]["id"]

    assert client.get(f"{API}/bookings/{booking_id}", headers=auth_headers(LENDER)).status_code == 200
    assert client.get(f"{API}/bookings/{booking_id}", headers=auth_headers(ADMIN)).status_code == 200
    res = client.get(f"{API}/bookings/{booking_id}", headers=auth_headers(STRANGER))
    assert res.status_code == 403
    assert res.json()["code"] == "Unauthorized"
    assert client.get(f"{API}/bookings/missing", headers=auth_headers(LENDER)).status_code == 404


def test_my_bookings_pagination(client, seeded):
    for n in range(3):
        _create(client, offset=10 + 5 * n, days=2)

    res = client.get(f"{API}/bookings/my", params={"role": "borrower", "limit": 2}, headers=auth_headers(BORROWER))
    body = res.json()
    assert len(body["data"]) == 2
    assert body["pagination"] == {
        "page": 1,
        "limit": 2,
        "total": 3,
        "totalPages": 2,
        "hasNext": True,
        "hasPrev": False,
    }

    res = client.get(f"{API}/bookings/my", params={"role": "lender"}, headers=auth_headers(BORROWER))
    assert res.json()["pagination"]["total"] == 0

    res = client.get(f"{API}/bookings/my", params={"status": ["cancelled"]}, headers=auth_headers(LENDER))
    assert res.json()["data"] == []


def test_my_booking_stats(client, seeded):
    _create(client, offset=10)
    res = client.get(f"{API}/bookings/my/stats", headers=auth_headers(LENDER))

    data = res.json()["data"]
    assert data["asLender"]["totalBookings"] == 1
    assert data["asLender"]["pendingBookings"] == 1
    assert data["asLender"]["totalEarnings"] == "75.00"
    assert data["asBorrower"]["totalSpent"] == "0.00"
    assert len(data["recentBookings"]) == 1


def test_item_availability(client, seeded):
    start, end = _dates(offset=10)
    res = client.get(
        f"{API}/items/{ITEM}/availability",
        params={"startDate": start, "endDate": end},
        headers=auth_headers(BORROWER),
    )
    assert res.json() == {"success": True, "data": {"available": True, "reason": None}}

    booking_id = _create(client, offset=10).json()["data"]["id"]
    client.put(f"{API}/bookings/{booking_id}/confirm", headers=auth_headers(LENDER))
    res = client.get(
        f"{API}/items/{ITEM}/availability",
        params={"startDate": start, "endDate": end},
        headers=auth_headers(BORROWER),
    )
    assert res.json()["data"]["available"] is False

    res = client.get(
        f"{API}/items/unknown/availability",
        params={"startDate": start, "endDate": end},
        headers=auth_headers(BORROWER),
    )
    assert res.status_code == 404


def test_admin_resolves_dispute(client, seeded):
    booking_id = _create(client).json()["data"]["id"]
    for action, user in (("confirm", LENDER), ("start", BORROWER), ("dispute", BORROWER)):
        assert client.put(f"{API}/bookings/{booking_id}/{action}", headers=auth_headers(user)).status_code == 200

    res = client.put(
        f"{API}/admin/bookings/{booking_id}/resolve", json={"status": "cancelled"}, headers=auth_headers(LENDER)
    )
    assert res.status_code == 403

    res = client.put(
        f"{API}/admin/bookings/{booking_id}/resolve", json={"status": "inProgress"}, headers=auth_headers(ADMIN)
    )
    assert res.status_code == 400

    res = client.put(
        f"{API}/admin/bookings/{booking_id}/resolve",
        json={"status": "cancelled", "reason": "Item damaged before handover"},
        headers=auth_headers(ADMIN),
    )
    assert res.status_code == 200
    assert res.json()["data"]["bookingStatus"] == "cancelled"

    res = client.get(f"{API}/admin/bookings", params={"status": "cancelled"}, headers=auth_headers(ADMIN))
    assert [b["id"] for b in res.json()["data"]] == [booking_id]
