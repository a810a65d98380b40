from datetime import date

from peerrent.core.security import create_access_token

LENDER = "lender-1"
BORROWER = "borrower-1"
STRANGER = "stranger-1"
ADMIN = "admin-1"
ITEM = "item-1"

# Fixed calendar for service-level tests; the core never compares against "today"
START = date(2030, 1, 10)


def auth_headers(user_id: str) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user_id)}"}
