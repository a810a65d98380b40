from decimal import Decimal
from typing import Optional

from sqlalchemy.orm import Session

from peerrent.core.enums import ItemStatus
from peerrent.models.item import Item
from peerrent.repositories.base import ItemTerms
from peerrent.repositories.booking_repository import translate_db_errors


class SqlItemDirectory:
    def __init__(self, db: Session):
        self.db = db

    @translate_db_errors
    def get_item_terms(self, item_id: str) -> Optional[ItemTerms]:
        item = self.db.get(Item, item_id)
        if not item:
            return None
        return ItemTerms(
            item_id=item.id,
            owner_id=item.user_id,
            is_active=bool(item.is_active),
            status=item.status,
            daily_rate=Decimal(str(item.rent_price_per_day)),
            security_amount=Decimal(str(item.security_amount)) if item.security_amount is not None else None,
            min_rental_days=item.min_rental_days or 1,
            max_rental_days=item.max_rental_days or 30,
        )

    @translate_db_errors
    def set_item_status(self, item_id: str, status: ItemStatus) -> None:
        item = self.db.get(Item, item_id)
        if item:
            item.status = status.value
            self.db.flush()
