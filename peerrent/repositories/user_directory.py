from decimal import Decimal

from sqlalchemy.orm import Session

from peerrent.models.user import User
from peerrent.repositories.booking_repository import translate_db_errors


class SqlUserDirectory:
    def __init__(self, db: Session):
        self.db = db

    @translate_db_errors
    def exists(self, user_id: str) -> bool:
        user = self.db.get(User, user_id)
        return bool(user and user.is_active)

    @translate_db_errors
    def set_trust_score(self, user_id: str, score: Decimal) -> None:
        user = self.db.get(User, user_id)
        if user:
            user.trust_score = score
            self.db.flush()
