import logging
from sqlalchemy.orm import Session
from sqlalchemy.exc import ProgrammingError
from peerrent.db.session import SessionLocal
from peerrent.services.audit_service import log_booking_event

logger = logging.getLogger(__name__)


def record_booking_event(event: dict, db: Session | None = None) -> dict:
    """Store a booking event in the audit trail. Notification fan-out would hang off here."""
    own_session = db is None
    db = db or SessionLocal()
    try:
        try:
            record = log_booking_event(db, event)
            db.commit()
        except ProgrammingError:
            # DB not migrated yet; don't crash the worker.
            db.rollback()
            return {"skipped": True, "reason": "missing_tables"}
        logger.info("recorded %s for booking %s", record.event_type, record.booking_id)
        return {"ok": True, "id": record.id}
    finally:
        if own_session:
            db.close()
