import uuid, json
from datetime import datetime, timezone
from sqlalchemy.orm import Session
from peerrent.models.booking_event import BookingEventRecord

def log_booking_event(db: Session, event: dict) -> BookingEventRecord:
    """Persist one serialized BookingEvent (see event_service.BookingEvent.to_dict)."""
    occurred = event.get("occurred_at")
    record = BookingEventRecord(
        id=str(uuid.uuid4()),
        event_type=event["event_type"],
        booking_id=event["booking_id"],
        actor_user_id=event.get("actor_user_id") or "",
        payload_json=json.dumps(event.get("payload") or {}, ensure_ascii=False, default=str),
        occurred_at=datetime.fromisoformat(occurred) if occurred else datetime.now(timezone.utc),
    )
    db.add(record)
    return record
