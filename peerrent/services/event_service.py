import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Protocol

from peerrent.core.config import settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BookingEvent:
    event_type: str  # booking.created, booking.confirmed, booking.rated, ...
    booking_id: str
    actor_user_id: str
    payload: dict[str, Any] = field(default_factory=dict)
    occurred_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> dict[str, Any]:
        return {
            "event_type": self.event_type,
            "booking_id": self.booking_id,
            "actor_user_id": self.actor_user_id,
            "payload": self.payload,
            "occurred_at": self.occurred_at.isoformat(),
        }


class EventPublisher(Protocol):
    def publish(self, event: BookingEvent) -> None: ...


class LoggingEventPublisher:
    def publish(self, event: BookingEvent) -> None:
        logger.info("booking event %s booking=%s actor=%s", event.event_type, event.booking_id, event.actor_user_id)


class CeleryEventPublisher:
    """Fire-and-forget: hands the event to the worker; no delivery guarantee."""

    def publish(self, event: BookingEvent) -> None:
        from peerrent.tasks.jobs import record_booking_event

        try:
            record_booking_event.delay(event.to_dict())
        except Exception:
            # Broker outages must not undo a committed booking change
            logger.exception("failed to enqueue booking event %s for %s", event.event_type, event.booking_id)


def get_event_publisher() -> EventPublisher:
    if settings.EVENT_DISPATCH == "celery":
        return CeleryEventPublisher()
    return LoggingEventPublisher()
