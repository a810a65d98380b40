from urllib.parse import parse_qs, urlencode, urlparse, urlunparse

from celery import Celery

from peerrent.core.config import settings

BOOKING_EVENTS_QUEUE = "booking-events"


def broker_url(url: str) -> str:
    """TLS Redis (rediss://) needs an explicit ssl_cert_reqs for Celery's redis transport."""
    parsed = urlparse(url or "")
    if parsed.scheme.lower() != "rediss":
        return url
    query = parse_qs(parsed.query)
    query.setdefault("ssl_cert_reqs", ["CERT_NONE"])
    return urlunparse(parsed._replace(query=urlencode(query, doseq=True)))


celery = Celery(
    "peerrent",
    broker=broker_url(settings.REDIS_URL),
    include=["peerrent.tasks.jobs"],
)

celery.conf.update(
    timezone="UTC",
    # Booking events are fire-and-forget; nobody waits on a result
    task_ignore_result=True,
    task_acks_late=True,
    task_routes={"peerrent.tasks.jobs.record_booking_event": {"queue": BOOKING_EVENTS_QUEUE}},
    broker_connection_retry_on_startup=True,
)
