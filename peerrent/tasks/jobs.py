from peerrent.tasks.celery_app import celery
from peerrent.tasks import worker_jobs

@celery.task(name="peerrent.tasks.jobs.record_booking_event")
def record_booking_event(event: dict):
    return worker_jobs.record_booking_event(event)
