from peerrent.tasks.celery_app import BOOKING_EVENTS_QUEUE, broker_url, celery


def test_plain_redis_url_is_untouched():
    assert broker_url("redis://localhost:6379/0") == "redis://localhost:6379/0"


def test_tls_redis_gets_cert_reqs():
    assert broker_url("rediss://:pw@cache.example.com:6379/0") == (
        "rediss://:pw@cache.example.com:6379/0?ssl_cert_reqs=CERT_NONE"
    )


def test_tls_redis_keeps_explicit_cert_reqs():
    url = "rediss://cache.example.com:6379/0?ssl_cert_reqs=CERT_REQUIRED"
    assert broker_url(url) == url


def test_booking_events_are_routed_to_their_queue():
    route = celery.conf.task_routes["peerrent.tasks.jobs.record_booking_event"]
    assert route == {"queue": BOOKING_EVENTS_QUEUE}
