"""Block until the Postgres behind DATABASE_URL accepts connections."""
import os
import sys
import time
from urllib.parse import urlparse

import psycopg2


def connect_kwargs(database_url: str) -> dict:
    # SQLAlchemy URLs carry a driver suffix psycopg2 does not understand
    p = urlparse(database_url.replace("postgresql+psycopg2://", "postgresql://"))
    return {
        "host": p.hostname or "db",
        "port": p.port or 5432,
        "user": p.username or "peerrent",
        "password": p.password or "peerrent",
        "dbname": (p.path or "").lstrip("/") or "peerrent",
    }


def wait(database_url: str, timeout_s: int = 60) -> None:
    kwargs = connect_kwargs(database_url)
    deadline = time.monotonic() + timeout_s
    print(f"[wait_for_db] Waiting for Postgres at {kwargs['host']}:{kwargs['port']} db={kwargs['dbname']} (timeout={timeout_s}s)")
    while True:
        try:
            psycopg2.connect(**kwargs).close()
            print("[wait_for_db] Postgres is ready.")
            return
        except psycopg2.OperationalError as e:
            if time.monotonic() > deadline:
                print(f"[wait_for_db] Timed out waiting for DB. Last error: {e}")
                raise
            time.sleep(1)


if __name__ == "__main__":
    url = os.getenv("DATABASE_URL")
    if not url:
        sys.exit("DATABASE_URL is not set")
    wait(url, int(os.getenv("DB_WAIT_TIMEOUT", "60")))
