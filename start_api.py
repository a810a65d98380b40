#!/usr/bin/env python3
"""
Run migrations (same process, same DATABASE_URL), then uvicorn.
Ensures tables exist before the app starts taking bookings.
"""
import os
import sys

# 1) Wait for DB (postgres only; sqlite needs no wait)
from peerrent.core.config import settings

if settings.DATABASE_URL.startswith("postgresql"):
    import wait_for_db

    wait_for_db.wait(settings.DATABASE_URL, int(os.getenv("DB_WAIT_TIMEOUT", "60")))

# 2) Run migrations using the same settings as the app
from alembic.config import Config
from alembic import command

alembic_cfg = Config(os.path.join(os.path.dirname(__file__), "alembic.ini"))
alembic_cfg.set_main_option("sqlalchemy.url", settings.DATABASE_URL)
command.upgrade(alembic_cfg, "head")

# 3) Start uvicorn (replace current process)
os.execv(
    sys.executable,
    [sys.executable, "-m", "uvicorn", "peerrent.main:app", "--host", "0.0.0.0", "--port", os.getenv("PORT", "8000")],
)
