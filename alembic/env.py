from logging.config import fileConfig

from alembic import context
from sqlalchemy import create_engine, pool

from peerrent.core.config import settings
from peerrent.db.session import Base

# Register every table on Base.metadata for autogenerate
from peerrent.models.user import User  # noqa: F401
from peerrent.models.item import Item  # noqa: F401
from peerrent.models.booking import Booking  # noqa: F401
from peerrent.models.payment import Payment  # noqa: F401
from peerrent.models.booking_event import BookingEventRecord  # noqa: F401

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def database_url() -> str:
    # start_api.py passes the URL explicitly; plain `alembic upgrade` falls back to settings
    url = config.get_main_option("sqlalchemy.url") or settings.DATABASE_URL
    if not url:
        raise RuntimeError("DATABASE_URL is not set (check .env / peerrent.core.config.settings)")
    return url


def configure_options(url: str) -> dict:
    return {
        "target_metadata": target_metadata,
        "compare_type": True,
        "compare_server_default": True,
        # SQLite cannot ALTER constraints in place
        "render_as_batch": url.startswith("sqlite"),
    }


def run_migrations_offline() -> None:
    url = database_url()
    context.configure(url=url, literal_binds=True, dialect_opts={"paramstyle": "named"}, **configure_options(url))
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    url = database_url()
    connectable = create_engine(url, poolclass=pool.NullPool)
    with connectable.connect() as connection:
        context.configure(connection=connection, **configure_options(url))
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
