from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker

from peerrent.core.config import settings


class Base(DeclarativeBase):
    pass


def serialize_sqlite_writes(engine: Engine) -> Engine:
    """
    SQLite ignores SELECT ... FOR UPDATE, so the item lock would lock nothing.
    Start every transaction with BEGIN IMMEDIATE instead: the write lock is held
    from the first statement until commit/rollback, and concurrent sessions wait
    on the busy timeout.
    """

    @event.listens_for(engine, "connect")
    def _disable_driver_begin(dbapi_connection, connection_record):
        # let SQLAlchemy emit BEGIN itself
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _begin_immediate(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")

    return engine


def create_db_engine(url: str, **kwargs) -> Engine:
    if not url.startswith("sqlite"):
        return create_engine(url, pool_pre_ping=True, **kwargs)
    connect_args = {"check_same_thread": False, "timeout": 30, **kwargs.pop("connect_args", {})}
    return serialize_sqlite_writes(create_engine(url, connect_args=connect_args, **kwargs))


engine = create_db_engine(settings.DATABASE_URL)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
