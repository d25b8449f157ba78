from sqlmodel import SQLModel, create_engine, Session
from sqlalchemy import event
from sqlalchemy.pool import NullPool
import logging

from .config import DATABASE_URL

logger = logging.getLogger(__name__)


def make_engine(url: str, **kwargs):
    if url.startswith("sqlite"):
        kwargs.setdefault("connect_args", {"check_same_thread": False})
    else:
        kwargs.setdefault("poolclass", NullPool)
        kwargs.setdefault("pool_pre_ping", True)

    new_engine = create_engine(url, **kwargs)

    if url.startswith("sqlite"):
        # SQLite ignores foreign keys (and so ON DELETE rules) unless asked
        @event.listens_for(new_engine, "connect")
        def _enable_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    return new_engine


engine = make_engine(DATABASE_URL)


def init_db(bind=None):
    """Create all tables that do not exist yet"""
    from . import models  # noqa: F401  registers tables on SQLModel.metadata

    SQLModel.metadata.create_all(bind or engine)
    logger.info("Database schema ready")


def get_session():
    with Session(engine) as session:
        yield session
