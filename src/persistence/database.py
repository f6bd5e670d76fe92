"""Engine and session factory for the ShipMatch database."""
import logging
from contextlib import contextmanager
from typing import Generator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from config.settings import settings
from src.persistence.models import Base

logger = logging.getLogger(__name__)


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    # SQLite ignores REFERENCES unless asked; listings and alerts must point at a real user
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def _build_engine() -> Engine:
    """Create the engine for ``settings.database_url``."""
    url = settings.database_url

    if url.startswith("sqlite"):
        sqlite_engine = create_engine(
            url,
            connect_args={"check_same_thread": False},  # scheduler jobs run off the main thread
        )
        event.listen(sqlite_engine, "connect", _enable_sqlite_foreign_keys)
        return sqlite_engine

    return create_engine(url, pool_size=5, max_overflow=10, pool_pre_ping=True)


engine = _build_engine()
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db() -> None:
    """Create the users, announcements, trips and alerts tables if missing."""
    Base.metadata.create_all(bind=engine)
    logger.info(
        "Database ready (%s) on %s",
        ", ".join(sorted(Base.metadata.tables)),
        engine.url.render_as_string(hide_password=True),
    )


@contextmanager
def get_session() -> Generator[Session, None, None]:
    """Session for one alert scan or publish; commits on success, rolls back on error."""
    session = SessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
