from fastapi import Request
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker, Session
from typing import Generator
import logging

from .config import Settings

logger = logging.getLogger(__name__)

Base = declarative_base()

def create_db_engine(settings: Settings) -> Engine:
    """Create the engine with a bounded connection pool.

    Callers beyond ``DB_POOL_SIZE + DB_MAX_OVERFLOW`` wait up to
    ``DB_POOL_TIMEOUT`` seconds for a connection, then fail.
    """
    url = settings.get_database_url
    is_sqlite = url.startswith("sqlite")

    engine = create_engine(
        url,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_timeout=settings.DB_POOL_TIMEOUT,
        pool_recycle=settings.DB_POOL_RECYCLE,
        connect_args={"check_same_thread": False} if is_sqlite else {},
    )

    if is_sqlite:
        # SQLite leaves foreign keys off unless asked per connection
        @event.listens_for(engine, "connect")
        def _enable_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    logger.info(
        f"Database pool ready: size={settings.DB_POOL_SIZE}, "
        f"overflow={settings.DB_MAX_OVERFLOW}, timeout={settings.DB_POOL_TIMEOUT}s"
    )
    return engine

def create_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Database dependency
def get_db(request: Request) -> Generator[Session, None, None]:
    """Get a database session from the application's session factory."""
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()

# Database initialization
def init_db(engine: Engine) -> None:
    """Create any missing tables."""
    # Register the models on Base.metadata
    from ..models import appointment, doctor, user  # noqa: F401

    Base.metadata.create_all(bind=engine)
