"""
Engine and sessions for the blog store.

Route handlers get one session per request through ``get_db``; repositories
commit on it and never open their own.
"""
from sqlalchemy import create_engine, text
from sqlalchemy.orm import declarative_base, sessionmaker, Session
from typing import Generator
import logging

from .config import settings

logger = logging.getLogger(__name__)

# SQLite connections are shared with FastAPI's worker threads
engine = create_engine(
    settings.DATABASE_URL,
    connect_args={"check_same_thread": False} if "sqlite" in settings.DATABASE_URL else {},
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db() -> Generator[Session, None, None]:
    """Request-scoped session, closed once the response is sent."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db() -> None:
    """
    Create the ``users`` and ``posts`` tables together with their indexes,
    including the partial unique index on active emails. Existing tables are
    left alone, so running it on every startup is safe.
    """
    try:
        from .models import User, Post  # noqa: F401

        Base.metadata.create_all(bind=engine)
        logger.info("Blog tables ready on %s", engine.url.render_as_string(hide_password=True))
    except Exception as e:
        logger.error("Could not create blog tables: %s", e)
        raise


def check_db_connection() -> bool:
    """Round-trip a trivial query; backs ``GET /health``."""
    try:
        with SessionLocal() as db:
            db.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.error("Blog store unreachable: %s", e)
        return False
