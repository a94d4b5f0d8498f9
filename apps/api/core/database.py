"""
Engine, session factory and declarative base.

PostgreSQL in deployment (pooled), SQLite for tests and local runs. The
stores commit their own writes, so the request dependency only has to hand
out a live session and close it again.
"""
from typing import Iterator

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import QueuePool, StaticPool
from core.config import settings
import logging
import time

logger = logging.getLogger(__name__)

CONNECT_ATTEMPTS = 3
CONNECT_BACKOFF_SECONDS = 0.1


def _build_engine(url: str) -> Engine:
    if url.startswith("sqlite"):
        # One shared connection keeps an in-memory database alive across sessions
        return create_engine(
            url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
            echo=settings.DEBUG,
        )
    return create_engine(
        url,
        poolclass=QueuePool,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_timeout=settings.DB_POOL_TIMEOUT,
        pool_recycle=settings.DB_POOL_RECYCLE,
        pool_pre_ping=True,
        echo=settings.DEBUG,
    )


engine = _build_engine(settings.database_url)

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
    expire_on_commit=False,  # entities stay readable after the store commits
)

Base = declarative_base()


@event.listens_for(engine, "connect")
def _on_connect(dbapi_conn, connection_record):
    logger.debug(f"Opened database connection ({engine.dialect.name})")


def _open_session() -> Session:
    """Open a session whose connection answered a ping, retrying with backoff."""
    for attempt in range(1, CONNECT_ATTEMPTS + 1):
        db = SessionLocal()
        try:
            db.execute(text("SELECT 1"))
            return db
        except Exception as e:
            db.close()
            if attempt == CONNECT_ATTEMPTS:
                logger.error(f"Database unreachable after {CONNECT_ATTEMPTS} attempts: {e}")
                raise
            logger.warning(f"Database ping failed (attempt {attempt}/{CONNECT_ATTEMPTS}), retrying")
            time.sleep(CONNECT_BACKOFF_SECONDS * (2 ** (attempt - 1)))


def get_db() -> Iterator[Session]:
    """
    FastAPI dependency yielding one session per request.

    Anything left uncommitted when the request fails is rolled back.
    """
    db = _open_session()
    try:
        yield db
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def check_db_connection() -> bool:
    """True when the database answers a trivial query."""
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.error(f"Database connection check failed: {e}")
        return False
