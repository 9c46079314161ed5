"""
JobTrack - Database engine, sessions and transient-error retries.

SQLite is the default store. Every SQLite connection enforces foreign keys,
so a job can never point at a user row that does not exist. In-memory
databases share one connection; file databases run in WAL mode.
"""
import logging
import random
import time
from contextlib import contextmanager
from functools import wraps

from sqlalchemy import create_engine, event
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from .config import settings

logger = logging.getLogger("jobtrack.database")

Base = declarative_base()

MAX_RETRY_DELAY = 2.0


def _is_memory_sqlite(url: str) -> bool:
    return url in ("sqlite://", "sqlite:///:memory:")


def create_app_engine(database_url: str = None):
    """
    Build the engine for a database URL (defaults to settings.database_url).

    SQLite connections get foreign key enforcement and a busy timeout;
    in-memory SQLite uses a single shared connection so every session sees
    the same tables. Other backends get pre-ping so dropped connections are
    replaced instead of failing the request.
    """
    url = database_url or settings.database_url

    if not url.startswith("sqlite"):
        logger.info("Created engine with pre-ping connection pool")
        return create_engine(url, pool_pre_ping=True)

    in_memory = _is_memory_sqlite(url)
    if in_memory:
        engine = create_engine(url, connect_args={"check_same_thread": False}, poolclass=StaticPool)
    else:
        engine = create_engine(url, connect_args={"check_same_thread": False})

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        if not in_memory:
            cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute("PRAGMA busy_timeout=5000")
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    logger.info(f"Created SQLite engine ({'in-memory' if in_memory else 'WAL mode'})")
    return engine


engine = create_app_engine()
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def with_retry(func):
    """
    Retry a read on OperationalError (locked database, dropped connection)
    with exponential backoff and jitter.

    Attempts and base delay come from settings. Any other error, and the
    last failed attempt, propagate unchanged.
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        attempts = settings.db_retry_max_attempts
        for attempt in range(1, attempts + 1):
            try:
                return func(*args, **kwargs)
            except OperationalError as exc:
                if attempt == attempts:
                    logger.error(f"{func.__name__} failed after {attempts} attempts: {exc}")
                    raise
                delay = min(settings.db_retry_base_delay * (2 ** (attempt - 1)), MAX_RETRY_DELAY)
                delay += random.uniform(0, delay * 0.5)
                logger.warning(f"{func.__name__} hit a transient DB error "
                               f"(attempt {attempt}/{attempts}), retrying in {delay:.2f}s")
                time.sleep(delay)

    return wrapper


def get_db():
    """FastAPI dependency that yields a request-scoped session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def get_resilient_session(session_factory=None):
    """
    Session for work outside request handlers (scripts, maintenance).

    Commits when the block finishes, rolls back and re-raises on any error.

    Usage:
        with get_resilient_session() as db:
            db.query(...)
    """
    db = (session_factory or SessionLocal)()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        logger.warning("Session rolled back")
        raise
    finally:
        db.close()


def init_db(bind=None):
    """
    Create all tables from model metadata.

    Used for fresh databases (which are then stamped at the latest Alembic
    revision) and by the tests. Existing databases are upgraded with
    `alembic upgrade head`.
    """
    from . import models  # noqa: F401
    from .auth import models as auth_models  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)
