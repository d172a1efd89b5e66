"""Database connection, session management, and table initialization.

Uses lazy initialization so importing this module does NOT trigger
Settings() or engine creation at import time.
"""

from pathlib import Path

from sqlalchemy import create_engine, make_url
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from emissions_dashboard.config import Settings


class Base(DeclarativeBase):
    """SQLAlchemy declarative base for all models."""
    pass


def build_engine(database_url: str, echo: bool = False):
    """Create a SQLAlchemy engine.

    Uses check_same_thread=False for SQLite to allow FastAPI's
    threaded request handling.
    """
    connect_args = {}
    if database_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False
        db_file = make_url(database_url).database
        if db_file and db_file != ":memory:":
            Path(db_file).parent.mkdir(parents=True, exist_ok=True)
    return create_engine(database_url, echo=echo, connect_args=connect_args)


def build_session_factory(engine) -> sessionmaker[Session]:
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


# ---------------------------------------------------------------------------
# Lazy application-level singletons (created on first access, not at import)
# ---------------------------------------------------------------------------

_engine = None
_read_engine = None
_SessionLocal = None
_ReadSessionLocal = None


def _get_engine():
    """Return the application-level engine, creating it on first call."""
    global _engine
    if _engine is None:
        settings = Settings()
        _engine = build_engine(settings.database_url, echo=settings.debug)
    return _engine


def _get_read_engine():
    """Engine for the read-only views; the write engine when no read URL is set."""
    global _read_engine
    if _read_engine is None:
        settings = Settings()
        if settings.read_database_url == settings.database_url:
            _read_engine = _get_engine()
        else:
            _read_engine = build_engine(settings.read_database_url, echo=settings.debug)
    return _read_engine


def _get_session_factory():
    global _SessionLocal
    if _SessionLocal is None:
        _SessionLocal = build_session_factory(_get_engine())
    return _SessionLocal


def _get_read_session_factory():
    global _ReadSessionLocal
    if _ReadSessionLocal is None:
        _ReadSessionLocal = build_session_factory(_get_read_engine())
    return _ReadSessionLocal


def get_db():
    """FastAPI dependency that yields a database session per request."""
    db = _get_session_factory()()
    try:
        yield db
    finally:
        db.close()


def get_read_db():
    """Like ``get_db`` but bound to the read-only store."""
    db = _get_read_session_factory()()
    try:
        yield db
    finally:
        db.close()


def init_db():
    """Create all tables that don't exist yet."""
    # Import models so they register with Base.metadata
    import emissions_dashboard.models  # noqa: F401
    Base.metadata.create_all(bind=_get_engine())
