"""Database setup and utilities."""

from __future__ import annotations

from typing import Any, Optional

from sqlalchemy import create_engine
from sqlalchemy.orm import Session as SQLSession
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from dragonsolitaire.config import get_db_url
from dragonsolitaire.web.models import Base

# Module-level caches so each URL gets one engine and one sessionmaker
_engines: dict[str, Any] = {}
_session_factories: dict[str, Any] = {}


def _build_engine(db_url: str):
    if db_url.startswith("sqlite"):
        kwargs: dict[str, Any] = {"connect_args": {"check_same_thread": False}}
        if ":memory:" in db_url or db_url == "sqlite://":
            # Every connection must see the same in-memory database
            kwargs["poolclass"] = StaticPool
        return create_engine(db_url, **kwargs)
    return create_engine(db_url)


def get_engine(db_url: Optional[str] = None):
    """Create or get the cached SQLAlchemy engine for ``db_url``."""
    if db_url is None:
        db_url = get_db_url()
    if db_url not in _engines:
        _engines[db_url] = _build_engine(db_url)
    return _engines[db_url]


def init_db(session_or_engine) -> None:
    """Create all tables."""
    if hasattr(session_or_engine, "get_bind"):
        engine = session_or_engine.get_bind()
    else:
        engine = session_or_engine
    Base.metadata.create_all(engine)


def get_session(db_url: Optional[str] = None) -> SQLSession:
    """Get a new database session from a cached sessionmaker."""
    if db_url is None:
        db_url = get_db_url()
    if db_url not in _session_factories:
        _session_factories[db_url] = sessionmaker(bind=get_engine(db_url))
    return _session_factories[db_url]()


def get_test_db() -> SQLSession:
    """Get a fresh in-memory database for testing.

    Note: Caller must call init_db(session) to create tables.
    """
    engine = _build_engine("sqlite:///:memory:")
    SessionLocal = sessionmaker(bind=engine)
    return SessionLocal()
