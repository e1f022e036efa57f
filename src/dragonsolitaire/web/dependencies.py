"""FastAPI dependency injection."""

from __future__ import annotations

from typing import Generator

from sqlalchemy.orm import Session as SQLSession

from dragonsolitaire.web.db import get_session


def get_db() -> Generator[SQLSession, None, None]:
    """Get database session."""
    db = get_session()
    try:
        yield db
    finally:
        db.close()
