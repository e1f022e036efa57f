"""Web backend for Dragon Solitaire."""

from dragonsolitaire.web.models import Base, GameSessionRecord
from dragonsolitaire.web.db import get_engine, init_db, get_session, get_test_db

__all__ = [
    "Base",
    "GameSessionRecord",
    "get_engine",
    "init_db",
    "get_session",
    "get_test_db",
]
