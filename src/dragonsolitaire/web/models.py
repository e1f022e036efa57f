"""SQLAlchemy models for web session storage."""

from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, Index, Integer, String, Text
from sqlalchemy.orm import declarative_base


def utc_now() -> datetime:
    """Return current UTC time (timezone-aware)."""
    return datetime.now(timezone.utc)


Base = declarative_base()


class GameSessionRecord(Base):
    """One browser game. ``state_json`` holds the engine snapshot."""

    __tablename__ = "game_sessions"

    id = Column(String, primary_key=True)  # UUID
    owner_hash = Column(String)
    seed = Column(Integer, nullable=False)
    state_json = Column(Text, nullable=False)
    version = Column(Integer, default=1)
    completed = Column(Boolean, default=False)
    won = Column(Boolean, default=False)
    created_at = Column(DateTime, default=utc_now)
    updated_at = Column(DateTime, default=utc_now, onupdate=utc_now)

    __table_args__ = (Index("idx_game_sessions_owner", "owner_hash"),)
