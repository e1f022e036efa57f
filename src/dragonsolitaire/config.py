"""Game constants and environment-driven settings."""

from __future__ import annotations

import os

# Dungeon grid bounds
MAX_WIDTH = 7
MAX_HEIGHT = 5

# Resource pile capacities (stock + available)
HEALTH_CAPACITY = 5
GEM_CAPACITY = 10
INVENTORY_CAPACITY = 7
FATE_CAPACITY = 5
DUNGEON_SIZE = 27

# Fate draws range 6-10; a 10 is a critical success
FATE_CRITICAL = 10

MERCHANT_GEM_COST = 1

DEFAULT_DB_URL = "sqlite:///:memory:"
DEFAULT_CORS_ORIGINS = "http://localhost:5173"
DEFAULT_RATE_LIMIT = "120/minute"


def get_db_url() -> str:
    """Database URL for web session storage.

    Defaults to an in-memory SQLite database, so sessions live only as long
    as the server process.
    """
    return os.environ.get("DRAGONSOLITAIRE_DB_URL", DEFAULT_DB_URL)


def get_ip_salt() -> str:
    """Salt used when hashing client IPs."""
    return os.environ.get("DRAGONSOLITAIRE_IP_SALT", "default-dev-salt")


def get_cors_origins() -> list[str]:
    """Allowed CORS origins for the browser client."""
    raw = os.environ.get("DRAGONSOLITAIRE_CORS_ORIGINS", DEFAULT_CORS_ORIGINS)
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


def get_rate_limit() -> str:
    """Default per-client rate limit for the web API, in slowapi syntax."""
    return os.environ.get("DRAGONSOLITAIRE_RATE_LIMIT", DEFAULT_RATE_LIMIT)
