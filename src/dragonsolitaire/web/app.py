"""FastAPI application for the Dragon Solitaire web client."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from dragonsolitaire import __version__
from dragonsolitaire.config import get_cors_origins, get_rate_limit
from dragonsolitaire.web.db import get_engine, init_db
from dragonsolitaire.web.routes import sessions
from dragonsolitaire.web.security import get_real_ip


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    init_db(get_engine())
    yield


def create_app(rate_limit: Optional[str] = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="Dragon Solitaire",
        description="Card dungeon crawl game server",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=get_cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Rate limiting keyed on the real client IP
    limiter = Limiter(key_func=get_real_ip, default_limits=[rate_limit or get_rate_limit()])
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    app.add_middleware(SlowAPIMiddleware)

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    app.include_router(sessions.router, prefix="/api", tags=["sessions"])

    return app


# Default app instance
app = create_app()
