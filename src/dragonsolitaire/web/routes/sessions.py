"""Sessions API routes for game play."""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Callable, Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session as SQLSession

from dragonsolitaire.simulation.engine import (
    IllegalActionError,
    choose,
    new_game,
    place_card,
    resolve_card,
)
from dragonsolitaire.simulation.serialization import (
    SnapshotError,
    from_query_string,
    restore,
    snapshot,
    snapshot_from_json,
    snapshot_to_json,
    to_query_string,
)
from dragonsolitaire.simulation.state import Deferred, GameState
from dragonsolitaire.web.dependencies import get_db
from dragonsolitaire.web.models import GameSessionRecord
from dragonsolitaire.web.security import get_real_ip, hash_ip
from dragonsolitaire.web.views import state_view

logger = logging.getLogger(__name__)

router = APIRouter()


# Request/Response models


class StartGameRequest(BaseModel):
    """Request to deal a new game."""

    seed: Optional[int] = Field(default=None, ge=0, le=2**32 - 1)


class SessionResponse(BaseModel):
    """Session id plus the current view."""

    session_id: str
    seed: int
    state: dict[str, Any]
    version: int
    completed: bool


class CellRequest(BaseModel):
    """Place or resolve at a grid position."""

    row: int
    col: int
    version: int  # Optimistic locking - must match current version


class ChooseRequest(BaseModel):
    """Answer a pending item choice (0-based option index)."""

    index: int
    version: int


class MoveResponse(BaseModel):
    """Response after applying an action."""

    state: dict[str, Any]
    version: int
    completed: bool
    result: dict[str, Any]


class SnapshotResponse(BaseModel):
    snapshot: dict[str, Any]
    query: str


class RestoreRequest(BaseModel):
    """Start a session from a saved snapshot dict or a client URL query."""

    snapshot: Optional[dict[str, Any]] = None
    query: Optional[str] = None


# Helpers


def _load(db: SQLSession, session_id: str, for_update: bool = False) -> GameSessionRecord:
    query = db.query(GameSessionRecord).filter(GameSessionRecord.id == session_id)
    if for_update:
        query = query.with_for_update()
    record = query.first()
    if not record:
        raise HTTPException(status_code=404, detail="Session not found")
    return record


def _create(db: SQLSession, request: Request, state: GameState) -> SessionResponse:
    record = GameSessionRecord(
        id=str(uuid.uuid4()),
        owner_hash=hash_ip(get_real_ip(request)),
        seed=state.seed,
        state_json=snapshot_to_json(state, indent=None),
        version=1,
        completed=state.is_game_over,
        won=state.is_won,
    )
    db.add(record)
    db.commit()
    logger.info(f"Session {record.id} started (seed={state.seed})")
    return SessionResponse(
        session_id=record.id,
        seed=state.seed,
        state=state_view(state, state.drain_events()),
        version=record.version,
        completed=record.completed,
    )


def _apply(
    db: SQLSession,
    session_id: str,
    version: int,
    action: Callable[[GameState], dict[str, Any]],
) -> MoveResponse:
    """Load, lock-check, apply ``action`` and save a session."""
    record = _load(db, session_id, for_update=True)

    # The engine does not refuse moves after game over; this layer does
    if record.completed:
        raise HTTPException(status_code=400, detail="Game is already completed")
    if version != record.version:
        raise HTTPException(
            status_code=409,
            detail=f"Version conflict: expected {record.version}, got {version}",
        )

    state = snapshot_from_json(record.state_json)
    try:
        result = action(state)
    except IllegalActionError as e:
        raise HTTPException(status_code=400, detail=str(e))

    record.state_json = snapshot_to_json(state, indent=None)
    record.version += 1
    record.completed = state.is_game_over
    record.won = state.is_won
    # onupdate only fires on a SQL UPDATE, set it explicitly
    record.updated_at = datetime.now(timezone.utc)
    db.commit()

    if record.completed:
        logger.info(f"Session {session_id} completed (won={state.is_won})")
    return MoveResponse(
        state=state_view(state, state.drain_events()),
        version=record.version,
        completed=record.completed,
        result=result,
    )


def _resolution_result(resolution) -> dict[str, Any]:
    if isinstance(resolution, Deferred):
        return {"resolution": "deferred", "reason": resolution.reason}
    return {"resolution": "resolved"}


# Endpoints


@router.post("/sessions", response_model=SessionResponse)
async def start_game(
    request: Request,
    start_request: Optional[StartGameRequest] = None,
    db: SQLSession = Depends(get_db),
):
    """Deal a new game. The same seed deals the same dungeon."""
    seed = start_request.seed if start_request else None
    return _create(db, request, new_game(seed))


@router.post("/sessions/restore", response_model=SessionResponse)
async def restore_game(
    restore_request: RestoreRequest,
    request: Request,
    db: SQLSession = Depends(get_db),
):
    """Start a new session from a snapshot or a client URL query string."""
    try:
        if restore_request.snapshot is not None:
            state = restore(restore_request.snapshot)
        elif restore_request.query is not None:
            state = from_query_string(restore_request.query)
        else:
            raise HTTPException(status_code=422, detail="Provide a snapshot or a query")
    except SnapshotError as e:
        raise HTTPException(status_code=422, detail=f"Invalid snapshot: {e}")
    return _create(db, request, state)


@router.get("/sessions/{session_id}", response_model=SessionResponse)
async def get_game(
    session_id: str,
    db: SQLSession = Depends(get_db),
):
    """Get the current view for resuming a game."""
    record = _load(db, session_id)
    state = snapshot_from_json(record.state_json)
    return SessionResponse(
        session_id=record.id,
        seed=record.seed,
        state=state_view(state),
        version=record.version,
        completed=record.completed,
    )


@router.post("/sessions/{session_id}/place", response_model=MoveResponse)
async def place(
    session_id: str,
    cell_request: CellRequest,
    db: SQLSession = Depends(get_db),
):
    """Draw the next dungeon card into an open cell."""

    def action(state: GameState) -> dict[str, Any]:
        card = place_card(state, cell_request.row, cell_request.col)
        return {"placed": card.code if card else None}

    return _apply(db, session_id, cell_request.version, action)


@router.post("/sessions/{session_id}/resolve", response_model=MoveResponse)
async def resolve(
    session_id: str,
    cell_request: CellRequest,
    db: SQLSession = Depends(get_db),
):
    """Resolve a face-up card."""

    def action(state: GameState) -> dict[str, Any]:
        return _resolution_result(resolve_card(state, cell_request.row, cell_request.col))

    return _apply(db, session_id, cell_request.version, action)


@router.post("/sessions/{session_id}/choose", response_model=MoveResponse)
async def choose_item(
    session_id: str,
    choose_request: ChooseRequest,
    db: SQLSession = Depends(get_db),
):
    """Answer a Merchant or Generous Wizard item choice."""

    def action(state: GameState) -> dict[str, Any]:
        return {"chosen": choose(state, choose_request.index).code}

    return _apply(db, session_id, choose_request.version, action)


@router.get("/sessions/{session_id}/snapshot", response_model=SnapshotResponse)
async def get_snapshot(
    session_id: str,
    db: SQLSession = Depends(get_db),
):
    """Saved state as a dict and as the client's URL query string."""
    record = _load(db, session_id)
    state = snapshot_from_json(record.state_json)
    return SnapshotResponse(snapshot=snapshot(state), query=to_query_string(state))
