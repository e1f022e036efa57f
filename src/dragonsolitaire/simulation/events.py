"""Notifications emitted by the engine for the UI to display."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class EventKind(Enum):
    MESSAGE = "message"
    CARD_PLACED = "card_placed"
    CARD_RESOLVED = "card_resolved"
    RESOLUTION_DEFERRED = "resolution_deferred"
    PILE_CHANGED = "pile_changed"
    FATE_DRAWN = "fate_drawn"
    FATE_RESHUFFLED = "fate_reshuffled"
    CHOICE_PENDING = "choice_pending"
    CHOICE_MADE = "choice_made"
    PASSAGE_FOUND = "passage_found"
    DUNGEON_RESET = "dungeon_reset"
    DRAGON_QUEEN_DEFEATED = "dragon_queen_defeated"
    GAME_OVER = "game_over"
    VICTORY = "victory"


@dataclass(frozen=True)
class GameEvent:
    """One user-facing notification."""

    kind: EventKind
    message: str
    data: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind.value, "message": self.message, "data": dict(self.data)}
