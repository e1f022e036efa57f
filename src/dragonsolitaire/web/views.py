"""Convert engine state to the JSON shape the browser client renders."""

from __future__ import annotations

from typing import Any, Optional

from dragonsolitaire.cards.dungeon import card_name
from dragonsolitaire.cards.schema import Card
from dragonsolitaire.simulation.events import GameEvent
from dragonsolitaire.simulation.engine import legal_actions
from dragonsolitaire.simulation.grid import Cell
from dragonsolitaire.simulation.state import GameState, PileKind


def _card_view(card: Card) -> dict[str, Any]:
    return {"code": card.code, "label": str(card)}


def _cell_view(cell: Cell) -> dict[str, Any]:
    view: dict[str, Any] = {
        "card": None,
        "face_down": cell.face_down,
        "interactable": cell.interactable,
    }
    if cell.card is not None:
        view["card"] = _card_view(cell.card)
        view["name"] = card_name(cell.card)
    return view


def state_view(state: GameState, events: Optional[list[GameEvent]] = None) -> dict[str, Any]:
    """Everything the client needs to draw one frame."""
    choice = state.pending_choice
    return {
        "grid": {
            "rows": state.grid.rows,
            "cols": state.grid.cols,
            "cells": [[_cell_view(cell) for cell in cells] for cells in state.grid.cells],
        },
        "piles": {
            kind.value: {
                "stock": len(state.pile(kind).stock),
                "available": [_card_view(card) for card in state.pile(kind).available],
            }
            for kind in PileKind
        },
        "dungeon_stock": len(state.dungeon_stock),
        "level": state.level,
        "dragon_queen_defeated": state.dragon_queen_defeated,
        "is_game_over": state.is_game_over,
        "is_won": state.is_won,
        "pending_choice": (
            {
                "kind": choice.kind.value,
                "prompt": choice.prompt,
                "options": [_card_view(card) for card in choice.options],
                "gem_cost": choice.gem_cost,
            }
            if choice is not None
            else None
        ),
        "legal_actions": (
            []
            if state.is_game_over
            else [
                {"kind": a.kind.value, "row": a.row, "col": a.col, "index": a.index}
                for a in legal_actions(state)
            ]
        ),
        "events": [event.to_dict() for event in events or []],
    }
