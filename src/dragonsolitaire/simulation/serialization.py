"""Snapshot and restore for GameState.

Two formats:
- a JSON-ready dict (``snapshot`` / ``restore``)
- the browser client's URL query string (``to_query_string`` /
  ``from_query_string``), where each card is a two-character code
"""

from __future__ import annotations

import json
from collections import Counter
from typing import Any, Dict, List, Optional
from urllib.parse import parse_qs, urlencode

from dragonsolitaire.cards.decks import (
    dungeon_cards,
    fate_cards,
    gem_cards,
    health_cards,
    inventory_cards,
)
from dragonsolitaire.cards.schema import Card, InvalidCardError
from dragonsolitaire.config import (
    DUNGEON_SIZE,
    FATE_CAPACITY,
    GEM_CAPACITY,
    HEALTH_CAPACITY,
    INVENTORY_CAPACITY,
)
from dragonsolitaire.simulation.grid import Grid
from dragonsolitaire.simulation.resolvers import build_choice
from dragonsolitaire.simulation.rng import Mulberry32, random_seed
from dragonsolitaire.simulation.state import ChoiceKind, GameState, Pile, PileKind


class SnapshotError(ValueError):
    """Raised when a snapshot cannot be restored."""

    pass


PILE_TOTALS = {
    PileKind.HEALTH: HEALTH_CAPACITY,
    PileKind.GEMS: GEM_CAPACITY,
    PileKind.INVENTORY: INVENTORY_CAPACITY,
    PileKind.FATE: FATE_CAPACITY,
}

PILE_DECKS = {
    PileKind.HEALTH: health_cards,
    PileKind.GEMS: gem_cards,
    PileKind.INVENTORY: inventory_cards,
    PileKind.FATE: fate_cards,
}


def _card_to_dict(card: Card) -> Dict[str, str]:
    return {"suit": card.suit.name, "value": card.value.name}


def _card_from_dict(data: Dict[str, Any]) -> Card:
    try:
        return Card.from_keys(data["suit"], data["value"])
    except (KeyError, TypeError) as e:
        raise SnapshotError(f"Malformed card: {data!r}") from e
    except InvalidCardError as e:
        raise SnapshotError(str(e)) from e


def _pile_to_dict(pile: Pile) -> Dict[str, Any]:
    return {
        "stock": [_card_to_dict(c) for c in pile.stock],
        "available": [_card_to_dict(c) for c in pile.available],
    }


def _pile_from_dict(kind: PileKind, data: Dict[str, Any]) -> Pile:
    try:
        pile = Pile(
            stock=[_card_from_dict(c) for c in data["stock"]],
            available=[_card_from_dict(c) for c in data["available"]],
        )
    except (KeyError, TypeError) as e:
        raise SnapshotError(f"Malformed {kind.value} pile") from e
    if pile.total != PILE_TOTALS[kind]:
        raise SnapshotError(
            f"{kind.value} pile has {pile.total} cards, expected {PILE_TOTALS[kind]}"
        )
    if Counter(pile.stock + pile.available) != Counter(PILE_DECKS[kind]()):
        raise SnapshotError(f"{kind.value} pile does not hold the {kind.value} cards")
    return pile


def snapshot(state: GameState) -> Dict[str, Any]:
    """Convert GameState to a JSON-serializable dict."""
    return {
        "health": _pile_to_dict(state.health),
        "gems": _pile_to_dict(state.gems),
        "inventory": _pile_to_dict(state.inventory),
        "fate": _pile_to_dict(state.fate),
        "dungeon_stock": [_card_to_dict(c) for c in state.dungeon_stock],
        "dungeon_matrix": [
            {
                "row": row,
                "col": col,
                "suit": cell.card.suit.name,
                "value": cell.card.value.name,
                "face_down": cell.face_down,
            }
            for row, col, cell in state.grid.occupied()
            if cell.card is not None
        ],
        "matrix_rows": state.grid.rows,
        "matrix_cols": state.grid.cols,
        "is_game_over": state.is_game_over,
        "dragon_queen_defeated": state.dragon_queen_defeated,
        "is_won": state.is_won,
        "level": state.level,
        "seed": state.seed,
        "rng_state": state.rng.state,
        "pending_choice": (
            {"kind": state.pending_choice.kind.value} if state.pending_choice else None
        ),
    }


def _build_grid(cells: List[Dict[str, Any]], rows: Optional[int], cols: Optional[int]) -> Grid:
    """Lay out occupied cells in a matrix of the saved size."""
    try:
        if rows is None:
            rows = max((int(c["row"]) for c in cells), default=0) + 1
        if cols is None:
            cols = max((int(c["col"]) for c in cells), default=0) + 1
        rows, cols = int(rows), int(cols)
    except (KeyError, TypeError, ValueError) as e:
        raise SnapshotError("Malformed dungeon matrix") from e
    if rows < 1 or cols < 1:
        raise SnapshotError(f"Invalid matrix size {rows}x{cols}")

    grid = Grid(rows, cols)
    for data in cells:
        try:
            row, col = int(data["row"]), int(data["col"])
        except (KeyError, TypeError, ValueError) as e:
            raise SnapshotError(f"Malformed cell: {data!r}") from e
        if not grid.in_bounds(row, col):
            raise SnapshotError(f"Cell ({row}, {col}) outside {rows}x{cols} matrix")
        cell = grid.cell(row, col)
        if cell.card is not None:
            raise SnapshotError(f"Duplicate cell ({row}, {col})")
        cell.card = _card_from_dict(data)
        cell.face_down = bool(data.get("face_down", False))
    if grid.card_count() == 0:
        raise SnapshotError("Dungeon matrix has no cards")
    return grid


def restore(data: Dict[str, Any]) -> GameState:
    """Rebuild a GameState from a snapshot dict.

    The saved matrix size is kept as-is when present; a snapshot without
    one is resized around its cards. Availability is always recomputed.
    """
    try:
        piles = {kind: _pile_from_dict(kind, data[kind.value]) for kind in PileKind}
        dungeon_stock = [_card_from_dict(c) for c in data["dungeon_stock"]]
        cells = list(data["dungeon_matrix"])
    except (KeyError, TypeError) as e:
        raise SnapshotError(f"Snapshot missing field: {e}") from e

    rows, cols = data.get("matrix_rows"), data.get("matrix_cols")
    grid = _build_grid(cells, rows, cols)
    if len(dungeon_stock) + grid.card_count() != DUNGEON_SIZE:
        raise SnapshotError(
            f"Dungeon has {len(dungeon_stock) + grid.card_count()} cards, expected {DUNGEON_SIZE}"
        )
    if Counter(dungeon_stock + grid.cards()) != Counter(dungeon_cards()):
        raise SnapshotError("Dungeon does not hold the dungeon cards")
    # An inferred size has no margins; grow the frontier back
    if rows is None or cols is None:
        grid.resize()
    grid.update_availability()

    try:
        seed = data.get("seed")
        seed = random_seed() if seed is None else int(seed)
        rng = Mulberry32(seed)
        if data.get("rng_state") is not None:
            rng.state = int(data["rng_state"])
        level = int(data.get("level", 1))
    except (TypeError, ValueError) as e:
        raise SnapshotError(f"Malformed seed, rng state or level: {e}") from e

    state = GameState(
        health=piles[PileKind.HEALTH],
        gems=piles[PileKind.GEMS],
        inventory=piles[PileKind.INVENTORY],
        fate=piles[PileKind.FATE],
        dungeon_stock=dungeon_stock,
        grid=grid,
        rng=rng,
        seed=seed,
        dragon_queen_defeated=bool(data.get("dragon_queen_defeated", False)),
        is_won=bool(data.get("is_won", False)),
        level=level,
    )
    state.is_game_over = bool(data.get("is_game_over", False)) or state.is_won or not state.health.available

    pending = data.get("pending_choice")
    if pending:
        try:
            kind = ChoiceKind(pending["kind"])
        except (KeyError, TypeError, ValueError) as e:
            raise SnapshotError(f"Malformed pending choice: {pending!r}") from e
        state.pending_choice = build_choice(state, kind)
    return state


def snapshot_to_json(state: GameState, indent: int = 2) -> str:
    """Serialize GameState to a JSON string."""
    return json.dumps(snapshot(state), indent=indent)


def snapshot_from_json(json_str: str) -> GameState:
    """Restore GameState from a JSON string."""
    try:
        data = json.loads(json_str)
    except json.JSONDecodeError as e:
        raise SnapshotError(f"Invalid JSON: {e}") from e
    return restore(data)


# Browser URL format

_QUERY_PILES = ("health", "inventory", "gems", "fate")


def _codes(cards: List[Card]) -> str:
    return "".join(card.code for card in cards)


def _cards_from_codes(codes: str) -> List[Card]:
    if len(codes) % 2:
        raise SnapshotError(f"Odd-length card string: {codes!r}")
    try:
        return [Card.from_code(codes[i:i + 2]) for i in range(0, len(codes), 2)]
    except InvalidCardError as e:
        raise SnapshotError(str(e)) from e


def to_query_string(state: GameState) -> str:
    """Encode GameState in the browser client's URL parameter format."""
    params: Dict[str, str] = {}
    for key in _QUERY_PILES:
        pile = state.pile(PileKind(key))
        params[key] = f"{_codes(pile.stock + pile.available)}:{len(pile.stock)}"
    params["dungeonStock"] = _codes(state.dungeon_stock)
    params["dungeonMatrix"] = "|".join(
        f"{row},{col},{cell.card.code},{'1' if cell.face_down else '0'}"
        for row, col, cell in state.grid.occupied()
        if cell.card is not None
    )
    params["matrixRows"] = str(state.grid.rows)
    params["matrixCols"] = str(state.grid.cols)
    params["seed"] = str(state.seed)
    params["rngState"] = str(state.rng.state)
    params["level"] = str(state.level)
    if state.dragon_queen_defeated:
        params["dragonQueenDefeated"] = "1"
    if state.is_won:
        params["isWon"] = "1"
    return urlencode(params)


def from_query_string(query: str) -> GameState:
    """Decode the browser client's URL parameter format."""
    params = {key: values[0] for key, values in parse_qs(query.lstrip("?"), keep_blank_values=True).items()}

    def pile_data(key: str) -> Dict[str, Any]:
        raw = params.get(key)
        if raw is None or ":" not in raw:
            raise SnapshotError(f"Missing or malformed '{key}' parameter")
        codes, stock_length = raw.rsplit(":", 1)
        cards = _cards_from_codes(codes)
        try:
            split = int(stock_length)
        except ValueError as e:
            raise SnapshotError(f"Bad stock length in '{key}'") from e
        return {
            "stock": [_card_to_dict(c) for c in cards[:split]],
            "available": [_card_to_dict(c) for c in cards[split:]],
        }

    cells: List[Dict[str, Any]] = []
    for entry in filter(None, params.get("dungeonMatrix", "").split("|")):
        try:
            row, col, code, face_down = entry.split(",")
            card = _cards_from_codes(code)[0]
            cells.append({
                "row": int(row),
                "col": int(col),
                "suit": card.suit.name,
                "value": card.value.name,
                "face_down": face_down == "1",
            })
        except (ValueError, IndexError) as e:
            raise SnapshotError(f"Malformed matrix entry: {entry!r}") from e

    def optional_int(key: str) -> Optional[int]:
        if key not in params:
            return None
        try:
            return int(params[key])
        except ValueError as e:
            raise SnapshotError(f"Bad integer for '{key}'") from e

    data: Dict[str, Any] = {key: pile_data(key) for key in _QUERY_PILES}
    data.update({
        "dungeon_stock": [_card_to_dict(c) for c in _cards_from_codes(params.get("dungeonStock", ""))],
        "dungeon_matrix": cells,
        "matrix_rows": optional_int("matrixRows"),
        "matrix_cols": optional_int("matrixCols"),
        "seed": optional_int("seed"),
        "rng_state": optional_int("rngState"),
        "level": optional_int("level") or 1,
        "dragon_queen_defeated": params.get("dragonQueenDefeated") == "1",
        "is_won": params.get("isWon") == "1",
    })
    return restore(data)
