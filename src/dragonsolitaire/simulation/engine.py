"""Public game operations.

All operations mutate the given ``GameState`` in place. Rule outcomes
(an unmatched passage, a merchant without gems) are ``Deferred`` results;
calls that break an operation's preconditions raise ``IllegalActionError``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from dragonsolitaire.cards.decks import fate_cards, gem_cards, health_cards, inventory_cards
from dragonsolitaire.cards.dungeon import card_name
from dragonsolitaire.cards.schema import Card
from dragonsolitaire.simulation.dungeon import deal_dungeon
from dragonsolitaire.simulation.events import EventKind
from dragonsolitaire.simulation.grid import Cell
from dragonsolitaire.simulation.resolvers import complete_choice, resolve_effect
from dragonsolitaire.simulation.rng import Mulberry32, random_seed, shuffle
from dragonsolitaire.simulation.state import GameState, Pile, Resolution, Resolved

logger = logging.getLogger(__name__)


class IllegalActionError(Exception):
    """An operation was called when its preconditions do not hold."""

    pass


class ActionKind(Enum):
    PLACE = "place"
    RESOLVE = "resolve"
    CHOOSE = "choose"


@dataclass(frozen=True)
class Action:
    """A move the player may make right now."""

    kind: ActionKind
    row: int = -1
    col: int = -1
    index: int = -1


def new_game(seed: Optional[int] = None) -> GameState:
    """Deal a fresh game. The same seed always deals the same game."""
    if seed is None:
        seed = random_seed()
    rng = Mulberry32(seed)

    # Shuffle order matches the browser client: inventory, fate, dungeon
    inventory = Pile(stock=shuffle(inventory_cards(), rng))
    fate = Pile(stock=shuffle(fate_cards(), rng))
    dungeon_stock, grid = deal_dungeon(rng)

    state = GameState(
        health=Pile(available=health_cards()),
        gems=Pile(stock=gem_cards()),
        inventory=inventory,
        fate=fate,
        dungeon_stock=dungeon_stock,
        grid=grid,
        rng=rng,
        seed=seed,
    )
    logger.info(f"New game (seed={seed})")
    return state


def _cell_at(state: GameState, row: int, col: int) -> Cell:
    if not state.grid.in_bounds(row, col):
        raise IllegalActionError(
            f"({row}, {col}) is outside the {state.grid.rows}x{state.grid.cols} dungeon"
        )
    return state.grid.cell(row, col)


def _require_no_pending_choice(state: GameState) -> None:
    if state.pending_choice is not None:
        raise IllegalActionError("An item choice is still pending")


def place_card(state: GameState, row: int, col: int) -> Optional[Card]:
    """Draw the top dungeon card face-up into an empty, interactable cell.

    Returns the placed card, or None when the dungeon stock is empty.
    """
    _require_no_pending_choice(state)
    cell = _cell_at(state, row, col)
    if cell.card is not None:
        raise IllegalActionError(f"({row}, {col}) already holds a card")
    if not cell.interactable:
        raise IllegalActionError(f"({row}, {col}) is not open for placement")
    if not state.dungeon_stock:
        logger.debug("Dungeon stock empty, nothing to place")
        return None

    card = state.dungeon_stock.pop()
    cell.card = card
    cell.face_down = False
    state.grid.update()
    logger.debug(f"Placed {card.code} at ({row}, {col})")
    state.emit(
        EventKind.CARD_PLACED,
        f"You discover {card_name(card)} ({card})",
        card=card.code,
        row=row,
        col=col,
    )
    return card


def resolve_card(state: GameState, row: int, col: int) -> Resolution:
    """Fire the effect of the face-up card at (row, col).

    A ``Resolved`` result flips the card face-down; a ``Deferred`` result
    leaves it face-up so the player can try again.
    """
    _require_no_pending_choice(state)
    cell = _cell_at(state, row, col)
    if cell.card is None:
        raise IllegalActionError(f"({row}, {col}) has no card to resolve")
    if cell.face_down:
        raise IllegalActionError(f"({row}, {col}) is already resolved")

    card = cell.card
    result = resolve_effect(state, card)
    if isinstance(result, Resolved):
        # Exit may have replaced the grid; flipping the old cell is harmless
        cell.face_down = True
        state.grid.update()
        logger.debug(f"Resolved {card.code} at ({row}, {col})")
        state.emit(EventKind.CARD_RESOLVED, f"{card_name(card)} resolved", card=card.code, row=row, col=col)
    else:
        logger.debug(f"Resolution of {card.code} deferred: {result.reason}")
        state.emit(
            EventKind.RESOLUTION_DEFERRED,
            result.reason,
            card=card.code,
            row=row,
            col=col,
        )
    return result


def choose(state: GameState, index: int) -> Card:
    """Answer the pending item choice with option ``index``."""
    choice = state.pending_choice
    if choice is None:
        raise IllegalActionError("There is no pending choice")
    if not 0 <= index < len(choice.options):
        raise IllegalActionError(
            f"Choice {index} out of range, expected 0-{len(choice.options) - 1}"
        )
    selected = choice.options[index]
    complete_choice(state, choice, selected)
    logger.debug(f"Chose {selected.code} for {choice.kind.value}")
    return selected


def legal_actions(state: GameState) -> list[Action]:
    """Every action whose preconditions currently hold.

    Resolving a listed card may still be refused by a game rule.
    """
    if state.pending_choice is not None:
        return [
            Action(ActionKind.CHOOSE, index=i)
            for i in range(len(state.pending_choice.options))
        ]
    actions: list[Action] = []
    for row, col, cell in state.grid.positions():
        if not cell.interactable:
            continue
        if cell.card is not None:
            actions.append(Action(ActionKind.RESOLVE, row, col))
        elif state.dungeon_stock:
            actions.append(Action(ActionKind.PLACE, row, col))
    return actions


def apply_action(state: GameState, action: Action) -> Optional[object]:
    """Dispatch an ``Action`` to the matching operation."""
    if action.kind is ActionKind.PLACE:
        return place_card(state, action.row, action.col)
    if action.kind is ActionKind.RESOLVE:
        return resolve_card(state, action.row, action.col)
    return choose(state, action.index)
