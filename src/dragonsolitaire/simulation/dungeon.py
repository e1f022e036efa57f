"""Dungeon lifecycle: dealing, exiting and winning."""

from __future__ import annotations

import logging

from dragonsolitaire.cards.decks import dungeon_cards
from dragonsolitaire.cards.schema import Card
from dragonsolitaire.simulation.economy import game_stats
from dragonsolitaire.simulation.events import EventKind
from dragonsolitaire.simulation.grid import Grid
from dragonsolitaire.simulation.rng import Mulberry32, shuffle
from dragonsolitaire.simulation.state import GameState

logger = logging.getLogger(__name__)


def deal_dungeon(rng: Mulberry32) -> tuple[list[Card], Grid]:
    """Shuffle the 27 dungeon cards and seed a grid with the top one."""
    stock = shuffle(dungeon_cards(), rng)
    grid = Grid.seeded(stock.pop())
    return stock, grid


def reset_dungeon(state: GameState) -> None:
    """Gather every dungeon card, reshuffle, and start a fresh grid.

    Resource piles are untouched.
    """
    cards = state.grid.cards() + state.dungeon_stock
    stock = shuffle(cards, state.rng)
    state.grid = Grid.seeded(stock.pop())
    state.dungeon_stock = stock
    state.level += 1
    logger.info(f"Dungeon reset, now on level {state.level}")
    state.emit(
        EventKind.DUNGEON_RESET,
        f"You descend to level {state.level} of the dungeon",
        level=state.level,
    )


def defeat_dragon_queen(state: GameState) -> None:
    """Record the Dragon Queen's defeat; the next Exit wins the game."""
    if state.dragon_queen_defeated:
        return
    state.dragon_queen_defeated = True
    logger.info("Dragon Queen defeated")
    state.emit(
        EventKind.DRAGON_QUEEN_DEFEATED,
        "You defeated the Dragon Queen! Find the exit to win.",
    )


def exit_dungeon(state: GameState) -> None:
    """Exit effect: win if the Dragon Queen is down, otherwise next level."""
    if not state.dragon_queen_defeated:
        reset_dungeon(state)
        return
    state.is_won = True
    state.is_game_over = True
    stats = game_stats(state)
    logger.info(f"Victory ({stats})")
    state.emit(EventKind.VICTORY, "You escaped the dungeon. You win!", **stats.to_dict())
