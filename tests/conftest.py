"""Shared fixtures for building game positions."""

import pytest

from dragonsolitaire.cards.schema import Card, Suit, Value
from dragonsolitaire.simulation.engine import new_game, place_card
from dragonsolitaire.simulation.state import GameState


def find_card(state: GameState, card: Card) -> tuple[int, int]:
    for row, col, cell in state.grid.occupied():
        if cell.card == card:
            return row, col
    raise AssertionError(f"{card.code} is not on the grid")


def deal_card(state: GameState, card: Card) -> tuple[int, int]:
    """Place ``card`` face-up above the starting card and return its position.

    Only valid on a freshly dealt game. Dungeon card conservation is kept.
    """
    if card not in state.dungeon_stock:
        # It is the starting card; swap it with the bottom of the stock
        _, _, start = next(state.grid.occupied())
        state.dungeon_stock[0], start.card = start.card, state.dungeon_stock[0]
    state.dungeon_stock.remove(card)
    state.dungeon_stock.append(card)
    place_card(state, 0, 1)
    state.drain_events()
    return find_card(state, card)


def force_fate(state: GameState, order: int) -> Card:
    """Put the HEARTS card of the given order on top of the fate stock."""
    card = Card(Suit.HEARTS, Value.from_order(order))
    state.fate.stock.remove(card)
    state.fate.stock.append(card)
    return card


@pytest.fixture
def game() -> GameState:
    state = new_game(seed=1234)
    state.drain_events()
    return state


@pytest.fixture
def deal():
    return deal_card


@pytest.fixture
def fate():
    return force_fate


@pytest.fixture
def locate():
    return find_card
