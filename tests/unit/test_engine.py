"""Tests for the public game operations."""

import pytest

from dragonsolitaire.cards.schema import Card
from dragonsolitaire.config import DUNGEON_SIZE
from dragonsolitaire.simulation.economy import gain
from dragonsolitaire.simulation.engine import (
    Action,
    ActionKind,
    IllegalActionError,
    apply_action,
    choose,
    legal_actions,
    new_game,
    place_card,
    resolve_card,
)
from dragonsolitaire.simulation.events import EventKind
from dragonsolitaire.simulation.state import PileKind


class TestNewGame:
    def test_fresh_game(self):
        state = new_game(seed=99)
        assert len(state.health.available) == 5
        assert len(state.gems.available) == 0
        assert len(state.inventory.available) == 0
        assert len(state.fate.available) == 0

        occupied = list(state.grid.occupied())
        assert len(occupied) == 1
        assert occupied[0][2].face_down
        assert len(state.dungeon_stock) == DUNGEON_SIZE - 1
        assert state.level == 1
        assert not state.is_game_over

    def test_same_seed_same_deal(self):
        a, b = new_game(seed=5), new_game(seed=5)
        assert a.dungeon_stock == b.dungeon_stock
        assert a.inventory.stock == b.inventory.stock
        assert a.fate.stock == b.fate.stock
        assert a.grid.cards() == b.grid.cards()

    def test_random_seed_recorded(self):
        state = new_game()
        assert 0 <= state.seed <= 2**32 - 1


class TestPlaceCard:
    def test_place_draws_top_of_stock(self, game):
        top = game.dungeon_stock[-1]
        assert place_card(game, 1, 0) == top
        assert len(game.dungeon_stock) == DUNGEON_SIZE - 2
        assert [e.kind for e in game.drain_events()] == [EventKind.CARD_PLACED]

    def test_occupied_cell_rejected(self, game):
        with pytest.raises(IllegalActionError):
            place_card(game, 1, 1)

    def test_non_frontier_cell_rejected(self, game):
        with pytest.raises(IllegalActionError):
            place_card(game, 0, 0)

    def test_out_of_bounds_rejected(self, game):
        with pytest.raises(IllegalActionError):
            place_card(game, 5, 5)

    def test_empty_stock_returns_none(self, game):
        game.dungeon_stock.clear()
        assert place_card(game, 0, 1) is None
        assert game.grid.card_count() == 1


class TestResolveCard:
    def test_face_down_card_rejected(self, game):
        with pytest.raises(IllegalActionError):
            resolve_card(game, 1, 1)

    def test_empty_cell_rejected(self, game):
        with pytest.raises(IllegalActionError):
            resolve_card(game, 0, 0)

    def test_emits_resolved_event(self, game, deal):
        row, col = deal(game, Card.from_code("7C"))
        resolve_card(game, row, col)
        assert EventKind.CARD_RESOLVED in [e.kind for e in game.drain_events()]


class TestChoose:
    def test_no_pending_choice(self, game):
        with pytest.raises(IllegalActionError):
            choose(game, 0)

    def test_index_out_of_range(self, game, deal):
        row, col = deal(game, Card.from_code("XB"))
        resolve_card(game, row, col)
        with pytest.raises(IllegalActionError):
            choose(game, 99)
        assert game.pending_choice is not None

    def test_place_blocked_while_choosing(self, game, deal):
        row, col = deal(game, Card.from_code("XB"))
        resolve_card(game, row, col)
        with pytest.raises(IllegalActionError):
            place_card(game, 0, 0)


class TestLegalActions:
    def test_fresh_game_offers_four_placements(self, game):
        actions = legal_actions(game)
        assert len(actions) == 4
        assert all(a.kind is ActionKind.PLACE for a in actions)

    def test_face_up_card_offers_resolve(self, game, deal):
        row, col = deal(game, Card.from_code("7C"))
        assert Action(ActionKind.RESOLVE, row, col) in legal_actions(game)

    def test_pending_choice_offers_only_choices(self, game, deal):
        row, col = deal(game, Card.from_code("AC"))
        gain(game, PileKind.GEMS, 1)
        resolve_card(game, row, col)
        actions = legal_actions(game)
        assert {a.kind for a in actions} == {ActionKind.CHOOSE}
        assert len(actions) == len(game.pending_choice.options)

    def test_no_placements_with_empty_stock(self, game):
        game.dungeon_stock.clear()
        assert legal_actions(game) == []

    def test_apply_action_dispatches(self, game):
        action = legal_actions(game)[0]
        card = apply_action(game, action)
        assert card is not None
        assert game.grid.card_count() == 2
