"""Tests for snapshot, JSON and URL query serialization."""

import json
from urllib.parse import parse_qs

import pytest

from dragonsolitaire.cards.schema import Card
from dragonsolitaire.simulation.economy import gain, lose
from dragonsolitaire.simulation.engine import place_card, resolve_card
from dragonsolitaire.simulation.serialization import (
    SnapshotError,
    from_query_string,
    restore,
    snapshot,
    snapshot_from_json,
    snapshot_to_json,
    to_query_string,
)
from dragonsolitaire.simulation.state import ChoiceKind, PileKind


def grid_layout(state) -> list[tuple[int, int, str, bool]]:
    return [(r, c, cell.card.code, cell.face_down) for r, c, cell in state.grid.occupied()]


def assert_same_game(a, b) -> None:
    for kind in PileKind:
        assert a.pile(kind) == b.pile(kind)
    assert a.dungeon_stock == b.dungeon_stock
    assert grid_layout(a) == grid_layout(b)
    assert (a.grid.rows, a.grid.cols) == (b.grid.rows, b.grid.cols)
    assert a.level == b.level
    assert a.rng.state == b.rng.state


class TestSnapshot:
    def test_snapshot_shape(self, game):
        data = snapshot(game)
        assert data["health"]["available"][0] == {"suit": "HEARTS", "value": "ACE"}
        assert len(data["dungeon_matrix"]) == 1
        assert data["dungeon_matrix"][0]["face_down"] is True
        assert data["matrix_rows"] == 3
        assert data["pending_choice"] is None

    def test_restore_mid_game(self, game):
        place_card(game, 0, 1)
        gain(game, PileKind.GEMS, 2)
        lose(game, PileKind.HEALTH, 1)

        restored = restore(snapshot(game))
        assert_same_game(game, restored)
        assert restored.grid.cell(1, 1).interactable

    def test_restored_game_continues_identically(self, game):
        restored = restore(snapshot(game))
        assert place_card(game, 0, 1) == place_card(restored, 0, 1)
        assert game.rng() == restored.rng()

    def test_json_round_trip(self, game):
        place_card(game, 1, 0)
        restored = snapshot_from_json(snapshot_to_json(game))
        assert_same_game(game, restored)

    def test_pending_choice_survives(self, game, deal):
        row, col = deal(game, Card.from_code("XB"))
        resolve_card(game, row, col)

        restored = restore(snapshot(game))
        assert restored.pending_choice.kind is ChoiceKind.GENEROUS_WIZARD
        assert restored.pending_choice.options == game.pending_choice.options

    def test_empty_health_restores_as_game_over(self, game):
        data = snapshot(game)
        data["health"]["stock"] = data["health"]["available"]
        data["health"]["available"] = []
        assert restore(data).is_game_over


class TestRestoreErrors:
    def test_wrong_pile_total(self, game):
        data = snapshot(game)
        data["gems"]["stock"].pop()
        with pytest.raises(SnapshotError):
            restore(data)

    def test_wrong_dungeon_total(self, game):
        data = snapshot(game)
        data["dungeon_stock"].pop()
        with pytest.raises(SnapshotError):
            restore(data)

    def test_missing_field(self, game):
        data = snapshot(game)
        del data["fate"]
        with pytest.raises(SnapshotError):
            restore(data)

    def test_bad_card(self, game):
        data = snapshot(game)
        data["dungeon_stock"][0] = {"suit": "STARS", "value": "ACE"}
        with pytest.raises(SnapshotError):
            restore(data)

    def test_cell_outside_matrix(self, game):
        data = snapshot(game)
        data["dungeon_matrix"][0]["row"] = 10
        with pytest.raises(SnapshotError):
            restore(data)

    def test_invalid_json(self):
        with pytest.raises(SnapshotError):
            snapshot_from_json("{not json")

    def test_bad_pending_choice(self, game):
        data = snapshot(game)
        data["pending_choice"] = {"kind": "bartender"}
        with pytest.raises(SnapshotError):
            restore(data)

    def test_foreign_card_in_matrix(self, game):
        data = snapshot(game)
        data["dungeon_matrix"][0].update({"suit": "HEARTS", "value": "FIVE"})
        with pytest.raises(SnapshotError, match="dungeon cards"):
            restore(data)

    def test_duplicate_dungeon_cards(self, game):
        data = snapshot(game)
        data["dungeon_stock"][1] = data["dungeon_stock"][0]
        with pytest.raises(SnapshotError, match="dungeon cards"):
            restore(data)

    def test_card_from_another_pile(self, game):
        data = snapshot(game)
        data["gems"]["stock"][0] = {"suit": "DIAMONDS", "value": "JACK"}
        with pytest.raises(SnapshotError, match="gems"):
            restore(data)

    def test_duplicate_pile_cards(self, game):
        data = snapshot(game)
        data["health"]["available"][1] = data["health"]["available"][0]
        with pytest.raises(SnapshotError, match="health"):
            restore(data)

    @pytest.mark.parametrize("field,value", [
        ("rng_state", "abc"),
        ("level", "x"),
        ("level", None),
        ("seed", "not-a-seed"),
        ("seed", [1]),
    ])
    def test_malformed_number(self, game, field, value):
        data = snapshot(game)
        data[field] = value
        with pytest.raises(SnapshotError):
            restore(data)

    def test_malformed_matrix_size(self, game):
        data = snapshot(game)
        data["matrix_rows"] = "three"
        with pytest.raises(SnapshotError):
            restore(data)


class TestQueryString:
    def test_pile_format(self, game):
        params = parse_qs(to_query_string(game))
        assert params["health"] == ["AH2H3H4H5H:0"]
        assert params["gems"][0].endswith(":10")
        assert params["matrixRows"] == ["3"]
        assert params["level"] == ["1"]
        assert len(params["dungeonStock"][0]) == 26 * 2

    def test_matrix_format(self, game):
        params = parse_qs(to_query_string(game))
        row, col, code, face_down = params["dungeonMatrix"][0].split(",")
        assert (row, col, face_down) == ("1", "1", "1")
        assert Card.from_code(code) in game.grid.cards()

    def test_round_trip(self, game):
        place_card(game, 2, 1)
        gain(game, PileKind.INVENTORY, 1)
        restored = from_query_string("?" + to_query_string(game))
        assert_same_game(game, restored)

    def test_flags(self, game):
        game.dragon_queen_defeated = True
        restored = from_query_string(to_query_string(game))
        assert restored.dragon_queen_defeated
        assert not restored.is_won

    def test_missing_pile(self, game):
        query = "&".join(p for p in to_query_string(game).split("&") if not p.startswith("fate="))
        with pytest.raises(SnapshotError):
            from_query_string(query)

    def test_odd_length_codes(self, game):
        params = {k: v[0] for k, v in parse_qs(to_query_string(game)).items()}
        params["dungeonStock"] = params["dungeonStock"][:-1]
        query = "&".join(f"{k}={v}" for k, v in params.items())
        with pytest.raises(SnapshotError):
            from_query_string(query)

    def test_json_safe(self, game):
        json.dumps(snapshot(game))

    def test_missing_matrix_size_restores_frontier(self, game):
        query = "&".join(
            p for p in to_query_string(game).split("&")
            if not p.startswith(("matrixRows=", "matrixCols="))
        )
        restored = from_query_string(query)
        assert (restored.grid.rows, restored.grid.cols) == (3, 3)
        assert grid_layout(restored) == grid_layout(game)
        open_cells = {
            (r, c) for r, c, cell in restored.grid.positions()
            if cell.card is None and cell.interactable
        }
        assert open_cells == {(0, 1), (1, 0), (1, 2), (2, 1)}

    def test_missing_matrix_size_after_growth(self, game):
        place_card(game, 1, 2)
        query = "&".join(
            p for p in to_query_string(game).split("&")
            if not p.startswith(("matrixRows=", "matrixCols="))
        )
        restored = from_query_string(query)
        assert (restored.grid.rows, restored.grid.cols) == (game.grid.rows, game.grid.cols)
        assert grid_layout(restored) == grid_layout(game)
