"""Tests for grid sizing and availability."""

import pytest

from dragonsolitaire.cards.schema import Card, Suit, Value
from dragonsolitaire.config import MAX_HEIGHT, MAX_WIDTH
from dragonsolitaire.simulation.engine import place_card
from dragonsolitaire.simulation.grid import Grid

FOUR_CLUBS = Card(Suit.CLUBS, Value.FOUR)
FIVE_CLUBS = Card(Suit.CLUBS, Value.FIVE)


def put(grid: Grid, row: int, col: int, card: Card = FOUR_CLUBS, face_down: bool = True) -> None:
    cell = grid.cell(row, col)
    cell.card = card
    cell.face_down = face_down


def interactable(grid: Grid) -> set[tuple[int, int]]:
    return {(row, col) for row, col, cell in grid.positions() if cell.interactable}


class TestGridBasics:
    def test_minimum_size(self):
        with pytest.raises(ValueError):
            Grid(0, 1)

    def test_cell_out_of_bounds(self):
        with pytest.raises(IndexError):
            Grid(2, 2).cell(2, 0)

    def test_empty_bounding_box(self):
        assert Grid(3, 3).bounding_box() is None

    def test_bounding_box(self):
        grid = Grid(4, 5)
        put(grid, 1, 1)
        put(grid, 2, 3, FIVE_CLUBS)
        box = grid.bounding_box()
        assert (box.min_row, box.max_row, box.min_col, box.max_col) == (1, 2, 1, 3)
        assert box.width == 3
        assert box.height == 2

    def test_adjacent_has_no_wraparound(self):
        grid = Grid(3, 3)
        assert len(grid.adjacent(0, 0)) == 2
        assert len(grid.adjacent(1, 1)) == 4


class TestSeededGrid:
    def test_seeded_grid_is_3x3(self):
        grid = Grid.seeded(FOUR_CLUBS)
        assert (grid.rows, grid.cols) == (3, 3)
        assert grid.cell(1, 1).card == FOUR_CLUBS
        assert grid.cell(1, 1).face_down

    def test_seeded_frontier(self):
        grid = Grid.seeded(FOUR_CLUBS)
        assert interactable(grid) == {(0, 1), (1, 0), (1, 2), (2, 1)}


class TestAvailability:
    def test_face_up_card_is_interactable(self):
        grid = Grid(3, 3)
        put(grid, 1, 1, face_down=False)
        grid.update_availability()
        assert grid.cell(1, 1).interactable
        # Face-up neighbours do not open empty cells
        assert interactable(grid) == {(1, 1)}

    def test_face_down_card_is_not_interactable(self):
        grid = Grid(3, 3)
        put(grid, 1, 1)
        grid.update_availability()
        assert not grid.cell(1, 1).interactable

    def test_two_face_down_neighbours_close_a_cell(self):
        grid = Grid(3, 3)
        put(grid, 1, 0)
        put(grid, 1, 2, FIVE_CLUBS)
        grid.update_availability()
        assert not grid.cell(1, 1).interactable
        assert grid.cell(0, 0).interactable
        assert grid.cell(2, 2).interactable

    def test_recomputed_from_scratch(self):
        grid = Grid(3, 3)
        grid.cell(0, 0).interactable = True
        put(grid, 2, 2)
        grid.update_availability()
        assert not grid.cell(0, 0).interactable


class TestResize:
    def test_place_on_edge_expands(self, game):
        assert (game.grid.rows, game.grid.cols) == (3, 3)
        card = place_card(game, 0, 1)

        assert (game.grid.rows, game.grid.cols) == (4, 3)
        placed = game.grid.cell(1, 1)
        assert placed.card == card
        assert not placed.face_down
        assert placed.interactable
        # Starting card moved down one row with the inserted top row
        assert game.grid.cell(2, 1).face_down
        assert {(2, 0), (2, 2), (3, 1)} <= interactable(game.grid)
        assert not game.grid.cell(0, 1).interactable

    def test_no_expansion_past_max_width(self):
        grid = Grid(1, MAX_WIDTH)
        put(grid, 0, 0)
        put(grid, 0, MAX_WIDTH - 1, FIVE_CLUBS)
        grid.update()
        assert grid.cols == MAX_WIDTH
        assert grid.rows == 3

    def test_no_expansion_past_max_height(self):
        grid = Grid(MAX_HEIGHT, 3)
        put(grid, 0, 1)
        put(grid, MAX_HEIGHT - 1, 1, FIVE_CLUBS)
        grid.update()
        assert (grid.rows, grid.cols) == (MAX_HEIGHT, 3)

    def test_full_span_trims_slack_edges(self):
        grid = Grid(3, MAX_WIDTH)
        for col in range(MAX_WIDTH):
            put(grid, 1, col, Card(Suit.SPADES, Value.from_order(col + 1)))
        grid.update()
        assert grid.cols == MAX_WIDTH
        assert grid.rows == 3

    def test_oversized_grid_shrinks(self):
        grid = Grid(3, MAX_WIDTH + 1)
        put(grid, 1, 1)
        put(grid, 1, 6, FIVE_CLUBS)
        grid.update()
        assert grid.cols == MAX_WIDTH
        assert grid.card_count() == 2

    def test_interior_card_keeps_size(self):
        grid = Grid(3, 3)
        put(grid, 1, 1, face_down=False)
        grid.update()
        assert (grid.rows, grid.cols) == (3, 3)

    def test_span_six_keeps_seven_wide_window(self):
        grid = Grid(3, MAX_WIDTH)
        for col in range(1, MAX_WIDTH):
            put(grid, 1, col, Card(Suit.SPADES, Value.from_order(col)))
        grid.update()
        assert (grid.rows, grid.cols) == (3, MAX_WIDTH)
        assert grid.cell(1, 0).card is None
        assert grid.cell(1, MAX_WIDTH - 1).card == Card(Suit.SPADES, Value.from_order(MAX_WIDTH - 1))
        # The spare left column is still a placement frontier
        assert (1, 0) in interactable(grid)

    def test_span_six_flush_left_keeps_spare_right_column(self):
        grid = Grid(3, MAX_WIDTH)
        for col in range(MAX_WIDTH - 1):
            put(grid, 1, col, Card(Suit.SPADES, Value.from_order(col + 1)))
        grid.update()
        assert grid.cols == MAX_WIDTH
        assert grid.cell(1, 0).card == Card(Suit.SPADES, Value.ACE)
        assert grid.cell(1, MAX_WIDTH - 1).card is None
        assert (1, MAX_WIDTH - 1) in interactable(grid)
