"""Dungeon grid: cell matrix, sizing policy and availability."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Optional

from dragonsolitaire.cards.schema import Card
from dragonsolitaire.config import MAX_HEIGHT, MAX_WIDTH


@dataclass
class Cell:
    """One grid position.

    An empty cell is never face-down. ``interactable`` on an empty cell means
    a card may be placed there; on an occupied cell it means the card may be
    resolved.
    """

    card: Optional[Card] = None
    face_down: bool = False
    interactable: bool = False

    @property
    def is_empty(self) -> bool:
        return self.card is None


@dataclass(frozen=True)
class BoundingBox:
    """Inclusive bounds of the occupied cells."""

    min_row: int
    max_row: int
    min_col: int
    max_col: int

    @property
    def width(self) -> int:
        return self.max_col - self.min_col + 1

    @property
    def height(self) -> int:
        return self.max_row - self.min_row + 1


class Grid:
    """Row-major matrix of cells bounded by MAX_WIDTH x MAX_HEIGHT."""

    def __init__(self, rows: int = 1, cols: int = 1) -> None:
        if rows < 1 or cols < 1:
            raise ValueError(f"Grid must be at least 1x1, got {rows}x{cols}")
        self.cells: list[list[Cell]] = [[Cell() for _ in range(cols)] for _ in range(rows)]

    @classmethod
    def seeded(cls, card: Card) -> "Grid":
        """Single face-down card, resized and with availability computed."""
        grid = cls()
        grid.cells[0][0].card = card
        grid.cells[0][0].face_down = True
        grid.update()
        return grid

    @property
    def rows(self) -> int:
        return len(self.cells)

    @property
    def cols(self) -> int:
        return len(self.cells[0])

    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self.rows and 0 <= col < self.cols

    def cell(self, row: int, col: int) -> Cell:
        if not self.in_bounds(row, col):
            raise IndexError(f"Cell ({row}, {col}) outside {self.rows}x{self.cols} grid")
        return self.cells[row][col]

    def positions(self) -> Iterator[tuple[int, int, Cell]]:
        for row, cells in enumerate(self.cells):
            for col, cell in enumerate(cells):
                yield row, col, cell

    def occupied(self) -> Iterator[tuple[int, int, Cell]]:
        return ((row, col, cell) for row, col, cell in self.positions() if cell.card is not None)

    def card_count(self) -> int:
        return sum(1 for _ in self.occupied())

    def cards(self) -> list[Card]:
        return [cell.card for _, _, cell in self.occupied() if cell.card is not None]

    def adjacent(self, row: int, col: int) -> list[Cell]:
        """Orthogonal neighbours, no wraparound."""
        neighbours = []
        for d_row, d_col in ((-1, 0), (1, 0), (0, -1), (0, 1)):
            r, c = row + d_row, col + d_col
            if self.in_bounds(r, c):
                neighbours.append(self.cells[r][c])
        return neighbours

    def bounding_box(self) -> Optional[BoundingBox]:
        """Bounds of occupied cells, or None for an empty grid."""
        occupied = [(row, col) for row, col, _ in self.occupied()]
        if not occupied:
            return None
        rows = [row for row, _ in occupied]
        cols = [col for _, col in occupied]
        return BoundingBox(min(rows), max(rows), min(cols), max(cols))

    def update(self) -> None:
        """Resize, then recompute availability."""
        self.resize()
        self.update_availability()

    def resize(self) -> None:
        """Expand toward the occupied edges, then trim slack edges.

        Never removes an occupied cell and never grows past
        MAX_WIDTH x MAX_HEIGHT.
        """
        self._expand()
        self._trim()

    def _expand(self) -> None:
        box = self.bounding_box()
        if box is None:
            return
        add_left = self.cols < MAX_WIDTH and box.min_col == 0
        # Each side is checked against the width after the previous insertion
        if add_left:
            for cells in self.cells:
                cells.insert(0, Cell())
        add_right = self.cols < MAX_WIDTH and box.max_col + int(add_left) == self.cols - 1
        if add_right:
            for cells in self.cells:
                cells.append(Cell())

        add_top = self.rows < MAX_HEIGHT and box.min_row == 0
        if add_top:
            self.cells.insert(0, [Cell() for _ in range(self.cols)])
        add_bottom = self.rows < MAX_HEIGHT and box.max_row + int(add_top) == self.rows - 1
        if add_bottom:
            self.cells.append([Cell() for _ in range(self.cols)])

    def _trim(self) -> None:
        box = self.bounding_box()
        if box is None:
            return
        # Slack edges only go once the occupied span reaches the maximum,
        # otherwise the grid would oscillate while it can still grow
        if box.width >= MAX_WIDTH:
            if self._column_empty(0):
                self._drop_column(0)
            if self._column_empty(self.cols - 1):
                self._drop_column(self.cols - 1)
        if box.height >= MAX_HEIGHT:
            if self._row_empty(0):
                del self.cells[0]
            if self._row_empty(self.rows - 1):
                self.cells.pop()

        # Oversized matrices (e.g. restored from an older client) shrink back
        while self.cols > MAX_WIDTH and self._column_empty(self.cols - 1):
            self._drop_column(self.cols - 1)
        while self.cols > MAX_WIDTH and self._column_empty(0):
            self._drop_column(0)
        while self.rows > MAX_HEIGHT and self._row_empty(self.rows - 1):
            self.cells.pop()
        while self.rows > MAX_HEIGHT and self._row_empty(0):
            del self.cells[0]

    def _column_empty(self, col: int) -> bool:
        return all(cells[col].card is None for cells in self.cells)

    def _row_empty(self, row: int) -> bool:
        return all(cell.card is None for cell in self.cells[row])

    def _drop_column(self, col: int) -> None:
        for cells in self.cells:
            del cells[col]

    def update_availability(self) -> None:
        """Recompute ``interactable`` for every cell from scratch.

        A card is actionable iff face-up. An empty cell accepts a placement
        iff exactly one orthogonal neighbour holds a face-down card.
        """
        for _, _, cell in self.positions():
            cell.interactable = False

        for row, col, cell in self.positions():
            if cell.card is not None:
                cell.interactable = not cell.face_down
            else:
                face_down_neighbours = [
                    n for n in self.adjacent(row, col) if n.card is not None and n.face_down
                ]
                cell.interactable = len(face_down_neighbours) == 1

    def __repr__(self) -> str:
        return f"Grid({self.rows}x{self.cols}, cards={self.card_count()})"
