"""Terminal display for the dungeon grid, piles and item choices."""

from __future__ import annotations

from typing import Optional

from dragonsolitaire.cards.schema import Card
from dragonsolitaire.simulation.grid import Cell
from dragonsolitaire.simulation.resolvers import EXIT_WILDCARD
from dragonsolitaire.simulation.state import GameState, PendingChoice, Pile, PileKind

CELL_WIDTH = 5


def format_card(card: Card) -> str:
    """Format card with unicode suit symbol."""
    return str(card)


def format_cell(cell: Cell) -> str:
    """Fixed-width text for one grid cell."""
    if cell.card is None:
        text = ".." if cell.interactable else ""
    elif cell.face_down:
        text = "##"
    else:
        text = format_card(cell.card) + ("*" if cell.interactable else "")
    return text.ljust(CELL_WIDTH)


def format_pile(name: str, pile: Pile) -> str:
    top: Optional[str] = format_card(pile.available[-1]) if pile.available else None
    line = f"{name:<10}{len(pile.stock)}/{len(pile.available)}"
    if top:
        line += f"  top {top}"
    return line


class StateRenderer:
    """Renders the visible game state to terminal."""

    def render(self, state: GameState, debug: bool = False) -> str:
        lines: list[str] = []

        title = f"=== Level {state.level} ==="
        if state.dragon_queen_defeated:
            title += "  (Dragon Queen defeated, find the Exit)"
        lines.append(title)
        lines.append("")

        header = "    " + "".join(str(col).ljust(CELL_WIDTH) for col in range(state.grid.cols))
        lines.append(header.rstrip())
        for row, cells in enumerate(state.grid.cells):
            body = "".join(format_cell(cell) for cell in cells)
            lines.append(f"{row:>2}  {body}".rstrip())
        lines.append("")

        lines.append(format_pile("Health", state.health))
        lines.append(format_pile("Gems", state.gems))
        lines.append(format_pile("Inventory", state.inventory))
        lines.append(format_pile("Fate", state.fate))
        lines.append(f"Dungeon   {len(state.dungeon_stock)} cards left")

        if debug:
            lines.append("")
            lines.append("--- Debug Info ---")
            if state.dungeon_stock:
                lines.append(f"Next dungeon card: {format_card(state.dungeon_stock[-1])}")
            if state.fate.stock:
                lines.append(f"Next fate card: {format_card(state.fate.stock[-1])}")
            lines.append(f"Seed: {state.seed}  RNG state: {state.rng.state}")

        return "\n".join(lines)


class ChoicePresenter:
    """Presents a pending item choice as a numbered list."""

    def present(self, choice: PendingChoice) -> str:
        lines = [choice.prompt + ":"]
        for i, card in enumerate(choice.options):
            label = format_card(card)
            if card == EXIT_WILDCARD:
                label += " (Exit)"
            lines.append(f"  [{i + 1}] {label}")
        return "\n".join(lines)


def pile_summary(state: GameState) -> dict[str, int]:
    """Available count per pile, used in end-of-game output."""
    return {kind.value: len(state.pile(kind).available) for kind in PileKind}
