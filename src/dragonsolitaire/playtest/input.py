"""Human input handling."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

from dragonsolitaire.simulation.engine import Action, ActionKind

USAGE = "Enter 'p ROW COL' to place, 'r ROW COL' to resolve, or 'q' to quit."


@dataclass
class InputResult:
    """Result of human input."""

    action: Optional[Action] = None
    quit: bool = False
    error: Optional[str] = None


class HumanPlayer:
    """Reads commands from the terminal."""

    def __init__(self, input_fn: Callable[[str], str] = input):
        self.input_fn = input_fn

    def parse(self, raw: str, choice_count: int = 0) -> InputResult:
        """Turn one line of input into an action.

        While a choice is pending (``choice_count`` > 0) only a 1-indexed
        option number or quit is accepted.
        """
        raw = raw.strip().lower()
        if raw in ("q", "quit", "exit"):
            return InputResult(quit=True)
        if not raw:
            return InputResult(error=USAGE)

        if choice_count:
            try:
                choice = int(raw)
            except ValueError:
                return InputResult(error=f"Invalid input '{raw}'. Enter a number or 'q'.")
            if choice < 1 or choice > choice_count:
                return InputResult(error=f"Invalid choice {choice}. Enter 1-{choice_count}.")
            return InputResult(action=Action(ActionKind.CHOOSE, index=choice - 1))

        parts = raw.split()
        kinds = {"p": ActionKind.PLACE, "place": ActionKind.PLACE,
                 "r": ActionKind.RESOLVE, "resolve": ActionKind.RESOLVE}
        if len(parts) != 3 or parts[0] not in kinds:
            return InputResult(error=f"Invalid input '{raw}'. {USAGE}")
        try:
            row, col = int(parts[1]), int(parts[2])
        except ValueError:
            return InputResult(error=f"Row and column must be numbers, got '{raw}'.")
        return InputResult(action=Action(kinds[parts[0]], row, col))

    def get_command(self, choice_count: int = 0, prompt: str = "> ") -> InputResult:
        """Prompt until the player enters something parseable or quits."""
        try:
            raw = self.input_fn(prompt)
        except (EOFError, KeyboardInterrupt):
            return InputResult(quit=True)
        return self.parse(raw, choice_count)
