"""Terminal play session management."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import Callable, Optional

from dragonsolitaire.simulation.economy import GameStats, game_stats
from dragonsolitaire.simulation.engine import (
    Action,
    ActionKind,
    IllegalActionError,
    apply_action,
    legal_actions,
    new_game,
)
from dragonsolitaire.simulation.state import Deferred, GameState
from dragonsolitaire.playtest.display import ChoicePresenter, StateRenderer, pile_summary
from dragonsolitaire.playtest.input import USAGE, HumanPlayer
from dragonsolitaire.playtest.rules import RuleExplainer

logger = logging.getLogger(__name__)


@dataclass
class SessionConfig:
    """Configuration for a play session."""

    seed: Optional[int] = None
    debug: bool = False
    show_rules: bool = True

    def __post_init__(self):
        """Generate seed if not provided."""
        if self.seed is None:
            self.seed = random.randint(0, 2**32 - 1)


@dataclass
class SessionResult:
    """How a session ended."""

    seed: int
    outcome: str  # won, lost, quit, stuck
    level: int
    stats: Optional[GameStats] = None
    stuck_reason: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "seed": self.seed,
            "outcome": self.outcome,
            "level": self.level,
            "stats": self.stats.to_dict() if self.stats else None,
            "stuck_reason": self.stuck_reason,
        }


@dataclass
class StuckDetector:
    """Detects a run where nothing the player can do changes the game.

    A position whose last resolve was deferred is "refused"; any successful
    action clears the set, since it may have made those cards resolvable.
    """

    refused: set[tuple[int, int]] = field(default_factory=set)

    def record_refused(self, row: int, col: int) -> None:
        self.refused.add((row, col))

    def record_progress(self) -> None:
        self.refused.clear()

    def check(self, actions: list[Action]) -> Optional[str]:
        if not actions:
            return "No moves left in the dungeon"
        if all(
            action.kind is ActionKind.RESOLVE and (action.row, action.col) in self.refused
            for action in actions
        ):
            return "Only cards that cannot be resolved remain"
        return None


class PlaytestSession:
    """Runs one interactive game in the terminal."""

    def __init__(self, config: SessionConfig, player: Optional[HumanPlayer] = None):
        self.config = config
        self.seed = config.seed
        self.renderer = StateRenderer()
        self.presenter = ChoicePresenter()
        self.explainer = RuleExplainer()
        self.human_input = player or HumanPlayer()
        self.stuck_detector = StuckDetector()
        self.state: Optional[GameState] = None

    def _show_events(self, state: GameState, output_fn: Callable[[str], None]) -> None:
        for event in state.drain_events():
            output_fn(f"  {event.message}")

    def _apply(self, state: GameState, action: Action, output_fn: Callable[[str], None]) -> None:
        try:
            result = apply_action(state, action)
        except IllegalActionError as e:
            output_fn(str(e))
            return
        if action.kind is ActionKind.PLACE and result is None:
            output_fn("The dungeon stock is empty.")
        elif isinstance(result, Deferred):
            self.stuck_detector.record_refused(action.row, action.col)
        else:
            self.stuck_detector.record_progress()

    def run(self, output_fn: Callable[[str], None] = print) -> SessionResult:
        """Run the session.

        Args:
            output_fn: Function to output text (default: print)

        Returns:
            SessionResult with the outcome and final stats
        """
        state = new_game(self.seed)
        self.state = state

        if self.config.show_rules:
            output_fn(self.explainer.explain_rules())
            output_fn("")
            output_fn(f"Seed: {self.seed} (use --seed {self.seed} to replay)")
            output_fn(USAGE)

        outcome = "quit"
        stuck_reason: Optional[str] = None

        while True:
            self._show_events(state, output_fn)

            if state.is_won:
                outcome = "won"
                output_fn("\n=== You escaped the dungeon! ===")
                break
            if state.is_game_over:
                outcome = "lost"
                output_fn("\n=== Game Over ===")
                break

            actions = legal_actions(state)
            stuck_reason = self.stuck_detector.check(actions)
            if stuck_reason:
                outcome = "stuck"
                output_fn(f"\nGame stuck: {stuck_reason}")
                break

            output_fn("")
            output_fn(self.renderer.render(state, self.config.debug))

            choice = state.pending_choice
            if choice is not None:
                output_fn("")
                output_fn(self.presenter.present(choice))

            result = self.human_input.get_command(len(choice.options) if choice else 0)
            if result.quit:
                break
            if result.error:
                output_fn(result.error)
                continue
            if result.action:
                self._apply(state, result.action, output_fn)

        summary = ", ".join(f"{name} {count}" for name, count in pile_summary(state).items())
        output_fn(f"Level {state.level}: {summary}")
        logger.info(f"Session ended: {outcome} (seed={self.seed})")

        return SessionResult(
            seed=self.seed,
            outcome=outcome,
            level=state.level,
            stats=game_stats(state),
            stuck_reason=stuck_reason,
        )
