"""Terminal play for Dragon Solitaire."""

from dragonsolitaire.playtest.display import StateRenderer, ChoicePresenter, format_card
from dragonsolitaire.playtest.rules import RuleExplainer
from dragonsolitaire.playtest.input import HumanPlayer, InputResult
from dragonsolitaire.playtest.session import (
    PlaytestSession,
    SessionConfig,
    SessionResult,
    StuckDetector,
)

__all__ = [
    "StateRenderer",
    "ChoicePresenter",
    "format_card",
    "RuleExplainer",
    "HumanPlayer",
    "InputResult",
    "PlaytestSession",
    "SessionConfig",
    "SessionResult",
    "StuckDetector",
]
