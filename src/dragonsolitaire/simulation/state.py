"""Mutable game state for a dungeon run."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Union

from dragonsolitaire.cards.schema import Card
from dragonsolitaire.simulation.events import EventKind, GameEvent
from dragonsolitaire.simulation.grid import Grid
from dragonsolitaire.simulation.rng import Mulberry32


class PileKind(Enum):
    HEALTH = "health"
    GEMS = "gems"
    INVENTORY = "inventory"
    FATE = "fate"


@dataclass
class Pile:
    """A resource pile: face-down stock and face-up available cards.

    Cards only ever move between the two lists, so ``total`` is constant.
    The end of each list is its top.
    """

    stock: list[Card] = field(default_factory=list)
    available: list[Card] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.stock) + len(self.available)

    def gain(self, amount: int = 1) -> int:
        """Move up to ``amount`` cards from stock to available.

        Returns the number actually moved.
        """
        moved = 0
        while moved < amount and self.stock:
            self.available.append(self.stock.pop())
            moved += 1
        return moved

    def lose(self, amount: int = 1) -> int:
        """Move up to ``amount`` cards from available back to stock.

        Returns the number actually moved.
        """
        moved = 0
        while moved < amount and self.available:
            self.stock.append(self.available.pop())
            moved += 1
        return moved

    def take(self, card: Card) -> bool:
        """Move one specific card from stock to available."""
        if card not in self.stock:
            return False
        self.stock.remove(card)
        self.available.append(card)
        return True


@dataclass(frozen=True)
class Resolved:
    """The card's effect fired; flip it face-down."""

    pass


@dataclass(frozen=True)
class Deferred:
    """The effect was refused by a game rule; the card stays actionable."""

    reason: str


Resolution = Union[Resolved, Deferred]


class ChoiceKind(Enum):
    MERCHANT = "merchant"
    GENEROUS_WIZARD = "generous_wizard"


@dataclass(frozen=True)
class PendingChoice:
    """An item selection the player still has to make."""

    kind: ChoiceKind
    prompt: str
    options: tuple[Card, ...]
    gem_cost: int = 0


@dataclass
class GameState:
    """Everything a single run owns. Mutated in place by the engine."""

    health: Pile
    gems: Pile
    inventory: Pile
    fate: Pile
    dungeon_stock: list[Card]
    grid: Grid
    rng: Mulberry32
    seed: int
    is_game_over: bool = False
    dragon_queen_defeated: bool = False
    is_won: bool = False
    level: int = 1
    pending_choice: Optional[PendingChoice] = None
    events: list[GameEvent] = field(default_factory=list)

    def pile(self, kind: PileKind) -> Pile:
        return {
            PileKind.HEALTH: self.health,
            PileKind.GEMS: self.gems,
            PileKind.INVENTORY: self.inventory,
            PileKind.FATE: self.fate,
        }[kind]

    def emit(self, kind: EventKind, message: str, **data: Any) -> None:
        self.events.append(GameEvent(kind=kind, message=message, data=data))

    def drain_events(self) -> list[GameEvent]:
        """Return and clear pending notifications."""
        events, self.events = self.events, []
        return events
