"""Resource pile economy: gain/lose, damage, fate draws and game over."""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import Any, Optional

from dragonsolitaire.simulation.events import EventKind
from dragonsolitaire.simulation.rng import shuffle
from dragonsolitaire.simulation.state import GameState, PileKind

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GameStats:
    """Summary shown when a run ends."""

    cards_explored: int
    cards_resolved: int
    gems_collected: int
    items_collected: int
    health_remaining: int
    dungeon_cards_remaining: int
    level: int

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def display_message(state: GameState, message: str) -> None:
    """Queue a plain message for the player."""
    state.emit(EventKind.MESSAGE, message)


def gain(state: GameState, kind: PileKind, amount: int = 1, source: Optional[str] = None) -> int:
    """Move up to ``amount`` cards of a pile from stock to available.

    Stops silently when the stock runs out, which is how capacity is capped.
    """
    pile = state.pile(kind)
    moved = pile.gain(amount)
    logger.debug(f"gain({kind.value}, {amount}) moved {moved}, available={len(pile.available)}")
    if moved:
        state.emit(
            EventKind.PILE_CHANGED,
            f"{source + ': ' if source else ''}gained {moved} {kind.value}",
            pile=kind.value,
            delta=moved,
        )
    return moved


def lose(state: GameState, kind: PileKind, amount: int = 1, source: Optional[str] = None) -> int:
    """Move up to ``amount`` cards of a pile from available back to stock.

    Losing health down to zero ends the game.
    """
    pile = state.pile(kind)
    moved = pile.lose(amount)
    logger.debug(f"lose({kind.value}, {amount}) moved {moved}, available={len(pile.available)}")
    if moved:
        state.emit(
            EventKind.PILE_CHANGED,
            f"{source + ': ' if source else ''}lost {moved} {kind.value}",
            pile=kind.value,
            delta=-moved,
        )
    if kind is PileKind.HEALTH:
        check_game_over(state)
    return moved


def lose_health(
    state: GameState,
    damage: int,
    use_gems: bool = False,
    source: Optional[str] = None,
) -> int:
    """Apply damage, optionally absorbing it 1-for-1 with available gems.

    Returns the health actually lost.
    """
    remaining = damage
    if use_gems and remaining > 0:
        absorbed = lose(state, PileKind.GEMS, min(remaining, len(state.gems.available)), source)
        remaining -= absorbed
        if absorbed:
            logger.debug(f"{absorbed} gem(s) absorbed damage, {remaining} left")
    if remaining <= 0:
        return 0
    return lose(state, PileKind.HEALTH, remaining, source)


def draw_fate(state: GameState) -> int:
    """Draw the top fate card and return its order (6-10).

    An exhausted fate stock is refilled by reshuffling the available cards.
    """
    fate = state.fate
    if not fate.stock:
        fate.stock = shuffle(fate.available, state.rng)
        fate.available = []
        state.emit(EventKind.FATE_RESHUFFLED, "The fate deck was reshuffled")
        logger.debug("Fate deck reshuffled")
    card = fate.stock.pop()
    fate.available.append(card)
    order = card.value.order
    state.emit(EventKind.FATE_DRAWN, f"Fate drew {card}", card=card.code, value=order)
    logger.debug(f"Fate draw: {card.code} ({order})")
    return order


def game_stats(state: GameState) -> GameStats:
    occupied = [cell for _, _, cell in state.grid.occupied()]
    return GameStats(
        cards_explored=len(occupied),
        cards_resolved=sum(1 for cell in occupied if cell.face_down),
        gems_collected=len(state.gems.available),
        items_collected=len(state.inventory.available),
        health_remaining=len(state.health.available),
        dungeon_cards_remaining=len(state.dungeon_stock),
        level=state.level,
    )


def check_game_over(state: GameState) -> bool:
    """Flag game over once health is empty. Repeated calls are no-ops."""
    if state.is_game_over:
        return True
    if state.health.available:
        return False
    state.is_game_over = True
    stats = game_stats(state)
    logger.info(f"Game over: health depleted ({stats})")
    state.emit(EventKind.GAME_OVER, "You have run out of health. Game over.", **stats.to_dict())
    return True
