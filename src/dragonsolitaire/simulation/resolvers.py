"""Effect handlers for dungeon cards.

``HANDLERS`` maps each ``EffectId`` to a function of
``(state, effect_id, card) -> Resolution``.
"""

from __future__ import annotations

import logging
from typing import Callable

from dragonsolitaire.cards.dungeon import (
    ENEMIES,
    EFFECT_NAMES,
    PIT_TRAPS,
    EffectId,
    RewardKind,
    card_name,
    effect_for,
)
from dragonsolitaire.cards.schema import Card, Suit, Value
from dragonsolitaire.config import FATE_CRITICAL, MERCHANT_GEM_COST
from dragonsolitaire.simulation.dungeon import defeat_dragon_queen, exit_dungeon
from dragonsolitaire.simulation.economy import (
    display_message,
    draw_fate,
    gain,
    lose,
    lose_health,
)
from dragonsolitaire.simulation.events import EventKind
from dragonsolitaire.simulation.state import (
    ChoiceKind,
    Deferred,
    GameState,
    PendingChoice,
    PileKind,
    Resolution,
    Resolved,
)

logger = logging.getLogger(__name__)

Handler = Callable[[GameState, EffectId, Card], Resolution]

# Offered alongside the inventory stock by the Merchant and the Wizard
EXIT_WILDCARD = Card(Suit.SPADES, Value.ACE)


def _resolve_exit(state: GameState, effect_id: EffectId, card: Card) -> Resolution:
    exit_dungeon(state)
    return Resolved()


def _resolve_pit_trap(state: GameState, effect_id: EffectId, card: Card) -> Resolution:
    trap = PIT_TRAPS[effect_id]
    lose_health(state, trap.damage, use_gems=trap.hidden, source=trap.name)
    return Resolved()


def _resolve_passage(state: GameState, effect_id: EffectId, card: Card) -> Resolution:
    """Close the passage if its face-up partner is on the grid."""
    partner = Card(card.suit.opposite, card.value)
    for row, col, cell in state.grid.occupied():
        if cell.card == partner and not cell.face_down:
            cell.face_down = True
            state.emit(
                EventKind.PASSAGE_FOUND,
                f"The passage connects to {partner} at ({row}, {col})",
                row=row,
                col=col,
            )
            return Resolved()
    message = "You found a passage, but it doesn't match any other passage in the dungeon."
    display_message(state, message)
    return Deferred(message)


def _resolve_gem(state: GameState, effect_id: EffectId, card: Card) -> Resolution:
    gain(state, PileKind.GEMS, 1, source=EFFECT_NAMES[effect_id])
    return Resolved()


def _resolve_healing(state: GameState, effect_id: EffectId, card: Card) -> Resolution:
    gain(state, PileKind.HEALTH, 2, source=EFFECT_NAMES[effect_id])
    return Resolved()


def _resolve_treasure(state: GameState, effect_id: EffectId, card: Card) -> Resolution:
    gain(state, PileKind.INVENTORY, 1, source=EFFECT_NAMES[effect_id])
    return Resolved()


def _resolve_enemy(state: GameState, effect_id: EffectId, card: Card) -> Resolution:
    """Fight with a fate draw. The card resolves whatever the outcome."""
    enemy = ENEMIES[effect_id]
    fate = draw_fate(state)
    if fate < enemy.min_fate_to_defeat:
        logger.debug(f"{enemy.name} wins (fate {fate} < {enemy.min_fate_to_defeat})")
        lose_health(state, enemy.damage, source=enemy.name)
    elif fate == FATE_CRITICAL:
        logger.debug(f"Critical success against {enemy.name}")
        for reward in enemy.critical_rewards:
            if reward.kind is RewardKind.HEALTH:
                gain(state, PileKind.HEALTH, reward.amount, source=enemy.name)
            elif reward.kind is RewardKind.GEMS:
                gain(state, PileKind.GEMS, reward.amount, source=enemy.name)
            elif reward.kind is RewardKind.INVENTORY:
                gain(state, PileKind.INVENTORY, reward.amount, source=enemy.name)
            elif reward.kind is RewardKind.DEFEAT_DRAGON_QUEEN:
                defeat_dragon_queen(state)
    else:
        display_message(state, f"You defeated the {enemy.name}.")
    return Resolved()


def inventory_options(state: GameState) -> tuple[Card, ...]:
    """Cards offered by an item selection: inventory stock plus Exit."""
    return tuple(state.inventory.stock) + (EXIT_WILDCARD,)


def build_choice(state: GameState, kind: ChoiceKind) -> PendingChoice:
    if kind is ChoiceKind.MERCHANT:
        return PendingChoice(
            kind=kind,
            prompt="Purchase an inventory item for 1 gem",
            options=inventory_options(state),
            gem_cost=MERCHANT_GEM_COST,
        )
    return PendingChoice(
        kind=kind,
        prompt="Choose an inventory item to gain",
        options=inventory_options(state),
    )


def offer_choice(state: GameState, kind: ChoiceKind) -> PendingChoice:
    """Open an item selection and record it on the state."""
    choice = build_choice(state, kind)
    state.pending_choice = choice
    state.emit(
        EventKind.CHOICE_PENDING,
        choice.prompt,
        options=[option.code for option in choice.options],
        gem_cost=choice.gem_cost,
    )
    return choice


def _resolve_merchant(state: GameState, effect_id: EffectId, card: Card) -> Resolution:
    if len(state.gems.available) < MERCHANT_GEM_COST:
        message = "You need at least 1 gem to use this card."
        display_message(state, message)
        return Deferred(message)
    offer_choice(state, ChoiceKind.MERCHANT)
    return Resolved()


def _resolve_wizard(state: GameState, effect_id: EffectId, card: Card) -> Resolution:
    offer_choice(state, ChoiceKind.GENEROUS_WIZARD)
    return Resolved()


def complete_choice(state: GameState, choice: PendingChoice, selected: Card) -> None:
    """Apply a selection from a pending choice and pay its cost."""
    state.pending_choice = None
    state.emit(EventKind.CHOICE_MADE, f"You chose {selected}", card=selected.code)
    source = EFFECT_NAMES[EffectId(choice.kind.value)]
    if selected == EXIT_WILDCARD:
        exit_dungeon(state)
    elif state.inventory.take(selected):
        state.emit(
            EventKind.PILE_CHANGED,
            f"{source}: gained {selected}",
            pile=PileKind.INVENTORY.value,
            delta=1,
        )
    if choice.gem_cost:
        lose(state, PileKind.GEMS, choice.gem_cost, source=source)


HANDLERS: dict[EffectId, Handler] = {
    EffectId.EXIT: _resolve_exit,
    EffectId.PASSAGE: _resolve_passage,
    EffectId.GEM: _resolve_gem,
    EffectId.HEALING: _resolve_healing,
    EffectId.TREASURE_CHEST: _resolve_treasure,
    EffectId.MERCHANT: _resolve_merchant,
    EffectId.GENEROUS_WIZARD: _resolve_wizard,
}
HANDLERS.update({effect_id: _resolve_pit_trap for effect_id in PIT_TRAPS})
HANDLERS.update({effect_id: _resolve_enemy for effect_id in ENEMIES})


def resolve_effect(state: GameState, card: Card) -> Resolution:
    """Dispatch a card to its handler."""
    effect_id = effect_for(card)
    logger.debug(f"Resolving {card.code}: {card_name(card)}")
    return HANDLERS[effect_id](state, effect_id, card)
