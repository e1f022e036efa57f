"""Dungeon card effect registry.

Each dungeon card maps to an ``EffectId``. Cards that share an effect
(CLUBS and SPADES SEVEN through JACK) are two registry keys pointing at the
same id; the handler for each id lives in ``simulation.resolvers``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Mapping

from dragonsolitaire.cards.schema import Card, Suit, Value


class EffectId(Enum):
    """Mechanical effect of a dungeon card."""

    EXIT = "exit"
    HIDDEN_PIT_TRAP = "hidden_pit_trap"
    VISIBLE_PIT_TRAP_1 = "visible_pit_trap_1"
    VISIBLE_PIT_TRAP_2 = "visible_pit_trap_2"
    VISIBLE_PIT_TRAP_3 = "visible_pit_trap_3"
    PASSAGE = "passage"
    GEM = "gem"
    HEALING = "healing"
    TREASURE_CHEST = "treasure_chest"
    SLIME = "slime"
    SKELETON = "skeleton"
    DRAGON_QUEEN = "dragon_queen"
    TROLL = "troll"
    YOUNG_DRAGON = "young_dragon"
    TROLL_KING = "troll_king"
    MERCHANT = "merchant"
    GENEROUS_WIZARD = "generous_wizard"


class RewardKind(Enum):
    """What a critical success grants."""

    HEALTH = "health"
    GEMS = "gems"
    INVENTORY = "inventory"
    DEFEAT_DRAGON_QUEEN = "defeat_dragon_queen"


@dataclass(frozen=True)
class Reward:
    kind: RewardKind
    amount: int = 1


@dataclass(frozen=True)
class EnemyProfile:
    """Combat numbers for an enemy card.

    A fate draw below ``min_fate_to_defeat`` costs ``damage`` health; a
    critical draw grants every reward in ``critical_rewards``.
    """

    name: str
    min_fate_to_defeat: int
    damage: int
    critical_rewards: tuple[Reward, ...]


@dataclass(frozen=True)
class PitTrapProfile:
    """A pit trap. Hidden traps let available gems absorb damage."""

    damage: int
    hidden: bool

    @property
    def name(self) -> str:
        kind = "Hidden" if self.hidden else "Visible"
        return f"{kind} Pit Trap ({self.damage} damage)"


ENEMIES: Mapping[EffectId, EnemyProfile] = MappingProxyType({
    EffectId.SLIME: EnemyProfile(
        name="Slime",
        min_fate_to_defeat=7,
        damage=1,
        critical_rewards=(Reward(RewardKind.HEALTH),),
    ),
    EffectId.SKELETON: EnemyProfile(
        name="Skeleton",
        min_fate_to_defeat=8,
        damage=1,
        critical_rewards=(Reward(RewardKind.GEMS),),
    ),
    EffectId.DRAGON_QUEEN: EnemyProfile(
        name="Dragon Queen",
        min_fate_to_defeat=9,
        damage=3,
        critical_rewards=(Reward(RewardKind.DEFEAT_DRAGON_QUEEN),),
    ),
    EffectId.TROLL: EnemyProfile(
        name="Troll",
        min_fate_to_defeat=9,
        damage=2,
        critical_rewards=(Reward(RewardKind.INVENTORY),),
    ),
    EffectId.YOUNG_DRAGON: EnemyProfile(
        name="Young Dragon",
        min_fate_to_defeat=10,
        damage=1,
        critical_rewards=(Reward(RewardKind.GEMS, 3),),
    ),
    EffectId.TROLL_KING: EnemyProfile(
        name="Troll King",
        min_fate_to_defeat=9,
        damage=3,
        critical_rewards=(
            Reward(RewardKind.GEMS),
            Reward(RewardKind.INVENTORY),
            Reward(RewardKind.HEALTH),
        ),
    ),
})

PIT_TRAPS: Mapping[EffectId, PitTrapProfile] = MappingProxyType({
    EffectId.HIDDEN_PIT_TRAP: PitTrapProfile(damage=2, hidden=True),
    EffectId.VISIBLE_PIT_TRAP_1: PitTrapProfile(damage=1, hidden=False),
    EffectId.VISIBLE_PIT_TRAP_2: PitTrapProfile(damage=2, hidden=False),
    EffectId.VISIBLE_PIT_TRAP_3: PitTrapProfile(damage=3, hidden=False),
})

_NAMES = {
    EffectId.EXIT: "Exit",
    EffectId.PASSAGE: "Passage",
    EffectId.GEM: "Gem",
    EffectId.HEALING: "Healing",
    EffectId.TREASURE_CHEST: "Treasure Chest",
    EffectId.MERCHANT: "Merchant",
    EffectId.GENEROUS_WIZARD: "Generous Wizard",
}
_NAMES.update({effect_id: profile.name for effect_id, profile in ENEMIES.items()})
_NAMES.update({effect_id: profile.name for effect_id, profile in PIT_TRAPS.items()})
EFFECT_NAMES: Mapping[EffectId, str] = MappingProxyType(_NAMES)


def _build_registry() -> dict[tuple[Suit, Value], EffectId]:
    registry: dict[tuple[Suit, Value], EffectId] = {
        (Suit.SPADES, Value.ACE): EffectId.EXIT,
        (Suit.SPADES, Value.TWO): EffectId.HIDDEN_PIT_TRAP,
        (Suit.SPADES, Value.THREE): EffectId.VISIBLE_PIT_TRAP_1,
        (Suit.SPADES, Value.QUEEN): EffectId.DRAGON_QUEEN,
        (Suit.SPADES, Value.KING): EffectId.TROLL,
        (Suit.CLUBS, Value.ACE): EffectId.MERCHANT,
        (Suit.CLUBS, Value.TWO): EffectId.VISIBLE_PIT_TRAP_2,
        (Suit.CLUBS, Value.THREE): EffectId.VISIBLE_PIT_TRAP_3,
        (Suit.CLUBS, Value.QUEEN): EffectId.YOUNG_DRAGON,
        (Suit.CLUBS, Value.KING): EffectId.TROLL_KING,
        (Suit.BLACK, Value.JOKER): EffectId.GENEROUS_WIZARD,
    }
    # Same effect in both suits
    shared = {
        Value.FOUR: EffectId.PASSAGE,
        Value.FIVE: EffectId.PASSAGE,
        Value.SIX: EffectId.PASSAGE,
        Value.SEVEN: EffectId.GEM,
        Value.EIGHT: EffectId.HEALING,
        Value.NINE: EffectId.TREASURE_CHEST,
        Value.TEN: EffectId.SLIME,
        Value.JACK: EffectId.SKELETON,
    }
    for suit in (Suit.SPADES, Suit.CLUBS):
        for value, effect_id in shared.items():
            registry[(suit, value)] = effect_id
    return registry


DUNGEON_EFFECTS: Mapping[tuple[Suit, Value], EffectId] = MappingProxyType(_build_registry())


def effect_for(card: Card) -> EffectId:
    """Look up the effect of a dungeon card.

    Raises:
        KeyError: If the card is not a dungeon card.
    """
    try:
        return DUNGEON_EFFECTS[(card.suit, card.value)]
    except KeyError:
        raise KeyError(f"{card.code} is not a dungeon card") from None


def card_name(card: Card) -> str:
    """Display name of a dungeon card's effect (e.g. "Passage (FIVE)")."""
    effect_id = effect_for(card)
    if effect_id is EffectId.PASSAGE:
        return f"Passage ({card.value.name})"
    return EFFECT_NAMES[effect_id]
