"""Starting card sets for each pile."""

from __future__ import annotations

from dragonsolitaire.cards.schema import Card, Suit, Value


def build_pile(pairs: list[tuple[Suit, Value]]) -> list[Card]:
    """Build a list of cards from (suit, value) pairs."""
    return [Card(suit, value) for suit, value in pairs]


def health_cards() -> list[Card]:
    """HEARTS ACE..FIVE."""
    return build_pile([(Suit.HEARTS, Value.from_order(order)) for order in range(1, 6)])


def gem_cards() -> list[Card]:
    """DIAMONDS ACE..TEN, ordered so TEN is drawn first."""
    return build_pile([(Suit.DIAMONDS, Value.from_order(order)) for order in range(1, 11)])


def inventory_cards() -> list[Card]:
    """HEARTS/DIAMONDS JACK, QUEEN, KING plus the RED JOKER."""
    pairs = [
        (suit, value)
        for suit in (Suit.HEARTS, Suit.DIAMONDS)
        for value in (Value.JACK, Value.QUEEN, Value.KING)
    ]
    pairs.append((Suit.RED, Value.JOKER))
    return build_pile(pairs)


def fate_cards() -> list[Card]:
    """HEARTS SIX..TEN."""
    return build_pile([(Suit.HEARTS, Value.from_order(order)) for order in range(6, 11)])


def dungeon_cards() -> list[Card]:
    """Full CLUBS, full SPADES and the BLACK JOKER (27 cards)."""
    pairs = [
        (suit, Value.from_order(order))
        for suit in (Suit.CLUBS, Suit.SPADES)
        for order in range(1, 14)
    ]
    pairs.append((Suit.BLACK, Value.JOKER))
    return build_pile(pairs)


def all_cards() -> list[Card]:
    """Every constructible card: 52 standard cards plus two jokers."""
    cards: list[Card] = []
    for suit in Suit:
        for value in Value:
            if suit.is_color != value.is_joker:
                continue
            cards.append(Card(suit, value))
    return cards
