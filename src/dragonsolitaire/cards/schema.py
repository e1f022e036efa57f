"""Card identity types and enumerations."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class InvalidCardError(ValueError):
    """Raised when a card cannot be constructed from the given suit/value."""

    pass


class Suit(Enum):
    """Card suits. BLACK and RED are the color-only joker suits."""

    HEARTS = "H"
    CLUBS = "C"
    DIAMONDS = "D"
    SPADES = "S"
    BLACK = "B"
    RED = "R"

    @property
    def code(self) -> str:
        return self.value

    @property
    def is_color(self) -> bool:
        """True for the joker suits."""
        return self in (Suit.BLACK, Suit.RED)

    @property
    def display(self) -> str:
        return _SUIT_DISPLAY[self]

    @property
    def opposite(self) -> "Suit":
        """Passage partner suit (CLUBS <-> SPADES)."""
        if self is Suit.CLUBS:
            return Suit.SPADES
        if self is Suit.SPADES:
            return Suit.CLUBS
        raise InvalidCardError(f"Suit {self.name} has no passage partner")


_SUIT_DISPLAY = {
    Suit.HEARTS: "♥",
    Suit.CLUBS: "♣",
    Suit.DIAMONDS: "♦",
    Suit.SPADES: "♠",
    Suit.BLACK: "●",
    Suit.RED: "○",
}


class Value(Enum):
    """Card values, keyed by their one-character code (TEN is "0")."""

    ACE = "A"
    TWO = "2"
    THREE = "3"
    FOUR = "4"
    FIVE = "5"
    SIX = "6"
    SEVEN = "7"
    EIGHT = "8"
    NINE = "9"
    TEN = "0"
    JACK = "J"
    QUEEN = "Q"
    KING = "K"
    JOKER = "X"

    @property
    def code(self) -> str:
        return self.value

    @property
    def order(self) -> int:
        """ACE=1 .. KING=13. JOKER sits outside the order at 14."""
        return _VALUE_ORDER[self]

    @property
    def is_joker(self) -> bool:
        return self is Value.JOKER

    @property
    def display(self) -> str:
        if self is Value.TEN:
            return "10"
        return self.value

    @classmethod
    def from_order(cls, order: int) -> "Value":
        for value, value_order in _VALUE_ORDER.items():
            if value_order == order and not value.is_joker:
                return value
        raise InvalidCardError(f"No card value with order {order}")


_VALUE_ORDER = {value: index + 1 for index, value in enumerate(Value)}


@dataclass(frozen=True)
class Card:
    """Immutable playing card. Equality is by (suit, value)."""

    suit: Suit
    value: Value

    def __post_init__(self) -> None:
        if not isinstance(self.suit, Suit):
            raise InvalidCardError(f"Invalid suit: {self.suit!r}")
        if not isinstance(self.value, Value):
            raise InvalidCardError(f"Invalid value: {self.value!r}")
        if self.suit.is_color != self.value.is_joker:
            raise InvalidCardError(
                f"{self.value.name} cannot be paired with suit {self.suit.name}"
            )

    @property
    def code(self) -> str:
        """Two-character short code, value first (e.g. "AH", "0S", "XB")."""
        return f"{self.value.code}{self.suit.code}"

    @classmethod
    def from_keys(cls, suit_key: str, value_key: str) -> "Card":
        """Build a card from enum names such as ("HEARTS", "ACE")."""
        try:
            suit = Suit[suit_key]
        except KeyError:
            raise InvalidCardError(f"Invalid suit key: {suit_key}") from None
        try:
            value = Value[value_key]
        except KeyError:
            raise InvalidCardError(f"Invalid value key: {value_key}") from None
        return cls(suit, value)

    @classmethod
    def from_code(cls, code: str) -> "Card":
        """Parse a two-character short code."""
        if len(code) != 2:
            raise InvalidCardError(f"Invalid card code: {code!r}")
        try:
            value = Value(code[0])
            suit = Suit(code[1])
        except ValueError:
            raise InvalidCardError(f"Invalid card code: {code!r}") from None
        return cls(suit, value)

    def __str__(self) -> str:
        return f"{self.value.display}{self.suit.display}"
