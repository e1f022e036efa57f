"""Seeded random number generation.

Mulberry32 matches the generator used by the browser client, so a seed
produces the same deal on both sides.
"""

from __future__ import annotations

import random
from typing import Callable, Optional, Sequence, TypeVar

T = TypeVar("T")

_MASK = 0xFFFFFFFF


def _imul(a: int, b: int) -> int:
    """Low 32 bits of a 32-bit multiply."""
    return (a * b) & _MASK


class Mulberry32:
    """32-bit mulberry32 PRNG. Its whole state is one unsigned int."""

    def __init__(self, seed: int) -> None:
        self.state = seed & _MASK

    def next_float(self) -> float:
        """Next float in [0, 1)."""
        self.state = (self.state + 0x6D2B79F5) & _MASK
        t = self.state
        t = _imul(t ^ (t >> 15), t | 1)
        t ^= (t + _imul(t ^ (t >> 7), t | 61)) & _MASK
        return ((t ^ (t >> 14)) & _MASK) / 4294967296

    def __call__(self) -> float:
        return self.next_float()


def random_seed() -> int:
    """Fresh nondeterministic 32-bit seed."""
    return random.randint(0, 2**32 - 1)


def shuffle(items: Sequence[T], rng: Optional[Callable[[], float]] = None) -> list[T]:
    """Fisher-Yates shuffle returning a new list."""
    if rng is None:
        rng = random.random
    shuffled = list(items)
    for i in range(len(shuffled) - 1, 0, -1):
        j = int(rng() * (i + 1))
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled
