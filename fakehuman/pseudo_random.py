"""Deterministic random stream consumed by the decision layer.

Every randomized decision an agent makes (cadence, hesitation, sampling, tile
search) draws from one ``PseudoRandom`` seeded from stable identifiers, so an
identical game history replays identical AI behaviour.
"""

from __future__ import annotations

import random
from typing import Iterable, Sequence, TypeVar

T = TypeVar("T")


def simple_hash(text: str) -> int:
    """32-bit signed string hash (``h = h * 31 + ord(c)``)."""

    h = 0
    for ch in text:
        h = (h * 31 + ord(ch)) & 0xFFFFFFFF
    if h >= 0x80000000:
        h -= 0x100000000
    return h


class PseudoRandom:
    """Seeded random stream with the draw helpers advisors need."""

    def __init__(self, seed: int):
        self.seed = seed
        self._rng = random.Random(seed)

    def next_int(self, lo: int, hi: int) -> int:
        """Return an integer in ``[lo, hi)``; ``lo`` when the range is empty."""
        if hi <= lo:
            return lo
        return self._rng.randrange(lo, hi)

    def next_float(self) -> float:
        return self._rng.random()

    def chance(self, odds: int) -> bool:
        """Return ``True`` with probability ``1 / odds`` (never for ``odds <= 0``)."""
        if odds <= 0:
            return False
        return self.next_int(0, odds) == 0

    def rand_element(self, items: Sequence[T]) -> T:
        if not items:
            raise ValueError("rand_element called with an empty sequence")
        return items[self.next_int(0, len(items))]

    def rand_from_set(self, items: Iterable[T]) -> T:
        """Pick from an unordered collection in a reproducible way."""
        pool = list(items)
        return self.rand_element(pool)
