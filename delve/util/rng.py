"""Deterministic random number generation for map generators.

Every map is generated from its own RandomStream. A stream is a pure function
of its seed and the number of draws taken so far, so:

1. The same seed always produces the same sequence of draws
2. Two maps generated side by side never share random state
3. There is no module-level generator that one caller could disturb for another

Usage:
    stream = RandomStream(42)
    width = stream.next_range(6, 10)
    if stream.next_bool(0.25):
        ...

Streams wrap ``random.Random`` seeded with an integer, whose Mersenne Twister
output is stable across platforms and Python releases.
"""

from __future__ import annotations

from collections.abc import Sequence
from random import Random
from typing import TypeVar

from delve.types import SEED_MASK

T = TypeVar("T")


def normalize_seed(seed: int) -> int:
    """Reduce any integer seed to its unsigned 64-bit value."""
    return seed & SEED_MASK


class RandomStream:
    """Seeded source of uniform integers, floats, booleans and samples.

    All higher level helpers are built on ``next_u32`` and ``next_float`` so
    the draw counter reflects exactly how far the stream has advanced.
    """

    def __init__(self, seed: int) -> None:
        self._seed = normalize_seed(seed)
        self._random = Random(self._seed)
        self._draws = 0

    @property
    def seed(self) -> int:
        return self._seed

    @property
    def draws(self) -> int:
        """Number of primitive draws taken from this stream."""
        return self._draws

    # -------------------------------------------------------------------------
    # Primitive draws
    # -------------------------------------------------------------------------

    def next_u32(self) -> int:
        """Return a uniform unsigned 32-bit integer."""
        self._draws += 1
        return self._random.getrandbits(32)

    def next_float(self) -> float:
        """Return a uniform float in [0.0, 1.0)."""
        self._draws += 1
        return self._random.random()

    # -------------------------------------------------------------------------
    # Derived helpers
    # -------------------------------------------------------------------------

    def next_range(self, lo: int, hi: int) -> int:
        """Return a uniform integer in [lo, hi).

        An empty range (hi <= lo) returns ``lo`` without drawing, so callers
        can pass clamped bounds without special-casing them.
        """
        span = hi - lo
        if span <= 0:
            return lo
        self._draws += 1
        return lo + self._random.randrange(span)

    def roll_dice(self, lo: int, hi: int) -> int:
        """Return a uniform integer in [lo, hi], both ends inclusive."""
        return self.next_range(lo, hi + 1)

    def next_bool(self, probability: float = 0.5) -> bool:
        """Return True with the given probability."""
        return self.next_float() < probability

    def choice(self, seq: Sequence[T]) -> T:
        """Return a random element from a non-empty sequence."""
        if not seq:
            raise IndexError("Cannot choose from an empty sequence")
        return seq[self.next_range(0, len(seq))]

    def sample(self, population: Sequence[T], k: int) -> list[T]:
        """Return ``k`` distinct elements, or all of them if ``k`` is larger."""
        pool = list(population)
        k = max(0, min(k, len(pool)))
        for i in range(k):
            j = self.next_range(i, len(pool))
            pool[i], pool[j] = pool[j], pool[i]
        return pool[:k]

    def __repr__(self) -> str:
        return f"RandomStream(seed={self._seed}, draws={self._draws})"
