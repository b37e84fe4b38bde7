"""Injectable randomness for the stochastic packers."""

from __future__ import annotations

import random
from typing import Optional, Protocol, Sequence, TypeVar

T = TypeVar("T")


class RandomSource(Protocol):
    def next_float(self) -> float:
        """Uniform float in [0, 1)."""
        ...

    def next_int(self, bound: int) -> int:
        """Uniform int in [0, bound)."""
        ...


class SeededRandom:
    """RandomSource backed by a private `random.Random`; pass a seed for repeatable runs."""

    def __init__(self, seed: Optional[int] = None):
        self._rng = random.Random(seed)

    def next_float(self) -> float:
        return self._rng.random()

    def next_int(self, bound: int) -> int:
        return self._rng.randrange(bound)


def choice(rng: RandomSource, items: Sequence[T]) -> T:
    return items[rng.next_int(len(items))]


def shuffled(rng: RandomSource, items: Sequence[T]) -> list[T]:
    """Fisher-Yates shuffle into a new list."""
    out = list(items)
    for i in range(len(out) - 1, 0, -1):
        j = rng.next_int(i + 1)
        out[i], out[j] = out[j], out[i]
    return out
