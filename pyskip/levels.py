"""Insertion-height policies.

The default policy draws heights from a geometric distribution: each extra
level is granted with probability ``1 / factor``. With the default factor of
4 the expected number of levels for *n* elements is about log4(n), which
keeps search, insert and remove at O(log n) on average.

A policy is any zero-argument callable returning a height >= 1, which lets
tests pin the layout with ``FixedLevels``.
"""
from __future__ import annotations

import itertools
import random
from collections.abc import Callable, Iterable
from typing import Optional

__all__ = ["DEFAULT_FACTOR", "LevelPolicy", "rand", "choose_level", "RandomLevels", "FixedLevels"]

DEFAULT_FACTOR = 4

LevelPolicy = Callable[[], int]


def rand(lo: int, hi: int, rng: Optional[random.Random] = None) -> int:
    """Uniform random integer in the half-open range ``[lo, hi)``."""
    if hi <= lo:
        raise ValueError(f"empty range [{lo}, {hi})")
    return (rng or random).randrange(lo, hi)


def choose_level(factor: int = DEFAULT_FACTOR, rng: Optional[random.Random] = None) -> int:
    """Count consecutive zero draws from ``[0, factor)``.

    The result is the number of *extra* levels; an insertion height is
    ``choose_level() + 1``.
    """
    level = 0
    while rand(0, factor, rng) == 0:
        level += 1
    return level


class RandomLevels:
    """Geometric height policy backed by its own ``random.Random``."""

    def __init__(self, factor: int = DEFAULT_FACTOR, rng: Optional[random.Random] = None, *, seed: Optional[int] = None):
        if factor < 2:
            raise ValueError(f"factor must be >= 2, got {factor}")
        if rng is not None and seed is not None:
            raise ValueError("pass either rng or seed, not both")
        self.factor = factor
        self.rng = rng if rng is not None else random.Random(seed)

    def __call__(self) -> int:
        return choose_level(self.factor, self.rng) + 1

    def __repr__(self) -> str:  # pragma: no cover
        return f"RandomLevels(factor={self.factor})"


class FixedLevels:
    """Replays a fixed sequence of heights, cycling when it runs out."""

    def __init__(self, heights: Iterable[int]):
        self.heights = list(heights)
        if not self.heights:
            raise ValueError("FixedLevels needs at least one height")
        if any(h < 1 for h in self.heights):
            raise ValueError(f"heights must be >= 1, got {self.heights}")
        self._it = itertools.cycle(self.heights)

    def __call__(self) -> int:
        return next(self._it)

    def __repr__(self) -> str:  # pragma: no cover
        return f"FixedLevels({self.heights!r})"
