"""pyskip: a probabilistic ordered multiset (skip list) in pure Python.

The package exposes ``pyskip.SkipList`` as the container meant to sit inside
larger storage engines (memtables, indexes), while keeping the supporting
pieces (node arena, height policies, error types) importable for testing and
experimentation.
"""

from __future__ import annotations

__all__ = [
    "SkipList",
    "Cursor",
    "Removal",
    "RandomLevels",
    "FixedLevels",
    "InvariantViolation",
    "NotFoundError",
]

from .errors import InvariantViolation, NotFoundError
from .levels import FixedLevels, RandomLevels
from .skiplist import Cursor, Removal, SkipList
