"""Skip list: a sorted multiset with expected O(log n) operations.

Layout (head column on the left, level 0 at the bottom)::

    L2  S ──────────────────► 5 ──────────────────►
        │                     │
    L1  S ──────► 2 ────────► 5 ────────► 8 ──────►
        │         │           │           │
    L0  S ─► 1 ─► 2 ─► 3 ───► 5 ─► 5 ───► 8 ─► 9 ─►

Every operation starts with a *traversal* that records, for each level, the
last node strictly below the searched value and the first node at or above
it. Insertion then splices a new vertical chain in before any equal values,
so duplicates sit newest first; removal unlinks the first equal node on
every level (the newest copy) and trims empty levels off the top of the head
column.

Complexities (average case):
    • add / find / remove – O(log n)
    • iterate             – O(n)

The container is not thread-safe and must not be mutated while a cursor
over it is still in use.
"""
from __future__ import annotations

import enum
import logging
import random
from collections.abc import Iterable, Iterator
from typing import Generic, Optional, TypeVar

from .arena import NIL, SENTINEL, Entry, NodeArena
from .errors import NotFoundError, check
from .levels import DEFAULT_FACTOR, LevelPolicy, RandomLevels

__all__ = ["SkipList", "Cursor", "Removal"]

logger = logging.getLogger(__name__)

T = TypeVar("T")

# level -> (predecessor handle, successor handle)
Tracked = dict[int, tuple[int, int]]


class Removal(enum.Enum):
    """Outcome of ``SkipList.remove``; truthy only when a value was removed."""

    REMOVED = 1
    NOT_FOUND = 0

    def __bool__(self) -> bool:
        return self is Removal.REMOVED


class Cursor(Generic[T]):
    """Forward iterator over the bottom level, one node handle at a time."""

    __slots__ = ("_arena", "_handle")

    def __init__(self, arena: NodeArena[T], start: int):
        self._arena = arena
        self._handle = start

    def __iter__(self) -> Cursor[T]:
        return self

    def __next__(self) -> T:
        if self._handle == NIL:
            raise StopIteration
        node = self._arena[self._handle]
        self._handle = node.right
        return node.value


class SkipList(Generic[T]):
    """Sorted container allowing duplicate values.

    Parameters
    ----------
    items: Iterable
        Initial values, added one by one in order.
    factor: int
        Inverse promotion probability of the default height policy.
    rng: random.Random | None
        Random source for the default height policy.
    seed:
        Seed for a private ``random.Random`` when ``rng`` is not given.
    levels: callable | None
        Custom height policy returning a height >= 1 per insertion. Replaces
        ``factor``/``rng``/``seed``.
    """

    def __init__(
        self,
        items: Iterable[T] = (),
        *,
        factor: int = DEFAULT_FACTOR,
        rng: Optional[random.Random] = None,
        seed: Optional[int] = None,
        levels: Optional[LevelPolicy] = None,
    ):
        if levels is None:
            levels = RandomLevels(factor, rng, seed=seed)
        elif rng is not None or seed is not None:
            raise ValueError("rng/seed cannot be combined with a custom level policy")
        self._levels = levels
        self._arena: NodeArena[T] = NodeArena()
        self._head = self._arena.alloc(SENTINEL)
        self._height = 1
        self._size = 0
        self.update(items)

    # ---------------------------------------------------------------------
    # Mutation API
    # ---------------------------------------------------------------------
    def add(self, value: T) -> None:
        """Insert ``value`` in front of any values equal to it."""
        half = self._levels()
        if half < 1:
            raise ValueError(f"level policy returned height {half}, expected >= 1")
        self._ensure_height(half)

        arena = self._arena
        try:
            tracked = self._traverse(value)
        except BaseException:
            # undo the growth above; the top level was non-empty before it
            self._shrink_head()
            raise
        down = NIL
        for idx in range(half):
            pre, nex = tracked[idx]
            node = arena.alloc(Entry(value), down, nex)
            arena[pre].right = node
            down = node
        self._size += 1

    def update(self, items: Iterable[T]) -> None:
        for item in items:
            self.add(item)

    def remove(self, value: T) -> Removal:
        """Remove one occurrence of ``value``.

        Returns ``Removal.NOT_FOUND`` and leaves the container untouched when
        no equal value is stored.
        """
        arena = self._arena
        tracked = self._traverse(value)

        _, cur = tracked[0]
        if cur == NIL or arena[cur].value != value:
            return Removal.NOT_FOUND

        for pre, cur in tracked.values():
            if cur == NIL:
                continue
            node = arena[cur]
            if node.value != value:
                continue
            arena[pre].right = node.right
            arena.release(cur)

        self._size -= 1
        self._shrink_head()
        return Removal.REMOVED

    def discard(self, value: T) -> bool:
        return bool(self.remove(value))

    def remove_or_raise(self, value: T) -> None:
        if not self.remove(value):
            raise NotFoundError(value)

    def clear(self) -> None:
        self._arena.clear()
        self._head = self._arena.alloc(SENTINEL)
        logger.debug("skip list cleared (%d values, %d levels dropped)", self._size, self._height)
        self._height = 1
        self._size = 0

    # ---------------------------------------------------------------------
    # Query API
    # ---------------------------------------------------------------------
    def find(self, value: T) -> bool:
        """Return True if at least one stored value equals ``value``."""
        _, cur = self._traverse(value)[0]
        return cur != NIL and self._arena[cur].value == value

    def height(self) -> int:
        """Number of levels, i.e. sentinels in the head column."""
        return self._height

    def __contains__(self, value: object) -> bool:
        return self.find(value)  # type: ignore[arg-type]

    def __len__(self) -> int:
        return self._size

    def __repr__(self) -> str:
        return f"{type(self).__name__}({list(self)!r})"

    # ------------------------------------------------------------------
    # Iteration helpers (ordered)
    # ------------------------------------------------------------------
    def iterate(self) -> Cursor[T]:
        """Lazy ascending cursor starting from the current bottom level."""
        arena = self._arena
        row = self._head
        while (below := arena[row].down) != NIL:
            row = below
        return Cursor(arena, arena[row].right)

    def __iter__(self) -> Iterator[T]:
        return self.iterate()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _traverse(self, value: T) -> Tracked:
        """Record (predecessor, successor) handles on every level, top down."""
        arena = self._arena
        level = self._height - 1
        tracked: Tracked = {}

        pre = self._head
        while pre != NIL:
            node = arena[pre]
            cur = node.right
            while cur != NIL and (nxt := arena[cur]).value < value:  # type: ignore[operator]
                pre, node = cur, nxt
                cur = nxt.right
            tracked[level] = (pre, cur)
            pre = node.down
            level -= 1

        check(pre == NIL, "traversal did not exhaust the head column")
        check(level == -1, f"head column depth disagrees with height {self._height}")
        return tracked

    def _ensure_height(self, expected: int) -> None:
        check(expected > 0, f"cannot grow head column to {expected} levels")
        current = self._height
        if current >= expected:
            return
        for _ in range(current, expected):
            self._head = self._arena.alloc(SENTINEL, down=self._head)
        self._height = expected
        logger.debug("head column grown %d -> %d", current, expected)

    def _shrink_head(self) -> None:
        arena = self._arena
        before = self._height
        while (top := arena[self._head]).right == NIL and top.down != NIL:
            arena.release(self._head)
            self._head = top.down
            self._height -= 1
        if self._height != before:
            logger.debug("head column shrunk %d -> %d", before, self._height)

    # ------------------------------------------------------------------
    # Consistency check 🔍
    # ------------------------------------------------------------------
    def validate(self) -> None:
        """Walk every level and raise ``InvariantViolation`` on corruption."""
        arena = self._arena
        column: list[int] = []
        handle = self._head
        while handle != NIL:
            node = arena[handle]
            check(node.is_sentinel, f"non-sentinel node {handle} in head column")
            column.append(handle)
            handle = node.down
        check(len(column) == self._height, f"head column has {len(column)} levels, height is {self._height}")
        check(self._height == 1 or arena[self._head].right != NIL, "empty top level was not trimmed")

        below: dict[int, T] = {}
        linked = 0
        for level, sentinel in enumerate(reversed(column)):
            row: dict[int, T] = {}
            prev: Optional[T] = None
            cur = arena[sentinel].right
            while cur != NIL:
                node = arena[cur]
                check(not node.is_sentinel, f"sentinel {cur} linked inside level {level}")
                value = node.value
                if row:
                    check(not value < prev, f"level {level} out of order at {value!r}")  # type: ignore[operator]
                if level == 0:
                    check(node.down == NIL, f"bottom node {cur} has a down link")
                else:
                    check(node.down in below, f"node {cur} on level {level} has no copy below")
                    check(below[node.down] == value, f"node {cur} differs from its copy below")
                row[cur] = value
                prev = value
                cur = node.right
            if level == 0:
                check(len(row) == self._size, f"level 0 holds {len(row)} values, size is {self._size}")
            linked += len(row)
            below = row
        check(len(arena) == linked + len(column), "arena holds unreachable nodes")
