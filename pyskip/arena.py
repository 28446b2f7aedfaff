"""Node storage for the skip list.

Every node of a container lives in one ``NodeArena`` and is addressed by an
integer *handle*. Links (``down`` / ``right``) are handles too, with ``NIL``
meaning "no link". Released handles go to a free list and are reused by the
next allocation, so unlinking a node is O(1) and nothing relies on
reference cycles being collected.

A node's payload is a tagged variant:

    ┌──────────────┬──────────────────────────────┐
    │ Sentinel     │ head-column node, no value   │
    │ Entry(value) │ stored element               │
    └──────────────┴──────────────────────────────┘
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar, Union

from .errors import check

__all__ = ["NIL", "SENTINEL", "Sentinel", "Entry", "Payload", "NodeArena"]

T = TypeVar("T")

NIL = -1


@dataclass(frozen=True, slots=True)
class Sentinel:
    def __repr__(self) -> str:
        return "SENTINEL"


SENTINEL = Sentinel()


@dataclass(frozen=True, slots=True)
class Entry(Generic[T]):
    value: T


Payload = Union[Sentinel, Entry[T]]


class _Node(Generic[T]):
    __slots__ = ("payload", "down", "right")

    def __init__(self, payload: Payload[T], down: int, right: int):
        self.payload = payload
        self.down = down
        self.right = right

    @property
    def is_sentinel(self) -> bool:
        return isinstance(self.payload, Sentinel)

    @property
    def value(self) -> T:
        payload = self.payload
        check(isinstance(payload, Entry), "sentinel node has no value")
        return payload.value  # type: ignore[union-attr]

    def __repr__(self) -> str:  # pragma: no cover
        return f"Node<{self.payload!r} down={self.down} right={self.right}>"


class NodeArena(Generic[T]):
    """Growable node store with handle recycling."""

    def __init__(self) -> None:
        self._nodes: list[Optional[_Node[T]]] = []
        self._free: list[int] = []

    # ------------------------------------------------------------------
    # Allocation
    # ------------------------------------------------------------------
    def alloc(self, payload: Payload[T], down: int = NIL, right: int = NIL) -> int:
        """Store a new node and return its handle."""
        node = _Node(payload, down, right)
        if self._free:
            handle = self._free.pop()
            self._nodes[handle] = node
            return handle
        self._nodes.append(node)
        return len(self._nodes) - 1

    def release(self, handle: int) -> None:
        """Drop the node behind ``handle`` and make the slot reusable."""
        self[handle]  # validates the handle
        self._nodes[handle] = None
        self._free.append(handle)

    def clear(self) -> None:
        self._nodes.clear()
        self._free.clear()

    # ------------------------------------------------------------------
    # Access
    # ------------------------------------------------------------------
    def __getitem__(self, handle: int) -> _Node[T]:
        check(0 <= handle < len(self._nodes), f"handle {handle} out of range")
        node = self._nodes[handle]
        check(node is not None, f"handle {handle} was released")
        return node  # type: ignore[return-value]

    def __len__(self) -> int:
        """Number of live nodes, sentinels included."""
        return len(self._nodes) - len(self._free)

    @property
    def capacity(self) -> int:
        return len(self._nodes)
