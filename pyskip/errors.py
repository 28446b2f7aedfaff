"""Error types shared by the skip-list modules.

Two channels are kept apart:
    • ``InvariantViolation`` – a structural assumption broke; always a bug.
    • ``NotFoundError``      – only raised by ``SkipList.remove_or_raise``;
      the regular ``remove`` reports absence through its return value.
"""
from __future__ import annotations

__all__ = ["InvariantViolation", "NotFoundError", "check"]


class InvariantViolation(AssertionError):
    """Internal consistency check failed."""


class NotFoundError(KeyError):
    """Value is not stored in the container."""


def check(condition: bool, message: str = "assertion fail") -> None:
    # Explicit raise so the check survives ``python -O``.
    if not condition:
        raise InvariantViolation(message)
