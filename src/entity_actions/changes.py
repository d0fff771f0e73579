"""Attribute change sets for optimistic updates.

An AttributeChangeSet lives for exactly one in-flight action:

    CLEAN --record()--> MUTATED --commit()--> COMMITTED
                           \
                            --revert()--> REVERTED

CLEAN means nothing changed. The set settles at most once: the first of
commit()/revert() wins and every later call is a no-op, so a completion
callback that fires twice cannot replay the rollback.
"""

from __future__ import annotations

__all__ = [
    "AttributeChange",
    "AttributeChangeSet",
    "ChangeState",
]

from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum
from typing import Any

from entity_actions.protocols import Entity


class ChangeState(str, Enum):
    """Lifecycle of the attribute set of one invocation."""

    CLEAN = "clean"
    MUTATED = "mutated"
    COMMITTED = "committed"
    REVERTED = "reverted"


@dataclass(frozen=True)
class AttributeChange:
    """One optimistic write.

    Attributes:
        key: Entity attribute name.
        old_value: Value before the write (restored on rollback).
        new_value: Value written optimistically.
    """

    key: str
    old_value: Any
    new_value: Any


class AttributeChangeSet:
    """Ordered record of the optimistic writes made for one action."""

    def __init__(self, action_name: str) -> None:
        self.action_name = action_name
        self._changes: list[AttributeChange] = []
        self._state = ChangeState.CLEAN
        self._settled = False

    @property
    def state(self) -> ChangeState:
        return self._state

    @property
    def settled(self) -> bool:
        """True once commit() or revert() has run."""
        return self._settled

    @property
    def keys(self) -> list[str]:
        return [change.key for change in self._changes]

    def record(self, key: str, old_value: Any, new_value: Any) -> None:
        """Record a write that has been (or is about to be) applied to the entity.

        Raises:
            RuntimeError: If the set has already settled.
        """
        if self._settled:
            raise RuntimeError(f"Change set for {self.action_name!r} is already {self._state.value}")
        self._changes.append(AttributeChange(key, old_value, new_value))
        self._state = ChangeState.MUTATED

    def commit(self) -> bool:
        """Keep the writes. Returns False if the set had already settled."""
        if self._settled:
            return False
        self._settled = True
        if self._changes:
            self._state = ChangeState.COMMITTED
        return True

    def revert(self, entity: Entity) -> bool:
        """Write every old value back, in recording order.

        The entity's dirty flag is the same after the revert as before it.

        Returns:
            False if the set had already settled, True otherwise.
        """
        if self._settled:
            return False
        self._settled = True
        if not self._changes:
            return True

        was_dirty = entity.is_dirty
        for change in self._changes:
            entity.set(change.key, change.old_value)
        entity.is_dirty = was_dirty

        self._state = ChangeState.REVERTED
        return True

    def __iter__(self) -> Iterator[AttributeChange]:
        return iter(self._changes)

    def __len__(self) -> int:
        return len(self._changes)

    def __repr__(self) -> str:
        return f"AttributeChangeSet({self.action_name!r}, state={self._state.value}, keys={self.keys!r})"
