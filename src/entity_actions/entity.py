"""Record: a dict-backed entity with change tracking.

Record is the entity shipped with the package. It satisfies the Entity
protocol and adds what the store-aware helpers in model_action.py need
(model_name and store).

Dirty tracking:
- set() marks the record dirty when the value actually changes
- is_dirty is a plain attribute and may be written directly; the optimistic
  invoker uses that to undo the flip caused by server-driven writes
- commit() adopts the current values as the clean baseline
- rollback_attributes() returns to the clean baseline
"""

from __future__ import annotations

__all__ = ["Record", "values_differ"]

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, ClassVar

if TYPE_CHECKING:
    from entity_actions.protocols import EntityStore


def values_differ(old_value: Any, new_value: Any) -> bool:
    """Identity/equality comparison, no deep diffing."""
    if old_value is new_value:
        return False
    return bool(old_value != new_value)


class Record:
    """In-memory entity with attribute change tracking.

    Subclasses set model_name so the store can find their invoker:

        class Post(Record):
            model_name = "post"
            like = model_action("like", {"liked": True})

    Attributes:
        model_name: Name used to look up the adapter and serializer in the store.
        store: The EntityStore this record belongs to (optional).
        is_dirty: True when the record has unsaved local changes.
    """

    model_name: ClassVar[str] = ""

    def __init__(
        self,
        attributes: Mapping[str, Any] | None = None,
        *,
        store: "EntityStore | None" = None,
    ) -> None:
        self._attributes: dict[str, Any] = dict(attributes or {})
        self._clean: dict[str, Any] = dict(self._attributes)
        self.store = store
        self.is_dirty = False

    def get(self, key: str, default: Any = None) -> Any:
        return self._attributes.get(key, default)

    def set(self, key: str, value: Any) -> None:
        if key in self._attributes and not values_differ(self._attributes[key], value):
            return
        self._attributes[key] = value
        self.is_dirty = True

    def changed_attributes(self) -> dict[str, tuple[Any, Any]]:
        """Map of key -> (clean value, current value) for every locally changed key."""
        changed: dict[str, tuple[Any, Any]] = {}
        for key in self._attributes.keys() | self._clean.keys():
            old_value = self._clean.get(key)
            new_value = self._attributes.get(key)
            if values_differ(old_value, new_value):
                changed[key] = (old_value, new_value)
        return changed

    def commit(self) -> None:
        """Adopt the current values as the clean baseline."""
        self._clean = dict(self._attributes)
        self.is_dirty = False

    def rollback_attributes(self) -> None:
        """Discard local changes and return to the clean baseline."""
        self._attributes = dict(self._clean)
        self.is_dirty = False

    def to_dict(self) -> dict[str, Any]:
        return dict(self._attributes)

    def __repr__(self) -> str:
        name = type(self).__name__
        dirty = " dirty" if self.is_dirty else ""
        return f"<{name}{dirty} {self._attributes!r}>"
