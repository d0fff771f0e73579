"""Protocol definitions for the collaborators an invoker is built from.

The resolver and the invoker never inherit behavior from these; any object
with the right shape can be injected (structural subtyping). Concrete
implementations shipped with the package:

    Transport       -> entity_actions.transport.HttpxTransport
    Entity          -> entity_actions.entity.Record
    NamingStrategy  -> entity_actions.naming (IdentityKeys, CamelCaseKeys, ...)
    EntityStore     -> entity_actions.store.Store
"""

from __future__ import annotations

__all__ = [
    "Entity",
    "EntityStore",
    "NamingStrategy",
    "Transport",
]

from collections.abc import Awaitable, Mapping
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from entity_actions.invoker import OptimisticInvoker


@runtime_checkable
class Transport(Protocol):
    """Sends one action request.

    The returned awaitable must raise on network failure or a non-2xx status
    and resolve with the response otherwise. Whatever it raises is handed to
    the caller unchanged.
    """

    def ajax(self, url: str, method: str, options: Mapping[str, Any]) -> Awaitable[Any]: ...


@runtime_checkable
class Entity(Protocol):
    """A persisted object with attribute access and change tracking.

    is_dirty means "has unsaved local changes relative to the server". Calling
    set() may flip it; the invoker snapshots and restores it around the writes
    it makes on the server's behalf.
    """

    is_dirty: bool

    def get(self, key: str) -> Any: ...

    def set(self, key: str, value: Any) -> None: ...


@runtime_checkable
class NamingStrategy(Protocol):
    """Maps logical attribute keys to wire-format keys."""

    def translate_key(self, key: str) -> str: ...


@runtime_checkable
class EntityStore(Protocol):
    """Finds the invoker and naming strategy responsible for a model."""

    def adapter_for(self, model_name: str) -> "OptimisticInvoker | None": ...

    def serializer_for(self, model_name: str) -> NamingStrategy | None: ...
