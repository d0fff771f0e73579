"""Optimistic action invoker.

OptimisticInvoker turns an action name into one HTTP request and, when asked,
applies local attribute changes ahead of the server's answer:

    perform(entity, "like")                      -> pending future (the transport result)
    apply_optimistic(entity, attrs, pending, "like")
                                                 -> writes attrs now, reverts them if pending fails
    perform_optimistic(entity, "like", new_attributes={"liked": True})
                                                 -> both, in that order

Payload precedence (later wins on key collision):
    definition.static_data < extra_data < values of definition.model_keys

Every key of the merged payload passes through naming.translate_key() exactly
once. perform() never awaits: validation errors are raised synchronously and
the transport awaitable is returned as an asyncio future without re-wrapping.
It must therefore be called while an event loop is running.

Overlapping actions on the same entity keys are not serialized; their
rollbacks interleave in completion order.
"""

from __future__ import annotations

__all__ = [
    "OptimisticInvoker",
    "apply_optimistic",
    "join_url",
]

import asyncio
from collections.abc import Callable, Mapping
from functools import partial
from typing import TYPE_CHECKING, Any, Optional, Union

from entity_actions.changes import AttributeChangeSet
from entity_actions.constants import DEFAULT_ACTION_METHOD, URL_SEPARATOR
from entity_actions.entity import values_differ
from entity_actions.exceptions import (
    InvalidAttributesError,
    MissingActionNameError,
    MissingEntityError,
    MissingSerializerError,
    MissingUrlError,
)
from entity_actions.protocols import Entity, NamingStrategy, Transport
from entity_actions.resolver import ActionDefinition, ActionRegistry, resolve_action
from entity_actions.telemetry.action_logger import get_action_logger

if TYPE_CHECKING:
    from entity_actions.config import AdapterConfig

_logger = get_action_logger()

# Attributes argument: None, a mapping, or a callable taking the action name
NewAttributes = Union[Mapping[str, Any], Callable[[str], Optional[Mapping[str, Any]]], None]


def join_url(prefix: str, path: str) -> str:
    """Join the adapter's URL prefix and an action URL with exactly one separator.

    Examples:
        join_url("/api", "likes/create")   -> "/api/likes/create"
        join_url("/api/", "/likes/create") -> "/api/likes/create"
        join_url("", "likes")              -> "/likes"
    """
    return prefix.rstrip(URL_SEPARATOR) + URL_SEPARATOR + path.lstrip(URL_SEPARATOR)


def _resolve_attributes(new_attributes: NewAttributes, action_name: str) -> Mapping[str, Any] | None:
    """Call an attributes callable and check that the result is a mapping."""
    if callable(new_attributes):
        new_attributes = new_attributes(action_name)
    if new_attributes is None:
        return None
    if not isinstance(new_attributes, Mapping):
        raise InvalidAttributesError(action_name, new_attributes)
    return new_attributes


def _settle(entity: Entity, changes: AttributeChangeSet, pending: asyncio.Future[Any]) -> None:
    """Done callback: keep the changes on success, revert them on failure or cancellation."""
    if pending.cancelled():
        error_type = "CancelledError"
    else:
        error = pending.exception()
        error_type = type(error).__name__ if error is not None else None

    if error_type is None:
        if changes.commit():
            _logger.debug({"event": "optimistic_committed", "action": changes.action_name, "keys": changes.keys})
        return

    if changes.revert(entity) and len(changes):
        _logger.warning(
            {
                "event": "optimistic_reverted",
                "action": changes.action_name,
                "keys": changes.keys,
                "error_type": error_type,
                "message": f"action failed ({error_type}), reverted {len(changes)} attribute(s)",
            }
        )


def apply_optimistic(
    entity: Entity,
    new_attributes: NewAttributes,
    pending: asyncio.Future[Any],
    action_name: str,
) -> AttributeChangeSet | None:
    """Write attributes onto the entity now and revert them if pending fails.

    Only keys whose value actually changes are written and recorded. The
    entity's is_dirty flag is the same after the writes as before them, and
    the same after a rollback as before the rollback.

    Args:
        entity: The entity to mutate.
        new_attributes: None (no-op), a mapping, or a callable called with
            action_name that returns a mapping (or None for a no-op).
        pending: The future returned by perform().
        action_name: The action being performed.

    Returns:
        The change set bound to pending, or None when there was nothing to apply.

    Raises:
        InvalidAttributesError: If new_attributes does not resolve to a mapping.
    """
    attributes = _resolve_attributes(new_attributes, action_name)
    if attributes is None:
        return None

    changes = AttributeChangeSet(action_name)
    was_dirty = entity.is_dirty
    for key, new_value in attributes.items():
        old_value = entity.get(key)
        if values_differ(old_value, new_value):
            changes.record(key, old_value, new_value)
            entity.set(key, new_value)
    entity.is_dirty = was_dirty

    if len(changes):
        _logger.debug({"event": "optimistic_applied", "action": action_name, "keys": changes.keys})

    pending.add_done_callback(partial(_settle, entity, changes))
    return changes


class OptimisticInvoker:
    """Performs actions for one adapter (one registry, one transport, one URL prefix).

    Usage:
        invoker = OptimisticInvoker(
            {"like": "likes/create"},
            HttpxTransport(client),
            naming=CamelCaseKeys(),
            url_prefix="/api",
        )
        await invoker.perform_optimistic(post, "like", new_attributes={"liked": True})
    """

    apply_optimistic = staticmethod(apply_optimistic)

    def __init__(
        self,
        actions: ActionRegistry,
        transport: Transport,
        *,
        naming: NamingStrategy | None = None,
        url_prefix: str | Callable[[], str] = "",
        default_method: str = DEFAULT_ACTION_METHOD,
    ) -> None:
        """Initialize the invoker.

        Args:
            actions: Registry of action names to entries (see resolver.py).
            transport: Sends the request; see protocols.Transport.
            naming: Default naming strategy; perform() may override it per call.
            url_prefix: Base path, or a zero-argument callable returning it.
            default_method: HTTP method for definitions that name none.
        """
        self._actions = actions
        self._transport = transport
        self._naming = naming
        self._url_prefix = url_prefix
        self.default_method = default_method

    @classmethod
    def from_config(
        cls,
        config: "AdapterConfig",
        transport: Transport,
        naming: NamingStrategy | None = None,
    ) -> "OptimisticInvoker":
        """Build an invoker from an AdapterConfig."""
        return cls(
            config.actions,
            transport,
            naming=naming,
            url_prefix=config.url_prefix,
            default_method=config.default_action_method,
        )

    @property
    def actions(self) -> ActionRegistry:
        return self._actions

    def url_prefix(self) -> str:
        if callable(self._url_prefix):
            return self._url_prefix()
        return self._url_prefix

    def resolve(self, entity: Any, action_name: str) -> ActionDefinition:
        return resolve_action(self._actions, action_name, entity)

    def build_payload(
        self,
        definition: ActionDefinition,
        entity: Entity,
        extra_data: Mapping[str, Any] | None,
        naming: NamingStrategy,
    ) -> dict[str, Any]:
        """Merge static data, caller data and model values, then translate keys."""
        merged: dict[str, Any] = dict(definition.static_data)
        if extra_data:
            merged.update(extra_data)
        for key in definition.model_keys:
            merged[key] = entity.get(key)

        return {naming.translate_key(key): value for key, value in merged.items()}

    def perform(
        self,
        entity: Entity,
        action_name: str,
        extra_data: Mapping[str, Any] | None = None,
        *,
        naming: NamingStrategy | None = None,
    ) -> asyncio.Future[Any]:
        """Send the request for an action.

        Args:
            entity: The entity the action is performed on.
            action_name: Name of the action in the registry.
            extra_data: Caller payload fields; override static data, lose to model_keys.
            naming: Naming strategy for this call (defaults to the invoker's).

        Returns:
            The transport's pending result as an asyncio future.

        Raises:
            MissingActionNameError: If action_name is empty.
            MissingEntityError: If entity is None.
            MissingSerializerError: If no naming strategy is available.
            MissingUrlError: If the action resolves to no URL (no request is sent).
            InvalidActionDefinitionError: If the registry entry has an unsupported shape.
        """
        if not action_name:
            raise MissingActionNameError()
        if entity is None:
            raise MissingEntityError(action_name)
        naming = naming or self._naming
        if naming is None:
            raise MissingSerializerError(action_name)

        definition = self.resolve(entity, action_name)
        payload = self.build_payload(definition, entity, extra_data, naming)

        if not definition.url:
            raise MissingUrlError(action_name)

        endpoint = join_url(self.url_prefix(), definition.url)
        method = definition.method or self.default_method

        _logger.info(
            {
                "event": "action_dispatched",
                "action": action_name,
                "method": method,
                "url": endpoint,
                "message": f"{method} {endpoint}",
            }
        )
        return asyncio.ensure_future(self._transport.ajax(endpoint, method, {"data": payload}))

    def perform_optimistic(
        self,
        entity: Entity,
        action_name: str,
        extra_data: Mapping[str, Any] | None = None,
        new_attributes: NewAttributes = None,
        *,
        naming: NamingStrategy | None = None,
    ) -> asyncio.Future[Any]:
        """perform() followed by apply_optimistic() against its pending result.

        A mapping of attributes is type-checked before the request is built. An
        attributes callable is only called once perform() has succeeded, so it
        never runs for an action that fails validation (e.g. MissingUrlError).
        If the callable returns something other than a mapping, the request
        already in flight is cancelled and InvalidAttributesError is raised.
        In every error case the entity is left untouched.
        """
        if not callable(new_attributes):
            new_attributes = _resolve_attributes(new_attributes, action_name)
        pending = self.perform(entity, action_name, extra_data, naming=naming)
        try:
            attributes = _resolve_attributes(new_attributes, action_name)
        except InvalidAttributesError:
            pending.cancel()
            raise
        if attributes is not None:
            apply_optimistic(entity, attributes, pending, action_name)
        return pending
