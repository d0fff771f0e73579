"""Action resolution: action name -> ActionDefinition.

An action registry maps action names to one of three entry shapes:

1. A URL string:
       {"like": "likes/create"}
2. A structured definition (ActionDefinition, mapping, or config ActionSpec):
       {"flag": {"url": "flags", "method": "PUT", "data": {...}, "model_keys": ["reason"]}}
3. A resolver callable (entity, action_name) returning shape 1 or 2:
       {"archive": lambda entity, name: f"posts/{entity.get('id')}/archive"}

Each entry is classified once into an ActionKind and then normalized.
Resolution is single-pass: a resolver callable is called at most once, and a
callable it returns is not called again. That result, like an absent entry,
degrades to a definition without a URL; the invoker rejects it with
MissingUrlError before any request is sent.
"""

from __future__ import annotations

__all__ = [
    "ActionDefinition",
    "ActionEntry",
    "ActionKind",
    "ActionRegistry",
    "classify_entry",
    "resolve_action",
]

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union

from pydantic import BaseModel

from entity_actions.exceptions import InvalidActionDefinitionError
from entity_actions.telemetry.action_logger import get_action_logger

_logger = get_action_logger()


@dataclass(frozen=True)
class ActionDefinition:
    """How to perform one action.

    Attributes:
        url: Path relative to the adapter's URL prefix. None or "" is unusable.
        method: HTTP method; None means the invoker's default.
        static_data: Literal payload fields.
        model_keys: Entity attributes whose live values are merged into the payload.
    """

    url: str | None = None
    method: str | None = None
    static_data: Mapping[str, Any] = field(default_factory=dict)
    model_keys: tuple[str, ...] = ()


ActionEntry = Union[
    str,
    ActionDefinition,
    Mapping[str, Any],
    BaseModel,
    Callable[[Any, str], Any],
]
ActionRegistry = Mapping[str, ActionEntry]


class ActionKind(str, Enum):
    """Shape of a registry entry."""

    MISSING = "missing"
    URL = "url"
    STRUCTURED = "structured"
    RESOLVER = "resolver"


def classify_entry(entry: Any, action_name: str) -> ActionKind:
    """Classify a registry entry (or a resolver's return value).

    Raises:
        InvalidActionDefinitionError: If the entry has none of the supported shapes.
    """
    if entry is None:
        return ActionKind.MISSING
    if isinstance(entry, str):
        return ActionKind.URL
    if isinstance(entry, (ActionDefinition, Mapping, BaseModel)):
        return ActionKind.STRUCTURED
    if callable(entry):
        return ActionKind.RESOLVER
    raise InvalidActionDefinitionError(action_name, entry)


def _normalize_model_keys(model_keys: Any, action_name: str) -> tuple[str, ...]:
    """Model keys must be a non-string sequence; anything else is ignored."""
    if model_keys is None:
        return ()
    if isinstance(model_keys, (str, bytes)) or not isinstance(model_keys, Sequence):
        _logger.warning(
            {
                "event": "invalid_model_keys",
                "action": action_name,
                "model_keys_type": type(model_keys).__name__,
                "message": "model_keys is not a list of attribute names, ignoring it",
            }
        )
        return ()
    return tuple(model_keys)


def _structured_definition(entry: Any, action_name: str) -> ActionDefinition:
    if isinstance(entry, ActionDefinition):
        return entry
    if isinstance(entry, BaseModel):
        # config.ActionSpec is already validated
        to_definition = getattr(entry, "to_definition", None)
        if to_definition is not None:
            return to_definition()
        entry = entry.model_dump()

    static_data = entry.get("data") if "data" in entry else entry.get("static_data")
    if static_data is None:
        static_data = {}
    elif not isinstance(static_data, Mapping):
        raise InvalidActionDefinitionError(action_name, static_data)

    model_keys = entry.get("model_keys") if "model_keys" in entry else entry.get("modelKeys")

    return ActionDefinition(
        url=entry.get("url"),
        method=entry.get("method"),
        static_data=dict(static_data),
        model_keys=_normalize_model_keys(model_keys, action_name),
    )


def resolve_action(registry: ActionRegistry, action_name: str, entity: Any) -> ActionDefinition:
    """Resolve an action name against a registry.

    Args:
        registry: Mapping of action names to entries.
        action_name: The action being triggered.
        entity: Passed to resolver callables as their first argument.

    Returns:
        The normalized ActionDefinition. Absent entries give ActionDefinition(url=None).

    Raises:
        InvalidActionDefinitionError: If the entry (or a resolver's result) has an
            unsupported shape.
    """
    entry = registry.get(action_name)
    kind = classify_entry(entry, action_name)

    if kind is ActionKind.RESOLVER:
        entry = entry(entity, action_name)
        kind = classify_entry(entry, action_name)
        if kind is ActionKind.RESOLVER:
            _logger.warning(
                {
                    "event": "resolver_returned_callable",
                    "action": action_name,
                    "message": "action resolver returned another callable, which is not resolved further",
                }
            )
            kind = ActionKind.MISSING

    if kind is ActionKind.MISSING:
        definition = ActionDefinition()
    elif kind is ActionKind.URL:
        definition = ActionDefinition(url=entry)
    else:
        definition = _structured_definition(entry, action_name)

    _logger.debug(
        {
            "event": "action_resolved",
            "action": action_name,
            "kind": kind.value,
            "url": definition.url,
            "method": definition.method,
        }
    )
    return definition
