"""Custom exceptions for entity-actions.

This module contains all custom exceptions used throughout the package.
Exceptions are organized into three categories:

Precondition Violations (raised before any side effect):
    - MissingActionNameError: perform() called without an action name
    - MissingEntityError: perform() called without an entity
    - MissingSerializerError: no naming strategy available for the entity

Resolution and Mutation Errors (raised synchronously, no partial state):
    - MissingUrlError: action resolved to no usable URL
    - InvalidActionDefinitionError: registry entry has an unsupported shape
    - InvalidAttributesError: optimistic attributes are not a mapping

Transport and Setup Errors:
    - ActionRequestError: HTTP request failed (raised by HttpxTransport)
    - ConfigurationError: adapter config or store wiring is invalid

Usage:
    from entity_actions.exceptions import MissingUrlError, ActionRequestError
"""

from __future__ import annotations

__all__ = [
    "ActionError",
    "ActionRequestError",
    "ConfigurationError",
    "InvalidActionDefinitionError",
    "InvalidAttributesError",
    "MissingActionNameError",
    "MissingEntityError",
    "MissingSerializerError",
    "MissingUrlError",
    "PreconditionError",
]

from typing import Any


class ActionError(Exception):
    """Base exception for all entity-actions errors."""


# =============================================================================
# Precondition Violations
# =============================================================================


class PreconditionError(ActionError):
    """Base for caller errors detected before any side effect occurs."""


class MissingActionNameError(PreconditionError):
    """Raised when an action is triggered without a name."""

    def __init__(self) -> None:
        super().__init__("An action must be triggered with a non-empty action name")


class MissingEntityError(PreconditionError):
    """Raised when an action is triggered without an entity."""

    def __init__(self, action_name: str | None = None) -> None:
        self.action_name = action_name
        super().__init__(f"Action {action_name!r} must be triggered with an entity")


class MissingSerializerError(PreconditionError):
    """Raised when no naming strategy is available to encode the payload keys."""

    def __init__(self, action_name: str | None = None, model_name: str | None = None) -> None:
        self.action_name = action_name
        self.model_name = model_name
        target = f" for model {model_name!r}" if model_name else ""
        super().__init__(f"Action {action_name!r} needs a naming strategy{target} to encode its payload")


# =============================================================================
# Resolution and Mutation Errors
# =============================================================================


class MissingUrlError(ActionError):
    """Raised when an action definition resolves to no usable URL.

    Attributes:
        action_name: The action that failed to resolve.
    """

    def __init__(self, action_name: str) -> None:
        self.action_name = action_name
        super().__init__(f"Action {action_name!r} must resolve a URL for its action definition")


class InvalidActionDefinitionError(ActionError):
    """Raised when a registry entry is not a URL, a definition, or a resolver callable."""

    def __init__(self, action_name: str, entry: Any) -> None:
        self.action_name = action_name
        self.entry = entry
        super().__init__(
            f"Action {action_name!r} has an unsupported definition of type {type(entry).__name__}"
        )


class InvalidAttributesError(ActionError, TypeError):
    """Raised when optimistic attributes do not resolve to a mapping."""

    def __init__(self, action_name: str, value: Any) -> None:
        self.action_name = action_name
        self.value = value
        super().__init__(
            f"Attributes for action {action_name!r} must be None, a mapping, "
            f"or a callable returning a mapping (got {type(value).__name__})"
        )


# =============================================================================
# Transport and Setup Errors
# =============================================================================


class ActionRequestError(ActionError):
    """Raised by HttpxTransport when an action request fails.

    Attributes:
        url: The endpoint that was called.
        method: The HTTP method used.
        status_code: HTTP status code, or None for network failures.
        detail: Error detail from the response body, or the transport error text.
    """

    def __init__(
        self,
        detail: str,
        *,
        url: str,
        method: str,
        status_code: int | None = None,
    ) -> None:
        self.detail = detail
        self.url = url
        self.method = method
        self.status_code = status_code
        if status_code:
            super().__init__(f"{method} {url} failed ({status_code}): {detail}")
        else:
            super().__init__(f"{method} {url} failed: {detail}")


class ConfigurationError(ActionError):
    """Configuration is invalid or incomplete.

    Raised when:
    - Config file does not exist
    - Config file contains invalid JSON
    - Config file fails Pydantic validation
    - A store has no invoker registered for a model
    """
