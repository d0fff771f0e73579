"""Adapter configuration for entity-actions.

An adapter config describes one REST backend: where it lives (host and
namespace), which HTTP method actions default to, and the action registry.

Example config file:
    {
      "host": "https://api.example.com",
      "namespace": "v1",
      "default_action_method": "POST",
      "actions": {
        "like": "likes/create",
        "flag": {"url": "flags", "method": "PUT", "data": {"source": "web"}, "modelKeys": ["reason"]}
      }
    }

Example usage:
    config = AdapterConfig.load_from_file(config_path)
    invoker = OptimisticInvoker.from_config(config, transport, naming=CamelCaseKeys())
"""

from __future__ import annotations

__all__ = [
    "ActionSpec",
    "AdapterConfig",
]

import json
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from entity_actions.constants import (
    DEFAULT_ACTION_METHOD,
    DEFAULT_HTTP_TIMEOUT_SECONDS,
    HTTP_METHODS,
    MAX_HTTP_TIMEOUT_SECONDS,
    MIN_HTTP_TIMEOUT_SECONDS,
    URL_SEPARATOR,
)
from entity_actions.exceptions import ConfigurationError
from entity_actions.resolver import ActionDefinition
from entity_actions.utils.file_helpers import load_validated_json, require_file_exists


def _normalize_method(value: str | None) -> str | None:
    if value is None:
        return None
    method = value.strip().upper()
    if method not in HTTP_METHODS:
        raise ValueError(f"unsupported HTTP method {value!r}, expected one of {', '.join(HTTP_METHODS)}")
    return method


class ActionSpec(BaseModel):
    """Structured action entry as written in a config file.

    Attributes:
        url: Path relative to the adapter's URL prefix.
        method: HTTP method (defaults to the adapter's default_action_method).
        static_data: Literal payload fields (key "data" in files).
        model_keys: Entity attributes merged into the payload (key "modelKeys" in files).
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    url: str = Field(min_length=1)
    method: str | None = None
    static_data: dict[str, Any] = Field(default_factory=dict, alias="data")
    model_keys: list[str] = Field(default_factory=list, alias="modelKeys")

    @field_validator("method")
    @classmethod
    def _check_method(cls, value: str | None) -> str | None:
        return _normalize_method(value)

    def to_definition(self) -> ActionDefinition:
        return ActionDefinition(
            url=self.url,
            method=self.method,
            static_data=dict(self.static_data),
            model_keys=tuple(self.model_keys),
        )


class AdapterConfig(BaseModel):
    """Configuration of one REST adapter.

    Attributes:
        host: Scheme and authority (e.g., "https://api.example.com"); empty for same-origin.
        namespace: Path segment(s) after the host (e.g., "api/v1").
        default_action_method: HTTP method for actions that don't name one.
        timeout_seconds: Request timeout for HttpxTransport (1-300).
        actions: Action registry; values are URL strings or ActionSpec objects.
    """

    host: str = ""
    namespace: str = ""
    default_action_method: str = DEFAULT_ACTION_METHOD
    timeout_seconds: int = Field(
        default=DEFAULT_HTTP_TIMEOUT_SECONDS,
        ge=MIN_HTTP_TIMEOUT_SECONDS,
        le=MAX_HTTP_TIMEOUT_SECONDS,
    )
    actions: dict[str, str | ActionSpec] = Field(default_factory=dict)

    @field_validator("default_action_method")
    @classmethod
    def _check_default_method(cls, value: str) -> str:
        method = _normalize_method(value)
        assert method is not None  # Non-optional field
        return method

    def url_prefix(self) -> str:
        """Base path for action URLs, built from host and namespace.

        Examples:
            host="https://api.example.com", namespace="v1" -> "https://api.example.com/v1"
            host="", namespace="api"                        -> "/api"
            host="", namespace=""                           -> ""
        """
        host = self.host.rstrip(URL_SEPARATOR)
        namespace = self.namespace.strip(URL_SEPARATOR)
        if not namespace:
            return host
        return f"{host}{URL_SEPARATOR}{namespace}"

    def save_to_file(self, config_path: Path) -> None:
        """Save configuration to a JSON file, creating parent directories."""
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(config_path, "w", encoding="utf-8") as f:
            json.dump(self.model_dump(by_alias=True, exclude_defaults=True), f, indent=2)

    @classmethod
    def load_from_file(cls, config_path: Path) -> "AdapterConfig":
        """Load configuration from a JSON file.

        Raises:
            ConfigurationError: If the file is missing, not JSON, or invalid.
        """
        try:
            require_file_exists(config_path, file_type="adapter config")
            return load_validated_json(config_path, cls, file_type="adapter config")
        except (FileNotFoundError, ValueError) as e:
            raise ConfigurationError(str(e)) from e
