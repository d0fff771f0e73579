"""File utilities for loading adapter configuration.

- require_file_exists: Friendly FileNotFoundError for missing config files
- load_validated_json: JSON parsing plus Pydantic validation with readable errors
"""

from __future__ import annotations

__all__ = [
    "load_validated_json",
    "require_file_exists",
]

import json
from pathlib import Path
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

# Type variable for Pydantic models
T = TypeVar("T", bound=BaseModel)


def require_file_exists(file_path: Path, file_type: str = "file") -> None:
    """Raise FileNotFoundError with a helpful message if the file doesn't exist.

    Args:
        file_path: Path to check.
        file_type: Description for the error message (e.g., "adapter config").

    Raises:
        FileNotFoundError: If file doesn't exist.
    """
    if file_path.exists():
        return

    raise FileNotFoundError(f"{file_type.capitalize()} file not found at {file_path}.")


def _describe_location(loc_parts: tuple[Any, ...], data: Any) -> str:
    """Render an error location, naming the action for errors inside "actions"."""
    loc = ".".join(str(x) for x in loc_parts)
    if len(loc_parts) >= 2 and loc_parts[0] == "actions" and isinstance(data, dict):
        actions = data.get("actions")
        if isinstance(actions, dict) and loc_parts[1] in actions:
            return f"{loc} (action: {loc_parts[1]})"
    return loc


def load_validated_json(
    file_path: Path,
    model_class: type[T],
    file_type: str = "file",
    encoding: str | None = "utf-8",
) -> T:
    """Load JSON file and validate against Pydantic model.

    Args:
        file_path: Path to JSON file.
        model_class: Pydantic model class to validate against.
        file_type: Description for error messages (e.g., "adapter config").
        encoding: File encoding.

    Returns:
        Validated Pydantic model instance.

    Raises:
        ValueError: If the file cannot be read, is not JSON, or fails validation.
    """
    try:
        with open(file_path, "r", encoding=encoding) as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in {file_type} file {file_path}: {e}") from e
    except OSError as e:
        raise ValueError(f"Could not read {file_type} file {file_path}: {e}") from e

    try:
        return model_class.model_validate(data)
    except ValidationError as e:
        errors = [f"  - {_describe_location(err['loc'], data)}: {err['msg']}" for err in e.errors()]
        raise ValueError(f"Invalid {file_type} in {file_path}:\n" + "\n".join(errors)) from e
