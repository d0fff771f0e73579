"""Shared utilities for entity-actions.

- iso_formatter: ISO 8601 JSONL formatting for file logs
- file_helpers: File existence checks and validated JSON loading

Import directly from submodules:
    from entity_actions.utils.file_helpers import load_validated_json
"""

__all__: list[str] = []  # Direct submodule imports required (see docstring)
