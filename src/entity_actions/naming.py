"""Naming strategies: logical attribute key -> wire-format key.

Each strategy implements NamingStrategy.translate_key(). Keys are assumed to
be written in Python style (snake_case) or already in wire style. Words are
split on "_", "-" and lower->Upper transitions and then lowercased, so runs of
capitals are not preserved: CamelCaseKeys turns "userID" into "userId".
"""

from __future__ import annotations

__all__ = [
    "CamelCaseKeys",
    "DasherizedKeys",
    "IdentityKeys",
    "UnderscoredKeys",
]

import re

# Word boundaries: "_" or "-" separators, and lower->Upper transitions
_SEPARATOR_RE = re.compile(r"[_\-\s]+")
_CAMEL_BOUNDARY_RE = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


def _words(key: str) -> list[str]:
    """Split a key into lowercase words."""
    spaced = _CAMEL_BOUNDARY_RE.sub("_", key)
    return [w.lower() for w in _SEPARATOR_RE.split(spaced) if w]


class IdentityKeys:
    """Leaves keys untouched."""

    def translate_key(self, key: str) -> str:
        return key


class CamelCaseKeys:
    """snake_case -> camelCase ("model_keys" -> "modelKeys")."""

    def translate_key(self, key: str) -> str:
        words = _words(key)
        if not words:
            return key
        return words[0] + "".join(w.capitalize() for w in words[1:])


class DasherizedKeys:
    """snake_case / camelCase -> dasherized ("first_name" -> "first-name")."""

    def translate_key(self, key: str) -> str:
        return "-".join(_words(key)) or key


class UnderscoredKeys:
    """camelCase / dasherized -> snake_case ("firstName" -> "first_name")."""

    def translate_key(self, key: str) -> str:
        return "_".join(_words(key)) or key
