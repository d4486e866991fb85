"""
deck_engine/models/validators.py -- Deck name and store shape validators.

These checks sit in front of every store mutation:

    - Name conflict detection (a hidden ``_name`` and a visible ``name``
      count as the same deck)
    - Structural validation of an imported ``{deck: [entry, ...]}`` mapping
      against a JSON Schema

Like the rest of the engine, validators return human-readable issue strings
rather than raising; the caller decides whether an issue is fatal.

Usage::

    from deck_engine.models.validators import find_name_conflicts

    issues = find_name_conflicts("_monsters", store.keys())
"""

from __future__ import annotations

import logging
from typing import Any, Iterable

from jsonschema import Draft202012Validator

logger = logging.getLogger(__name__)

HIDDEN_PREFIX = "_"

DECK_STORE_SCHEMA = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "additionalProperties": {
        "type": "array",
        "items": {"type": "string"},
    },
}


# ------------------------------------------------------------------
# Hidden-prefix helpers
# ------------------------------------------------------------------

def is_hidden(name: str) -> bool:
    """Return True if *name* denotes a deck hidden from pick lists."""
    return name.startswith(HIDDEN_PREFIX)


def base_name(name: str) -> str:
    """Strip the hidden prefix (if any) from *name*."""
    return name[len(HIDDEN_PREFIX):] if is_hidden(name) else name


# ------------------------------------------------------------------
# Name conflicts
# ------------------------------------------------------------------

def find_name_conflicts(
    name: str,
    existing: Iterable[str],
    ignore: str | None = None,
) -> list[str]:
    """Check *name* against the names already present in a store.

    Parameters
    ----------
    name : str
        The candidate deck name (hidden prefix included).
    existing : iterable of str
        Names currently in the store.
    ignore : str, optional
        A name to skip, typically the deck being renamed.

    Returns
    -------
    list[str]
        One message per clashing deck; empty when *name* is free.
    """
    issues: list[str] = []
    wanted = base_name(name)
    for other in existing:
        if other == ignore:
            continue
        if other == name:
            issues.append(f"A deck named '{name}' already exists.")
        elif base_name(other) == wanted:
            issues.append(
                f"The name '{name}' clashes with deck '{other}': hidden and "
                f"visible decks cannot share the base name '{wanted}'."
            )
    return issues


def find_store_name_clashes(data: dict[str, Any]) -> list[tuple[str, str]]:
    """Return ``(first, second)`` name pairs that share a base name."""
    clashes: list[tuple[str, str]] = []
    seen: dict[str, str] = {}
    for name in data:
        key = base_name(name)
        if key in seen:
            clashes.append((seen[key], name))
        else:
            seen[key] = name
    return clashes


def validate_store_names(data: dict[str, Any]) -> list[str]:
    """Report hidden/visible base-name clashes across a whole store."""
    return [
        f"Decks '{first}' and '{second}' share the base name "
        f"'{base_name(second)}'. Rename or remove one of them."
        for first, second in find_store_name_clashes(data)
    ]


# ------------------------------------------------------------------
# Structural validation
# ------------------------------------------------------------------

def validate_store_schema(data: Any) -> list[str]:
    """Validate *data* against :data:`DECK_STORE_SCHEMA`.

    Returns
    -------
    list[str]
        Human-readable messages, one per schema violation, ordered by
        their location in the document.
    """
    validator = Draft202012Validator(DECK_STORE_SCHEMA)
    errors = sorted(validator.iter_errors(data), key=lambda e: list(map(str, e.absolute_path)))
    return [_humanize_schema_error(err) for err in errors]


def _humanize_schema_error(err) -> str:
    """Turn a jsonschema ``ValidationError`` into a friendly sentence."""
    path = list(err.absolute_path)
    if not path:
        return "Deck data must be a JSON object mapping deck names to entry lists."
    deck = path[0]
    if len(path) == 1:
        return (
            f"Deck '{deck}' should be a list of entries but is "
            f"{_json_type_name(err.instance)}."
        )
    return (
        f"Entry {path[1]} of deck '{deck}' should be text but is "
        f"{_json_type_name(err.instance)}."
    )


def _json_type_name(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "a boolean"
    if isinstance(value, (int, float)):
        return "a number"
    if isinstance(value, str):
        return "text"
    if isinstance(value, dict):
        return "an object"
    if isinstance(value, list):
        return "a list"
    return type(value).__name__
