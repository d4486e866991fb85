"""
deck_engine/entry_codec.py -- Weight prefix encoding for deck entries.

Stored entries may start with a weight prefix::

    ::5::A rusty sword
    ::2d6+1::{treasure}
    A plain entry (weight 1)

:func:`decode` splits the prefix from the display content and never
raises: a string that opens with ``::`` but has no closing marker is simply
unweighted content.  :func:`encode` is its inverse for any content that
does not itself begin with ``::``.
"""

from __future__ import annotations

from typing import Optional

from deck_engine.models.base import Entry

WEIGHT_MARKER = "::"

# Expressions that mean "no explicit weight" and are dropped on encode.
_IMPLICIT_WEIGHTS = frozenset({"", "1"})


def decode(raw: str) -> Entry:
    """Split a raw entry string into an :class:`Entry` record."""
    if raw.startswith(WEIGHT_MARKER):
        end = raw.find(WEIGHT_MARKER, len(WEIGHT_MARKER))
        if end != -1:
            return Entry(
                weight_expr=raw[len(WEIGHT_MARKER):end],
                content=raw[end + len(WEIGHT_MARKER):],
            )
    return Entry(weight_expr=None, content=raw)


def encode(content: str, weight_expr: Optional[str] = None) -> str:
    """Build the stored form of an entry.

    Returns *content* unchanged when *weight_expr* is ``None``, empty or
    ``"1"``; otherwise ``"::" + weight_expr + "::" + content``.
    """
    if weight_expr is None or weight_expr in _IMPLICIT_WEIGHTS:
        return content
    return f"{WEIGHT_MARKER}{weight_expr}{WEIGHT_MARKER}{content}"


def content_of(raw: str) -> str:
    """Return only the display content of a raw entry."""
    return decode(raw).content
