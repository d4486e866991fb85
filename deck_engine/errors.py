"""
deck_engine/errors.py -- Exception types raised by the draw engine.

Only population-level failures and deck naming conflicts are raised.
Malformed weight expressions and dangling references are recovered in
place (fallback weight 1, inline diagnostic text) and never reach callers
as exceptions.
"""

from __future__ import annotations


class DeckEngineError(Exception):
    """Base class for every error raised by :mod:`deck_engine`."""


class EmptyPopulationError(DeckEngineError, ValueError):
    """A top-level draw was attempted on a deck with nothing to draw."""

    def __init__(self, message: str = "", deck_name: str | None = None):
        if not message:
            if deck_name is None:
                message = "Cannot draw from an empty population (total weight is 0)."
            else:
                message = (
                    f"Cannot draw from deck '{deck_name}': it is missing or "
                    f"has no entries."
                )
        super().__init__(message)
        self.deck_name = deck_name


class ResolutionDepthExceeded(DeckEngineError, RuntimeError):
    """Reference expansion kept producing new references past the limit.

    Attributes
    ----------
    depth : int
        The configured maximum depth that was exceeded, or the pass that
        was running when the draw budget ran out.
    text : str
        The partially resolved text at the point resolution was abandoned.
    draws : int or None
        The draw budget that ran out, or ``None`` when the pass limit
        was hit.
    """

    def __init__(self, depth: int, text: str, draws: int | None = None):
        preview = text if len(text) <= 60 else text[:60] + "..."
        if draws is None:
            limit = f"within {depth} passes"
        else:
            limit = f"within {draws} draws (pass {depth})"
        super().__init__(
            f"Reference resolution did not finish {limit}. "
            f"A deck probably references itself with replacement. "
            f"Last text: {preview!r}"
        )
        self.depth = depth
        self.text = text
        self.draws = draws


class DeckNotFoundError(DeckEngineError, KeyError):
    """A store operation named a deck that does not exist."""

    def __init__(self, deck_name: str):
        super().__init__(deck_name)
        self.deck_name = deck_name

    def __str__(self) -> str:
        return f"No deck named '{self.deck_name}' exists."


class DeckNameConflictError(DeckEngineError, ValueError):
    """A mutation would give two decks the same (base) name."""

    def __init__(self, deck_name: str, issues: list[str] | None = None):
        self.deck_name = deck_name
        self.issues = list(issues or [])
        detail = " ".join(self.issues) or f"The name '{deck_name}' is already in use."
        super().__init__(detail)


class DeckImportError(DeckEngineError, ValueError):
    """An import payload could not be interpreted as a deck mapping."""
