"""
deck_engine/models/base.py -- Core records shared by the engine modules.

Entries travel through the store as plain ``::weight::content`` strings.
Inside the engine they are handled as :class:`Entry` records so that the
weight expression and the display content are never confused; the combined
text form only exists at the serialization boundary (see
:mod:`deck_engine.entry_codec`).
"""

from __future__ import annotations

from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")

DEFAULT_MAX_DEPTH = 64
DEFAULT_MAX_DRAWS = 10_000
DEFAULT_LABEL_LENGTH = 15


class Entry(BaseModel):
    """A decoded deck entry.

    Attributes
    ----------
    weight_expr : str or None
        The raw weight expression (``"5"``, ``"2d6+1"``...) or ``None``
        when the entry carries no weight prefix.
    content : str
        Display text, possibly containing ``{deck}`` references.
    """

    model_config = ConfigDict(frozen=True)

    weight_expr: Optional[str] = None
    content: str = ""

    @property
    def is_weighted(self) -> bool:
        return self.weight_expr is not None

    def to_raw(self) -> str:
        """Encode back to the stored ``::weight::content`` form."""
        from deck_engine.entry_codec import encode

        return encode(self.content, self.weight_expr)


class WeightedItem(BaseModel, Generic[T]):
    """A value paired with its already-clamped integer weight."""

    model_config = ConfigDict(frozen=True)

    value: T
    weight: int = Field(default=1, ge=0)


class DistributionSlice(BaseModel):
    """One row of a deck's probability breakdown."""

    model_config = ConfigDict(frozen=True)

    index: int
    label: str
    weight: int
    probability: float = 0.0

    @property
    def percentage(self) -> int:
        """Probability rounded to a whole percent, as shown in charts."""
        return int(self.probability * 100 + 0.5)


class DrawSettings(BaseModel):
    """Tunable limits for drawing and reporting.

    Attributes
    ----------
    max_depth : int
        Number of resolution passes allowed before
        :class:`~deck_engine.errors.ResolutionDepthExceeded` is raised.
    max_draws : int
        Reference substitutions allowed per resolution.  Bounds decks that
        branch into themselves (``{%Z}{%Z}``) long before ``max_depth``.
    label_length : int
        Content characters kept in distribution labels.
    default_deck_name : str
        Base name used by :meth:`DeckStore.create_deck` when none is given.
    untitled_deck_name : str
        Name used when a rename would leave a deck with a blank name.
    """

    model_config = ConfigDict(validate_assignment=True)

    max_depth: int = Field(default=DEFAULT_MAX_DEPTH, ge=1)
    max_draws: int = Field(default=DEFAULT_MAX_DRAWS, ge=1)
    label_length: int = Field(default=DEFAULT_LABEL_LENGTH, ge=1)
    default_deck_name: str = Field(default="New Deck", min_length=1)
    untitled_deck_name: str = Field(default="Untitled Deck", min_length=1)
