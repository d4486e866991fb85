"""
deck_engine -- Weighted reference-resolution draw engine.

Submodules:
    entry_codec   ``::weight::content`` prefix encoding.
    weights       Number / dice weight expressions and clamping.
    sampler       Weighted random selection and top-level deck draws.
    resolver      ``{deck}`` / ``{%deck}`` reference expansion.
    distribution  Per-entry probability breakdown for charts.
    deck_store    Validated deck collection with editing and import/export.
    models        Pydantic records, settings and validators.
"""

from deck_engine.deck_store import DeckEvent, DeckStore
from deck_engine.distribution import distribution
from deck_engine.entry_codec import decode, encode
from deck_engine.errors import (
    DeckEngineError,
    DeckImportError,
    DeckNameConflictError,
    DeckNotFoundError,
    EmptyPopulationError,
    ResolutionDepthExceeded,
)
from deck_engine.models import DistributionSlice, DrawSettings, Entry, WeightedItem
from deck_engine.resolver import ReferenceResolver, resolve
from deck_engine.sampler import draw_entry, weighted_draw
from deck_engine.weights import clamp_weight, evaluate_weight_expression

__version__ = "0.1.0"

__all__ = [
    "DeckEngineError",
    "DeckEvent",
    "DeckImportError",
    "DeckNameConflictError",
    "DeckNotFoundError",
    "DeckStore",
    "DistributionSlice",
    "DrawSettings",
    "EmptyPopulationError",
    "Entry",
    "ReferenceResolver",
    "ResolutionDepthExceeded",
    "WeightedItem",
    "clamp_weight",
    "decode",
    "distribution",
    "draw_entry",
    "encode",
    "evaluate_weight_expression",
    "resolve",
    "weighted_draw",
]
