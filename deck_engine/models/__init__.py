"""
deck_engine/models/ -- Pydantic v2 models for the draw engine.

Submodules:
    base        Entry record, weighted items, distribution slices, settings.
    validators  Deck name and store shape validators.
"""

from deck_engine.models.base import (
    DistributionSlice,
    DrawSettings,
    Entry,
    WeightedItem,
)

__all__ = ["DistributionSlice", "DrawSettings", "Entry", "WeightedItem"]
