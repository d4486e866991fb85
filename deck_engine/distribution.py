"""
deck_engine/distribution.py -- Probability breakdown of a deck.

Read-only view used for charts: each entry's weight, evaluated and clamped
exactly as :func:`deck_engine.sampler.draw_entry` does, with a short label
and its share of the total.  Dice weights are rolled once per report, so a
report is one sample of the odds a draw would see at that moment.
"""

from __future__ import annotations

from typing import Sequence

from deck_engine.entry_codec import decode
from deck_engine.models.base import DEFAULT_LABEL_LENGTH, DistributionSlice
from deck_engine.rng import RandomSource
from deck_engine.utils import truncate
from deck_engine.weights import entry_weight


def entry_label(index: int, content: str, length: int = DEFAULT_LABEL_LENGTH) -> str:
    """Chart label for the entry at zero-based *index*."""
    return f"#{index + 1}: {truncate(content, length)}"


def distribution(
    raw_entries: Sequence[str],
    rng: RandomSource | None = None,
    label_length: int = DEFAULT_LABEL_LENGTH,
) -> list[DistributionSlice]:
    """Return one :class:`DistributionSlice` per entry, in deck order.

    An empty deck yields an empty list.
    """
    rows = []
    for index, raw in enumerate(raw_entries):
        entry = decode(raw)
        rows.append((index, entry_label(index, entry.content, label_length), entry_weight(entry, rng)))

    total = sum(weight for _, _, weight in rows)
    return [
        DistributionSlice(
            index=index,
            label=label,
            weight=weight,
            probability=weight / total,
        )
        for index, label, weight in rows
    ]
