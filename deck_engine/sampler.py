"""
deck_engine/sampler.py -- Weighted random selection.

:func:`weighted_draw` picks one value with probability proportional to its
weight.  It is equivalent to expanding every item into ``weight`` copies
and choosing uniformly, without materialising the copies: a uniform number
scaled to the total weight is floored to an index and located on the
cumulative weights.

:func:`draw_entry` is the top-level draw used for a whole deck: decode each
raw entry, weigh it, sample, and hand back the chosen content (references
still unresolved).
"""

from __future__ import annotations

import logging
import math
from typing import Iterable, Sequence, TypeVar

from deck_engine.entry_codec import decode
from deck_engine.errors import EmptyPopulationError
from deck_engine.models.base import WeightedItem
from deck_engine.rng import RandomSource, default_rng
from deck_engine.weights import entry_weight

logger = logging.getLogger(__name__)

T = TypeVar("T")


def weighted_draw(items: Sequence[WeightedItem[T]], rng: RandomSource | None = None) -> T:
    """Draw one value from *items* with probability ``weight / total``.

    Raises
    ------
    EmptyPopulationError
        If *items* is empty or every weight is 0.
    """
    total = sum(item.weight for item in items)
    if total <= 0:
        raise EmptyPopulationError()

    source = rng if rng is not None else default_rng()
    target = min(math.floor(source.random() * total), total - 1)

    cumulative = 0
    for item in items:
        cumulative += item.weight
        if target < cumulative:
            return item.value

    # Unreachable while weights are non-negative integers.
    return items[-1].value


def weigh_entries(raw_entries: Iterable[str], rng: RandomSource | None = None) -> list[WeightedItem[str]]:
    """Decode raw entries into content/weight pairs."""
    weighted = []
    for raw in raw_entries:
        entry = decode(raw)
        weighted.append(WeightedItem(value=entry.content, weight=entry_weight(entry, rng)))
    return weighted


def draw_entry(
    raw_entries: Sequence[str],
    rng: RandomSource | None = None,
    deck_name: str | None = None,
) -> str:
    """Weighted top-level draw from a deck's raw entries.

    Parameters
    ----------
    raw_entries : sequence of str
        The deck's stored entries.
    rng : RandomSource, optional
        Source used both for dice weights and for the draw itself.
    deck_name : str, optional
        Only used to word the error message.

    Returns
    -------
    str
        The chosen entry's content, weight prefix removed.

    Raises
    ------
    EmptyPopulationError
        If the deck has no entries.
    """
    if not raw_entries:
        raise EmptyPopulationError(deck_name=deck_name)
    items = weigh_entries(raw_entries, rng)
    content = weighted_draw(items, rng)
    logger.debug("Drew %r from %s (%d entries)", content, deck_name or "deck", len(items))
    return content
