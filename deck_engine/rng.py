"""
deck_engine/rng.py -- Injectable randomness source.

Every drawing operation takes an optional ``rng`` argument.  Anything with
a ``random()`` method returning a float in ``[0, 1)`` qualifies, so a
seeded :class:`random.Random` works for reproducible runs and tests can
pass a scripted source.
"""

from __future__ import annotations

import math
import random
from typing import Protocol, runtime_checkable


@runtime_checkable
class RandomSource(Protocol):
    """Minimal uniform random source used by the engine."""

    def random(self) -> float:  # pragma: no cover - protocol
        ...


_DEFAULT_RNG = random.Random()


def default_rng() -> RandomSource:
    """Return the process-wide unseeded generator."""
    return _DEFAULT_RNG


def pick_index(length: int, rng: RandomSource | None = None) -> int:
    """Return a uniform index in ``[0, length)`` scaled from ``rng.random()``."""
    source = rng if rng is not None else default_rng()
    index = math.floor(source.random() * length)
    # Guard against sources that return exactly 1.0.
    return min(index, length - 1)
