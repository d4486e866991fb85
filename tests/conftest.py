"""
Shared pytest fixtures for the deck engine test suite.

Provides:
    - scripted_rng: factory for a deterministic RandomSource
    - seeded_rng: a seeded random.Random for statistical checks
    - sample_decks: a small deck mapping with weights, references and a
      hidden deck
"""

import random
import sys
from pathlib import Path

import pytest

# ---------------------------------------------------------------------------
# Ensure deck_engine/ is importable regardless of where pytest is invoked
# ---------------------------------------------------------------------------

PROJECT_ROOT = Path(__file__).resolve().parent.parent

if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))


class ScriptedRandom:
    """RandomSource that replays a fixed list of values, cycling at the end."""

    def __init__(self, values):
        self.values = list(values)
        self.calls = 0

    def random(self):
        value = self.values[self.calls % len(self.values)]
        self.calls += 1
        return value


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def scripted_rng():
    """Return a factory: ``scripted_rng(0.0, 0.5)`` replays those values."""
    def _make(*values):
        return ScriptedRandom(values or (0.0,))
    return _make


@pytest.fixture
def seeded_rng():
    """Return a seeded generator so statistical tests are repeatable."""
    return random.Random(20240611)


@pytest.fixture
def sample_decks():
    """Return a deck mapping exercising weights, references and hiding.

    ``tavern`` draws a patron and a drink; patrons are consumed, drinks are
    drawn with replacement from the hidden ``_drink`` deck.
    """
    return {
        "tavern": [
            "{patron} orders {%_drink}",
            "::3::The bard plays a song",
        ],
        "patron": ["a dwarf", "::4::an elf", "a goblin"],
        "_drink": ["ale", "mead", "::2d6::cider"],
        "empty": [],
    }
