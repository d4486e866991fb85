"""
deck_engine/weights.py -- Weight expression evaluation.

A weight expression is either a number literal or dice notation::

    "5"        -> 5
    "d6"       -> 1..6
    "3d4-2"    -> 1..10
    "nonsense" -> 1

:func:`evaluate_weight_expression` returns the raw value; dice are rolled
anew on every call, so a dice-weighted entry gets a fresh weight each time
a deck is drawn from or charted.  :func:`clamp_weight` turns any raw value
into the positive integer the sampler works with.  Both the sampler and the
distribution reporter go through :func:`entry_weight`, which keeps charted
odds identical to real draw odds.

Bad input is never an error here: edited text is untrusted, and a typo in
a weight must not interrupt a draw, so it silently counts as weight 1.
"""

from __future__ import annotations

import math
import re
import sys
from typing import Union

from deck_engine.models.base import Entry
from deck_engine.rng import RandomSource, default_rng

Number = Union[int, float]

DICE_PATTERN = re.compile(r"^(\d*)d(\d+)([+-]\d+)?$", re.IGNORECASE | re.ASCII)

MIN_WEIGHT = 1
# Keeps a deck's summed weight well inside float range for the sampler.
MAX_WEIGHT = sys.maxsize


def _parse_number(expr: str) -> Number | None:
    """Return the finite number *expr* spells, or ``None``.

    Only plain ASCII literals count: ``float`` would also accept digit
    separators (``1_000``) and non-ASCII digits.
    """
    if "_" in expr or not expr.isascii():
        return None
    try:
        value = float(expr)
    except ValueError:
        return None
    if not math.isfinite(value):
        return None
    return int(value) if value.is_integer() else value


def roll_die(sides: int, rng: RandomSource | None = None) -> int:
    """Roll one die with *sides* faces (a zero-sided die always shows 1)."""
    source = rng if rng is not None else default_rng()
    return math.floor(source.random() * sides) + 1


def evaluate_weight_expression(expr: str, rng: RandomSource | None = None) -> Number:
    """Evaluate a weight expression to a raw (unclamped) number.

    Parameters
    ----------
    expr : str
        Number literal or dice notation ``[count]d<sides>[+|-modifier]``.
    rng : RandomSource, optional
        Source for dice rolls; defaults to the shared generator.

    Returns
    -------
    int or float
        The literal value, the dice total, or ``1`` when *expr* matches
        neither form.
    """
    text = expr.strip()

    number = _parse_number(text)
    if number is not None:
        return number

    match = DICE_PATTERN.match(text)
    if match is None:
        return 1

    count = int(match.group(1)) if match.group(1) else 1
    sides = int(match.group(2))
    modifier = int(match.group(3)) if match.group(3) else 0

    total = sum(roll_die(sides, rng) for _ in range(count))
    return total + modifier


def clamp_weight(value) -> int:
    """Round *value* half up and clamp it to ``[MIN_WEIGHT, MAX_WEIGHT]``."""
    if isinstance(value, int):
        return min(MAX_WEIGHT, max(MIN_WEIGHT, value))
    try:
        number = float(value)
    except (TypeError, ValueError):
        return MIN_WEIGHT
    if not math.isfinite(number):
        return MIN_WEIGHT
    return min(MAX_WEIGHT, max(MIN_WEIGHT, math.floor(number + 0.5)))


def entry_weight(entry: Entry, rng: RandomSource | None = None) -> int:
    """Effective sampling weight of a decoded entry."""
    if entry.weight_expr is None:
        return MIN_WEIGHT
    return clamp_weight(evaluate_weight_expression(entry.weight_expr, rng))
