"""
Tests for deck_engine/weights.py -- weight expression evaluation.

Validates:
    - Number literals pass through unclamped
    - Dice notation stays within [N + K, N * M + K]
    - Unparseable expressions evaluate to 1
    - clamp_weight rounds half up with a minimum of 1
    - entry_weight combines both for decoded entries
"""

import math

import pytest

from deck_engine.entry_codec import decode
from deck_engine.weights import (
    MAX_WEIGHT,
    MIN_WEIGHT,
    clamp_weight,
    entry_weight,
    evaluate_weight_expression,
    roll_die,
)


class TestNumberLiterals:
    """Expressions that parse as finite numbers."""

    def test_integer(self):
        assert evaluate_weight_expression("5") == 5

    def test_surrounding_whitespace(self):
        assert evaluate_weight_expression(" 12 ") == 12

    def test_zero_and_negative_unclamped(self):
        """The evaluator does not clamp; callers do."""
        assert evaluate_weight_expression("0") == 0
        assert evaluate_weight_expression("-3") == -3

    def test_fraction(self):
        assert evaluate_weight_expression("2.5") == 2.5

    @pytest.mark.parametrize("expr", ["inf", "-Infinity", "nan"])
    def test_non_finite_is_unparseable(self, expr):
        assert evaluate_weight_expression(expr) == 1

    @pytest.mark.parametrize("expr", ["1_000", "٣", "１２"])
    def test_only_plain_ascii_literals(self, expr):
        """Digit separators and non-ASCII digits are not number literals."""
        assert evaluate_weight_expression(expr) == 1


class TestDice:
    """Dice notation [count]d<sides>[+|-modifier]."""

    def test_bounds_over_many_rolls(self, seeded_rng):
        """3d6+2 always lands in [5, 20]."""
        results = {evaluate_weight_expression("3d6+2", seeded_rng) for _ in range(5000)}
        assert min(results) >= 5
        assert max(results) <= 20
        # Both extremes show up over 5000 rolls.
        assert 5 in results
        assert 20 in results

    def test_minimum_roll(self, scripted_rng):
        assert evaluate_weight_expression("3d6+2", scripted_rng(0.0)) == 5

    def test_maximum_roll(self, scripted_rng):
        assert evaluate_weight_expression("3d6+2", scripted_rng(0.999)) == 20

    def test_count_defaults_to_one(self, scripted_rng):
        assert evaluate_weight_expression("d20", scripted_rng(0.5)) == 11

    def test_negative_modifier(self, scripted_rng):
        assert evaluate_weight_expression("2d4-10", scripted_rng(0.0)) == -8

    def test_case_insensitive(self, scripted_rng):
        assert evaluate_weight_expression("2D4", scripted_rng(0.999)) == 8

    def test_each_die_uses_a_fresh_draw(self, scripted_rng):
        rng = scripted_rng(0.0, 0.999, 0.5)
        # 1 + 6 + 4
        assert evaluate_weight_expression("3d6", rng) == 11
        assert rng.calls == 3

    @pytest.mark.parametrize("expr", ["٢d6", "2d٦", "d6+٣"])
    def test_non_ascii_digits_rejected(self, expr):
        assert evaluate_weight_expression(expr) == 1

    def test_zero_dice(self):
        assert evaluate_weight_expression("0d6+3") == 3

    def test_roll_die_range(self, seeded_rng):
        rolls = {roll_die(4, seeded_rng) for _ in range(500)}
        assert rolls == {1, 2, 3, 4}

    @pytest.mark.parametrize("count,sides,modifier", [(1, 1, 0), (2, 6, 3), (4, 10, -2)])
    def test_parametrized_bounds(self, seeded_rng, count, sides, modifier):
        sign = "+" if modifier >= 0 else "-"
        expr = f"{count}d{sides}{sign}{abs(modifier)}"
        for _ in range(300):
            value = evaluate_weight_expression(expr, seeded_rng)
            assert count + modifier <= value <= count * sides + modifier


class TestUnparseable:
    """Anything else evaluates to weight 1."""

    @pytest.mark.parametrize("expr", ["abc", "", "2d", "d", "1d6+", "2d6*3", "1 d6", "x5"])
    def test_fallback(self, expr):
        assert evaluate_weight_expression(expr) == 1


class TestClampWeight:
    """Tests for clamp_weight."""

    def test_positive_integer_unchanged(self):
        assert clamp_weight(7) == 7

    def test_rounds_half_up(self):
        assert clamp_weight(2.5) == 3
        assert clamp_weight(2.4) == 2

    @pytest.mark.parametrize("value", [0, -4, 0.2, float("nan"), math.inf, "abc", None])
    def test_minimum_is_one(self, value):
        assert clamp_weight(value) == MIN_WEIGHT

    @pytest.mark.parametrize("value", [1e308, 10 ** 400, MAX_WEIGHT + 1])
    def test_capped_at_max_weight(self, value):
        assert clamp_weight(value) == MAX_WEIGHT

    def test_huge_literal_is_capped(self):
        assert entry_weight(decode("::1e308::x")) == MAX_WEIGHT


class TestEntryWeight:
    """Tests for entry_weight."""

    def test_unweighted(self):
        assert entry_weight(decode("plain")) == 1

    def test_weighted(self):
        assert entry_weight(decode("::5::b")) == 5

    def test_zero_weight_is_clamped(self):
        assert entry_weight(decode("::0::never gone")) == 1

    def test_malformed_weight(self):
        assert entry_weight(decode("::lots::x")) == 1

    def test_dice_weight(self, scripted_rng):
        assert entry_weight(decode("::2d6::x"), scripted_rng(0.999)) == 12
