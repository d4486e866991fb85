"""
Tests for deck_engine/entry_codec.py -- weight prefix encoding.

Validates:
    - Weighted and unweighted entries decode into the right fields
    - A missing closing marker leaves the entry unweighted
    - encode drops implicit weights ("", "1", None)
    - decode(encode(...)) round-trips for integer weights
"""

import pytest

from deck_engine.entry_codec import WEIGHT_MARKER, content_of, decode, encode
from deck_engine.models import Entry


class TestDecode:
    """Tests for decode."""

    def test_weighted_entry(self):
        """A ::w:: prefix is split from the content."""
        entry = decode("::5::b")
        assert entry.weight_expr == "5"
        assert entry.content == "b"

    def test_dice_weight(self):
        entry = decode("::2d6+1::a goblin")
        assert entry.weight_expr == "2d6+1"
        assert entry.content == "a goblin"

    def test_plain_entry(self):
        """Entries without the prefix have no weight expression."""
        entry = decode("plain text")
        assert entry.weight_expr is None
        assert entry.content == "plain text"

    def test_unclosed_prefix_is_content(self):
        """An opening marker without a closing one does not raise."""
        entry = decode("::5 oops")
        assert entry.weight_expr is None
        assert entry.content == "::5 oops"

    def test_empty_weight_expression(self):
        entry = decode("::::x")
        assert entry.weight_expr == ""
        assert entry.content == "x"

    def test_content_may_contain_marker(self):
        """Only the first closing marker ends the weight."""
        entry = decode("::3::a::b")
        assert entry.weight_expr == "3"
        assert entry.content == "a::b"

    def test_marker_not_at_start_is_content(self):
        entry = decode("x ::3:: y")
        assert entry.weight_expr is None
        assert entry.content == "x ::3:: y"

    def test_content_of(self):
        assert content_of("::9::heavy") == "heavy"
        assert content_of("light") == "light"

    def test_returns_entry_record(self):
        assert decode("::2::x") == Entry(weight_expr="2", content="x")


class TestEncode:
    """Tests for encode."""

    @pytest.mark.parametrize("weight", [None, "", "1"])
    def test_implicit_weights_are_dropped(self, weight):
        """encode returns the bare content for weight 1 or no weight."""
        assert encode("x", weight) == "x"

    def test_explicit_weight(self):
        assert encode("x", "3") == "::3::x"

    def test_dice_weight(self):
        assert encode("a {b}", "1d4-1") == "::1d4-1::a {b}"

    def test_entry_to_raw(self):
        """Entry.to_raw is the serialization boundary."""
        assert Entry(weight_expr="7", content="seven").to_raw() == "::7::seven"
        assert Entry(content="one").to_raw() == "one"


class TestRoundTrip:
    """decode(encode(content, w)) returns the original fields."""

    def test_integer_weights(self):
        for weight in range(1, 60):
            entry = decode(encode("x", str(weight)))
            assert entry.content == "x"
            expected = None if weight == 1 else str(weight)
            assert entry.weight_expr == expected
            assert int(entry.weight_expr or "1") == weight

    def test_marker_constant(self):
        assert WEIGHT_MARKER == "::"
