"""
deck_engine/resolver.py -- Expansion of deck references inside entry text.

Entry content may embed references to other decks:

    ``{name}``   draw *without* replacement: the chosen entry is removed
                 from deck ``name``.
    ``{%name}``  draw *with* replacement: deck ``name`` is left untouched.

Each pass replaces every ``{%name}`` token, then every ``{name}`` token, left
to right.  Drawn content may itself contain references, so passes repeat
while the text still holds a ``{`` and a ``}``.  A reference to a missing
or empty deck becomes the inline diagnostic
``[invalid reference: collection "<name>" missing or empty]``, which holds
no braces and therefore cannot trigger another pass.

Referenced entries are picked uniformly: an entry's weight only matters
when its own deck is drawn from at the top level.

The number of passes is capped by ``max_depth`` and the number of
substitutions by ``max_draws``.  A deck that references
itself with replacement (``Z = ["{%Z}"]``) never runs out of tokens; it
raises :class:`~deck_engine.errors.ResolutionDepthExceeded` instead of
recursing forever, and one that branches into itself (``{%Z}{%Z}``) runs
out of draws within a few passes.

Usage::

    from deck_engine.resolver import ReferenceResolver

    decks = {"weapon": ["sword", "axe"], "hero": ["a knight with a {weapon}"]}
    text = ReferenceResolver(decks).resolve("{hero}")
"""

from __future__ import annotations

import logging
import re
from typing import Callable, MutableMapping

from deck_engine.entry_codec import content_of
from deck_engine.errors import ResolutionDepthExceeded
from deck_engine.models.base import DEFAULT_MAX_DEPTH, DEFAULT_MAX_DRAWS
from deck_engine.rng import RandomSource, pick_index

logger = logging.getLogger(__name__)

CollectionStore = MutableMapping[str, list]

WITH_REPLACEMENT_PATTERN = re.compile(r"\{%(.*?)\}")
WITHOUT_REPLACEMENT_PATTERN = re.compile(r"\{(?!%)\s*(.*?)\s*\}")

INVALID_REFERENCE_TEMPLATE = '[invalid reference: collection "{name}" missing or empty]'

ConsumeCallback = Callable[[str, str], None]


def invalid_reference(name: str) -> str:
    """Diagnostic text substituted for an unresolvable reference."""
    return INVALID_REFERENCE_TEMPLATE.format(name=name)


class ReferenceResolver:
    """Resolves ``{name}`` / ``{%name}`` tokens against a deck store.

    Parameters
    ----------
    store : MutableMapping[str, list[str]]
        Deck name -> raw entries.  Mutated in place by
        without-replacement draws.
    rng : RandomSource, optional
        Source for entry selection.
    max_depth : int, optional
        Maximum number of substitution passes per :meth:`resolve` call.
    max_draws : int, optional
        Maximum number of references substituted per :meth:`resolve` call.
    on_consume : callable, optional
        Called as ``on_consume(deck_name, raw_entry)`` after an entry is
        removed from the store, so the owner can persist the change.
    """

    def __init__(
        self,
        store: CollectionStore,
        rng: RandomSource | None = None,
        max_depth: int = DEFAULT_MAX_DEPTH,
        on_consume: ConsumeCallback | None = None,
        max_draws: int = DEFAULT_MAX_DRAWS,
    ):
        if max_depth < 1:
            raise ValueError("max_depth must be at least 1")
        if max_draws < 1:
            raise ValueError("max_draws must be at least 1")
        self.store = store
        self.rng = rng
        self.max_depth = max_depth
        self.max_draws = max_draws
        self.on_consume = on_consume
        self._draws = 0
        self._depth = 0
        self._text = ""

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def resolve(self, text: str) -> str:
        """Expand every reference in *text* and return the final string.

        Raises
        ------
        ResolutionDepthExceeded
            If references are still being produced after ``max_depth``
            passes, or more than ``max_draws`` references are substituted.
        """
        result = text
        self._draws = 0
        for depth in range(1, self.max_depth + 1):
            if not has_references(result):
                return result
            self._depth = depth
            self._text = result
            expanded = self._expand_once(result)
            logger.debug("Resolution pass %d: %r -> %r", depth, result, expanded)
            result = expanded

        if has_references(result):
            raise ResolutionDepthExceeded(self.max_depth, result)
        return result

    def draw_from(self, name: str, with_replacement: bool) -> str:
        """Draw the content of one uniformly chosen entry of deck *name*.

        Without replacement the entry is removed from the deck.  A missing
        or empty deck yields the invalid-reference diagnostic.
        """
        entries = self.store.get(name)
        if not entries:
            logger.warning("Reference to missing or empty deck '%s'", name)
            return invalid_reference(name)

        index = pick_index(len(entries), self.rng)
        if with_replacement:
            raw = entries[index]
        else:
            raw = entries.pop(index)
            logger.debug("Consumed entry %d of deck '%s' (%d left)", index, name, len(entries))
            if self.on_consume is not None:
                self.on_consume(name, raw)
        return content_of(raw)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _expand_once(self, text: str) -> str:
        text = WITH_REPLACEMENT_PATTERN.sub(
            lambda m: self._substitute(m.group(1).strip(), True), text,
        )
        return WITHOUT_REPLACEMENT_PATTERN.sub(
            lambda m: self._substitute(m.group(1).strip(), False), text,
        )

    def _substitute(self, name: str, with_replacement: bool) -> str:
        if self._draws >= self.max_draws:
            raise ResolutionDepthExceeded(self._depth, self._text, draws=self.max_draws)
        self._draws += 1
        return self.draw_from(name, with_replacement)


def has_references(text: str) -> bool:
    """Return True if *text* still holds a brace pair forming a reference token."""
    if "{" not in text or "}" not in text:
        return False
    return bool(
        WITH_REPLACEMENT_PATTERN.search(text)
        or WITHOUT_REPLACEMENT_PATTERN.search(text)
    )


def resolve(
    text: str,
    store: CollectionStore,
    rng: RandomSource | None = None,
    max_depth: int = DEFAULT_MAX_DEPTH,
    max_draws: int = DEFAULT_MAX_DRAWS,
) -> str:
    """Convenience wrapper around :meth:`ReferenceResolver.resolve`."""
    resolver = ReferenceResolver(store, rng=rng, max_depth=max_depth, max_draws=max_draws)
    return resolver.resolve(text)
