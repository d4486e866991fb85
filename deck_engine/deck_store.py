"""
deck_engine/deck_store.py -- Deck collection management for the draw engine.

Owns the ordered ``{deck name: [raw entry, ...]}`` mapping and is the only
layer that mutates it on purpose: deck creation, renaming, hiding, ordering,
entry editing, JSON import/export, and drawing.  Every mutation goes through
the name validators so a hidden ``_name`` and a visible ``name`` can never
coexist.

Drawing from a deck may consume entries of *other* decks through
``{name}`` references.  Listeners registered with :meth:`DeckStore.subscribe`
are told about those removals too, so the caller can persist the store and
refresh anything showing it.

The store does no locking.  Callers embedding it in a concurrent host must
serialise draws against one store.

Usage:
    from deck_engine.deck_store import DeckStore

    store = DeckStore({"loot": ["::3::gold", "a {%gem}"], "_gem": ["ruby", "opal"]})
    store.subscribe(lambda event, name: save(store.export_json()))
    print(store.draw("loot"))
"""

from __future__ import annotations

import logging
from enum import Enum, auto
from typing import Any, Callable, Optional

from deck_engine.entry_codec import decode, encode
from deck_engine.errors import (
    DeckImportError,
    DeckNameConflictError,
    DeckNotFoundError,
    EmptyPopulationError,
)
from deck_engine.distribution import distribution as _distribution
from deck_engine.models.base import DistributionSlice, DrawSettings, Entry
from deck_engine.models.validators import (
    HIDDEN_PREFIX,
    base_name,
    find_name_conflicts,
    find_store_name_clashes,
    is_hidden,
    validate_store_names,
    validate_store_schema,
)
from deck_engine.resolver import ReferenceResolver
from deck_engine.rng import RandomSource
from deck_engine.sampler import draw_entry
from deck_engine.utils import dump_json, safe_parse_json

logger = logging.getLogger(__name__)


class DeckEvent(Enum):
    """Kinds of change reported to store listeners."""

    CREATED = auto()
    UPDATED = auto()
    RENAMED = auto()
    DELETED = auto()
    CONSUMED = auto()
    REORDERED = auto()
    REPLACED = auto()


Listener = Callable[[DeckEvent, str], None]

_INVALID_JSON = object()


# ---------------------------------------------------------------------------
# Data repair
# ---------------------------------------------------------------------------

def repair_decks(data: dict[str, Any]) -> dict[str, list[str]]:
    """Coerce a loosely shaped mapping into ``{name: [str, ...]}``.

    Structural problems are located with the JSON Schema validator and
    logged; the data is then fixed rather than rejected:

        - ``null`` deck values become empty decks
        - any other non-list value becomes a one-entry deck
        - non-text entries are converted to text
    """
    for issue in validate_store_schema(data):
        logger.warning("Repairing deck data: %s", issue)

    repaired: dict[str, list[str]] = {}
    for name, value in data.items():
        name = str(name)
        if value is None:
            repaired[name] = []
        elif isinstance(value, list):
            repaired[name] = [item if isinstance(item, str) else _as_text(item) for item in value]
        else:
            repaired[name] = [_as_text(value)]
    return repaired


def _as_text(value: Any) -> str:
    if isinstance(value, (dict, list)):
        return dump_json(value, indent=None)
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    return str(value)


# ---------------------------------------------------------------------------
# DeckStore
# ---------------------------------------------------------------------------

class DeckStore:
    """Ordered, validated collection of named decks.

    Parameters
    ----------
    decks : dict, optional
        Initial ``{name: [raw entry, ...]}`` mapping.  Malformed values are
        repaired; conflicting names raise :class:`DeckNameConflictError`.
    settings : DrawSettings, optional
        Depth and naming limits.
    rng : RandomSource, optional
        Randomness for draws, dice weights and references.
    """

    def __init__(
        self,
        decks: Optional[dict[str, Any]] = None,
        settings: Optional[DrawSettings] = None,
        rng: Optional[RandomSource] = None,
    ):
        self.settings = settings or DrawSettings()
        self.rng = rng
        self._listeners: list[Listener] = []
        self._decks: dict[str, list[str]] = {}
        if decks:
            self._decks.update(self._checked(repair_decks(decks)))

    # ------------------------------------------------------------------
    # Mapping access
    # ------------------------------------------------------------------

    @property
    def decks(self) -> dict[str, list[str]]:
        """The live mapping handed to the resolver (mutated by draws)."""
        return self._decks

    def names(self) -> list[str]:
        return list(self._decks)

    def visible_names(self) -> list[str]:
        """Deck names for pick lists (hidden decks left out)."""
        return [name for name in self._decks if not is_hidden(name)]

    @staticmethod
    def display_name(name: str) -> str:
        return base_name(name)

    def search(self, keyword: str) -> list[str]:
        """Names whose display name contains *keyword*, case-insensitively."""
        if not keyword:
            return self.names()
        needle = keyword.lower()
        return [name for name in self._decks if needle in base_name(name).lower()]

    def __contains__(self, name: object) -> bool:
        return name in self._decks

    def __len__(self) -> int:
        return len(self._decks)

    def __iter__(self):
        return iter(self._decks)

    def raw_entries(self, name: str) -> list[str]:
        """A copy of deck *name*'s stored entry strings."""
        return list(self._require(name))

    def entries(self, name: str) -> list[Entry]:
        """Deck *name*'s entries as decoded records."""
        return [decode(raw) for raw in self._require(name)]

    # ------------------------------------------------------------------
    # Listeners
    # ------------------------------------------------------------------

    def subscribe(self, listener: Listener) -> None:
        """Register *listener*, called as ``listener(event, deck_name)``."""
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _emit(self, event: DeckEvent, name: str) -> None:
        for listener in list(self._listeners):
            listener(event, name)

    # ------------------------------------------------------------------
    # Deck lifecycle
    # ------------------------------------------------------------------

    def create_deck(self, name: Optional[str] = None) -> str:
        """Create an empty deck and return the name actually used.

        When *name* is taken (or clashes with its hidden/visible twin) a
        ``(1)``, ``(2)``... suffix is appended until it is free.
        """
        requested = (name or "").strip() or self.settings.default_deck_name
        candidate = requested
        counter = 1
        while find_name_conflicts(candidate, self._decks):
            candidate = f"{requested}({counter})"
            counter += 1

        self._decks[candidate] = []
        logger.debug("Created deck '%s'", candidate)
        self._emit(DeckEvent.CREATED, candidate)
        return candidate

    def delete_deck(self, name: str) -> None:
        self._require(name)
        del self._decks[name]
        self._emit(DeckEvent.DELETED, name)

    def clear(self) -> None:
        """Remove every deck."""
        names = list(self._decks)
        self._decks.clear()
        for name in names:
            self._emit(DeckEvent.DELETED, name)

    def rename_deck(self, name: str, new_name: str) -> str:
        """Rename deck *name*, keeping its position and hidden state.

        A blank *new_name* falls back to ``settings.untitled_deck_name``.

        Returns
        -------
        str
            The final name (hidden prefix included).

        Raises
        ------
        DeckNameConflictError
            If the new name is already used by another deck.
        """
        self._require(name)
        target = new_name.strip() or self.settings.untitled_deck_name
        if is_hidden(name) and not is_hidden(target):
            target = HIDDEN_PREFIX + target
        if target == name:
            return name

        issues = find_name_conflicts(target, self._decks, ignore=name)
        if issues:
            raise DeckNameConflictError(target, issues)

        self._replace_key(name, target)
        logger.debug("Renamed deck '%s' -> '%s'", name, target)
        self._emit(DeckEvent.RENAMED, target)
        return target

    def set_hidden(self, name: str, hidden: bool) -> str:
        """Hide or reveal deck *name*; returns its new name."""
        self._require(name)
        if is_hidden(name) == hidden:
            return name
        target = HIDDEN_PREFIX + name if hidden else base_name(name)

        issues = find_name_conflicts(target, self._decks, ignore=name)
        if issues:
            raise DeckNameConflictError(target, issues)

        self._replace_key(name, target)
        self._emit(DeckEvent.RENAMED, target)
        return target

    def toggle_hidden(self, name: str) -> str:
        return self.set_hidden(name, not is_hidden(name))

    def move_deck(self, name: str, offset: int) -> bool:
        """Swap deck *name* with its neighbour at *offset* (-1 up, +1 down).

        Returns False (and changes nothing) when the move would leave the
        list.
        """
        self._require(name)
        order = list(self._decks)
        index = order.index(name)
        other = index + offset
        if offset == 0 or not 0 <= other < len(order):
            return False
        order[index], order[other] = order[other], order[index]
        self._reset({key: self._decks[key] for key in order})
        self._emit(DeckEvent.REORDERED, name)
        return True

    # ------------------------------------------------------------------
    # Entry editing
    # ------------------------------------------------------------------

    def add_entry(self, name: str, content: str = "", weight_expr: Optional[str] = None) -> int:
        """Append an entry to deck *name* and return its index."""
        entries = self._require(name)
        entries.append(encode(content, weight_expr))
        self._emit(DeckEvent.UPDATED, name)
        return len(entries) - 1

    def update_entry(
        self,
        name: str,
        index: int,
        content: str,
        weight_expr: Optional[str] = None,
    ) -> None:
        entries = self._require(name)
        self._check_index(name, entries, index)
        entries[index] = encode(content, weight_expr)
        self._emit(DeckEvent.UPDATED, name)

    def remove_entry(self, name: str, index: int) -> str:
        """Remove and return the raw entry at *index*."""
        entries = self._require(name)
        self._check_index(name, entries, index)
        raw = entries.pop(index)
        self._emit(DeckEvent.UPDATED, name)
        return raw

    def move_entry(self, name: str, index: int, offset: int) -> bool:
        """Swap the entry at *index* with the one at ``index + offset``."""
        entries = self._require(name)
        self._check_index(name, entries, index)
        other = index + offset
        if offset == 0 or not 0 <= other < len(entries):
            return False
        entries[index], entries[other] = entries[other], entries[index]
        self._emit(DeckEvent.UPDATED, name)
        return True

    # ------------------------------------------------------------------
    # Drawing
    # ------------------------------------------------------------------

    def draw(self, name: str) -> str:
        """Weighted draw from deck *name* with all references resolved.

        The drawn entry stays in its deck; entries reached through
        ``{other}`` references are consumed from their decks.

        Raises
        ------
        EmptyPopulationError
            If the deck is missing or has no entries.
        ResolutionDepthExceeded
            If reference expansion does not settle within
            ``settings.max_depth`` passes or ``settings.max_draws``
            substitutions.
        """
        entries = self._decks.get(name)
        if not entries:
            raise EmptyPopulationError(deck_name=name)
        content = draw_entry(entries, self.rng, deck_name=name)
        return self.resolve(content)

    def resolve(self, text: str) -> str:
        """Expand references in *text* against this store."""
        resolver = ReferenceResolver(
            self._decks,
            rng=self.rng,
            max_depth=self.settings.max_depth,
            max_draws=self.settings.max_draws,
            on_consume=self._on_consume,
        )
        return resolver.resolve(text)

    def distribution(self, name: str) -> list[DistributionSlice]:
        """Probability breakdown of deck *name* for charts."""
        return _distribution(
            self._require(name),
            rng=self.rng,
            label_length=self.settings.label_length,
        )

    def _on_consume(self, name: str, raw: str) -> None:
        self._emit(DeckEvent.CONSUMED, name)

    # ------------------------------------------------------------------
    # Import / export
    # ------------------------------------------------------------------

    def export_json(self, indent: Optional[int] = 4) -> str:
        """Serialise all decks, entry strings untouched."""
        return dump_json(self._decks, indent=indent)

    def import_json(self, payload: Any, merge: bool = False) -> list[str]:
        """Load decks from JSON text (or an already parsed mapping).

        Parameters
        ----------
        payload : str, bytes or dict
            The deck mapping.
        merge : bool
            When True, imported decks are added to the existing ones and
            replace same-named decks; otherwise they replace the whole
            store.

        Returns
        -------
        list[str]
            Names of the imported decks.

        Raises
        ------
        DeckImportError
            If *payload* is not a JSON object.
        DeckNameConflictError
            If the result would contain hidden/visible twins.  The store
            is left unchanged.
        """
        if isinstance(payload, (str, bytes, bytearray)):
            data = safe_parse_json(payload, default=_INVALID_JSON)
            if data is _INVALID_JSON:
                raise DeckImportError("The deck data is not valid JSON.")
        else:
            data = payload

        if not isinstance(data, dict):
            raise DeckImportError(
                "Deck data must be a JSON object mapping deck names to entry lists."
            )

        imported = repair_decks(data)
        if merge:
            combined = dict(self._decks)
            combined.update(imported)
        else:
            combined = imported

        self._reset(self._checked(combined))
        logger.info("Imported %d deck(s) (%s)", len(imported), "merged" if merge else "replaced")
        self._emit(DeckEvent.REPLACED, "")
        return list(imported)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _require(self, name: str) -> list[str]:
        try:
            return self._decks[name]
        except KeyError:
            raise DeckNotFoundError(name) from None

    @staticmethod
    def _check_index(name: str, entries: list[str], index: int) -> None:
        if not 0 <= index < len(entries):
            raise IndexError(
                f"Deck '{name}' has {len(entries)} entries; index {index} is out of range."
            )

    @staticmethod
    def _checked(decks: dict[str, list[str]]) -> dict[str, list[str]]:
        clashes = find_store_name_clashes(decks)
        if clashes:
            raise DeckNameConflictError(clashes[0][1], validate_store_names(decks))
        return decks

    def _reset(self, decks: dict[str, list[str]]) -> None:
        # Keep the mapping object stable for callers holding ``decks``.
        self._decks.clear()
        self._decks.update(decks)

    def _replace_key(self, old: str, new: str) -> None:
        self._reset({
            (new if key == old else key): value
            for key, value in self._decks.items()
        })
