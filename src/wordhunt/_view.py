"""EnrichedSessionState: a searchable, filterable projection of a session."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Callable

from ._errors import UnknownWordError
from ._session import SessionState
from ._types import Classification, Word, WordUse

WordPredicate = Callable[[WordUse, Classification], bool]


class SortOrder(enum.Enum):
    APPEARANCE = "appearance"
    FREQUENCY = "frequency"
    ALPHABETICAL = "alphabetical"


def show_all(use: WordUse, classification: Classification) -> bool:
    return True


@dataclass(slots=True, frozen=True)
class WordFilter:
    """Predicate over (use, classification) built from review settings.

    Args:
        classifications: Classifications to show. None shows all.
        minimum_letters: Hide words with fewer letters than this.
        minimum_occurrences: Hide words used fewer times than this.
        allow_initial_capitals: When False, hide words whose display form
            starts with an uppercase letter (mostly proper nouns).
        excluded: Word keys to hide, e.g. words already known from other
            sessions. See load_excluded_words.
    """

    classifications: frozenset[Classification] | None = None
    minimum_letters: int = 0
    minimum_occurrences: int = 1
    allow_initial_capitals: bool = True
    excluded: frozenset[str] = frozenset()

    def __call__(self, use: WordUse, classification: Classification) -> bool:
        if self.classifications is not None and classification not in self.classifications:
            return False
        if use.word.key in self.excluded:
            return False
        if use.count < self.minimum_occurrences:
            return False
        display = use.word.display
        if self.minimum_letters and sum(ch.isalpha() for ch in display) < self.minimum_letters:
            return False
        if not self.allow_initial_capitals and display[:1].isupper():
            return False
        return True


class EnrichedSessionState:
    """Derived review state over one SessionState.

    Nothing here is persisted. The filtered view is recomputed lazily
    whenever the search text, filter, sort order or the session's
    classifications change.
    """

    __slots__ = (
        "_session", "_search_text", "_active_filter", "_sort_order",
        "_cursor", "_view", "_view_revision",
    )

    def __init__(
        self,
        session: SessionState,
        search_text: str | None = None,
        active_filter: WordPredicate | None = None,
        sort_order: SortOrder = SortOrder.APPEARANCE,
    ) -> None:
        self._session = session
        self._search_text = search_text or None
        self._active_filter = active_filter if active_filter is not None else show_all
        self._sort_order = sort_order
        self._cursor = 0
        self._view: tuple[WordUse, ...] | None = None
        self._view_revision = -1

    @property
    def session(self) -> SessionState:
        return self._session

    @property
    def search_text(self) -> str | None:
        return self._search_text

    @property
    def active_filter(self) -> WordPredicate:
        return self._active_filter

    @property
    def sort_order(self) -> SortOrder:
        return self._sort_order

    @property
    def cursor(self) -> int:
        self.view()
        return self._cursor

    # -- Mutators --

    def set_search(self, text: str | None) -> None:
        self._search_text = text or None
        self._invalidate()

    def set_filter(self, predicate: WordPredicate | None) -> None:
        self._active_filter = predicate if predicate is not None else show_all
        self._invalidate()

    def set_sort(self, order: SortOrder) -> None:
        self._sort_order = order
        self._invalidate()

    def _invalidate(self) -> None:
        self._view_revision = -1

    # -- View --

    def view(self) -> tuple[WordUse, ...]:
        """Visible uses, recomputed only when an input has changed."""
        if self._view is None or self._view_revision != self._session.revision:
            previous = self._at_cursor()
            self._view = self._compute()
            self._view_revision = self._session.revision
            self._restore_cursor(previous)
        return self._view

    def __len__(self) -> int:
        return len(self.view())

    def _compute(self) -> tuple[WordUse, ...]:
        session = self._session
        get = session.classifications.get
        unclassified = Classification.UNCLASSIFIED
        predicate = self._active_filter
        needle = self._search_text.casefold() if self._search_text else None

        visible = [
            use for use in session.analysis.ordered_uses
            if (needle is None or needle in use.word.display.casefold())
            and predicate(use, get(use.word, unclassified))
        ]
        if self._sort_order is SortOrder.FREQUENCY:
            visible.sort(key=lambda use: -use.count)
        elif self._sort_order is SortOrder.ALPHABETICAL:
            visible.sort(key=lambda use: use.word.key)
        return tuple(visible)

    def _restore_cursor(self, previous: WordUse | None) -> None:
        view = self._view or ()
        if previous is not None:
            for i, use in enumerate(view):
                if use.word == previous.word:
                    self._cursor = i
                    return
        self._cursor = max(0, min(self._cursor, len(view) - 1))

    # -- Cursor --

    def _at_cursor(self) -> WordUse | None:
        if not self._view:
            return None
        return self._view[self._cursor]

    def current(self) -> WordUse | None:
        self.view()
        return self._at_cursor()

    def advance_cursor(self) -> None:
        view = self.view()
        if view:
            self._cursor = min(self._cursor + 1, len(view) - 1)

    def retreat_cursor(self) -> None:
        if self.view():
            self._cursor = max(self._cursor - 1, 0)

    def select(self, word: Word | str) -> WordUse:
        """Move the cursor onto a word in the current view."""
        use = self._session.analysis.find(word)
        if use is not None:
            for i, candidate in enumerate(self.view()):
                if candidate.word == use.word:
                    self._cursor = i
                    return candidate
        raise UnknownWordError(f"{str(word)!r} is not in the current view")

    def classify_current(self, classification: Classification) -> WordUse | None:
        """Classify the word under the cursor, then move to the next one."""
        use = self.current()
        if use is None:
            return None
        self._session.classify(use.word, classification)
        current = self.current()
        if current is not None and current.word == use.word:
            self.advance_cursor()
        return use
