"""Data structures for wordhunt."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field


class Classification(enum.Enum):
    """Review status a user assigns to a word."""

    UNCLASSIFIED = "unclassified"
    KNOWN = "known"
    UNKNOWN = "unknown"
    STARRED = "starred"


@dataclass(slots=True, frozen=True)
class Word:
    key: str                             # normalized identity
    display: str = field(compare=False)  # first-seen original casing

    def __str__(self) -> str:
        return self.display


@dataclass(slots=True, frozen=True)
class Occurrence:
    sentence_index: int  # 0-based position in the segmenter output
    sentence: str

    def __post_init__(self) -> None:
        if self.sentence_index < 0:
            raise ValueError(f"sentence_index must be >= 0, got {self.sentence_index}")


@dataclass(slots=True, frozen=True)
class WordUse:
    word: Word
    count: int
    occurrences: tuple[Occurrence, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "occurrences", tuple(self.occurrences))
        if self.count < 1:
            raise ValueError(f"count must be >= 1, got {self.count}")
        if len(self.occurrences) != self.count:
            raise ValueError(
                f"{self.word.key!r}: count {self.count} does not match "
                f"{len(self.occurrences)} occurrences"
            )
        indices = [o.sentence_index for o in self.occurrences]
        if indices != sorted(indices):
            raise ValueError(f"{self.word.key!r}: sentence indices are out of order")

    @property
    def sentence_indices(self) -> list[int]:
        return [o.sentence_index for o in self.occurrences]


@dataclass(slots=True, frozen=True)
class AnalysisResult:
    """Distinct words of one document in first-appearance order."""

    source_name: str
    ordered_uses: tuple[WordUse, ...]
    _index: dict[str, int] = field(
        init=False, repr=False, compare=False, default_factory=dict,
    )

    def __post_init__(self) -> None:
        uses = tuple(self.ordered_uses)
        index = {use.word.key: i for i, use in enumerate(uses)}
        if len(index) != len(uses):
            raise ValueError("ordered_uses contains duplicate words")
        object.__setattr__(self, "ordered_uses", uses)
        object.__setattr__(self, "_index", index)

    def __len__(self) -> int:
        return len(self.ordered_uses)

    def __contains__(self, word: object) -> bool:
        if not isinstance(word, (Word, str)):
            return False
        return self.find(word) is not None

    def find(self, word: Word | str) -> WordUse | None:
        """Return the use for a word (or raw token), or None if absent."""
        if isinstance(word, Word):
            key = word.key
        else:
            from ._tokenizer import normalize_word

            key = normalize_word(word)
        i = self._index.get(key)
        return None if i is None else self.ordered_uses[i]

    def position(self, word: Word) -> int:
        """First-appearance position of a word, -1 if absent."""
        return self._index.get(word.key, -1)

    @property
    def words(self) -> list[Word]:
        return [use.word for use in self.ordered_uses]


@dataclass(slots=True, frozen=True)
class SessionProgress:
    total: int
    unclassified: int
    known: int
    unknown: int
    starred: int

    @property
    def classified(self) -> int:
        return self.total - self.unclassified
