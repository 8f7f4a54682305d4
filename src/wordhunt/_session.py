"""SessionState: an analysis plus the user's review progress."""

from __future__ import annotations

from dataclasses import dataclass, field

from ._errors import UnknownWordError
from ._types import (
    AnalysisResult,
    Classification,
    SessionProgress,
    Word,
    WordUse,
)


@dataclass(slots=True)
class SessionState:
    """The unit of persistence for one reviewed document.

    ``classifications`` only ever holds words present in ``analysis``;
    a missing entry means ``Classification.UNCLASSIFIED``, which is never
    stored explicitly.
    """

    name: str
    analysis: AnalysisResult
    classifications: dict[Word, Classification] = field(default_factory=dict)
    revision: int = field(default=0, compare=False, repr=False)

    def __post_init__(self) -> None:
        cleaned: dict[Word, Classification] = {}
        for word, classification in self.classifications.items():
            use = self._resolve(word)
            classification = Classification(classification)
            if classification is not Classification.UNCLASSIFIED:
                cleaned[use.word] = classification
        self.classifications = cleaned

    @classmethod
    def new(cls, analysis: AnalysisResult, name: str | None = None) -> SessionState:
        """Wrap a fresh analysis; the name defaults to the source name."""
        return cls(name=analysis.source_name if name is None else name, analysis=analysis)

    def _resolve(self, word: Word | str) -> WordUse:
        use = self.analysis.find(word)
        if use is None:
            raise UnknownWordError(
                f"{str(word)!r} does not appear in {self.analysis.source_name!r}"
            )
        return use

    def classify(self, word: Word | str, classification: Classification | str) -> None:
        """Set a word's classification; UNCLASSIFIED clears it.

        Raises:
            UnknownWordError: If the word is not part of the analysis. The
                classification map is left untouched.
        """
        classification = Classification(classification)
        use = self._resolve(word)
        if classification is Classification.UNCLASSIFIED:
            self.classifications.pop(use.word, None)
        else:
            self.classifications[use.word] = classification
        self.revision += 1

    def classification_of(self, word: Word | str) -> Classification:
        use = self._resolve(word)
        return self.classifications.get(use.word, Classification.UNCLASSIFIED)

    def rename(self, name: str) -> None:
        self.name = name
        self.revision += 1

    def words_with(self, classification: Classification) -> list[WordUse]:
        """Uses with the given classification, in analysis order."""
        get = self.classifications.get
        unclassified = Classification.UNCLASSIFIED
        return [
            use for use in self.analysis.ordered_uses
            if get(use.word, unclassified) is classification
        ]

    def progress(self) -> SessionProgress:
        counts = {c: 0 for c in Classification}
        for classification in self.classifications.values():
            counts[classification] += 1
        total = len(self.analysis)
        return SessionProgress(
            total=total,
            unclassified=total - len(self.classifications),
            known=counts[Classification.KNOWN],
            unknown=counts[Classification.UNKNOWN],
            starred=counts[Classification.STARRED],
        )
