"""Aggregates word usage across an ordered sentence sequence."""

from __future__ import annotations

from typing import Iterable

from ._tokenizer import Tokenizer
from ._types import AnalysisResult, Occurrence, Word, WordUse


class Analyser:
    """Builds an AnalysisResult in first-appearance order."""

    __slots__ = ("_tokenizer",)

    def __init__(self, tokenizer: Tokenizer | None = None) -> None:
        self._tokenizer = tokenizer if tokenizer is not None else Tokenizer()

    def analyse(self, sentences: Iterable[str], source_name: str) -> AnalysisResult:
        """Collect every distinct word with the sentences it appears in.

        Words are ordered by first appearance, not by frequency. Every
        token of a sentence records that sentence's 0-based position in
        ``sentences``.
        """
        order: list[Word] = []
        uses: dict[Word, list[Occurrence]] = {}

        for index, sentence in enumerate(sentences):
            for word in self._tokenizer.words(sentence):
                occurrences = uses.get(word)
                if occurrences is None:
                    occurrences = uses[word] = []
                    order.append(word)
                occurrences.append(Occurrence(index, sentence))

        return AnalysisResult(
            source_name=source_name,
            ordered_uses=tuple(
                WordUse(word, len(uses[word]), tuple(uses[word]))
                for word in order
            ),
        )


def analyse(sentences: Iterable[str], source_name: str) -> AnalysisResult:
    """Analyse pre-split sentences with the default tokenizer."""
    return Analyser().analyse(sentences, source_name)
