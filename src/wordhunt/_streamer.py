"""FileStreamer: from a file on disk to a session."""

from __future__ import annotations

import logging
import os
import time
from pathlib import Path
from typing import Callable

from ._analyser import Analyser
from ._codec import read_session, write_session
from ._errors import (
    CorruptSessionError,
    EmptyDocumentError,
    EmptyInputError,
    SessionFormatError,
    SessionIOError,
    UnsupportedVersionError,
)
from ._extractor import DefaultExtractor, Extractor
from ._sentence import DEFAULT_LOCALE, Segmenter
from ._session import SessionState
from ._types import AnalysisResult

LOG = logging.getLogger(__name__)

# (distinct_word_count, elapsed_millis, source_name)
AnalysisObserver = Callable[[int, int, str], None]


def log_analysis(word_count: int, elapsed_millis: int, source_name: str) -> None:
    LOG.info(
        "Analysed text and found %d words in %dms (%s)",
        word_count, elapsed_millis, source_name,
    )


class FileStreamer:
    """Entry point turning documents and session files into sessions.

    Args:
        extractor: Supplies document text. Defaults to DefaultExtractor.
        analyser: Builds the word analysis. Defaults to Analyser().
        locale: Sentence segmentation locale, e.g. "en" or "de_DE".
        observer: Called after each analysis with the distinct word
            count, elapsed milliseconds and source name. Defaults to an
            INFO log line.
    """

    __slots__ = ("_extractor", "_analyser", "_segmenter", "_observer")

    def __init__(
        self,
        extractor: Extractor | None = None,
        analyser: Analyser | None = None,
        locale: str = DEFAULT_LOCALE,
        observer: AnalysisObserver | None = None,
    ) -> None:
        self._extractor = extractor if extractor is not None else DefaultExtractor()
        self._analyser = analyser if analyser is not None else Analyser()
        self._segmenter = Segmenter(locale)
        self._observer = observer if observer is not None else log_analysis

    def lines(self, path: str | os.PathLike[str]) -> list[str]:
        """Extract a document and split it into sentences.

        Raises:
            ExtractionError: If the document cannot be read.
            EmptyDocumentError: If the document holds no text.
        """
        extracted = self._extractor.extract(path)
        if not extracted.text.strip():
            raise EmptyDocumentError(f"No text in file '{path}'")
        try:
            return self._segmenter.segment(extracted.text)
        except EmptyInputError as e:
            # Only control characters survived extraction.
            raise EmptyDocumentError(f"No text in file '{path}'") from e

    def analyse(self, path: str | os.PathLike[str]) -> AnalysisResult:
        start = time.perf_counter()
        sentences = self.lines(path)
        filename = Path(path).name
        result = self._analyser.analyse(sentences, filename)
        elapsed = round((time.perf_counter() - start) * 1000)
        self._observer(len(result), elapsed, filename)
        return result

    def create_new_session(self, path: str | os.PathLike[str]) -> SessionState:
        return SessionState.new(self.analyse(path))

    def create_or_open_session(
        self, path: str | os.PathLike[str], *, strict: bool = False
    ) -> SessionState:
        """Open a saved session, or analyse the file as a new document.

        Any file can be handed in: if it is not a readable session it is
        treated as a document. With ``strict=True`` a file that carries the
        session marker but cannot be decoded raises instead of being
        replaced by a fresh analysis.
        """
        try:
            return read_session(path)
        except (CorruptSessionError, UnsupportedVersionError) as e:
            if strict:
                raise
            LOG.warning("Discarding unreadable session file %s: %s", path, e)
        except (SessionFormatError, SessionIOError) as e:
            LOG.debug("%s is not a session file", path, exc_info=e)
        return self.create_new_session(path)

    def save_session(self, state: SessionState, path: str | os.PathLike[str]) -> None:
        write_session(state, path)


def analyse_document(path: str | os.PathLike[str], locale: str = DEFAULT_LOCALE) -> AnalysisResult:
    return FileStreamer(locale=locale).analyse(path)


def create_new_session(path: str | os.PathLike[str], locale: str = DEFAULT_LOCALE) -> SessionState:
    return FileStreamer(locale=locale).create_new_session(path)


def create_or_open_session(
    path: str | os.PathLike[str],
    locale: str = DEFAULT_LOCALE,
    *,
    strict: bool = False,
) -> SessionState:
    return FileStreamer(locale=locale).create_or_open_session(path, strict=strict)
