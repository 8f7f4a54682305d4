"""Wordhunt: turn a document into a resumable vocabulary review session."""

from __future__ import annotations

import logging

from ._analyser import Analyser, analyse
from ._codec import (
    FORMAT_VERSION,
    SESSION_SUFFIX,
    SessionCodec,
    is_session,
    read_session,
    write_session,
)
from ._errors import (
    CorruptSessionError,
    EmptyDocumentError,
    EmptyInputError,
    ExtractionError,
    NotASessionError,
    SessionFormatError,
    SessionIOError,
    UnknownWordError,
    UnsupportedVersionError,
    WordhuntError,
)
from ._exclusions import load_excluded_words
from ._export import export_words, selected_uses
from ._extractor import DefaultExtractor, ExtractedText, Extractor
from ._sentence import DEFAULT_LOCALE, Segmenter, split_sentences
from ._session import SessionState
from ._streamer import (
    FileStreamer,
    analyse_document,
    create_new_session,
    create_or_open_session,
)
from ._tokenizer import Tokenizer, normalize_word, tokenize
from ._types import (
    AnalysisResult,
    Classification,
    Occurrence,
    SessionProgress,
    Word,
    WordUse,
)
from ._view import EnrichedSessionState, SortOrder, WordFilter, show_all

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "AnalysisResult",
    "Analyser",
    "Classification",
    "CorruptSessionError",
    "DEFAULT_LOCALE",
    "DefaultExtractor",
    "EmptyDocumentError",
    "EmptyInputError",
    "EnrichedSessionState",
    "ExtractedText",
    "ExtractionError",
    "Extractor",
    "FORMAT_VERSION",
    "FileStreamer",
    "NotASessionError",
    "Occurrence",
    "SESSION_SUFFIX",
    "Segmenter",
    "SessionCodec",
    "SessionFormatError",
    "SessionIOError",
    "SessionProgress",
    "SessionState",
    "SortOrder",
    "Tokenizer",
    "UnknownWordError",
    "UnsupportedVersionError",
    "Word",
    "WordFilter",
    "WordUse",
    "WordhuntError",
    "analyse",
    "analyse_document",
    "create_new_session",
    "create_or_open_session",
    "export_words",
    "is_session",
    "load_excluded_words",
    "normalize_word",
    "read_session",
    "selected_uses",
    "show_all",
    "split_sentences",
    "tokenize",
    "write_session",
]

logging.getLogger(__name__).addHandler(logging.NullHandler())
