"""Word keys to hide from review, gathered from earlier work."""

from __future__ import annotations

import logging
import os
from typing import Iterable

from ._codec import is_session, read_session
from ._extractor import DefaultExtractor, Extractor
from ._tokenizer import Tokenizer
from ._types import Classification

LOG = logging.getLogger(__name__)


def load_excluded_words(
    paths: Iterable[str | os.PathLike[str]],
    classifications: Iterable[Classification] = (Classification.KNOWN,),
    *,
    extractor: Extractor | None = None,
) -> frozenset[str]:
    """Collect word keys from saved sessions and word lists.

    A session file contributes the words it has classified as one of
    ``classifications``. Any other file is read as a word list: every
    word on it counts, so exports written with counts can be fed back in.

    Raises:
        ExtractionError: If a word list cannot be read.
        SessionFormatError: If a session file cannot be decoded.
        SessionIOError: If a file cannot be opened.
    """
    wanted = frozenset(classifications)
    extractor = extractor if extractor is not None else DefaultExtractor()
    tokenizer = Tokenizer()
    keys: set[str] = set()

    for path in paths:
        if is_session(path):
            state = read_session(path)
            found = {
                word.key for word, classification in state.classifications.items()
                if classification in wanted
            }
        else:
            text = extractor.extract(path).text
            found = {
                word.key
                for line in text.splitlines()
                for word in tokenizer.words(line)
            }
        LOG.debug("Excluding %d words from %s", len(found), path)
        keys |= found

    return frozenset(keys)
