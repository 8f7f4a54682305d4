"""Locale-aware regex sentence segmenter."""

from __future__ import annotations

import logging
import re
from functools import lru_cache
from typing import Iterator

from ._errors import EmptyInputError

LOG = logging.getLogger(__name__)

DEFAULT_LOCALE = "en"

# Non-whitespace C0/C1 control characters become plain spaces.
_CONTROL_RE = re.compile(r"[\x00-\x08\x0e-\x1b\x7f-\x84\x86-\x9f]")
_WS_RE = re.compile(r"\s+")
# A blank line (or a Unicode paragraph separator) always ends a sentence.
_PARAGRAPH_RE = re.compile(r"\n[^\S\n]*\n\s*|\u2029")
_NEXT_RE = re.compile(r"\s*(\S)")
_PREV_WORD_RE = re.compile(r"([\w.]+)$")

# Terminators that end a sentence even when no whitespace follows.
_WIDE_TERMINATORS = "\u3002\uff01\uff1f"
_BASE_TERMINATORS = ".!?\u2026" + _WIDE_TERMINATORS
_CLOSERS = "\"')]}\u2019\u201d\u00bb\u300d\u300f\uff09"

_LOCALE_TERMINATORS = {
    "hi": "\u0964\u0965",
    "ar": "\u061f",
    "fa": "\u061f",
    "ur": "\u061f\u06d4",
    "el": "\u037e;",
}

# Lowercased, without the trailing period.
_ABBREVIATIONS: dict[str, frozenset[str]] = {
    "en": frozenset({
        "mr", "mrs", "ms", "dr", "st", "jr", "sr", "prof", "gen", "sgt",
        "cpl", "pvt", "rev", "capt", "col", "lt", "hon", "inc", "ltd",
        "corp", "co", "vs", "etc", "no", "vol", "fig", "approx", "dept",
        "est", "e.g", "i.e", "cf", "al", "jan", "feb", "mar", "apr", "jun",
        "jul", "aug", "sep", "sept", "oct", "nov", "dec", "mt", "ft",
    }),
    "de": frozenset({
        "bzw", "ca", "d.h", "dr", "evtl", "ggf", "hr", "fr", "nr", "prof",
        "s", "sog", "str", "u.a", "usw", "vgl", "z.b", "z.t", "inkl", "bspw",
        "jh", "abs", "max", "min",
    }),
    "fr": frozenset({
        "m", "mm", "mme", "mlle", "dr", "pr", "st", "ste", "etc", "cf",
        "p.ex", "av", "bd", "env", "vol", "no", "chap",
    }),
    "es": frozenset({
        "sr", "sra", "srta", "dr", "dra", "ud", "uds", "etc", "pág", "núm",
        "aprox", "avda", "dto", "ej", "p.ej", "lic", "ing",
    }),
    "it": frozenset({
        "sig", "sigg", "sig.ra", "dott", "prof", "ing", "avv", "ecc", "pag",
        "es", "n", "cfr", "geom",
    }),
    "nl": frozenset({
        "dhr", "mevr", "mw", "dr", "prof", "ir", "ing", "bijv", "o.a",
        "enz", "nr", "blz", "d.w.z", "m.b.t",
    }),
    "pt": frozenset({
        "sr", "sra", "srta", "dr", "dra", "prof", "etc", "pág", "nº", "av",
        "ex", "p.ex", "eng",
    }),
}

# Locales where "3. Oktober" is an ordinal, not a sentence end.
_ORDINAL_PERIOD_LOCALES = frozenset({"de", "nl", "da", "no", "fi", "cs", "pl"})


def _language(locale: str) -> str:
    return locale.replace("-", "_").split("_", 1)[0].lower() or DEFAULT_LOCALE


class Segmenter:
    """Splits raw text into whitespace-normalized sentences."""

    __slots__ = ("_language", "_terminator_re", "_abbreviations", "_ordinals")

    def __init__(self, locale: str = DEFAULT_LOCALE) -> None:
        self._language = _language(locale)
        terminators = _BASE_TERMINATORS + _LOCALE_TERMINATORS.get(self._language, "")
        self._terminator_re = re.compile(
            "([" + re.escape(terminators) + "]+)([" + re.escape(_CLOSERS) + "]*)"
        )
        self._abbreviations = _ABBREVIATIONS.get(self._language, frozenset())
        self._ordinals = self._language in _ORDINAL_PERIOD_LOCALES

    @property
    def language(self) -> str:
        return self._language

    def segment(self, text: str) -> list[str]:
        """Split text into sentences.

        Raises:
            EmptyInputError: If the text holds nothing but whitespace and
                control characters.
        """
        text = _CONTROL_RE.sub(" ", text)
        if not text.strip():
            raise EmptyInputError("No text to segment")

        sentences: list[str] = []
        for paragraph in _PARAGRAPH_RE.split(text):
            start = 0
            for end in self._boundaries(paragraph):
                _emit(paragraph[start:end], sentences)
                start = end
            _emit(paragraph[start:], sentences)

        LOG.debug("Segmented %d characters into %d sentences", len(text), len(sentences))
        return sentences

    def _boundaries(self, text: str) -> Iterator[int]:
        for m in self._terminator_re.finditer(text):
            end = m.end()
            terminators = m.group(1)
            if end < len(text) and not text[end].isspace():
                if terminators[-1] in _WIDE_TERMINATORS:
                    yield end
                continue

            following = _NEXT_RE.match(text, end)
            if following is None:
                continue  # end of text
            if following.group(1).islower() and _is_period_run(terminators):
                continue
            if terminators == "." and self._is_abbreviation(text, m.start()):
                continue
            yield end

    def _is_abbreviation(self, text: str, period: int) -> bool:
        m = _PREV_WORD_RE.search(text, max(0, period - 40), period)
        if m is None:
            return False
        word = m.group(1)
        if len(word) == 1 and word.isupper():
            return True  # initial, e.g. "J. Smith"
        if self._ordinals and word.isdigit():
            return True
        return word.lower() in self._abbreviations


def _is_period_run(terminators: str) -> bool:
    return all(ch in ".\u2026" for ch in terminators)


def _emit(span: str, sentences: list[str]) -> None:
    sentence = _WS_RE.sub(" ", span).strip()
    if sentence:
        sentences.append(sentence)


@lru_cache(maxsize=None)
def _segmenter(locale: str) -> Segmenter:
    return Segmenter(locale)


def split_sentences(text: str, locale: str = DEFAULT_LOCALE) -> list[str]:
    """Split text into sentences using locale-specific regex heuristics."""
    return _segmenter(locale).segment(text)
