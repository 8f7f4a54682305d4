"""Word tokenization and identity normalization."""

from __future__ import annotations

import re
import unicodedata
from typing import Iterator

from ._types import Word

_HAN = r"\u3400-\u4dbf\u4e00-\u9fff\uf900-\ufaff"
# Letters and digits, minus Han ideographs (one token per ideograph).
_WORD_CHAR = rf"[^\W_{_HAN}]"
# Combining marks that Python's \w does not cover.
_MARK = (
    r"[\u0300-\u036f\u0483-\u0489\u0591-\u05c7\u0610-\u061a\u064b-\u065f"
    r"\u0670\u06d6-\u06ed\u0900-\u0903\u093a-\u094f\u0951-\u0957\u0962\u0963"
    r"\u0981-\u0983\u09bc-\u09d7\u0e31\u0e34-\u0e3a\u0e47-\u0e4e"
    r"\u1ab0-\u1aff\u1dc0-\u1dff\u20d0-\u20ff\u3099\u309a\ufe20-\ufe2f]"
)
_PART = rf"(?:{_WORD_CHAR}{_MARK}*)+"
# Single internal apostrophes and hyphens join parts: don't, sun-up.
_JOINERS = r"'\u2019\-\u2010"
_WORD_RE = re.compile(rf"[{_HAN}]|{_PART}(?:[{_JOINERS}]{_PART})*")


def normalize_word(token: str) -> str:
    """Identity key for a token: NFC, unified apostrophe, case-folded."""
    token = unicodedata.normalize("NFC", token).replace("\u2019", "'")
    return " ".join(token.casefold().split())


def _has_letter(token: str) -> bool:
    return any(ch.isalpha() for ch in token)


class Tokenizer:
    """Splits sentences into word tokens.

    Tokens keep their original casing. Pure numerals, punctuation and
    whitespace are dropped; no stemming is applied.
    """

    __slots__ = ()

    def tokenize(self, sentence: str) -> list[str]:
        sentence = unicodedata.normalize("NFC", sentence)
        return [
            m.group() for m in _WORD_RE.finditer(sentence)
            if _has_letter(m.group())
        ]

    def normalize(self, token: str) -> str:
        return normalize_word(token)

    def words(self, sentence: str) -> Iterator[Word]:
        """Yield a Word per token, display form as written."""
        for token in self.tokenize(sentence):
            yield Word(normalize_word(token), token)


_DEFAULT = Tokenizer()


def tokenize(sentence: str) -> list[str]:
    """Split one sentence into word tokens."""
    return _DEFAULT.tokenize(sentence)
