"""Wordhunt error types."""


class WordhuntError(Exception):
    """Base error for all wordhunt failures."""


class EmptyInputError(WordhuntError):
    """Segmentation found no text at all."""


class EmptyDocumentError(WordhuntError):
    """The extractor returned blank text for a document."""


class ExtractionError(WordhuntError):
    """A source document could not be read or is not supported."""


class UnknownWordError(WordhuntError, KeyError):
    """A word is not present in the analysis (or in the current view)."""

    def __str__(self) -> str:
        return Exception.__str__(self)


class SessionIOError(WordhuntError):
    """Reading or writing a session file failed at the OS level."""


class SessionFormatError(WordhuntError):
    """Base error for session files that cannot be decoded."""


class NotASessionError(SessionFormatError):
    """The input does not start with the session file marker."""


class CorruptSessionError(SessionFormatError):
    """The input carries the session marker but its contents are damaged."""


class UnsupportedVersionError(SessionFormatError):
    """The session file uses a layout this version cannot read."""
