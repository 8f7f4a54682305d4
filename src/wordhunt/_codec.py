"""Session file encoding, format detection, and SHA-256 payload verification.

Layout::

    MAGIC | msgpack envelope {"format": int, "sha256": str, "payload": bytes}

The payload is itself msgpack. Each sentence is stored once and words
refer to it by index. Any other format number is rejected with
UnsupportedVersionError.
"""

from __future__ import annotations

import hashlib
import io
import logging
import os
import stat
import tempfile
from pathlib import Path
from typing import IO, Any, Union

import msgpack

from ._errors import (
    CorruptSessionError,
    NotASessionError,
    SessionIOError,
    UnknownWordError,
    UnsupportedVersionError,
)
from ._session import SessionState
from ._types import AnalysisResult, Classification, Occurrence, Word, WordUse

LOG = logging.getLogger(__name__)

MAGIC = b"\x89WHSESS\n"
FORMAT_VERSION = 1
SESSION_SUFFIX = ".wordy"

# Strings from undecodable file names carry lone surrogates.
_UNICODE_ERRORS = "surrogateescape"

Source = Union[str, "os.PathLike[str]", IO[bytes]]


def _sha256(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


def _describe(source: Any) -> str:
    if isinstance(source, (str, os.PathLike)):
        return str(source)
    return getattr(source, "name", repr(source))


# -- Encoding --


def _encode_payload(state: SessionState) -> dict[str, Any]:
    sentences: dict[int, str] = {}
    words: list[list[Any]] = []
    for use in state.analysis.ordered_uses:
        indices = []
        for occurrence in use.occurrences:
            sentences[occurrence.sentence_index] = occurrence.sentence
            indices.append(occurrence.sentence_index)
        words.append([use.word.key, use.word.display, indices])

    return {
        "name": state.name,
        "source": state.analysis.source_name,
        "sentences": dict(sorted(sentences.items())),
        "words": words,
        "classifications": {
            word.key: classification.value
            for word, classification in state.classifications.items()
        },
    }


def dumps(state: SessionState) -> bytes:
    """Encode a session to bytes.

    Names taken from undecodable file names keep their escaped bytes.
    """
    payload = msgpack.packb(
        _encode_payload(state), use_bin_type=True, unicode_errors=_UNICODE_ERRORS,
    )
    envelope = msgpack.packb(
        {"format": FORMAT_VERSION, "sha256": _sha256(payload), "payload": payload},
        use_bin_type=True,
    )
    return MAGIC + envelope


def _target_mode(path: Path) -> int:
    """Mode of the file being replaced, else the umask default."""
    try:
        return stat.S_IMODE(os.stat(path).st_mode)
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask


def write_session(state: SessionState, destination: Source) -> None:
    """Write a session to a path or a binary file object.

    Paths are written through a sibling temp file and renamed into place,
    so an existing session is never left half-written.

    Raises:
        SessionIOError: If the file cannot be written.
    """
    try:
        data = dumps(state)
    except UnicodeEncodeError as e:
        raise SessionIOError(
            f"Unable to encode session '{_describe(destination)}': {e}"
        ) from e
    if not isinstance(destination, (str, os.PathLike)):
        try:
            destination.write(data)
        except OSError as e:
            raise SessionIOError(f"Unable to save session '{_describe(destination)}'") from e
        return

    path = Path(destination)
    tmp_path = None
    try:
        fd, tmp_path = tempfile.mkstemp(dir=path.parent, prefix=path.name, suffix=".tmp")
        with os.fdopen(fd, "wb") as f:
            f.write(data)
        os.chmod(tmp_path, _target_mode(path))
        os.replace(tmp_path, path)
    except OSError as e:
        if tmp_path is not None and os.path.exists(tmp_path):
            os.unlink(tmp_path)
        raise SessionIOError(f"Unable to save session '{path}'") from e
    LOG.debug("Saved session %r (%d words) to %s", state.name, len(state.analysis), path)


# -- Decoding --


def _read_bytes(source: Source) -> bytes:
    try:
        if isinstance(source, (str, os.PathLike)):
            with open(source, "rb") as f:
                return f.read()
        return source.read()
    except OSError as e:
        raise SessionIOError(f"Unable to read file '{_describe(source)}'") from e


def _has_marker(source: Source) -> bool:
    try:
        if isinstance(source, (str, os.PathLike)):
            with open(source, "rb") as f:
                return f.read(len(MAGIC)) == MAGIC
        head = source.read(len(MAGIC))
        source.seek(-len(head), io.SEEK_CUR)
        return head == MAGIC
    except OSError as e:
        raise SessionIOError(f"Unable to read file '{_describe(source)}'") from e


def _unpack(data: bytes, what: str, name: str) -> Any:
    try:
        return msgpack.unpackb(
            data, raw=False, strict_map_key=False, unicode_errors=_UNICODE_ERRORS,
        )
    except (ValueError, TypeError, msgpack.UnpackException) as e:
        raise CorruptSessionError(f"Session file '{name}' has an unreadable {what}") from e


def _open_envelope(data: bytes, name: str) -> Any:
    if not data.startswith(MAGIC):
        raise NotASessionError(f"'{name}' is not a session file")

    envelope = _unpack(data[len(MAGIC):], "header", name)
    if not isinstance(envelope, dict):
        raise CorruptSessionError(f"Session file '{name}' has an unreadable header")

    version = envelope.get("format")
    if version != FORMAT_VERSION:
        raise UnsupportedVersionError(
            f"Session file '{name}' uses format {version!r}, "
            f"expected {FORMAT_VERSION}"
        )

    payload = envelope.get("payload")
    expected = envelope.get("sha256")
    if not isinstance(payload, bytes) or not isinstance(expected, str):
        raise CorruptSessionError(f"Session file '{name}' is missing its payload")
    actual = _sha256(payload)
    if actual != expected:
        raise CorruptSessionError(
            f"Checksum mismatch for session '{name}': "
            f"expected {expected[:16]}..., got {actual[:16]}..."
        )

    return _unpack(payload, "payload", name)


def _decode(payload: dict[str, Any]) -> SessionState:
    sentences: dict[int, str] = payload["sentences"]
    uses = []
    for key, display, indices in payload["words"]:
        occurrences = tuple(Occurrence(i, sentences[i]) for i in indices)
        uses.append(WordUse(Word(key, display), len(occurrences), occurrences))

    analysis = AnalysisResult(source_name=payload["source"], ordered_uses=tuple(uses))
    classifications = {
        Word(key, key): Classification(value)
        for key, value in payload["classifications"].items()
    }
    return SessionState(
        name=payload["name"], analysis=analysis, classifications=classifications,
    )


def loads(data: bytes, name: str = "<bytes>") -> SessionState:
    """Decode a session from bytes.

    Raises:
        NotASessionError: If the data does not start with the session marker.
        UnsupportedVersionError: If the format version is not readable.
        CorruptSessionError: If the contents are damaged or inconsistent.
    """
    payload = _open_envelope(data, name)
    try:
        return _decode(payload)
    except (
        AttributeError, KeyError, IndexError, TypeError, ValueError,
        UnknownWordError,
    ) as e:
        raise CorruptSessionError(f"Session file '{name}' is inconsistent: {e}") from e


def read_session(source: Source) -> SessionState:
    """Read a session from a path or a binary file object.

    The marker is checked before anything else is parsed, so arbitrary
    documents fail fast with NotASessionError.

    Raises:
        NotASessionError, CorruptSessionError, UnsupportedVersionError,
        SessionIOError
    """
    name = _describe(source)
    if not _has_marker(source):
        raise NotASessionError(f"'{name}' is not a session file")
    return loads(_read_bytes(source), name)


def is_session(source: Source) -> bool:
    """True if the source starts with the session marker."""
    return _has_marker(source)


class SessionCodec:
    """Namespace for the session file operations."""

    MAGIC = MAGIC
    FORMAT_VERSION = FORMAT_VERSION

    write = staticmethod(write_session)
    read = staticmethod(read_session)
    detect = staticmethod(is_session)
    dumps = staticmethod(dumps)
    loads = staticmethod(loads)
