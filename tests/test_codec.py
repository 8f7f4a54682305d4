"""Tests for session file encoding, detection and version handling."""

import hashlib
import io
import os
import stat

import msgpack
import pytest

from wordhunt._codec import (
    FORMAT_VERSION,
    MAGIC,
    SessionCodec,
    dumps,
    is_session,
    loads,
    read_session,
    write_session,
)
from wordhunt._errors import (
    CorruptSessionError,
    NotASessionError,
    SessionFormatError,
    SessionIOError,
    UnsupportedVersionError,
)
from wordhunt._session import SessionState
from wordhunt._types import Classification, Word


def _envelope(payload, version=FORMAT_VERSION, checksum=None):
    packed = msgpack.packb(payload, use_bin_type=True)
    return MAGIC + msgpack.packb({
        "format": version,
        "sha256": checksum or hashlib.sha256(packed).hexdigest(),
        "payload": packed,
    }, use_bin_type=True)


def _assert_same(a, b):
    assert a == b
    assert a.name == b.name
    assert a.analysis.source_name == b.analysis.source_name
    assert [u.word.display for u in a.analysis.ordered_uses] == [
        u.word.display for u in b.analysis.ordered_uses
    ]
    assert [u.occurrences for u in a.analysis.ordered_uses] == [
        u.occurrences for u in b.analysis.ordered_uses
    ]
    assert a.classifications == b.classifications


def test_round_trip_fresh(session, tmp_path):
    path = tmp_path / "pets.wordy"
    write_session(session, path)
    _assert_same(read_session(path), session)


def test_round_trip_with_classifications(huck_session, tmp_path):
    huck_session.classify("king", Classification.KNOWN)
    huck_session.classify("rusty", Classification.UNKNOWN)
    huck_session.classify("didn't", Classification.STARRED)
    huck_session.rename("Huck, chapter 20")
    path = tmp_path / "huck.wordy"
    write_session(huck_session, str(path))
    loaded = read_session(str(path))
    _assert_same(loaded, huck_session)
    assert loaded.classification_of("rusty") is Classification.UNKNOWN


def test_round_trip_bytes(huck_session):
    _assert_same(loads(dumps(huck_session)), huck_session)


def test_round_trip_file_objects(session):
    buffer = io.BytesIO()
    write_session(session, buffer)
    buffer.seek(0)
    _assert_same(read_session(buffer), session)


def test_round_trip_preserves_unicode(tmp_path):
    from wordhunt import analyse

    state = SessionState.new(analyse(["Le café était fermé.", "我很好。"], "mixed.txt"))
    state.classify("CAFÉ", Classification.STARRED)
    path = tmp_path / "mixed.wordy"
    write_session(state, path)
    _assert_same(read_session(path), state)


def test_file_starts_with_marker(session, tmp_path):
    path = tmp_path / "pets.wordy"
    SessionCodec.write(session, path)
    assert path.read_bytes().startswith(MAGIC)
    assert is_session(path)
    assert SessionCodec.detect(path)


def test_plain_text_is_not_a_session(tmp_path):
    path = tmp_path / "book.txt"
    path.write_text("The cat sat. The dog ran.", encoding="utf-8")
    assert not is_session(path)
    with pytest.raises(NotASessionError):
        read_session(path)


def test_empty_file_is_not_a_session(tmp_path):
    path = tmp_path / "empty.wordy"
    path.write_bytes(b"")
    with pytest.raises(NotASessionError):
        read_session(path)


def test_raw_msgpack_is_not_a_session(session):
    with pytest.raises(NotASessionError):
        loads(msgpack.packb({"name": "x"}))


def test_marker_check_leaves_stream_position(session):
    buffer = io.BytesIO(dumps(session))
    assert is_session(buffer)
    assert buffer.tell() == 0


def test_missing_file(tmp_path):
    with pytest.raises(SessionIOError):
        read_session(tmp_path / "nope.wordy")


def test_write_to_missing_directory(session, tmp_path):
    with pytest.raises(SessionIOError):
        write_session(session, tmp_path / "missing" / "pets.wordy")


def test_write_replaces_existing_file(session, huck_session, tmp_path):
    path = tmp_path / "s.wordy"
    write_session(huck_session, path)
    write_session(session, path)
    _assert_same(read_session(path), session)
    assert [p.name for p in tmp_path.iterdir()] == ["s.wordy"]


def test_truncated_file_is_corrupt(session):
    data = dumps(session)
    with pytest.raises(CorruptSessionError):
        loads(data[: len(data) // 2])


def test_marker_only_is_corrupt():
    with pytest.raises(CorruptSessionError):
        loads(MAGIC)


def test_checksum_mismatch(session):
    """Tampered payload should raise CorruptSessionError."""
    data = _envelope(
        {"name": "x", "source": "x", "sentences": {}, "words": [], "classifications": {}},
        checksum="0" * 64,
    )
    with pytest.raises(CorruptSessionError, match="Checksum mismatch"):
        loads(data)


def test_future_version(session):
    """Newer layouts should raise UnsupportedVersionError."""
    data = _envelope({"anything": True}, version=99)
    with pytest.raises(UnsupportedVersionError):
        loads(data)


def test_missing_version():
    data = MAGIC + msgpack.packb({"payload": b"", "sha256": ""}, use_bin_type=True)
    with pytest.raises(UnsupportedVersionError):
        loads(data)


def test_format_errors_share_a_base():
    for error in (NotASessionError, CorruptSessionError, UnsupportedVersionError):
        assert issubclass(error, SessionFormatError)


def test_missing_fields_are_corrupt():
    with pytest.raises(CorruptSessionError):
        loads(_envelope({"name": "x"}))


def test_dangling_sentence_reference_is_corrupt():
    payload = {
        "name": "x", "source": "x.txt",
        "sentences": {0: "Hello."},
        "words": [["hello", "Hello", [0, 5]]],
        "classifications": {},
    }
    with pytest.raises(CorruptSessionError):
        loads(_envelope(payload))


def test_classification_for_absent_word_is_corrupt():
    payload = {
        "name": "x", "source": "x.txt",
        "sentences": {0: "Hello."},
        "words": [["hello", "Hello", [0]]],
        "classifications": {"goodbye": "known"},
    }
    with pytest.raises(CorruptSessionError):
        loads(_envelope(payload))


def test_bad_classification_value_is_corrupt():
    payload = {
        "name": "x", "source": "x.txt",
        "sentences": {0: "Hello."},
        "words": [["hello", "Hello", [0]]],
        "classifications": {"hello": "maybe"},
    }
    with pytest.raises(CorruptSessionError):
        loads(_envelope(payload))


@pytest.mark.parametrize("version", [0, 2])
def test_other_formats_are_unsupported(version):
    payload = {
        "name": "x", "source": "x.txt",
        "sentences": {0: "Hello."},
        "words": [["hello", "Hello", [0]]],
        "classifications": {},
    }
    assert loads(_envelope(payload, version=FORMAT_VERSION)).name == "x"
    with pytest.raises(UnsupportedVersionError, match=f"format {version}"):
        loads(_envelope(payload, version=version))


def test_string_classification_is_saved(session):
    session.classify("cat", "known")
    buffer = io.BytesIO()
    write_session(session, buffer)
    buffer.seek(0)
    assert read_session(buffer).classification_of("cat") is Classification.KNOWN


posix_only = pytest.mark.skipif(os.name != "posix", reason="POSIX file names and modes")


@posix_only
def test_undecodable_file_name_round_trips(tmp_path):
    from wordhunt import create_new_session

    source = os.fsdecode(b"caf\xe9.txt")
    document = tmp_path / source
    document.write_text("The cat sat.", encoding="utf-8")
    state = create_new_session(document)
    assert state.analysis.source_name == source

    path = tmp_path / "cafe.wordy"
    write_session(state, path)
    loaded = read_session(path)
    assert loaded.name == source
    assert loaded.analysis.source_name == source
    _assert_same(loaded, state)


def test_unencodable_name_is_io_error(session):
    session.rename("broken \ud800 name")
    with pytest.raises(SessionIOError):
        write_session(session, io.BytesIO())


@posix_only
def test_new_file_mode_follows_umask(session, tmp_path):
    path = tmp_path / "pets.wordy"
    previous = os.umask(0o022)
    try:
        write_session(session, path)
    finally:
        os.umask(previous)
    assert stat.S_IMODE(path.stat().st_mode) == 0o644


@posix_only
def test_replaced_file_keeps_its_mode(session, huck_session, tmp_path):
    path = tmp_path / "huck.wordy"
    write_session(huck_session, path)
    os.chmod(path, 0o640)
    write_session(session, path)
    assert stat.S_IMODE(path.stat().st_mode) == 0o640
    _assert_same(read_session(path), session)
