"""Tests for FileStreamer: analysis, new sessions and open-or-create."""

import logging

import pytest

import wordhunt
from wordhunt._codec import MAGIC, dumps, write_session
from wordhunt._errors import (
    CorruptSessionError,
    EmptyDocumentError,
    ExtractionError,
    UnsupportedVersionError,
)
from wordhunt._extractor import ExtractedText
from wordhunt._streamer import FileStreamer
from wordhunt._types import Classification


class FakeExtractor:
    def __init__(self, text):
        self.text = text
        self.paths = []

    def extract(self, path):
        self.paths.append(path)
        return ExtractedText(self.text, {"format": "fake"})


class RecordingObserver:
    def __init__(self):
        self.calls = []

    def __call__(self, word_count, elapsed_millis, source_name):
        self.calls.append((word_count, elapsed_millis, source_name))


def test_lines(document):
    lines = FileStreamer().lines(document)
    assert len(lines) == 4
    assert lines[0] == "It was after sun-up now, but we went right on and didn't tie up."


def test_analyse_reports_to_observer(document):
    observer = RecordingObserver()
    result = FileStreamer(observer=observer).analyse(document)
    assert result.source_name == "book.txt"
    assert len(result) == 40
    ((count, elapsed, name),) = observer.calls
    assert count == 40
    assert elapsed >= 0
    assert name == "book.txt"


def test_default_observer_logs(document, caplog):
    with caplog.at_level(logging.INFO, logger="wordhunt"):
        FileStreamer().analyse(document)
    assert "Analysed text and found 40 words" in caplog.text
    assert "book.txt" in caplog.text


def test_scenario_through_extractor(tmp_path):
    streamer = FileStreamer(extractor=FakeExtractor("The cat sat. The dog ran."))
    result = streamer.analyse(tmp_path / "pets.pdf")
    assert [(u.word.display, u.count) for u in result.ordered_uses] == [
        ("The", 2), ("cat", 1), ("sat", 1), ("dog", 1), ("ran", 1),
    ]
    assert result.source_name == "pets.pdf"


@pytest.mark.parametrize("text", ["", "   ", "\n\n\t \r\n"])
def test_blank_document(tmp_path, text):
    observer = RecordingObserver()
    streamer = FileStreamer(extractor=FakeExtractor(text), observer=observer)
    with pytest.raises(EmptyDocumentError, match="No text in file"):
        streamer.create_new_session(tmp_path / "blank.txt")
    assert observer.calls == []


def test_control_characters_only_document(tmp_path):
    streamer = FileStreamer(extractor=FakeExtractor("\x00\x01\x02"))
    with pytest.raises(EmptyDocumentError):
        streamer.analyse(tmp_path / "junk.txt")


def test_whitespace_file_on_disk(tmp_path):
    path = tmp_path / "spaces.txt"
    path.write_text("   \n\n  ", encoding="utf-8")
    with pytest.raises(EmptyDocumentError):
        wordhunt.analyse_document(path)


def test_missing_document(tmp_path):
    with pytest.raises(ExtractionError):
        FileStreamer().analyse(tmp_path / "missing.txt")


def test_create_new_session(document):
    state = FileStreamer().create_new_session(document)
    assert state.name == "book.txt"
    assert state.classifications == {}
    assert len(state.analysis) == 40


def test_create_or_open_raw_document(document):
    state = wordhunt.create_or_open_session(document)
    assert state.name == "book.txt"
    assert all(
        state.classification_of(u.word) is Classification.UNCLASSIFIED
        for u in state.analysis.ordered_uses
    )


def test_create_or_open_saved_session(document, tmp_path):
    streamer = FileStreamer()
    state = streamer.create_new_session(document)
    state.classify("king", Classification.KNOWN)
    state.rename("Huck")
    path = tmp_path / "huck.wordy"
    streamer.save_session(state, path)

    extractor = FakeExtractor("should not be used")
    reopened = FileStreamer(extractor=extractor).create_or_open_session(path)
    assert reopened == state
    assert reopened.name == "Huck"
    assert extractor.paths == []


def test_session_file_with_any_extension(session, tmp_path):
    path = tmp_path / "pets.txt"
    write_session(session, path)
    assert wordhunt.create_or_open_session(path) == session


def test_corrupt_session_falls_back(tmp_path, caplog):
    path = tmp_path / "broken.wordy"
    path.write_bytes(MAGIC + b"The cat sat. The dog ran.")
    with caplog.at_level(logging.WARNING, logger="wordhunt"):
        state = FileStreamer().create_or_open_session(path)
    assert "Discarding unreadable session file" in caplog.text
    assert state.analysis.find("cat") is not None


def test_corrupt_session_strict(tmp_path):
    path = tmp_path / "broken.wordy"
    path.write_bytes(MAGIC + b"The cat sat. The dog ran.")
    with pytest.raises(CorruptSessionError):
        FileStreamer().create_or_open_session(path, strict=True)


def test_unsupported_version_strict(tmp_path):
    import msgpack

    path = tmp_path / "future.wordy"
    path.write_bytes(MAGIC + msgpack.packb({"format": 7, "sha256": "", "payload": b""}))
    with pytest.raises(UnsupportedVersionError):
        wordhunt.create_or_open_session(path, strict=True)


def test_strict_still_analyses_documents(document):
    state = FileStreamer().create_or_open_session(document, strict=True)
    assert len(state.analysis) == 40


def test_missing_file_is_extraction_error(tmp_path):
    with pytest.raises(ExtractionError):
        FileStreamer().create_or_open_session(tmp_path / "missing.txt")


def test_locale_changes_segmentation(tmp_path):
    text = "Er kam am 3. Oktober an. Dann ging er."
    english = FileStreamer(extractor=FakeExtractor(text), locale="en")
    german = FileStreamer(extractor=FakeExtractor(text), locale="de")
    assert len(english.lines(tmp_path / "x.txt")) == 3
    assert len(german.lines(tmp_path / "x.txt")) == 2


def test_reanalysis_is_deterministic(document):
    first = wordhunt.create_new_session(document)
    second = wordhunt.create_new_session(document)
    assert first == second
    assert dumps(first) == dumps(second)
