"""Shared fixtures for wordhunt tests."""

import pytest

import wordhunt

HUCK_FINN = (
    "It was after sun-up now, but we went right on and didn't tie up. "
    "The king and the duke turned out by and by looking pretty rusty. "
    "After breakfast the king he took a seat on the corner of the raft. "
    "When he had got it pretty good him and the duke begun to practice it "
    "together."
)


@pytest.fixture
def analysis():
    """Analysis of the two-sentence cat/dog document."""
    sentences = wordhunt.split_sentences("The cat sat. The dog ran.")
    return wordhunt.analyse(sentences, "pets.txt")


@pytest.fixture
def session(analysis):
    return wordhunt.SessionState.new(analysis)


@pytest.fixture
def huck_session():
    sentences = wordhunt.split_sentences(HUCK_FINN)
    return wordhunt.SessionState.new(wordhunt.analyse(sentences, "huck.txt"), name="Huck")


@pytest.fixture
def document(tmp_path):
    """A plain-text document on disk."""
    path = tmp_path / "book.txt"
    path.write_text(HUCK_FINN, encoding="utf-8")
    return path
