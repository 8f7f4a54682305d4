"""Export a selection of words as plain text."""

from __future__ import annotations

import os
from typing import IO, Iterable

from ._errors import SessionIOError
from ._session import SessionState
from ._types import Classification, WordUse


def selected_uses(
    state: SessionState,
    classifications: Iterable[Classification] = (Classification.UNKNOWN,),
) -> list[WordUse]:
    """Uses whose classification is one of ``classifications``, in analysis order."""
    wanted = frozenset(classifications)
    get = state.classifications.get
    return [
        use for use in state.analysis.ordered_uses
        if get(use.word, Classification.UNCLASSIFIED) in wanted
    ]


def export_words(
    state: SessionState,
    destination: str | os.PathLike[str] | IO[str],
    classifications: Iterable[Classification] = (Classification.UNKNOWN,),
    *,
    with_counts: bool = False,
) -> int:
    """Write one word per line; returns the number of words written."""
    if with_counts:
        lines = [f"{use.word.display}\t{use.count}\n" for use in selected_uses(state, classifications)]
    else:
        lines = [f"{use.word.display}\n" for use in selected_uses(state, classifications)]

    if isinstance(destination, (str, os.PathLike)):
        try:
            with open(destination, "w", encoding="utf-8") as f:
                f.writelines(lines)
        except OSError as e:
            raise SessionIOError(f"Unable to export to '{destination}'") from e
    else:
        destination.writelines(lines)
    return len(lines)
