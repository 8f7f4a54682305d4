"""Document text extraction."""

from __future__ import annotations

import os
import zipfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

import docx
from docx.opc.exceptions import PackageNotFoundError

from ._errors import ExtractionError

_TEXT_ENCODINGS = ("utf-8-sig", "cp1252")


@dataclass(slots=True, frozen=True)
class ExtractedText:
    text: str
    metadata: dict[str, str] = field(default_factory=dict)


class Extractor(Protocol):
    def extract(self, path: str | os.PathLike[str]) -> ExtractedText:
        """Return the document's plain text.

        Blank text is returned as-is; only unreadable or unsupported
        input raises ExtractionError.
        """
        ...


def _decode(data: bytes, path: Path) -> tuple[str, str]:
    if b"\x00" in data:
        raise ExtractionError(f"Unsupported binary file '{path}'")
    for encoding in _TEXT_ENCODINGS:
        try:
            return data.decode(encoding), encoding
        except UnicodeDecodeError:
            continue
    return data.decode("latin-1"), "latin-1"


class DefaultExtractor:
    """Reads .docx files with python-docx and everything else as text."""

    __slots__ = ()

    def extract(self, path: str | os.PathLike[str]) -> ExtractedText:
        path = Path(path)
        if path.suffix.lower() == ".docx":
            return self._extract_docx(path)
        return self._extract_text(path)

    def _extract_text(self, path: Path) -> ExtractedText:
        try:
            with open(path, "rb") as f:
                data = f.read()
        except OSError as e:
            raise ExtractionError(f"Unable to read file '{path}'") from e
        text, encoding = _decode(data, path)
        return ExtractedText(text, {"format": "text", "encoding": encoding})

    def _extract_docx(self, path: Path) -> ExtractedText:
        try:
            document = docx.Document(str(path))
        except (PackageNotFoundError, OSError) as e:
            raise ExtractionError(f"Unable to read file '{path}'") from e
        except (zipfile.BadZipFile, KeyError, ValueError) as e:
            raise ExtractionError(f"Unable to parse document '{path}'") from e

        paragraphs = [p.text for p in document.paragraphs if p.text.strip()]
        metadata = {"format": "docx"}
        title = document.core_properties.title
        if title:
            metadata["title"] = title
        return ExtractedText("\n\n".join(paragraphs), metadata)
