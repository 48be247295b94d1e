"""Core data model shared by the pipeline stages.

A :class:`RawDocument` is read from disk once and never modified.  The
sanitizer derives a plain string from it, and the segmenter turns that string
into a :class:`RecordSet` whose order is the page order of the output PDF.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path


@dataclass(slots=True, frozen=True)
class RawDocument:
    """Unmodified text content of one input file."""

    source: Path
    text: str


@dataclass(slots=True, frozen=True)
class Record:
    """One payslip extracted from the stream.

    ``index`` is the 0-based position of the record in its source file.
    """

    index: int
    text: str


@dataclass(slots=True, frozen=True)
class RecordSet:
    """Ordered records belonging to one input file."""

    source: Path
    records: tuple[Record, ...]

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self) -> Iterator[Record]:
        return iter(self.records)

    def texts(self) -> list[str]:
        """Return the record bodies in page order."""

        return [r.text for r in self.records]


__all__ = ["RawDocument", "Record", "RecordSet"]
