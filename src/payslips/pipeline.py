"""Per-file conversion and batch orchestration.

:func:`convert_file` runs one export through the whole pipeline:
read, sanitize, segment and render.  :func:`convert_batch` does so for many
files in order.  Failures are isolated per file: any error while converting
one export is recorded in its :class:`FileOutcome` and the batch moves on.
The background image is loaded by the caller and shared by every file.
"""

from __future__ import annotations

import os
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from time import perf_counter

from .config import ConfigModel
from .io import Background, read_document, write_pdf
from .preprocess.sanitizer import sanitize
from .preprocess.segmenter import build_record_set
from .utils.errors import NoRecordsFoundError, PayslipError, RenderError
from .utils.logging import get_logger

logger = get_logger(__name__)

ProgressFunc = Callable[[str], None]


class FileStatus(Enum):
    """Result category for one input file."""

    OK = "ok"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(slots=True)
class FileOutcome:
    """What happened to one input file."""

    source: Path
    status: FileStatus
    output: Path | None = None
    records: int = 0
    message: str = ""


@dataclass(slots=True)
class BatchSummary:
    """Outcomes of a batch in input order."""

    outcomes: list[FileOutcome] = field(default_factory=list)

    def _count(self, status: FileStatus) -> int:
        return sum(1 for o in self.outcomes if o.status is status)

    @property
    def succeeded(self) -> int:
        return self._count(FileStatus.OK)

    @property
    def skipped(self) -> int:
        return self._count(FileStatus.SKIPPED)

    @property
    def failed(self) -> int:
        return self._count(FileStatus.FAILED)

    def __len__(self) -> int:
        return len(self.outcomes)


@dataclass(slots=True)
class StageTimer:
    """Wall-clock duration of one pipeline stage, logged when the stage ends."""

    stage: str
    started: float = 0.0
    elapsed_ms: float = 0.0

    def __enter__(self) -> "StageTimer":
        self.started = perf_counter()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.elapsed_ms = (perf_counter() - self.started) * 1000.0
        logger.debug("Stage %s finished in %.1f ms", self.stage, self.elapsed_ms)


def _quiet(_msg: str) -> None:
    pass


def output_path_for(
    source: str | os.PathLike[str],
    suffix: str = ".pdf",
    directory: str | os.PathLike[str] | None = None,
) -> Path:
    """Return the PDF path for ``source``.

    The suffix is appended to the full file name (``PSEAL075.001`` becomes
    ``PSEAL075.001.pdf``).  Without ``directory`` the PDF is placed next to
    its input.
    """

    src = Path(source)
    parent = Path(directory) if directory is not None else src.parent
    return parent / (src.name + suffix)


def convert_file(
    source: str | os.PathLike[str],
    background: Background,
    cfg: ConfigModel,
    *,
    progress: ProgressFunc | None = None,
) -> FileOutcome:
    """Convert one export into a PDF and return its outcome.

    Raises
    ------
    FileReadError, MalformedInputError, NoRecordsFoundError, RenderError
        Propagated to the caller; :func:`convert_batch` records them.
    """

    emit = progress or _quiet
    src = Path(source)

    emit(f"Reading {src}")
    doc = read_document(src, encoding=cfg.input.encoding, errors=cfg.input.errors)

    with StageTimer("segment") as parse_timer:
        records = build_record_set(sanitize(doc.text), src)
    emit(f"Extracted {len(records)} payslip(s) in {parse_timer.elapsed_ms:.1f} ms")

    target = output_path_for(src, cfg.output.suffix, cfg.output.directory)
    if cfg.output.directory is not None:
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise RenderError(f"cannot create output directory {target.parent}: {exc}") from exc

    with StageTimer("render") as render_timer:
        write_pdf(records, target, background)
    emit(f"Rendered {target} in {render_timer.elapsed_ms:.1f} ms")

    return FileOutcome(source=src, status=FileStatus.OK, output=target, records=len(records))


def convert_batch(
    sources: Iterable[str | os.PathLike[str]],
    background: Background,
    cfg: ConfigModel,
    *,
    progress: ProgressFunc | None = None,
    on_outcome: Callable[[FileOutcome], None] | None = None,
) -> BatchSummary:
    """Convert ``sources`` one after another, isolating failures per file.

    Two inputs that map to the same PDF (same file name with ``--out-dir``)
    never overwrite each other: the later one is reported as failed.
    """

    summary = BatchSummary()
    # resolved output path -> resolved input that produced it
    produced: dict[Path, Path] = {}
    for source in sources:
        src = Path(source)
        target = output_path_for(src, cfg.output.suffix, cfg.output.directory).resolve()
        try:
            owner = produced.get(target)
            if owner is not None and owner != src.resolve():
                raise RenderError(f"{target} was already written for {owner} in this batch")
            outcome = convert_file(src, background, cfg, progress=progress)
        except NoRecordsFoundError as exc:
            logger.warning("Skipping %s: %s", src, exc)
            outcome = FileOutcome(source=src, status=FileStatus.SKIPPED, message=str(exc))
        except PayslipError as exc:
            logger.error("Failed to convert %s: %s", src, exc)
            outcome = FileOutcome(source=src, status=FileStatus.FAILED, message=str(exc))
        except Exception as exc:
            logger.exception("Unexpected error while converting %s", src)
            outcome = FileOutcome(
                source=src, status=FileStatus.FAILED, message=f"{type(exc).__name__}: {exc}"
            )
        if outcome.status is FileStatus.OK:
            produced[target] = src.resolve()
        summary.outcomes.append(outcome)
        if on_outcome is not None:
            on_outcome(outcome)
    return summary


__all__ = [
    "BatchSummary",
    "FileOutcome",
    "FileStatus",
    "StageTimer",
    "convert_batch",
    "convert_file",
    "output_path_for",
]
