"""Tests for per-file conversion and batch isolation."""

from __future__ import annotations

from pathlib import Path

import pytest
from pypdf import PdfReader

from payslips.config import load_config
from payslips.io import Background
from payslips.pipeline import (
    FileStatus,
    StageTimer,
    convert_batch,
    convert_file,
    output_path_for,
)
from payslips.utils.errors import FileReadError, MalformedInputError, NoRecordsFoundError


def test_output_path_appends_suffix(tmp_path: Path) -> None:
    assert output_path_for(tmp_path / "PSEAL075.001") == tmp_path / "PSEAL075.001.pdf"
    assert output_path_for("a/b.txt", ".PDF", tmp_path) == tmp_path / "b.txt.PDF"


def test_convert_file(sample_export: Path, background: Background) -> None:
    messages: list[str] = []
    outcome = convert_file(sample_export, background, load_config(env={}), progress=messages.append)
    assert outcome.status is FileStatus.OK
    assert outcome.records == 2
    assert outcome.output == sample_export.parent / "PSEAL075.001.pdf"
    reader = PdfReader(str(outcome.output))
    assert len(reader.pages) == 2
    assert "MURPHY" in reader.pages[0].extract_text()
    assert any("2 payslip(s)" in m for m in messages)


def test_convert_file_into_output_directory(
    sample_export: Path, background: Background, tmp_path: Path
) -> None:
    cfg = load_config(env={})
    cfg.output.directory = tmp_path / "pdfs" / "nested"
    outcome = convert_file(sample_export, background, cfg)
    assert outcome.output == tmp_path / "pdfs" / "nested" / "PSEAL075.001.pdf"
    assert outcome.output.exists()


def test_convert_file_errors(tmp_path: Path, background: Background) -> None:
    cfg = load_config(env={})
    with pytest.raises(FileReadError):
        convert_file(tmp_path / "missing.001", background, cfg)

    malformed = tmp_path / "malformed.001"
    malformed.write_text("no page marker at all\n")
    with pytest.raises(MalformedInputError):
        convert_file(malformed, background, cfg)

    single = tmp_path / "single.001"
    single.write_text("HEADER\n1 ONLY PAGE WITHOUT BREAK\n")
    with pytest.raises(NoRecordsFoundError):
        convert_file(single, background, cfg)
    assert not output_path_for(single).exists()


def test_batch_isolates_unreadable_file(
    tmp_path: Path, sample_text: str, background: Background
) -> None:
    first = tmp_path / "first.001"
    second = tmp_path / "second.001"
    third = tmp_path / "third.001"
    first.write_text(sample_text, encoding="latin-1")
    third.write_text(sample_text, encoding="latin-1")

    seen: list[Path] = []
    summary = convert_batch(
        [first, second, third],
        background,
        load_config(env={}),
        on_outcome=lambda o: seen.append(o.source),
    )

    assert seen == [first, second, third]
    assert [o.status for o in summary.outcomes] == [
        FileStatus.OK,
        FileStatus.FAILED,
        FileStatus.OK,
    ]
    assert "second.001" in summary.outcomes[1].message
    assert (tmp_path / "first.001.pdf").exists()
    assert not (tmp_path / "second.001.pdf").exists()
    assert (tmp_path / "third.001.pdf").exists()
    assert (summary.succeeded, summary.skipped, summary.failed) == (2, 0, 1)
    assert len(summary) == 3


def test_batch_reports_malformed_and_empty(tmp_path: Path, background: Background) -> None:
    malformed = tmp_path / "malformed.001"
    malformed.write_text("no page marker\n")
    empty = tmp_path / "empty.001"
    empty.write_text("HEADER\n1 ONE PAGE\n")
    directory = tmp_path / "a_directory"
    directory.mkdir()

    summary = convert_batch([malformed, empty, directory], background, load_config(env={}))
    assert [o.status for o in summary.outcomes] == [
        FileStatus.FAILED,
        FileStatus.SKIPPED,
        FileStatus.FAILED,
    ]
    assert "preamble" in summary.outcomes[0].message
    assert list(tmp_path.glob("*.pdf")) == []


def test_batch_refuses_to_overwrite_same_named_output(
    tmp_path: Path, sample_text: str, background: Background
) -> None:
    first = tmp_path / "a" / "PSEAL075.001"
    second = tmp_path / "b" / "PSEAL075.001"
    for path in (first, second):
        path.parent.mkdir()
        path.write_text(sample_text, encoding="latin-1")
    cfg = load_config(env={})
    cfg.output.directory = tmp_path / "pdfs"

    summary = convert_batch([first, second, first], background, cfg)

    assert [o.status for o in summary.outcomes] == [
        FileStatus.OK,
        FileStatus.FAILED,
        FileStatus.OK,
    ]
    assert "already written" in summary.outcomes[1].message
    assert str(first.resolve()) in summary.outcomes[1].message
    assert [p.name for p in (tmp_path / "pdfs").iterdir()] == ["PSEAL075.001.pdf"]


def test_stage_timer_measures_elapsed_time() -> None:
    with StageTimer("segment") as timer:
        assert timer.elapsed_ms == 0.0
    assert timer.stage == "segment"
    assert timer.elapsed_ms >= 0.0
