from __future__ import annotations

from pathlib import Path

from pypdf import PdfReader
from typer.testing import CliRunner

from payslips.cli import app


def test_cli_converts_file(sample_export: Path) -> None:
    runner = CliRunner()
    result = runner.invoke(app, [str(sample_export)])
    assert result.exit_code == 0
    out_pdf = sample_export.parent / "PSEAL075.001.pdf"
    assert f"OK {sample_export} -> {out_pdf} (2 records)" in result.stdout
    assert "Processed 1 file(s): 1 succeeded, 0 skipped, 0 failed." in result.stdout
    assert len(PdfReader(str(out_pdf)).pages) == 2


def test_cli_batch_continues_after_failure(tmp_path: Path, sample_text: str) -> None:
    first = tmp_path / "first.001"
    missing = tmp_path / "missing.001"
    third = tmp_path / "third.001"
    first.write_text(sample_text, encoding="latin-1")
    third.write_text(sample_text, encoding="latin-1")

    runner = CliRunner()
    result = runner.invoke(app, [str(first), str(missing), str(third)])
    assert result.exit_code == 0
    assert f"FAILED {missing}" in result.stdout
    assert "Processed 3 file(s): 2 succeeded, 0 skipped, 1 failed." in result.stdout
    assert (tmp_path / "first.001.pdf").exists()
    assert (tmp_path / "third.001.pdf").exists()


def test_cli_skips_file_without_records(tmp_path: Path) -> None:
    single = tmp_path / "single.001"
    single.write_text("HEADER\n1 ONE PAGE\n")
    runner = CliRunner()
    result = runner.invoke(app, [str(single)])
    assert result.exit_code == 0
    assert f"SKIPPED {single}" in result.stdout
    assert not (tmp_path / "single.001.pdf").exists()


def test_cli_out_dir(sample_export: Path, tmp_path: Path) -> None:
    out_dir = tmp_path / "pdfs"
    runner = CliRunner()
    result = runner.invoke(app, ["--out-dir", str(out_dir), str(sample_export)])
    assert result.exit_code == 0
    assert (out_dir / "PSEAL075.001.pdf").exists()


def test_cli_verbose_progress(sample_export: Path) -> None:
    runner = CliRunner()
    result = runner.invoke(app, ["-v", str(sample_export)])
    assert result.exit_code == 0
    assert "Extracted 2 payslip(s)" in result.stderr
