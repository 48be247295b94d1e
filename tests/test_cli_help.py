from __future__ import annotations

import pytest
from typer.testing import CliRunner

from payslips import __version__
from payslips.cli import app


@pytest.mark.parametrize("args", [[], ["help"], ["HELP"], ["Help", "ignored.001"]])
def test_help_keyword(args: list[str]) -> None:
    runner = CliRunner()
    result = runner.invoke(app, args)
    assert result.exit_code == 0
    assert "Enables the conversion of PCL formatted documents to PDF documents." in result.stdout
    assert "Usage: payslips" in result.stdout


@pytest.mark.parametrize("keyword", ["version", "VERSION"])
def test_version_keyword(keyword: str) -> None:
    runner = CliRunner()
    result = runner.invoke(app, [keyword])
    assert result.exit_code == 0
    assert f"NGA Dublin PCL to PDF converter, v{__version__}" in result.stdout
    assert "By Paul Hitz" in result.stdout


def test_option_help() -> None:
    runner = CliRunner()
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    assert "--config" in result.stdout
    assert "--out-dir" in result.stdout
    assert "--background" in result.stdout
