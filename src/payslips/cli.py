"""Typer-based command line interface for the payslip converter.

``payslips FILE...`` converts each PCL text export into ``FILE.pdf``.  The
words ``help`` and ``version`` (any case) as the first argument print static
text instead; calling without arguments is the same as ``help``.  Files are
processed in order and a failing file never stops the batch: each input gets
one summary line on stdout, followed by a completion line.

Exit codes
----------
0 batch completed (individual files may have failed)
3 background image unavailable (nothing is converted)
4 configuration error
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

import typer
from pydantic import ValidationError

from . import __version__
from .config import ConfigModel, load_config
from .io import load_background
from .pipeline import FileOutcome, FileStatus, convert_batch
from .utils.errors import BackgroundUnavailableError
from .utils.logging import configure_logging

if not sys.stdout.isatty():  # pragma: no cover - CLI test context
    os.environ.setdefault("NO_COLOR", "1")
    os.environ.setdefault("RICH_DISABLE_NO_COLOR", "1")

HELP_TEXT = """\
Enables the conversion of PCL formatted documents to PDF documents.
Usage: payslips [OPTIONS] <PCL_FILE>...
example: payslips PSEAL075.001"""

VERSION_TEXT = f"""\
NGA Dublin PCL to PDF converter, v{__version__}
By Paul Hitz"""

app = typer.Typer(
    name="payslips",
    help="Convert PCL payslip exports into PDF documents, one payslip per page.",
    add_completion=False,
)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _safe_exit(code: int, msg: str | None = None) -> None:
    """Exit the CLI with ``code`` emitting ``msg`` to stderr if provided."""

    if msg:
        typer.echo(msg, err=True)
    raise typer.Exit(code)


def _apply_overrides(
    cfg: ConfigModel,
    *,
    out_dir: Path | None,
    background: Path | None,
) -> ConfigModel:
    """Return a copy of ``cfg`` with CLI overrides applied."""

    new_cfg = cfg.model_copy(deep=True)
    if out_dir is not None:
        new_cfg.output.directory = out_dir
    if background is not None:
        new_cfg.background.path = background
    return new_cfg


def _report(outcome: FileOutcome) -> None:
    if outcome.status is FileStatus.OK:
        typer.echo(f"OK {outcome.source} -> {outcome.output} ({outcome.records} records)")
    elif outcome.status is FileStatus.SKIPPED:
        typer.echo(f"SKIPPED {outcome.source}: {outcome.message}")
    else:
        typer.echo(f"FAILED {outcome.source}: {outcome.message}")


@app.command()
def main(
    files: Optional[List[str]] = typer.Argument(  # noqa: B008
        None, help="PCL text exports to convert, or 'help' / 'version'"
    ),
    config_path: Optional[Path] = typer.Option(  # noqa: B008
        None, "--config", help="YAML config to override defaults"
    ),
    out_dir: Optional[Path] = typer.Option(  # noqa: B008
        None, "--out-dir", help="Write PDFs here instead of next to each input"
    ),
    background_path: Optional[Path] = typer.Option(  # noqa: B008
        None, "--background", help="Use this image instead of the bundled background"
    ),
    verbose: bool = typer.Option(  # noqa: B008
        False, "--verbose", "-v", help="Emit progress messages to stderr"
    ),
) -> None:
    """Convert each FILE into FILE.pdf with one payslip per page."""

    if not files or files[0].lower() == "help":
        typer.echo(HELP_TEXT)
        return
    if files[0].lower() == "version":
        typer.echo(VERSION_TEXT)
        return

    try:
        cfg = load_config(config_path)
    except (ValidationError, Exception) as exc:  # pragma: no cover - diverse
        _safe_exit(4, str(exc).splitlines()[0])
    cfg = _apply_overrides(cfg, out_dir=out_dir, background=background_path)

    configure_logging(logging.INFO if verbose else cfg.logging.level)
    if verbose:
        typer.echo("Loaded config", err=True)

    try:
        background = load_background(cfg.background.path)
    except BackgroundUnavailableError as exc:
        _safe_exit(3, str(exc))

    def progress(msg: str) -> None:
        if verbose:
            typer.echo(msg, err=True)

    summary = convert_batch(files, background, cfg, progress=progress, on_outcome=_report)
    typer.echo(
        f"Processed {len(summary)} file(s): {summary.succeeded} succeeded, "
        f"{summary.skipped} skipped, {summary.failed} failed."
    )
