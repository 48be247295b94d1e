"""Shared fixtures: a small but realistic export and the bundled background."""

from __future__ import annotations

from pathlib import Path

import pytest

from payslips.io import Background, load_background

# Job header, then two pages; the last page break is followed by the trailer.
SAMPLE_EXPORT = (
    "JOBHDR PSEAL075 RUN 101129\n"
    "1 EMPLOYEE  0001  MURPHY J\n"
    "   BASIC PAY   H.RATE=00001234   1,234.00\n"
    "\n"
    "\n"
    "1 EMPLOYEE  0002  KELLY A\n"
    "   BASIC PAY   H.RATE=00005678   2,345.00\n"
    "\n"
    "\n"
    "1 END OF RUN\n"
)


@pytest.fixture(scope="session")
def background() -> Background:
    return load_background()


@pytest.fixture()
def sample_export(tmp_path: Path) -> Path:
    path = tmp_path / "PSEAL075.001"
    path.write_text(SAMPLE_EXPORT, encoding="latin-1")
    return path


@pytest.fixture()
def sample_text() -> str:
    return SAMPLE_EXPORT
