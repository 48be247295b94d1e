"""Plain-text reader for printer stream exports.

:func:`read_text` loads a whole export into memory.  Line endings are
normalized: ``\\r\\n`` and lone ``\\r`` become ``\\n``, and every line,
including the last one, is terminated by ``\\n``.  The sanitizer and segmenter
only look for ``\\n`` based markers, so exports produced on Windows hosts parse
the same way as Unix ones.

Every failure to obtain the text (missing file, permissions, a directory path,
undecodable bytes) is reported as :class:`~payslips.utils.errors.FileReadError`.
"""

from __future__ import annotations

import os
from pathlib import Path

from ...model import RawDocument
from ...utils.errors import FileReadError

PathLikeStr = os.PathLike[str]


def read_text(
    path: str | PathLikeStr,
    *,
    encoding: str = "latin-1",
    errors: str = "strict",
) -> str:
    """Read ``path`` and return its normalized contents.

    Parameters
    ----------
    path:
        Path to the export on disk.
    encoding:
        Text encoding.  Defaults to ``"latin-1"`` which maps every byte, as
        the legacy exports are not UTF-8.
    errors:
        Error handling strategy passed to :func:`open`.

    Raises
    ------
    FileReadError
        If the file cannot be opened, read or decoded.
    """

    try:
        with open(path, "r", encoding=encoding, errors=errors, newline=None) as f:
            content = f.read()
    except (OSError, UnicodeDecodeError) as exc:
        raise FileReadError(f"cannot read {path}: {exc}") from exc
    if content and not content.endswith("\n"):
        content += "\n"
    return content


def read_document(
    path: str | PathLikeStr,
    *,
    encoding: str = "latin-1",
    errors: str = "strict",
) -> RawDocument:
    """Read ``path`` into a :class:`~payslips.model.RawDocument`."""

    return RawDocument(source=Path(path), text=read_text(path, encoding=encoding, errors=errors))


__all__ = ["read_text", "read_document"]
