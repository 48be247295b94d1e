"""Removal of printer control codes and the stream preamble.

The :func:`sanitize` function turns the raw text of a PCL export into text the
segmenter can split.  It applies the following steps in order:

1. **Control-code blanking** – every ``H.RATE=`` marker together with the
   eight characters following it is replaced by the same number of spaces.
   The output is laid out by column, so the width must not change.
2. **Preamble removal** – everything up to the first ``"\\n1"`` marker, the
   marker itself and one further character is dropped.  This is the job
   header the printer emits before the first page.
3. **Boundary restoration** – a single ``"\\n"`` is prepended.

Output contract
---------------
The sanitized text always starts with ``"\\n"``.  The segmenter relies on this
boundary: the record delimiter begins with newlines, and the restored one
stands in for the line break consumed together with the preamble.

Example
-------

>>> sanitize("JOB\\n1 Pay\\nH.RATE=12345678 EUR\\n")
'\\nPay\\n                EUR\\n'
"""

from __future__ import annotations

import re
from typing import Final

from ..utils.errors import MalformedInputError
from ..utils.logging import get_logger

logger = get_logger(__name__)

CONTROL_CODE_MARKER: Final = "H.RATE="
CONTROL_CODE_ARG_WIDTH: Final = 8
PREAMBLE_MARKER: Final = "\n1"
# The marker plus the character following the "1".
PREAMBLE_SKIP: Final = len(PREAMBLE_MARKER) + 1

_CONTROL_CODE_RE: Final = re.compile(
    re.escape(CONTROL_CODE_MARKER) + ".{%d}" % CONTROL_CODE_ARG_WIDTH
)


def _blank(match: re.Match[str]) -> str:
    return " " * len(match.group(0))


def count_control_codes(text: str) -> int:
    """Return the number of control-code fragments in ``text``."""

    return sum(1 for _ in _CONTROL_CODE_RE.finditer(text))


def blank_control_codes(text: str) -> str:
    """Replace each control-code fragment with an equal-length run of spaces.

    Applying the function to its own output returns the text unchanged.
    """

    return _CONTROL_CODE_RE.sub(_blank, text)


def strip_preamble(text: str) -> str:
    """Drop the job header in front of the first page.

    Raises
    ------
    MalformedInputError
        If ``text`` has no ``"\\n1"`` marker, or ends before the character
        following it.
    """

    idx = text.find(PREAMBLE_MARKER)
    if idx < 0:
        raise MalformedInputError("preamble boundary marker not found")
    start = idx + PREAMBLE_SKIP
    if start > len(text):
        raise MalformedInputError(f"input ends inside the preamble marker at offset {idx}")
    return text[start:]


def sanitize(raw: str) -> str:
    """Return ``raw`` with control codes blanked and the preamble removed.

    The result always starts with ``"\\n"`` (see the module documentation).
    """

    logger.debug("Blanking %d control-code fragment(s)", count_control_codes(raw))
    text = blank_control_codes(raw)
    text = strip_preamble(text)
    return "\n" + text


__all__ = [
    "CONTROL_CODE_MARKER",
    "CONTROL_CODE_ARG_WIDTH",
    "PREAMBLE_MARKER",
    "blank_control_codes",
    "count_control_codes",
    "strip_preamble",
    "sanitize",
]
