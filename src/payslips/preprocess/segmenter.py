"""Splitting of sanitized text into payslip records.

Each page of the stream starts with three line breaks followed by the carriage
control digit ``1``.  :func:`segment` performs a literal split on that
delimiter and drops the final fragment, which is whatever trails the last page
break (usually a blank remainder).  The fragment is discarded without being
inspected.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Final, List

from ..model import Record, RecordSet
from ..utils.errors import NoRecordsFoundError
from ..utils.logging import get_logger

logger = get_logger(__name__)

RECORD_DELIMITER: Final = "\n\n\n1"


def segment(text: str) -> List[str]:
    """Split ``text`` into record bodies in order of appearance.

    The number of records equals the number of delimiter occurrences.  Text
    without any delimiter yields an empty list.
    """

    parts = text.split(RECORD_DELIMITER)
    return parts[:-1]


def build_record_set(text: str, source: str | os.PathLike[str]) -> RecordSet:
    """Segment ``text`` and wrap the bodies as :class:`Record` objects.

    Raises
    ------
    NoRecordsFoundError
        If the delimiter does not occur in ``text``.
    """

    bodies = segment(text)
    if not bodies:
        raise NoRecordsFoundError(f"no records found in {source}")
    logger.debug("Segmented %s into %d record(s)", source, len(bodies))
    records = tuple(Record(index=i, text=body) for i, body in enumerate(bodies))
    return RecordSet(source=Path(source), records=records)


__all__ = ["RECORD_DELIMITER", "segment", "build_record_set"]
