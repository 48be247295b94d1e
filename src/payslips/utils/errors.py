"""Typed exceptions raised while converting payslip exports.

Every per-file failure derives from :class:`PayslipError` so the batch loop can
report it and move on.  :class:`BackgroundUnavailableError` is the one
condition that stops a whole run, since every page needs the background.
"""


class PayslipError(Exception):
    """Base class for all conversion errors."""


class FileReadError(PayslipError, OSError):
    """Raised when an input file is missing, unreadable or cannot be decoded."""


class MalformedInputError(PayslipError, ValueError):
    """Raised when the preamble boundary marker cannot be located."""


class NoRecordsFoundError(PayslipError, ValueError):
    """Raised when segmentation yields no records."""


class RenderError(PayslipError):
    """Raised when the PDF cannot be produced."""


class BackgroundUnavailableError(RenderError):
    """Raised when the shared background image cannot be loaded."""
