"""Logging utilities.

All modules obtain their logger through :func:`get_logger` so records end up
under the ``payslips`` namespace.  :func:`configure_logging` attaches a single
stderr handler to that namespace and may be called repeatedly (for example
once per CLI invocation) without stacking handlers.
"""

from __future__ import annotations

import logging
import sys

ROOT_LOGGER_NAME = "payslips"

_FORMAT = "%(levelname)s %(name)s: %(message)s"


def get_logger(name: str) -> logging.Logger:
    """Return a logger nested under the package namespace."""

    if name == ROOT_LOGGER_NAME or name.startswith(ROOT_LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def configure_logging(level: int | str = logging.WARNING) -> logging.Logger:
    """Configure the package logger with ``level`` and return it."""

    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.WARNING

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(level)
    for handler in logger.handlers:
        if getattr(handler, "_payslips_handler", False):
            # Rebind in case sys.stderr was swapped since the last call.
            handler.stream = sys.stderr  # type: ignore[attr-defined]
            break
    else:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(_FORMAT))
        handler._payslips_handler = True  # type: ignore[attr-defined]
        logger.addHandler(handler)
    return logger


__all__ = ["ROOT_LOGGER_NAME", "get_logger", "configure_logging"]
