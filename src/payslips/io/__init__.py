"""Reading printer stream exports and writing payslip PDFs."""

from __future__ import annotations

from .readers.txt_reader import read_document, read_text
from .writers.pdf_writer import Background, load_background, write_pdf

__all__ = [
    "Background",
    "load_background",
    "read_document",
    "read_text",
    "write_pdf",
]
