"""PDF payslip writer.

Every record becomes exactly one A4 page: the shared background image is
painted first, then the record text is drawn on top in 8pt Courier.  The
geometry below is fixed; records of any length start at the same position.

Layout
------
Text starts at ``x = PAGE_MARGIN + INDENT`` (91pt).  The first text line sits
one ``LEADING`` below the top margin and the record body begins after
``TOP_PADDING_LINES`` empty lines.  Lines wider than the text area are
wrapped at the last space that fits, or hard-broken if there is none.

Output files are written atomically.  The canvas renders into a temporary
file next to the destination which is renamed into place only after the
document has been finalized; on failure the temporary file is removed.

Writer states
-------------
``UNOPENED -> OPEN -> (BACKGROUND_DRAWN -> TEXT_DRAWN -> PAGE_ADVANCED)* ->
CLOSED``.  Any failure moves the writer to ``ABORTED``.
"""

from __future__ import annotations

import io
import os
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from importlib import resources as importlib_resources
from pathlib import Path
from types import TracebackType
from typing import Final, List

from reportlab.lib.utils import ImageReader
from reportlab.pdfbase.pdfmetrics import stringWidth
from reportlab.pdfgen import canvas

from ...model import Record
from ...utils.errors import BackgroundUnavailableError, RenderError
from ...utils.logging import get_logger

logger = get_logger(__name__)

# A4 at 72 DPI
PAGE_WIDTH: Final = 595
PAGE_HEIGHT: Final = 842
PAGE_MARGIN: Final = 36
INDENT: Final = 55
FONT_NAME: Final = "Courier"
FONT_SIZE: Final = 8
LEADING: Final = 10.2
TOP_PADDING_LINES: Final = 4

TEXT_LEFT: Final = PAGE_MARGIN + INDENT
TEXT_TOP: Final = PAGE_HEIGHT - PAGE_MARGIN
TEXT_WIDTH: Final = PAGE_WIDTH - 2 * PAGE_MARGIN - INDENT

BACKGROUND_RESOURCE: Final = "resources/payslip_background.png"


@dataclass(slots=True, frozen=True)
class DocumentMetadata:
    """Constant document information stamped on every output."""

    title: str = "PayslipGenerator"
    keywords: str = "payslips"
    creator: str = "NGA Dublin PCL to PDF converter"
    author: str = "NorthgateArinso"


METADATA: Final = DocumentMetadata()


@dataclass(slots=True, frozen=True)
class Background:
    """Decoded background image shared by all pages of all documents."""

    source: str
    image: ImageReader


@dataclass(slots=True, frozen=True)
class PlacedLine:
    """A single line of text at its baseline position."""

    x: float
    y: float
    text: str


class RendererState(Enum):
    """Lifecycle of a :class:`PdfPageWriter`."""

    UNOPENED = "unopened"
    OPEN = "open"
    BACKGROUND_DRAWN = "background_drawn"
    TEXT_DRAWN = "text_drawn"
    PAGE_ADVANCED = "page_advanced"
    CLOSED = "closed"
    ABORTED = "aborted"


# ---------------------------------------------------------------------------
# Background
# ---------------------------------------------------------------------------


def load_background(path: str | os.PathLike[str] | None = None) -> Background:
    """Load the background image once.

    ``path`` overrides the image bundled with the package.

    Raises
    ------
    BackgroundUnavailableError
        If the image cannot be read or decoded.
    """

    if path is None:
        resource = importlib_resources.files("payslips").joinpath(BACKGROUND_RESOURCE)
        source = f"payslips/{BACKGROUND_RESOURCE}"
        read_bytes = resource.read_bytes
    else:
        source = str(path)
        read_bytes = Path(path).read_bytes

    try:
        image = ImageReader(io.BytesIO(read_bytes()))
        width, height = image.getSize()
    except Exception as exc:  # reportlab and Pillow raise assorted types
        raise BackgroundUnavailableError(f"cannot load background image {source}: {exc}") from exc
    logger.debug("Loaded background %s (%dx%d px)", source, width, height)
    return Background(source=source, image=image)


# ---------------------------------------------------------------------------
# Layout
# ---------------------------------------------------------------------------


def _fits(text: str) -> bool:
    return stringWidth(text, FONT_NAME, FONT_SIZE) <= TEXT_WIDTH


# Courier is monospaced, so no line longer than this can fit.
_MAX_CHARS: Final = int(TEXT_WIDTH // stringWidth("M", FONT_NAME, FONT_SIZE))


def _wrap_line(line: str) -> List[str]:
    """Split ``line`` into pieces no wider than the text area."""

    pieces: List[str] = []
    rest = line
    while len(rest) > _MAX_CHARS or not _fits(rest):
        cut = min(len(rest), _MAX_CHARS)
        while cut > 1 and not _fits(rest[:cut]):
            cut -= 1
        space = rest.rfind(" ", 0, cut + 1)
        if space > 0 and rest[:space].strip():
            pieces.append(rest[:space])
            rest = rest[space + 1 :]
        else:
            pieces.append(rest[:cut])
            rest = rest[cut:]
    pieces.append(rest)
    return pieces


def layout_record(text: str) -> List[PlacedLine]:
    """Return the positioned lines for one record, padding included.

    Positions depend only on line numbers, never on the record's length.
    """

    lines = [""] * TOP_PADDING_LINES + text.split("\n")
    placed: List[PlacedLine] = []
    y = float(TEXT_TOP)
    for raw in lines:
        for piece in _wrap_line(raw):
            y -= LEADING
            placed.append(PlacedLine(TEXT_LEFT, y, piece))
    return placed


# ---------------------------------------------------------------------------
# Writer
# ---------------------------------------------------------------------------


class PdfPageWriter:
    """Context manager producing one PDF, one page per record.

    Leaving the ``with`` block normally finalizes the document; leaving it with
    an exception aborts and removes the partial output.
    """

    def __init__(
        self,
        path: str | os.PathLike[str],
        background: Background,
        metadata: DocumentMetadata = METADATA,
    ) -> None:
        self.path = Path(path)
        self.background = background
        self.metadata = metadata
        self.state = RendererState.UNOPENED
        self.pages = 0
        self._canvas: canvas.Canvas | None = None
        self._tmp_path: Path | None = None

    # -- state handling -----------------------------------------------------

    def _require(self, *states: RendererState) -> canvas.Canvas:
        if self.state not in states:
            raise RenderError(f"invalid writer state {self.state.value} for {self.path}")
        assert self._canvas is not None
        return self._canvas

    def open(self) -> "PdfPageWriter":
        if self.state is not RendererState.UNOPENED:
            raise RenderError(f"writer for {self.path} already opened")
        if not self.path.parent.is_dir():
            raise RenderError(f"output directory {self.path.parent} does not exist")
        self._tmp_path = self.path.with_name(f".{self.path.name}.{os.getpid()}.part")
        try:
            c = canvas.Canvas(str(self._tmp_path), pagesize=(PAGE_WIDTH, PAGE_HEIGHT))
        except Exception:
            self.abort()
            raise
        c.setTitle(self.metadata.title)
        c.setKeywords(self.metadata.keywords)
        c.setCreator(self.metadata.creator)
        c.setAuthor(self.metadata.author)
        self._canvas = c
        self.state = RendererState.OPEN
        return self

    def draw_background(self) -> None:
        c = self._require(RendererState.OPEN, RendererState.PAGE_ADVANCED)
        c.drawImage(self.background.image, 0, 0, width=PAGE_WIDTH, height=PAGE_HEIGHT)
        self.state = RendererState.BACKGROUND_DRAWN

    def draw_text(self, text: str) -> None:
        c = self._require(RendererState.BACKGROUND_DRAWN)
        c.setFont(FONT_NAME, FONT_SIZE)
        placed = layout_record(text)
        for line in placed:
            if line.text:
                c.drawString(line.x, line.y, line.text)
        if placed and placed[-1].y < PAGE_MARGIN:
            logger.warning("Page %d of %s overflows the bottom margin", self.pages + 1, self.path)
        self.state = RendererState.TEXT_DRAWN

    def advance_page(self) -> None:
        c = self._require(RendererState.TEXT_DRAWN)
        c.showPage()
        self.pages += 1
        self.state = RendererState.PAGE_ADVANCED

    def add_record(self, record: Record | str) -> None:
        """Draw one complete page for ``record``."""

        text = record.text if isinstance(record, Record) else record
        self.draw_background()
        self.draw_text(text)
        self.advance_page()

    def close(self) -> Path:
        """Finalize the document and move it to its destination."""

        if self.state is RendererState.OPEN:
            raise RenderError(f"no pages to write to {self.path}")
        c = self._require(RendererState.PAGE_ADVANCED)
        assert self._tmp_path is not None
        c.save()
        os.replace(self._tmp_path, self.path)
        self._tmp_path = None
        self.state = RendererState.CLOSED
        logger.debug("Wrote %d page(s) to %s", self.pages, self.path)
        return self.path

    def abort(self) -> None:
        """Discard the partial document."""

        if self._tmp_path is not None:
            self._tmp_path.unlink(missing_ok=True)
            self._tmp_path = None
        self._canvas = None
        self.state = RendererState.ABORTED

    # -- context manager ----------------------------------------------------

    def __enter__(self) -> "PdfPageWriter":
        return self.open()

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if exc_type is not None:
            self.abort()
            return
        try:
            self.close()
        except BaseException:
            self.abort()
            raise


def write_pdf(
    records: Iterable[Record | str],
    path: str | os.PathLike[str],
    background: Background,
) -> Path:
    """Render ``records`` into a PDF at ``path``, one page each.

    Raises
    ------
    RenderError
        If the document cannot be written.  No file is left at ``path`` in
        that case.
    """

    try:
        with PdfPageWriter(path, background) as writer:
            for record in records:
                writer.add_record(record)
    except RenderError:
        raise
    except Exception as exc:
        raise RenderError(f"cannot write {path}: {exc}") from exc
    return Path(path)


__all__ = [
    "PAGE_WIDTH",
    "PAGE_HEIGHT",
    "PAGE_MARGIN",
    "INDENT",
    "FONT_NAME",
    "FONT_SIZE",
    "LEADING",
    "TOP_PADDING_LINES",
    "TEXT_LEFT",
    "TEXT_TOP",
    "METADATA",
    "Background",
    "DocumentMetadata",
    "PlacedLine",
    "RendererState",
    "PdfPageWriter",
    "layout_record",
    "load_background",
    "write_pdf",
]
