"""Page-cursor layout for fixed report templates.

Coordinates are millimetres on an A4 portrait page with the origin in the top
left corner and y growing downwards. A ``PageBuilder`` accumulates draw
instructions for the current page; ``build`` freezes them into a
``PageSequence`` that an output sink consumes once.

Text ``y`` is the baseline of the first line. Table and image ``y`` is the top
edge of the element.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Protocol, Sequence, Tuple, Union

from reportlab.lib.units import mm
from reportlab.lib.utils import simpleSplit
from reportlab.pdfbase.pdfmetrics import stringWidth

from fieldsheets.blobs import ImageLoadError

log = logging.getLogger("uvicorn.error")

PAGE_WIDTH = 210.0
PAGE_HEIGHT = 297.0
TOP_MARGIN = 20.0
BOTTOM_MARGIN = 14.0
CONTENT_BOTTOM = PAGE_HEIGHT - BOTTOM_MARGIN

PT_TO_MM = 1.0 / mm
LINE_FACTOR = 1.15
MIN_FIT_SIZE = 6.0
ELLIPSIS = "\u2026"

RGB = Tuple[int, int, int]


def font_name(bold: bool) -> str:
    return "Helvetica-Bold" if bold else "Helvetica"


def line_height(size: float) -> float:
    """Line pitch in mm for a font size in points."""
    return size * PT_TO_MM * LINE_FACTOR


def wrap_text(content: str, size: float, bold: bool = False, max_width: Optional[float] = None) -> Tuple[str, ...]:
    text = "" if content is None else str(content)
    if max_width is None:
        lines = text.split("\n")
    else:
        lines = simpleSplit(text, font_name(bold), size, max_width * mm)
    return tuple(lines) or ("",)


def text_width(content: str, size: float, bold: bool = False) -> float:
    return stringWidth(content, font_name(bold), size) * PT_TO_MM


def fit_line(
    content: str, max_width: float, size: float = 10.0, bold: bool = False, min_size: float = MIN_FIT_SIZE
) -> Tuple[str, float]:
    """One line within ``max_width`` mm.

    The font shrinks down to ``min_size``; text still too wide is cut with an ellipsis.
    """
    text = " ".join(("" if content is None else str(content)).split())
    fitted = size
    while fitted > min_size and text_width(text, fitted, bold) > max_width:
        fitted = max(min_size, fitted - 0.5)
    if text_width(text, fitted, bold) <= max_width:
        return text, fitted
    while text and text_width(text + ELLIPSIS, fitted, bold) > max_width:
        text = text[:-1]
    return text.rstrip() + ELLIPSIS, fitted


class ImageSource(Protocol):
    def load(self, ref: str) -> bytes: ...


@dataclass(frozen=True)
class GridStyle:
    col_widths: Tuple[float, ...]
    x: float = 14.0
    font_size: float = 8.0
    padding: float = 1.5
    header_fill: RGB = (52, 81, 158)
    header_text: RGB = (255, 255, 255)
    body_text: RGB = (0, 0, 0)
    line_color: RGB = (180, 180, 180)

    @property
    def width(self) -> float:
        return sum(self.col_widths)


@dataclass(frozen=True)
class TextOp:
    x: float
    y: float
    lines: Tuple[str, ...]
    size: float = 10.0
    bold: bool = False


@dataclass(frozen=True)
class TableRow:
    cells: Tuple[Tuple[str, ...], ...]
    height: float
    header: bool = False
    # one cell spanning every column (empty-state message)
    span: bool = False


@dataclass(frozen=True)
class TableOp:
    x: float
    y: float
    rows: Tuple[TableRow, ...]
    style: GridStyle

    @property
    def height(self) -> float:
        return sum(row.height for row in self.rows)


@dataclass(frozen=True)
class ImageOp:
    x: float
    y: float
    width: float
    height: float
    ref: str
    data: bytes = field(repr=False)


DrawOp = Union[TextOp, TableOp, ImageOp]


@dataclass(frozen=True)
class Page:
    number: int
    ops: Tuple[DrawOp, ...]

    def texts(self) -> List[str]:
        out: List[str] = []
        for op in self.ops:
            if isinstance(op, TextOp):
                out.append(" ".join(op.lines))
            elif isinstance(op, TableOp):
                for row in op.rows:
                    out.extend(" ".join(cell) for cell in row.cells)
        return out

    def images(self) -> List[ImageOp]:
        return [op for op in self.ops if isinstance(op, ImageOp)]

    def tables(self) -> List[TableOp]:
        return [op for op in self.ops if isinstance(op, TableOp)]


@dataclass(frozen=True)
class PageSequence:
    pages: Tuple[Page, ...]

    def __len__(self) -> int:
        return len(self.pages)

    def __iter__(self):
        return iter(self.pages)

    def __getitem__(self, index: int) -> Page:
        return self.pages[index]

    def texts(self) -> List[str]:
        return [text for page in self.pages for text in page.texts()]

    def images(self) -> List[ImageOp]:
        return [image for page in self.pages for image in page.images()]


class PageBuilder:
    def __init__(self, loader: Optional[ImageSource] = None) -> None:
        self.loader = loader
        self._pages: List[Page] = []
        self._ops: List[DrawOp] = []
        self._built = False

    @property
    def page_number(self) -> int:
        return len(self._pages) + 1

    def _check_open(self) -> None:
        if self._built:
            raise RuntimeError("PageBuilder already built; start a new builder for another report")

    def text(
        self,
        x: float,
        y: float,
        content: str,
        size: float = 10.0,
        bold: bool = False,
        max_width: Optional[float] = None,
    ) -> float:
        """Place a line or a wrapped block; returns the baseline following it."""
        self._check_open()
        lines = wrap_text(content, size, bold, max_width)
        self._ops.append(TextOp(x=x, y=y, lines=lines, size=size, bold=bold))
        return y + len(lines) * line_height(size)

    def text_line(
        self,
        x: float,
        y: float,
        content: str,
        max_width: float,
        size: float = 10.0,
        bold: bool = False,
    ) -> float:
        """Place ``content`` on a single line fitted to ``max_width``; the pitch stays that of ``size``."""
        self._check_open()
        line, fitted = fit_line(content, max_width, size, bold)
        self._ops.append(TextOp(x=x, y=y, lines=(line,), size=fitted, bold=bold))
        return y + line_height(size)

    def _row(self, cells: Sequence[str], style: GridStyle, header: bool = False) -> TableRow:
        wrapped = tuple(
            wrap_text(cell, style.font_size, header, max(width - 2 * style.padding, 1.0))
            for cell, width in zip(cells, style.col_widths)
        )
        tallest = max(len(lines) for lines in wrapped) if wrapped else 1
        height = tallest * line_height(style.font_size) + 2 * style.padding
        return TableRow(cells=wrapped, height=height, header=header)

    def _span_row(self, message: str, style: GridStyle) -> TableRow:
        lines = wrap_text(message, style.font_size, False, max(style.width - 2 * style.padding, 1.0))
        height = len(lines) * line_height(style.font_size) + 2 * style.padding
        return TableRow(cells=(lines,), height=height, span=True)

    def table(
        self,
        start_y: float,
        header: Sequence[str],
        body: Sequence[Sequence[str]],
        style: GridStyle,
        empty_message: Optional[str] = None,
    ) -> float:
        """Ruled grid split across pages with a repeated header; returns the y below it."""
        self._check_open()
        if len(header) != len(style.col_widths):
            raise ValueError(f"Table has {len(header)} header cells for {len(style.col_widths)} columns")
        head = self._row(header, style, header=True)
        rows = [self._row([str(cell) for cell in cells], style) for cells in body]
        if not rows and empty_message:
            rows = [self._span_row(empty_message, style)]

        y = start_y
        first = rows[0].height if rows else 0.0
        if y + head.height + first > CONTENT_BOTTOM:
            self.new_page()
            y = TOP_MARGIN

        chunk: List[TableRow] = [head]
        chunk_top = y
        y += head.height
        for row in rows:
            # a row taller than a whole page is placed anyway
            if y + row.height > CONTENT_BOTTOM and len(chunk) > 1:
                self._ops.append(TableOp(x=style.x, y=chunk_top, rows=tuple(chunk), style=style))
                self.new_page()
                chunk = [head]
                chunk_top = TOP_MARGIN
                y = TOP_MARGIN + head.height
            chunk.append(row)
            y += row.height
        self._ops.append(TableOp(x=style.x, y=chunk_top, rows=tuple(chunk), style=style))
        return y

    def image(self, x: float, y: float, source_ref: str, width: float, height: float) -> bool:
        """Embed an image in a bounding box; a failing image is logged and left out."""
        self._check_open()
        if self.loader is None:
            log.warning("No image loader configured; skipping image %s", source_ref)
            return False
        try:
            data = self.loader.load(source_ref)
        except ImageLoadError as exc:
            log.warning("Skipping image %s: %s", source_ref, exc)
            return False
        self._ops.append(ImageOp(x=x, y=y, width=width, height=height, ref=source_ref, data=data))
        return True

    def new_page(self) -> None:
        self._check_open()
        self._pages.append(Page(number=self.page_number, ops=tuple(self._ops)))
        self._ops = []

    def ensure_space(self, y: float, needed: float) -> float:
        """y unchanged when ``needed`` mm still fit on the page, else the top of a new page."""
        self._check_open()
        if y + needed > CONTENT_BOTTOM:
            self.new_page()
            return TOP_MARGIN
        return y

    def build(self) -> PageSequence:
        self._check_open()
        self._pages.append(Page(number=self.page_number, ops=tuple(self._ops)))
        self._ops = []
        self._built = True
        return PageSequence(pages=tuple(self._pages))


__all__ = [
    "BOTTOM_MARGIN",
    "CONTENT_BOTTOM",
    "ELLIPSIS",
    "GridStyle",
    "ImageSource",
    "ImageOp",
    "MIN_FIT_SIZE",
    "Page",
    "PageBuilder",
    "PageSequence",
    "PAGE_HEIGHT",
    "PAGE_WIDTH",
    "TableOp",
    "TableRow",
    "TextOp",
    "TOP_MARGIN",
    "fit_line",
    "font_name",
    "line_height",
    "text_width",
    "wrap_text",
]
