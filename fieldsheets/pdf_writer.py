from __future__ import annotations

import logging
from io import BytesIO
from pathlib import Path
from typing import Optional

from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from fieldsheets.layout import (
    RGB,
    ImageOp,
    PageSequence,
    TableOp,
    TextOp,
    font_name,
    line_height,
)

log = logging.getLogger("uvicorn.error")

_, PAGE_H = A4
ASCENT = 0.78


def _y(y_mm: float) -> float:
    return PAGE_H - y_mm * mm


def _rgb(c: canvas.Canvas, color: RGB, stroke: bool = False) -> None:
    r, g, b = (channel / 255.0 for channel in color)
    if stroke:
        c.setStrokeColorRGB(r, g, b)
    else:
        c.setFillColorRGB(r, g, b)


def _draw_text(c: canvas.Canvas, op: TextOp) -> None:
    c.setFont(font_name(op.bold), op.size)
    c.setFillColorRGB(0, 0, 0)
    pitch = line_height(op.size)
    for index, line in enumerate(op.lines):
        c.drawString(op.x * mm, _y(op.y + index * pitch), line)


def _draw_table(c: canvas.Canvas, op: TableOp) -> None:
    style = op.style
    pitch = line_height(style.font_size)
    top = op.y
    c.setLineWidth(0.25)
    _rgb(c, style.line_color, stroke=True)
    for row in op.rows:
        bottom = top + row.height
        if row.header:
            _rgb(c, style.header_fill)
            c.rect(op.x * mm, _y(bottom), style.width * mm, row.height * mm, stroke=1, fill=1)
            _rgb(c, style.header_text)
        else:
            c.rect(op.x * mm, _y(bottom), style.width * mm, row.height * mm, stroke=1, fill=0)
            _rgb(c, style.body_text)
        c.setFont(font_name(row.header), style.font_size)

        widths = (style.width,) if row.span else style.col_widths
        x = op.x
        for index, (lines, width) in enumerate(zip(row.cells, widths)):
            if index and not row.span:
                c.line(x * mm, _y(top), x * mm, _y(bottom))
            baseline = top + style.padding + ASCENT * style.font_size / mm
            for line in lines:
                c.drawString((x + style.padding) * mm, _y(baseline), line)
                baseline += pitch
            x += width
        top = bottom


def _draw_image(c: canvas.Canvas, op: ImageOp) -> None:
    try:
        c.drawImage(
            ImageReader(BytesIO(op.data)),
            op.x * mm,
            _y(op.y + op.height),
            width=op.width * mm,
            height=op.height * mm,
            preserveAspectRatio=True,
            anchor="nw",
            mask="auto",
        )
    except Exception as exc:
        log.warning("Failed to draw image %s: %s", op.ref, exc)


def render_pdf(pages: PageSequence, out_path: Path, *, title: Optional[str] = None) -> Path:
    out_path = Path(out_path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    c = canvas.Canvas(str(out_path), pagesize=A4)
    if title:
        c.setTitle(title)
    c.setCreator("fieldsheets")
    for page in pages:
        for op in page.ops:
            if isinstance(op, TextOp):
                _draw_text(c, op)
            elif isinstance(op, TableOp):
                _draw_table(c, op)
            elif isinstance(op, ImageOp):
                _draw_image(c, op)
        c.showPage()
    c.save()
    return out_path


__all__ = ["render_pdf"]
