from __future__ import annotations

import io
import logging

from reportlab.pdfgen.canvas import Canvas

from billing.core.errors import SerializationError
from billing.pdf.canvas import DrawCommand, ImageCommand, LineCommand, PageSet, RectCommand, TextCommand

logger = logging.getLogger(__name__)


def _draw_text(c: Canvas, cmd: TextCommand) -> None:
    c.setFillColorRGB(*cmd.color)
    if cmd.opacity < 1:
        c.setFillAlpha(cmd.opacity)
    c.setFont(cmd.font, cmd.size)
    if cmd.align == "right":
        c.drawRightString(cmd.x, cmd.y, cmd.text)
    elif cmd.align == "centre":
        c.drawCentredString(cmd.x, cmd.y, cmd.text)
    else:
        c.drawString(cmd.x, cmd.y, cmd.text)


def _draw_rect(c: Canvas, cmd: RectCommand) -> None:
    if cmd.fill is not None:
        c.setFillColorRGB(*cmd.fill)
    if cmd.stroke is not None:
        c.setStrokeColorRGB(*cmd.stroke)
        c.setLineWidth(cmd.line_width)
    if cmd.opacity < 1:
        c.setFillAlpha(cmd.opacity)
        c.setStrokeAlpha(cmd.opacity)
    c.rect(
        cmd.x,
        cmd.y,
        cmd.width,
        cmd.height,
        stroke=1 if cmd.stroke is not None else 0,
        fill=1 if cmd.fill is not None else 0,
    )


def _draw_line(c: Canvas, cmd: LineCommand) -> None:
    c.setStrokeColorRGB(*cmd.color)
    c.setLineWidth(cmd.line_width)
    c.line(cmd.x1, cmd.y1, cmd.x2, cmd.y2)


def _draw_image(c: Canvas, cmd: ImageCommand) -> None:
    c.drawImage(
        cmd.image,
        cmd.x,
        cmd.y,
        width=cmd.width,
        height=cmd.height,
        preserveAspectRatio=True,
        anchor="sw",
        mask="auto",
    )


_DRAWERS = {
    TextCommand: _draw_text,
    RectCommand: _draw_rect,
    LineCommand: _draw_line,
    ImageCommand: _draw_image,
}


def _replay(c: Canvas, cmd: DrawCommand) -> None:
    # Each command gets its own graphics state so colours and alpha never leak
    c.saveState()
    try:
        _DRAWERS[type(cmd)](c, cmd)
    finally:
        c.restoreState()


def render_pdf(pages: PageSet, title: str = "", author: str = "") -> bytes:
    """Serialize laid-out pages to PDF bytes.

    The canvas runs in ReportLab's invariant mode, so the same pages always
    produce byte-identical output. Any failure is raised as SerializationError.
    """
    buf = io.BytesIO()
    try:
        first = pages[0]
        c = Canvas(buf, pagesize=(first.width, first.height), invariant=1)
        c.setTitle(title)
        c.setAuthor(author)
        c.setCreator("billing")
        for page in pages:
            c.setPageSize((page.width, page.height))
            for cmd in page.commands:
                _replay(c, cmd)
            c.showPage()
        c.save()
    except Exception as exc:
        raise SerializationError(f"failed to write PDF: {exc}") from exc
    data = buf.getvalue()
    logger.debug("Serialized %d page(s), %d bytes", len(pages), len(data))
    return data
