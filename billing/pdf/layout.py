"""
Paginating layout engine.

Every placement function takes an immutable LayoutCursor and returns the next
cursor plus the draw commands it produced, each addressed to a page index.
Pagination is just another placement: it closes the current page with a
footer and opens the next one with the repeated column header. Only
layout_document() touches the PageSet.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import List, Optional, Tuple

from billing.core.currency import format_amount
from billing.core.settings import Settings
from billing.pdf import theme as t
from billing.pdf.canvas import DrawCommand, LineCommand, PageSet, TextCommand
from billing.pdf.document import InvoiceDocument, LineItem
from billing.pdf.header_footer import draw_column_header, draw_footer, draw_header
from billing.pdf.metrics import FontPair, default_fonts
from billing.pdf.resources import Logo
from billing.pdf.totals import draw_paid_stamp, draw_totals_box, totals_box_height
from billing.pdf.wrap import wrap_text

logger = logging.getLogger(__name__)

Placed = List[Tuple[int, DrawCommand]]


@dataclass(frozen=True)
class LayoutCursor:
    page_index: int
    y: float

    def moved(self, dy: float) -> "LayoutCursor":
        return replace(self, y=self.y - dy)

    def on_new_page(self, y: float) -> "LayoutCursor":
        return LayoutCursor(page_index=self.page_index + 1, y=y)

    def fits(self, height: float) -> bool:
        return self.y - height >= t.MIN_CONTENT_Y


@dataclass(frozen=True)
class LayoutContext:
    doc: InvoiceDocument
    fonts: FontPair
    settings: Settings = field(default_factory=Settings)
    logo: Optional[Logo] = None


def _at(cursor: LayoutCursor, cmds: List[DrawCommand]) -> Placed:
    return [(cursor.page_index, c) for c in cmds]


def paginate(ctx: LayoutContext, cursor: LayoutCursor, continued: Optional[str] = None) -> Tuple[LayoutCursor, Placed]:
    """Close the current page and open the next one below a fresh column header.

    ``continued`` is the title of a line item split across the break; it is
    repeated under the column header with a "(continued)" marker.
    """
    placed = _at(cursor, draw_footer(ctx.doc.invoice_number, ctx.settings, ctx.fonts))
    nxt = cursor.on_new_page(t.CONTINUATION_TOP_Y)
    y, header = draw_column_header(nxt.y, ctx.fonts)
    nxt = replace(nxt, y=y)
    placed += _at(nxt, header)
    if continued:
        placed.append((nxt.page_index, TextCommand(
            t.ITEM_TITLE_X, nxt.y, f"{continued} (continued)", ctx.fonts.regular.font_name,
            t.DESCRIPTION_SIZE, t.TEXT_SECONDARY, tag="continued",
        )))
        nxt = nxt.moved(t.CONTINUED_LINE_HEIGHT)
    return nxt, placed


def ensure_space(
    ctx: LayoutContext, cursor: LayoutCursor, height: float, continued: Optional[str] = None
) -> Tuple[LayoutCursor, Placed]:
    """Paginate when an element of ``height`` would dip below MIN_CONTENT_Y."""
    if cursor.fits(height):
        return cursor, []
    return paginate(ctx, cursor, continued)


def estimate_item_height(item: LineItem) -> float:
    """Best-case height of a whole item, assuming every detail fits on one line."""
    return (
        t.TITLE_LINE_HEIGHT
        + (t.DESCRIPTION_LINE_HEIGHT if item.description else 0)
        + len(item.details) * t.DETAIL_LINE_HEIGHT
        + t.ITEM_PADDING
    )


# Space below the column header on a continuation page
_FRESH_PAGE_SPACE = (t.CONTINUATION_TOP_Y - t.COLUMN_HEADER_ADVANCE) - t.MIN_CONTENT_Y


def place_item(
    ctx: LayoutContext, cursor: LayoutCursor, number: int, item: LineItem, is_last: bool
) -> Tuple[LayoutCursor, Placed]:
    regular, bold = ctx.fonts.regular, ctx.fonts.bold
    placed: Placed = []
    label = f"{number}. {item.title}"

    # Move a whole item to the next page when it would fit there but not here.
    # Items taller than a page start where they are and split line by line.
    estimate = estimate_item_height(item)
    if not cursor.fits(estimate) and estimate <= _FRESH_PAGE_SPACE:
        cursor, p = paginate(ctx, cursor)
        placed += p

    # Title row with the amount right-aligned on its first line
    title_lines = wrap_text(label, t.TITLE_MAX_WIDTH, bold, t.TITLE_SIZE) or [label]
    cursor, p = ensure_space(ctx, cursor, t.TITLE_LINE_HEIGHT)
    placed += p
    placed.append((cursor.page_index, TextCommand(
        t.ITEM_TITLE_X, cursor.y, title_lines[0], bold.font_name, t.TITLE_SIZE, t.TEXT_PRIMARY, tag="item-title",
    )))
    placed.append((cursor.page_index, TextCommand(
        t.AMOUNT_RIGHT_X, cursor.y, format_amount(item.amount, ctx.doc.currency_code), regular.font_name,
        t.TITLE_SIZE, t.TEXT_PRIMARY, align="right", tag="item-amount",
    )))
    for line in title_lines[1:]:
        cursor = cursor.moved(t.TITLE_CONTINUATION_HEIGHT)
        cursor, p = ensure_space(ctx, cursor, t.TITLE_CONTINUATION_HEIGHT, continued=label)
        placed += p
        placed.append((cursor.page_index, TextCommand(
            t.ITEM_TITLE_X, cursor.y, line, bold.font_name, t.TITLE_SIZE, t.TEXT_PRIMARY, tag="item-title",
        )))
    cursor = cursor.moved(t.TITLE_LINE_HEIGHT)

    if item.description:
        for line in wrap_text(item.description, t.DETAIL_MAX_WIDTH, regular, t.DESCRIPTION_SIZE):
            cursor, p = ensure_space(ctx, cursor, t.DESCRIPTION_LINE_HEIGHT, continued=label)
            placed += p
            placed.append((cursor.page_index, TextCommand(
                t.ITEM_TEXT_X, cursor.y, line, regular.font_name, t.DESCRIPTION_SIZE, t.TEXT_SECONDARY,
                tag="item-description",
            )))
            cursor = cursor.moved(t.DESCRIPTION_LINE_HEIGHT)

    text_x = t.ITEM_TEXT_X + t.BULLET_INDENT
    for detail in item.details:
        lines = wrap_text(detail, t.DETAIL_MAX_WIDTH, regular, t.DETAIL_SIZE)
        for i, line in enumerate(lines):
            cursor, p = ensure_space(ctx, cursor, t.DETAIL_LINE_HEIGHT, continued=label)
            placed += p
            if i == 0:
                placed.append((cursor.page_index, TextCommand(
                    t.ITEM_TEXT_X, cursor.y, t.BULLET, regular.font_name, t.DETAIL_SIZE, t.TEXT_SECONDARY,
                    tag="bullet",
                )))
            # Continuation lines share the first line's indent
            placed.append((cursor.page_index, TextCommand(
                text_x, cursor.y, line, regular.font_name, t.DETAIL_SIZE, t.TEXT_SECONDARY, tag="detail",
            )))
            cursor = cursor.moved(t.DETAIL_LINE_HEIGHT)

    cursor = cursor.moved(t.ITEM_PADDING)

    if not is_last and cursor.fits(t.SEPARATOR_GAP):
        placed.append((cursor.page_index, LineCommand(
            t.ITEM_TITLE_X, cursor.y, t.PAGE_WIDTH - 60, cursor.y, t.LINE_COLOR, line_width=0.5, tag="separator",
        )))
        cursor = cursor.moved(t.SEPARATOR_GAP)
    return cursor, placed


def place_totals(ctx: LayoutContext, cursor: LayoutCursor) -> Tuple[LayoutCursor, Placed, LayoutCursor]:
    """Totals box below the items. Returns (cursor below the box, commands, cursor at the box top)."""
    totals = ctx.doc.totals
    height = totals_box_height(totals)
    cursor = cursor.moved(t.TOTALS_GAP)
    cursor, placed = ensure_space(ctx, cursor, height)
    top = cursor
    placed += _at(cursor, draw_totals_box(totals, ctx.doc.currency_code, cursor.y, ctx.fonts))
    return cursor.moved(height), placed, top


def place_paid_stamp(ctx: LayoutContext, box_top: LayoutCursor) -> Tuple[LayoutCursor, Placed]:
    """PAID stamp beside the totals box, vertically centred on it."""
    height = totals_box_height(ctx.doc.totals)
    centre = box_top.moved(height / 2 - 10)
    cursor, placed = ensure_space(ctx, replace(centre, y=centre.y + t.STAMP_HEIGHT / 2), t.STAMP_HEIGHT)
    y_center = cursor.y - t.STAMP_HEIGHT / 2
    placed += _at(cursor, draw_paid_stamp(y_center, ctx.fonts))
    return cursor, placed


def place_notes(ctx: LayoutContext, cursor: LayoutCursor) -> Tuple[LayoutCursor, Placed]:
    notes = ctx.doc.notes
    if not notes:
        return cursor, []
    regular, bold = ctx.fonts.regular, ctx.fonts.bold
    cursor = cursor.moved(t.NOTES_GAP)
    cursor, placed = ensure_space(ctx, cursor, 18 + t.NOTES_LINE_HEIGHT)
    placed.append((cursor.page_index, TextCommand(
        t.MARGIN_X, cursor.y, "NOTES", bold.font_name, 9, t.TEXT_SECONDARY, tag="notes-label",
    )))
    cursor = cursor.moved(18)
    width = t.PAGE_WIDTH - 2 * t.MARGIN_X
    for paragraph in notes.splitlines():
        for line in wrap_text(paragraph, width, regular, 9):
            cursor, p = ensure_space(ctx, cursor, t.NOTES_LINE_HEIGHT)
            placed += p
            placed.append((cursor.page_index, TextCommand(
                t.MARGIN_X, cursor.y, line, regular.font_name, 9, t.TEXT_SECONDARY, tag="notes",
            )))
            cursor = cursor.moved(t.NOTES_LINE_HEIGHT)
    return cursor, placed


def _apply(pages: PageSet, placed: Placed) -> None:
    for page_index, cmd in placed:
        while page_index >= len(pages):
            pages.new_page()
        pages[page_index].draw([cmd])


def layout_document(
    doc: InvoiceDocument,
    fonts: Optional[FontPair] = None,
    settings: Optional[Settings] = None,
    logo: Optional[Logo] = None,
) -> PageSet:
    """Lay out a whole invoice and return its sealed pages.

    The document is expected to hold at least one line item; amounts are
    rendered as given without any validation.
    """
    ctx = LayoutContext(doc=doc, fonts=fonts or default_fonts(), settings=settings or Settings(), logo=logo)
    pages = PageSet()
    pages.new_page()

    y, header = draw_header(doc, ctx.settings, ctx.fonts, logo)
    cursor = LayoutCursor(page_index=0, y=y)
    _apply(pages, _at(cursor, header))
    y, columns = draw_column_header(cursor.y, ctx.fonts)
    _apply(pages, _at(cursor, columns))
    cursor = replace(cursor, y=y)

    count = len(doc.line_items)
    for number, item in enumerate(doc.line_items, start=1):
        cursor, placed = place_item(ctx, cursor, number, item, is_last=number == count)
        _apply(pages, placed)

    cursor, placed, box_top = place_totals(ctx, cursor)
    _apply(pages, placed)

    if doc.is_paid:
        stamp_cursor, placed = place_paid_stamp(ctx, box_top)
        _apply(pages, placed)
        if stamp_cursor.page_index > cursor.page_index:
            cursor = stamp_cursor.moved(t.STAMP_HEIGHT)

    cursor, placed = place_notes(ctx, cursor)
    _apply(pages, placed)

    # Every earlier page got its footer when it was closed
    _apply(pages, _at(cursor, draw_footer(doc.invoice_number, ctx.settings, ctx.fonts)))

    logger.info("Laid out invoice %s: %d item(s) on %d page(s)", doc.invoice_number, count, len(pages))
    return pages.seal()
