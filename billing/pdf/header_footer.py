"""Fixed first-page header, repeating column header and the per-page footer band."""

from __future__ import annotations

from typing import List, Optional, Tuple

from billing.core.settings import Settings
from billing.pdf import theme as t
from billing.pdf.canvas import DrawCommand, ImageCommand, LineCommand, RectCommand, TextCommand
from billing.pdf.document import InvoiceDocument
from billing.pdf.metrics import FontPair
from billing.pdf.resources import Logo

LOGO_MAX_WIDTH = 120
LOGO_MAX_HEIGHT = 40


def _logo_box(logo: Logo) -> Tuple[float, float]:
    scale = min(LOGO_MAX_WIDTH / logo.width, LOGO_MAX_HEIGHT / logo.height)
    return logo.width * scale, logo.height * scale


def draw_header(
    doc: InvoiceDocument,
    settings: Settings,
    fonts: FontPair,
    logo: Optional[Logo],
    page_width: float = t.PAGE_WIDTH,
    page_height: float = t.PAGE_HEIGHT,
) -> Tuple[float, List[DrawCommand]]:
    """
    Draw the first-page header:
    - logo (or the business name as a text wordmark when no logo is usable)
    - the word "INVOICE" on the right and an accent rule under both
    - BILL TO block on the left, invoice number/date and FROM block on the right

    Returns (y below the header, commands).
    """
    regular, bold = fonts.regular.font_name, fonts.bold.font_name
    right = page_width - t.MARGIN_X
    cmds: List[DrawCommand] = []
    y = page_height - 60

    if logo is not None:
        w, h = _logo_box(logo)
        cmds.append(ImageCommand(t.MARGIN_X, y - 15, w, h, logo.image, tag="logo"))
    else:
        wordmark = settings.business_name or "INVOICE"
        cmds.append(TextCommand(t.MARGIN_X, y, wordmark, bold, 24, t.BRAND, tag="logo-fallback"))

    cmds.append(TextCommand(right, y + 5, "INVOICE", bold, 28, t.BRAND, align="right", tag="title"))

    y -= 60
    cmds.append(LineCommand(t.MARGIN_X, y, right, y, t.ACCENT, line_width=2))
    y -= 50

    # Left column: who is billed
    left_y = y
    cmds.append(TextCommand(t.MARGIN_X, left_y, "BILL TO", bold, 9, t.TEXT_SECONDARY))
    left_y -= 22
    cmds.append(TextCommand(t.MARGIN_X, left_y, doc.client, bold, 14, t.TEXT_PRIMARY, tag="client"))
    for line in doc.counterparty_address_lines:
        left_y -= 14
        cmds.append(TextCommand(t.MARGIN_X, left_y, line, regular, 10, t.TEXT_SECONDARY))
    if doc.project_name:
        left_y -= 20
        cmds.append(TextCommand(t.MARGIN_X, left_y, f"Project: {doc.project_name}", regular, 10, t.TEXT_SECONDARY))
    if doc.duration:
        left_y -= 18
        cmds.append(TextCommand(t.MARGIN_X, left_y, f"Duration: {doc.duration}", regular, 10, t.TEXT_SECONDARY))

    # Right column: invoice details, then who is billing
    right_x = page_width - 200
    right_y = y
    cmds.append(RectCommand(right_x - 10, right_y - 5, 160, 24, fill=t.BG_LIGHT))
    cmds.append(TextCommand(right_x, right_y + 2, "Invoice #", regular, 9, t.TEXT_SECONDARY))
    cmds.append(TextCommand(right, right_y + 2, doc.invoice_number, bold, 11, t.BRAND, align="right", tag="invoice-number"))
    right_y -= 35
    cmds.append(TextCommand(right_x, right_y, "Issue Date", regular, 9, t.TEXT_SECONDARY))
    cmds.append(TextCommand(right, right_y, doc.issue_date, regular, 10, t.TEXT_PRIMARY, align="right", tag="issue-date"))

    right_y -= 40
    cmds.append(TextCommand(right_x, right_y, "FROM", bold, 9, t.TEXT_SECONDARY))
    right_y -= 20
    cmds.append(TextCommand(right_x, right_y, settings.business_name, bold, 11, t.TEXT_PRIMARY))
    step = 16
    for line in settings.from_address_lines:
        right_y -= step
        cmds.append(TextCommand(right_x, right_y, line, regular, 9, t.TEXT_SECONDARY))
        step = 14
    if settings.website:
        right_y -= 18
        cmds.append(TextCommand(right_x, right_y, settings.website, regular, 9, t.ACCENT))

    return min(left_y, right_y) - 50, cmds


def draw_column_header(
    y: float,
    fonts: FontPair,
    page_width: float = t.PAGE_WIDTH,
) -> Tuple[float, List[DrawCommand]]:
    """DESCRIPTION / AMOUNT band. Returns (first item baseline, commands)."""
    bold = fonts.bold.font_name
    cmds: List[DrawCommand] = [
        RectCommand(
            t.MARGIN_X,
            y - t.COLUMN_HEADER_HEIGHT,
            page_width - 2 * t.MARGIN_X,
            t.COLUMN_HEADER_HEIGHT,
            fill=t.BG_LIGHT,
            tag="column-header",
        ),
        TextCommand(t.ITEM_TITLE_X, y - 18, "DESCRIPTION", bold, 9, t.TEXT_PRIMARY),
        TextCommand(page_width - 60, y - 18, "AMOUNT", bold, 9, t.TEXT_PRIMARY, align="right"),
    ]
    return y - t.COLUMN_HEADER_ADVANCE, cmds


def draw_footer(
    invoice_number: str,
    settings: Settings,
    fonts: FontPair,
    page_width: float = t.PAGE_WIDTH,
) -> List[DrawCommand]:
    """Footer band for one page. Carries the invoice number so separated pages stay identifiable."""
    regular = fonts.regular.font_name
    name = settings.footer_name or settings.business_name
    cmds: List[DrawCommand] = [
        RectCommand(0, 0, page_width, t.FOOTER_BAND_HEIGHT, fill=t.BRAND, tag="footer"),
        TextCommand(t.MARGIN_X, 35, name, regular, 9, t.WHITE),
    ]
    if settings.website:
        cmds.append(TextCommand(t.MARGIN_X, 20, settings.website, regular, 8, t.FOOTER_MUTED))
    cmds.append(
        TextCommand(
            page_width - t.MARGIN_X,
            28,
            f"Invoice {invoice_number}",
            regular,
            8,
            t.FOOTER_NUMBER,
            align="right",
            tag="footer-invoice-number",
        )
    )
    return cmds
