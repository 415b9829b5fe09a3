from __future__ import annotations

from typing import List

from billing.core.currency import format_amount
from billing.pdf import theme as t
from billing.pdf.canvas import DrawCommand, LineCommand, RectCommand, TextCommand
from billing.pdf.document import Totals
from billing.pdf.metrics import FontPair


def totals_box_height(totals: Totals) -> float:
    return t.TOTALS_BOX_HEIGHT_FULL if totals.has_breakdown else t.TOTALS_BOX_HEIGHT_COMPACT


def _fmt_rate(rate: float) -> str:
    s = f"{rate:.2f}".rstrip("0").rstrip(".")
    return s or "0"


def tax_label(totals: Totals) -> str:
    if totals.tax_rate_percent:
        return f"Tax ({_fmt_rate(totals.tax_rate_percent)}%)"
    return "Tax"


def draw_totals_box(totals: Totals, currency: str, y_top: float, fonts: FontPair) -> List[DrawCommand]:
    """Totals summary anchored with its first baseline at ``y_top``.

    Breakdown rows are drawn only for values that are present (discount and tax
    also only when positive); the bold TOTAL row is always drawn.
    """
    regular, bold = fonts.regular.font_name, fonts.bold.font_name
    height = totals_box_height(totals)
    cmds: List[DrawCommand] = [
        RectCommand(
            t.PAGE_WIDTH - 270,
            y_top - height + 10,
            t.TOTALS_BOX_WIDTH,
            height,
            fill=t.BG_LIGHT,
            tag="totals-box",
        )
    ]
    x = t.TOTALS_LABEL_X
    right = t.TOTALS_VALUE_RIGHT_X
    y = y_top

    if totals.has_breakdown:
        if totals.subtotal is not None:
            cmds.append(TextCommand(x, y, "Subtotal", regular, 10, t.TEXT_SECONDARY))
            cmds.append(TextCommand(right, y, format_amount(totals.subtotal, currency), regular, 10,
                                    t.TEXT_PRIMARY, align="right", tag="subtotal"))
            y -= t.TOTALS_ROW_HEIGHT
        if totals.discount is not None and totals.discount > 0:
            cmds.append(TextCommand(x, y, "Discount", regular, 10, t.TEXT_SECONDARY))
            cmds.append(TextCommand(right, y, format_amount(totals.discount, currency, negative=True), regular, 10,
                                    t.ACCENT, align="right", tag="discount"))
            y -= t.TOTALS_ROW_HEIGHT
        if totals.tax is not None and totals.tax > 0:
            cmds.append(TextCommand(x, y, tax_label(totals), regular, 10, t.TEXT_SECONDARY))
            cmds.append(TextCommand(right, y, format_amount(totals.tax, currency), regular, 10,
                                    t.TEXT_PRIMARY, align="right", tag="tax"))
            y -= t.TOTALS_ROW_HEIGHT
        cmds.append(LineCommand(x, y + 5, right, y + 5, t.LINE_COLOR, line_width=1))
        y -= 12

    cmds.append(TextCommand(x, y, "TOTAL", bold, 12, t.TEXT_PRIMARY, tag="total-label"))
    cmds.append(TextCommand(right, y - 2, format_amount(totals.total, currency), bold, 16,
                            t.BRAND, align="right", tag="total-amount"))
    return cmds


def draw_paid_stamp(y_center: float, fonts: FontPair) -> List[DrawCommand]:
    x = t.STAMP_CENTER_X
    return [
        RectCommand(
            x - t.STAMP_WIDTH / 2,
            y_center - t.STAMP_HEIGHT / 2,
            t.STAMP_WIDTH,
            t.STAMP_HEIGHT,
            stroke=t.ACCENT,
            line_width=3,
            opacity=0.6,
            tag="paid-stamp",
        ),
        TextCommand(x, y_center - 8, "PAID", fonts.bold.font_name, t.STAMP_SIZE, t.ACCENT,
                    align="centre", opacity=0.4, tag="paid-text"),
    ]
