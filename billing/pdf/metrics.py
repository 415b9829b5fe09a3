from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Tuple

from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont, TTFError

from billing.core.paths import resource_path

logger = logging.getLogger(__name__)

REGULAR_FONT = "Helvetica"
BOLD_FONT = "Helvetica-Bold"


@dataclass(frozen=True)
class FontMetrics:
    """Width measurement for one registered font."""

    font_name: str

    def width_of(self, text: str, font_size: float) -> float:
        return pdfmetrics.stringWidth(text, self.font_name, font_size)


@dataclass(frozen=True)
class FontPair:
    regular: FontMetrics
    bold: FontMetrics


def _register_ttf(name: str, rel: str) -> bool:
    path = resource_path(rel)
    if not path.exists():
        return False
    if name in pdfmetrics.getRegisteredFontNames():
        return True
    try:
        pdfmetrics.registerFont(TTFont(name, str(path)))
    except (TTFError, OSError) as exc:
        logger.warning("Could not load font %s from %s: %s", name, path, exc)
        return False
    return True


def register_fonts() -> Tuple[str, str]:
    """Return (regular_font_name, bold_font_name).

    NotoSans from assets/fonts is used when present; otherwise the built-in
    Helvetica pair.
    """
    regular = "NotoSans" if _register_ttf("NotoSans", "assets/fonts/NotoSans-Regular.ttf") else REGULAR_FONT
    bold = "NotoSans-Bold" if _register_ttf("NotoSans-Bold", "assets/fonts/NotoSans-Bold.ttf") else BOLD_FONT
    return regular, bold


def default_fonts() -> FontPair:
    regular, bold = register_fonts()
    return FontPair(regular=FontMetrics(regular), bold=FontMetrics(bold))
