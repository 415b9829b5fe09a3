"""
Invoice PDF generation: raw invoice data in, A4 PDF bytes out.

    raw dict -> normalize -> InvoiceDocument -> layout_document -> PageSet -> render_pdf -> bytes
"""

from __future__ import annotations

import logging
from datetime import date
from pathlib import Path
from typing import Any, Mapping, Optional

from billing.core.settings import Settings
from billing.pdf.document import InvoiceDocument
from billing.pdf.layout import layout_document
from billing.pdf.metrics import default_fonts
from billing.pdf.normalize import normalize
from billing.pdf.resources import load_logo
from billing.pdf.serialize import render_pdf

logger = logging.getLogger(__name__)


def render_invoice(doc: InvoiceDocument, settings: Optional[Settings] = None) -> bytes:
    """Lay out and serialize an already-normalized document."""
    settings = settings or Settings()
    fonts = default_fonts()
    logo = load_logo(settings.logo_path)
    pages = layout_document(doc, fonts=fonts, settings=settings, logo=logo)
    return render_pdf(pages, title=f"Invoice {doc.invoice_number}", author=settings.business_name)


def generate_invoice_pdf(
    data: Mapping[str, Any],
    settings: Optional[Settings] = None,
    *,
    today: Optional[date] = None,
) -> bytes:
    """Generate invoice PDF bytes from modern or legacy invoice input.

    Raises ValidationError before any rendering when the input has no line
    items or a non-finite amount.
    """
    settings = settings or Settings()
    doc = normalize(data, today=today, default_currency=settings.default_currency)
    return render_invoice(doc, settings)


def build_invoice_pdf(
    out_path: Path | str,
    data: Mapping[str, Any],
    settings: Optional[Settings] = None,
    *,
    today: Optional[date] = None,
) -> Path:
    """Write the invoice PDF for ``data`` to ``out_path`` and return the path."""
    out = Path(out_path)
    pdf = generate_invoice_pdf(data, settings, today=today)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_bytes(pdf)
    logger.info("PDF built: %s", out)
    return out
