from __future__ import annotations

import io
import zipfile
from datetime import date

from pypdf import PdfReader

from billing.pdf.bulk import bundle_zip, invoice_filename, merge_pdfs
from billing.pdf.invoice_generator import generate_invoice_pdf

from tests.conftest import make_invoice


def test_invoice_filename_strips_unsafe_characters() -> None:
    assert invoice_filename("Acme, Ltd.", date(2025, 3, 2)) == "Invoice_Acme Ltd_Mar.pdf"
    assert invoice_filename("!!!", "2025-11-30") == "Invoice_Invoice_Nov.pdf"


def test_bundle_zip_deduplicates_names() -> None:
    data = bundle_zip([("a.pdf", b"1"), ("a.pdf", b"2"), ("b.pdf", b"3"), ("a.pdf", b"4")])
    with zipfile.ZipFile(io.BytesIO(data)) as zf:
        assert zf.namelist() == ["a.pdf", "a-2.pdf", "b.pdf", "a-3.pdf"]
        assert zf.read("a-2.pdf") == b"2"


def test_merge_keeps_page_order(settings) -> None:
    first = generate_invoice_pdf(make_invoice(number="INV-A"), settings)
    second = generate_invoice_pdf(make_invoice(n_items=40, details=3, number="INV-B"), settings)

    merged = PdfReader(io.BytesIO(merge_pdfs([first, second])))
    assert len(merged.pages) == 1 + len(PdfReader(io.BytesIO(second)).pages)
    assert "INV-A" in merged.pages[0].extract_text()
    assert "INV-B" in merged.pages[1].extract_text()
