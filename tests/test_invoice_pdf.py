from __future__ import annotations

import io
from datetime import date
from pathlib import Path

import pytest
from PIL import Image
from pypdf import PdfReader
from reportlab.lib.pagesizes import A4

from billing.core.errors import SerializationError, ValidationError
from billing.core.settings import Settings
from billing.pdf.canvas import PageSet, TextCommand
from billing.pdf.invoice_generator import build_invoice_pdf, generate_invoice_pdf
from billing.pdf.serialize import render_pdf

from tests.conftest import make_invoice


def _read(pdf: bytes) -> PdfReader:
    return PdfReader(io.BytesIO(pdf))


def _text(reader: PdfReader) -> str:
    return "\n".join(page.extract_text() or "" for page in reader.pages)


def test_single_item_invoice_is_one_a4_page(settings: Settings) -> None:
    pdf = generate_invoice_pdf(make_invoice(), settings)

    assert pdf.startswith(b"%PDF")
    reader = _read(pdf)
    assert len(reader.pages) == 1
    box = reader.pages[0].mediabox
    assert float(box.width) == pytest.approx(A4[0])
    assert float(box.height) == pytest.approx(A4[1])

    text = _text(reader)
    assert "INVOICE" in text
    assert "Test Client" in text
    assert "1. Item 1" in text
    assert "£100.00" in text
    assert "Invoice INV-TEST-1" in text


def test_document_metadata_names_the_invoice(settings: Settings) -> None:
    reader = _read(generate_invoice_pdf(make_invoice(), settings))
    assert reader.metadata.title == "Invoice INV-TEST-1"
    assert reader.metadata.author == settings.business_name


def test_long_invoice_spans_pages_with_footer_on_each(settings: Settings) -> None:
    reader = _read(generate_invoice_pdf(make_invoice(n_items=40, details=3), settings))

    assert len(reader.pages) > 1
    for page in reader.pages:
        text = page.extract_text()
        assert "Invoice INV-TEST-1" in text
        assert "DESCRIPTION" in text
    assert "£4,000.00" in _text(reader)


def test_rendering_is_byte_identical(settings: Settings) -> None:
    data = make_invoice(n_items=12, details=2, isPaid=True)
    assert generate_invoice_pdf(data, settings) == generate_invoice_pdf(data, settings)


def test_paid_invoice_shows_stamp(settings: Settings) -> None:
    assert "PAID" in _text(_read(generate_invoice_pdf(make_invoice(isPaid=True), settings)))
    assert "PAID" not in _text(_read(generate_invoice_pdf(make_invoice(isPaid=False), settings)))


def test_legacy_input_renders(settings: Settings) -> None:
    data = {
        "transaction": {
            "payee": "Acme Ltd",
            "category": "Consulting",
            "amount": 250,
            "currency": "USD",
            "date": "2025-03-14",
            "paymentStatus": "PAID",
        }
    }
    text = _text(_read(generate_invoice_pdf(data, settings)))

    assert "Acme Ltd" in text
    assert "Consulting - Mar 2025" in text
    assert "$250.00" in text
    assert "31 March 2025" in text
    assert "PAID" in text


def test_today_is_used_when_input_has_no_date(settings: Settings) -> None:
    data = {"metadata": {"client": "Globex"}, "lineItems": [{"title": "Retainer", "amount": 5}]}
    text = _text(_read(generate_invoice_pdf(data, settings, today=date(2025, 6, 1))))
    assert "1 June 2025" in text


def test_invalid_input_fails_before_writing(settings: Settings, tmp_path: Path) -> None:
    out = tmp_path / "out" / "invoice.pdf"
    with pytest.raises(ValidationError):
        build_invoice_pdf(out, {"lineItems": []}, settings)
    assert not out.exists()

    bad = make_invoice()
    bad["lineItems"][0]["amount"] = float("nan")
    with pytest.raises(ValidationError):
        build_invoice_pdf(out, bad, settings)
    assert not out.exists()


def test_build_writes_file(settings: Settings, tmp_path: Path) -> None:
    out = build_invoice_pdf(tmp_path / "nested" / "invoice.pdf", make_invoice(), settings)
    assert out.exists()
    assert len(_read(out.read_bytes()).pages) == 1


def test_unreadable_logo_still_renders(tmp_path: Path) -> None:
    broken = tmp_path / "logo.png"
    broken.write_bytes(b"garbage")
    text = _text(_read(generate_invoice_pdf(make_invoice(), Settings(logo_path=str(broken)))))
    assert "E2W" in text


def test_logo_is_embedded_as_image(tmp_path: Path) -> None:
    logo = tmp_path / "logo.png"
    Image.new("RGB", (300, 100), (200, 30, 30)).save(logo)

    reader = _read(generate_invoice_pdf(make_invoice(), Settings(logo_path=str(logo))))
    assert len(reader.pages[0].images) == 1


def test_serialization_failure_is_wrapped() -> None:
    pages = PageSet()
    pages.new_page().draw([TextCommand(50, 50, "x", "No-Such-Font", 10, (0, 0, 0))])
    with pytest.raises(SerializationError):
        render_pdf(pages)
