from __future__ import annotations

import io
import json
import zipfile
from datetime import date
from pathlib import Path

import pytest
from pypdf import PdfReader

from billing.data import db
from billing.data.models import Transaction
from billing.data.repo import (
    create_transaction,
    export_invoices,
    generate_invoice_for_transaction,
    generate_invoices,
    get_transaction,
    invoice_input_for_transaction,
    list_transactions,
)


@pytest.fixture(autouse=True)
def temp_db(tmp_path: Path, monkeypatch):
    monkeypatch.setattr(db, "_ENGINE", None)
    engine = db.configure(tmp_path / "billing.db")
    db.create_db_and_tables()
    yield engine
    engine.dispose()


def _tx(**overrides):
    dto = {
        "date": date(2025, 1, 10),
        "category": "Consulting",
        "payee": "Acme Ltd",
        "amount": 250,
        "currency": "GBP",
        "exchange_rate": 150.0,
    }
    dto.update(overrides)
    return create_transaction(dto)


def test_create_converts_to_bdt_and_persists() -> None:
    tx = _tx()
    assert tx.id is not None
    assert tx.amount_bdt == 37500.0

    loaded = get_transaction(tx.id)
    assert loaded is not None
    assert loaded.payee == "Acme Ltd"
    assert loaded.currency == "GBP"
    assert loaded.payment_status == "UNPAID"


def test_bdt_amount_is_its_own_conversion() -> None:
    tx = _tx(currency="BDT", amount=1200, exchange_rate=None)
    assert tx.amount_bdt == 1200.0


@pytest.mark.parametrize("missing", ["date", "payee", "category"])
def test_create_requires_core_fields(missing) -> None:
    dto = {"date": date(2025, 1, 1), "payee": "X", "category": "Y", "amount": 1}
    dto[missing] = None
    with pytest.raises(ValueError):
        create_transaction(dto)


def test_list_filters_and_orders_newest_first() -> None:
    old = _tx(date=date(2024, 12, 1), payment_status="PAID")
    new = _tx(date=date(2025, 2, 1))

    assert [t.id for t in list_transactions()] == [new.id, old.id]
    assert [t.id for t in list_transactions(payment_status="paid")] == [old.id]
    assert len(list_transactions(limit=1)) == 1


def test_single_amount_row_uses_legacy_shape() -> None:
    data = invoice_input_for_transaction(_tx(due_date=date(2025, 2, 5)))
    assert "lineItems" not in data
    assert data["transaction"]["payee"] == "Acme Ltd"
    assert data["invoiceDate"] == "5 February 2025"
    assert data["invoiceNumber"].startswith("INV-JAN-")


def test_line_item_row_uses_modern_shape() -> None:
    items = [{"title": "A", "details": ["one"], "amount": 100}, {"title": "B", "amount": 150}]
    data = invoice_input_for_transaction(_tx(line_items=items, payment_status="PAID"))
    assert data["lineItems"] == items
    assert data["totals"] == {"total": 250.0}
    assert data["isPaid"] is True
    assert data["invoiceDate"] == "31 January 2025"


def test_generate_marks_row_and_names_file(settings) -> None:
    tx = _tx(payee="Acme, Ltd.")
    name, pdf = generate_invoice_for_transaction(tx.id, settings)

    assert name == "Invoice_Acme Ltd_Jan.pdf"
    text = PdfReader(io.BytesIO(pdf)).pages[0].extract_text()
    assert "£250.00" in text

    stored = get_transaction(tx.id)
    assert stored.invoice_generated is True
    assert stored.invoice_number.startswith("INV-JAN-")
    assert stored.invoice_number in text


def test_generate_missing_transaction() -> None:
    with pytest.raises(LookupError):
        generate_invoice_for_transaction(9999)


def test_generate_invoices_skips_failures(settings, caplog) -> None:
    good = _tx()
    bad = _tx(line_items=[{"title": "A", "amount": 1}])
    # Corrupt the stored breakdown so normalization rejects it
    with db.session_scope() as s:
        row = s.get(Transaction, bad.id)
        row.line_items_json = json.dumps([{"title": "A", "amount": "n/a"}])
        s.add(row)

    results = generate_invoices([good.id, 4242, bad.id], settings)
    assert [name for name, _ in results] == ["Invoice_Acme Ltd_Jan.pdf"]
    assert "4242" in caplog.text


def test_export_zip_and_merged(settings) -> None:
    a = _tx()
    b = _tx(payee="Globex", date=date(2025, 2, 3))

    with zipfile.ZipFile(io.BytesIO(export_invoices([a.id, b.id], settings))) as zf:
        assert zf.namelist() == ["Invoice_Acme Ltd_Jan.pdf", "Invoice_Globex_Feb.pdf"]

    merged = PdfReader(io.BytesIO(export_invoices([a.id, b.id], settings, merged=True)))
    assert len(merged.pages) == 2


def test_export_with_nothing_to_render() -> None:
    with pytest.raises(LookupError):
        export_invoices([1234])
