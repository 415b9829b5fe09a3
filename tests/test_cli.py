from __future__ import annotations

import json
from pathlib import Path

from pypdf import PdfReader

from billing.core.settings import Settings, save_settings
from billing.main import main

from tests.conftest import make_invoice


def _write(tmp_path: Path, data) -> Path:
    src = tmp_path / "invoice.json"
    src.write_text(json.dumps(data), encoding="utf-8")
    return src


def _settings_file(tmp_path: Path) -> Path:
    path = tmp_path / "settings.json"
    save_settings(Settings(business_name="Northwind", logo_path=None), path)
    return path


def test_cli_writes_pdf(tmp_path: Path, capsys) -> None:
    src = _write(tmp_path, make_invoice())
    out = tmp_path / "out.pdf"

    code = main([str(src), "-o", str(out), "--settings", str(_settings_file(tmp_path))])

    assert code == 0
    assert "Wrote invoice to:" in capsys.readouterr().out
    text = PdfReader(str(out)).pages[0].extract_text()
    assert "Northwind" in text


def test_cli_default_output_uses_invoice_number(tmp_path: Path) -> None:
    src = _write(tmp_path, make_invoice(number="INV-77"))
    assert main([str(src), "--settings", str(_settings_file(tmp_path))]) == 0
    assert (tmp_path / "invoice-INV-77.pdf").exists()


def test_cli_rejects_invalid_invoice(tmp_path: Path, capsys) -> None:
    src = _write(tmp_path, {"lineItems": []})
    out = tmp_path / "out.pdf"

    assert main([str(src), "-o", str(out), "--settings", str(_settings_file(tmp_path))]) == 1
    assert "Line items are required" in capsys.readouterr().err
    assert not out.exists()


def test_cli_unreadable_input(tmp_path: Path, capsys) -> None:
    src = tmp_path / "broken.json"
    src.write_text("{", encoding="utf-8")
    assert main([str(src)]) == 2
    assert "Cannot read" in capsys.readouterr().err


def test_cli_rejects_malformed_date(tmp_path: Path, capsys) -> None:
    data = {"transaction": {"payee": "Acme", "category": "Consulting", "amount": 10, "date": "31/01/2025"}}
    src = _write(tmp_path, data)
    out = tmp_path / "out.pdf"

    assert main([str(src), "-o", str(out), "--settings", str(_settings_file(tmp_path))]) == 1
    assert "Invalid invoice" in capsys.readouterr().err
    assert not out.exists()
