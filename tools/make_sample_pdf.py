from __future__ import annotations

from datetime import date as _date
from datetime import datetime
from pathlib import Path
import sys

# Ensure we can import the billing package when running this script directly
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from billing.core.settings import load_settings
from billing.pdf.invoice_generator import build_invoice_pdf


def _short_invoice() -> dict:
    return {
        "metadata": {
            "client": "Northwind Traders",
            "project": "Website refresh",
            "duration": "22 Oct - 23 Dec 2024",
            "invoiceNumber": "SAMPLE-001",
            "notes": "Payment due within 14 days by bank transfer.",
            "billingAddress": ["12 Harbour Street", "Bristol, BS1 4XX"],
        },
        "currency": "GBP",
        "lineItems": [
            {
                "title": "Discovery & Strategy Phase",
                "description": "Workshops and stakeholder interviews",
                "details": ["Initial consultation & 5 discovery meetings", "Competitor audit"],
                "amount": 1200.00,
            },
            {"title": "Design", "details": ["Wireframes", "Visual design for 8 templates"], "amount": 2400.00},
            {"title": "Build", "amount": 3150.50},
        ],
        "totals": {"subtotal": 6750.50, "tax": 1350.10, "taxRatePercent": 20, "total": 8100.60},
        "isPaid": True,
        "invoiceDate": _date.today().strftime("%d %B %Y"),
    }


def _long_invoice() -> dict:
    items = []
    for n in range(1, 41):
        items.append({
            "title": f"Sprint {n}",
            "details": [
                "Feature development and code review",
                "QA pass across supported browsers and devices, including regression of previously shipped work",
                "Release notes",
            ],
            "amount": 450.00 + n,
        })
    return {
        "metadata": {"client": "Contoso Ltd", "invoiceNumber": "SAMPLE-040"},
        "currency": "USD",
        "lineItems": items,
    }


def main() -> None:
    settings = load_settings()
    out_dir = ROOT / "assets" / "samples"
    out_dir.mkdir(parents=True, exist_ok=True)

    for name, data in (("SAMPLE_SHORT", _short_invoice()), ("SAMPLE_LONG", _long_invoice())):
        out_pdf = out_dir / f"{name}.pdf"
        try:
            build_invoice_pdf(out_pdf, data, settings)
        except PermissionError:
            # If the file is open/locked, write to a timestamped file instead
            ts = datetime.now().strftime("%Y%m%d-%H%M%S")
            out_pdf = out_dir / f"{name}-{ts}.pdf"
            build_invoice_pdf(out_pdf, data, settings)
        print(f"Wrote sample to: {out_pdf}")


if __name__ == "__main__":
    main()
