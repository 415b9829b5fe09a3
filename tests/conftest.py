from __future__ import annotations

from typing import Any, Dict, List, Optional

import pytest

from billing.core.settings import Settings
from billing.pdf.metrics import BOLD_FONT, REGULAR_FONT, FontMetrics, FontPair


@pytest.fixture
def fonts() -> FontPair:
    return FontPair(regular=FontMetrics(REGULAR_FONT), bold=FontMetrics(BOLD_FONT))


@pytest.fixture
def settings() -> Settings:
    # No logo configured: header renders the text wordmark
    return Settings(logo_path=None)


def make_invoice(
    n_items: int = 1,
    details: int = 0,
    amount: float = 100.0,
    currency: str = "GBP",
    number: str = "INV-TEST-1",
    totals: Optional[Dict[str, Any]] = None,
    **extra: Any,
) -> Dict[str, Any]:
    """Modern-shape invoice input with ``n_items`` items of ``details`` bullets each."""
    items: List[Dict[str, Any]] = []
    for i in range(1, n_items + 1):
        items.append({
            "title": f"Item {i}",
            "details": [f"Detail {i}.{d}" for d in range(1, details + 1)],
            "amount": amount,
        })
    data: Dict[str, Any] = {
        "metadata": {"client": "Test Client", "invoiceNumber": number},
        "currency": currency,
        "lineItems": items,
        "invoiceDate": "31 January 2025",
    }
    if totals is not None:
        data["totals"] = totals
    data.update(extra)
    return data
