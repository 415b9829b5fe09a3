from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple


@dataclass(frozen=True)
class LineItem:
    title: str
    amount: float
    description: Optional[str] = None
    # Ordered bullet strings, may be empty
    details: Tuple[str, ...] = ()


@dataclass(frozen=True)
class Totals:
    """Totals block of an invoice.

    When subtotal/discount/tax are given the caller guarantees
    ``total == subtotal - discount + tax``; nothing here re-validates it.
    """

    total: float
    subtotal: Optional[float] = None
    discount: Optional[float] = None
    tax: Optional[float] = None
    tax_rate_percent: Optional[float] = None

    @property
    def has_breakdown(self) -> bool:
        return self.subtotal is not None or self.discount is not None or self.tax is not None


@dataclass(frozen=True)
class InvoiceDocument:
    """Canonical invoice consumed by the layout engine, whatever shape the input had."""

    client: str
    invoice_number: str
    issue_date: str
    currency_code: str
    line_items: Tuple[LineItem, ...]
    totals: Totals
    is_paid: bool = False
    counterparty_address_lines: Tuple[str, ...] = field(default_factory=tuple)
    project_name: Optional[str] = None
    duration: Optional[str] = None
    notes: Optional[str] = None
