"""
Turn caller-supplied invoice data into one canonical InvoiceDocument.

Two input shapes are accepted:

- modern: ``{"metadata": {...}, "currency": "GBP", "lineItems": [...],
  "totals": {...}, "isPaid": bool, "invoiceDate": str}``
- legacy: ``{"transaction": {...}, "isPaid": bool, "invoiceNumber": str,
  "invoiceDate": str}`` with one implicit line item.

The shape is decided once in parse_input(); the layout engine never sees raw input.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from billing.core.currency import to_decimal
from billing.core.errors import ValidationError
from billing.core.numbering import (
    derive_invoice_number,
    format_long_date,
    format_month_year,
    as_date,
    invoice_date_for,
)
from billing.pdf.document import InvoiceDocument, LineItem, Totals

DEFAULT_CURRENCY = "GBP"
DEFAULT_CLIENT = "Client"
DEFAULT_INVOICE_NUMBER = "INV-001"


@dataclass(frozen=True)
class LegacyInvoiceInput:
    transaction: Mapping[str, Any]
    is_paid: Optional[bool] = None
    invoice_number: Optional[str] = None
    invoice_date: Optional[str] = None
    project_name: Optional[str] = None
    duration: Optional[str] = None


@dataclass(frozen=True)
class ModernInvoiceInput:
    line_items: List[Mapping[str, Any]]
    metadata: Mapping[str, Any] = field(default_factory=dict)
    currency: Optional[str] = None
    totals: Optional[Mapping[str, Any]] = None
    is_paid: bool = False
    invoice_date: Optional[str] = None
    # Fallback source for client/currency/number when metadata omits them
    transaction: Optional[Mapping[str, Any]] = None


InvoiceInput = Union[LegacyInvoiceInput, ModernInvoiceInput]


def _str_or_none(val: Any) -> Optional[str]:
    if val is None:
        return None
    s = str(val).strip()
    return s or None


def _finite(val: Any, what: str) -> float:
    if isinstance(val, bool):
        raise ValidationError(f"{what} must be a number, got {val!r}")
    try:
        num = float(val)
    except (TypeError, ValueError):
        raise ValidationError(f"{what} must be a number, got {val!r}") from None
    if not math.isfinite(num):
        raise ValidationError(f"{what} must be finite, got {val!r}")
    return num


def _flag(val: Any, what: str) -> Optional[bool]:
    if val is None or isinstance(val, bool):
        return val
    raise ValidationError(f"{what} must be true or false, got {val!r}")


def _date(val: Any, what: str) -> Optional[date]:
    if not val:
        return None
    try:
        return as_date(val)
    except (TypeError, ValueError):
        raise ValidationError(f"{what} must be an ISO date, got {val!r}") from None


def _optional_finite(val: Any, what: str) -> Optional[float]:
    return None if val is None else _finite(val, what)


def parse_input(raw: Mapping[str, Any]) -> InvoiceInput:
    """Resolve which input shape ``raw`` is. Legacy means a transaction and no lineItems."""
    if not isinstance(raw, Mapping):
        raise ValidationError("Invoice input must be a JSON object")

    tx = raw.get("transaction")
    if tx is not None and not isinstance(tx, Mapping):
        raise ValidationError("transaction must be an object")

    if tx is not None and not raw.get("lineItems"):
        return LegacyInvoiceInput(
            transaction=tx,
            is_paid=_flag(raw.get("isPaid"), "isPaid"),
            invoice_number=_str_or_none(raw.get("invoiceNumber")),
            invoice_date=_str_or_none(raw.get("invoiceDate")),
            project_name=_str_or_none(raw.get("projectName")),
            duration=_str_or_none(raw.get("duration")),
        )

    items = raw.get("lineItems")
    if items is None:
        items = []
    if not isinstance(items, list):
        raise ValidationError("lineItems must be a list")
    metadata = raw.get("metadata") or {}
    if not isinstance(metadata, Mapping):
        raise ValidationError("metadata must be an object")
    totals = raw.get("totals")
    if totals is not None and not isinstance(totals, Mapping):
        raise ValidationError("totals must be an object")
    return ModernInvoiceInput(
        line_items=items,
        metadata=metadata,
        currency=_str_or_none(raw.get("currency")),
        totals=totals,
        is_paid=bool(_flag(raw.get("isPaid"), "isPaid")),
        invoice_date=_str_or_none(raw.get("invoiceDate")),
        transaction=tx,
    )


def _line_item(raw: Any, position: int) -> LineItem:
    if not isinstance(raw, Mapping):
        raise ValidationError(f"line item {position} must be an object")
    title = _str_or_none(raw.get("title"))
    if title is None:
        raise ValidationError(f"line item {position} has no title")
    details = raw.get("details") or []
    if isinstance(details, str):
        details = [details]
    if not isinstance(details, (list, tuple)):
        raise ValidationError(f"line item {position} details must be a list")
    return LineItem(
        title=title,
        amount=_finite(raw.get("amount"), f"line item {position} amount"),
        description=_str_or_none(raw.get("description")),
        details=tuple(str(d) for d in details if _str_or_none(d) is not None),
    )


def _totals(raw: Optional[Mapping[str, Any]], items: Tuple[LineItem, ...]) -> Totals:
    # Exact sum; rounding is left to display formatting
    computed = float(sum((to_decimal(i.amount) for i in items), Decimal("0")))
    if not raw:
        return Totals(total=computed)
    total = raw.get("total")
    return Totals(
        total=computed if total is None else _finite(total, "total"),
        subtotal=_optional_finite(raw.get("subtotal"), "subtotal"),
        discount=_optional_finite(raw.get("discount"), "discount"),
        tax=_optional_finite(raw.get("tax"), "tax"),
        tax_rate_percent=_optional_finite(
            raw.get("taxRatePercent", raw.get("taxRate")), "taxRatePercent"
        ),
    )


def _address_lines(*sources: Optional[Mapping[str, Any]]) -> Tuple[str, ...]:
    for src in sources:
        if not src:
            continue
        lines = src.get("billingAddress")
        if isinstance(lines, str):
            lines = lines.splitlines()
        if lines:
            return tuple(s for s in (str(x).strip() for x in lines) if s)
    return ()


def _transaction_amount(tx: Mapping[str, Any]) -> float:
    currency = str(tx.get("currency") or "").upper()
    if currency == "BDT" and tx.get("amountBDT") is not None:
        return _finite(tx.get("amountBDT"), "transaction amountBDT")
    return _finite(tx.get("amount"), "transaction amount")


def _normalize_legacy(inp: LegacyInvoiceInput, today: date) -> InvoiceDocument:
    tx = inp.transaction
    payee = _str_or_none(tx.get("payee")) or DEFAULT_CLIENT
    when = _date(tx.get("date"), "transaction date") or today
    due = _date(tx.get("dueDate"), "transaction dueDate")
    amount = _transaction_amount(tx)

    category = _str_or_none(tx.get("category")) or "Services"
    prefix = payee if category.upper() == "OTHER EXPENSES" else category
    item = LineItem(
        title=f"{prefix} - {format_month_year(when)}",
        amount=amount,
        description=_str_or_none(tx.get("description")),
    )

    is_paid = inp.is_paid
    if is_paid is None:
        is_paid = str(tx.get("paymentStatus") or "").upper() == "PAID"

    return InvoiceDocument(
        client=payee,
        invoice_number=(
            inp.invoice_number
            or _str_or_none(tx.get("invoiceNumber"))
            or derive_invoice_number(payee, when)
        ),
        issue_date=inp.invoice_date or invoice_date_for(when, due),
        currency_code=(_str_or_none(tx.get("currency")) or DEFAULT_CURRENCY).upper(),
        line_items=(item,),
        totals=Totals(total=amount),
        is_paid=bool(is_paid),
        counterparty_address_lines=_address_lines(tx),
        project_name=inp.project_name or _str_or_none(tx.get("projectName")),
        duration=inp.duration or _str_or_none(tx.get("duration")),
        notes=_str_or_none(tx.get("notes")),
    )


def _normalize_modern(inp: ModernInvoiceInput, today: date, default_currency: str) -> InvoiceDocument:
    if not inp.line_items:
        raise ValidationError("Line items are required")
    items = tuple(_line_item(raw, n) for n, raw in enumerate(inp.line_items, start=1))

    meta = inp.metadata
    tx: Mapping[str, Any] = inp.transaction or {}
    client = _str_or_none(meta.get("client")) or _str_or_none(tx.get("payee")) or DEFAULT_CLIENT

    tx_date = _date(tx.get("date"), "transaction date")
    number = _str_or_none(meta.get("invoiceNumber")) or _str_or_none(tx.get("invoiceNumber"))
    if number is None:
        number = derive_invoice_number(client, tx_date) if tx_date else DEFAULT_INVOICE_NUMBER

    if inp.invoice_date:
        issue_date = inp.invoice_date
    elif tx_date:
        issue_date = format_long_date(tx_date)
    else:
        issue_date = format_long_date(today)

    currency = inp.currency or _str_or_none(tx.get("currency")) or default_currency

    return InvoiceDocument(
        client=client,
        invoice_number=number,
        issue_date=issue_date,
        currency_code=currency.upper(),
        line_items=items,
        totals=_totals(inp.totals, items),
        is_paid=inp.is_paid,
        counterparty_address_lines=_address_lines(meta, tx),
        project_name=_str_or_none(meta.get("project")),
        duration=_str_or_none(meta.get("duration")),
        notes=_str_or_none(meta.get("notes")),
    )


def normalize(
    inp: Union[InvoiceInput, Dict[str, Any]],
    *,
    today: Optional[date] = None,
    default_currency: str = DEFAULT_CURRENCY,
) -> InvoiceDocument:
    """Build the canonical document.

    Raises ValidationError for an empty line item list or a non-finite amount/total.
    ``today`` is only used when the input carries no date at all.
    """
    if not isinstance(inp, (LegacyInvoiceInput, ModernInvoiceInput)):
        inp = parse_input(inp)
    today = today or date.today()
    if isinstance(inp, LegacyInvoiceInput):
        return _normalize_legacy(inp, today)
    return _normalize_modern(inp, today, default_currency)
