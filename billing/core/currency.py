from __future__ import annotations

import math
from decimal import Decimal, ROUND_HALF_EVEN, ROUND_HALF_UP, InvalidOperation
from typing import Optional


# Static lookup; unknown codes render as the raw code.
# The taka sign is missing from the standard PDF fonts, so BDT keeps its code.
CURRENCY_SYMBOLS = {
	"GBP": "£",
	"USD": "$",
	"EUR": "€",
	"BDT": "BDT ",
}


def to_decimal(x: object) -> Decimal:
	"""Best-effort conversion to Decimal via str to avoid binary float artifacts."""
	try:
		return Decimal(str(x))
	except (InvalidOperation, ValueError, TypeError):
		return Decimal("0")


def round_money(x: float | Decimal) -> float:
	"""Round to 2 decimals using banker's rounding (round-half-to-even) and return float."""
	d = to_decimal(x)
	q = d.quantize(Decimal("0.01"), rounding=ROUND_HALF_EVEN)
	return float(q)


def fmt_money(x: float | Decimal, width: Optional[int] = None, grouping: bool = True) -> str:
	"""
	Format a monetary value for display with exactly two decimals.

	Display rounding is plain fixed-point (half away from zero) on the decimal
	string form of the value; no business rounding rule is applied here.
	"""
	q = to_decimal(x).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
	s = f"{q:,.2f}" if grouping else f"{q:.2f}"
	return s.rjust(width) if isinstance(width, int) and width > 0 else s


def currency_symbol(code: str) -> str:
	code = (code or "").strip().upper()
	return CURRENCY_SYMBOLS.get(code, code)


def format_amount(x: float | Decimal, currency: str, negative: bool = False) -> str:
	"""Symbol-prefixed display amount, e.g. ``format_amount(100, "GBP") == "£100.00"``.

	``negative`` renders a leading minus sign in front of the symbol (used for discounts).
	"""
	d = to_decimal(x)
	sign = ""
	if d < 0:
		sign, d = "-", -d
	if negative:
		sign = "-"
	return f"{sign}{currency_symbol(currency)}{fmt_money(d)}"


def convert_currency(amount: float | Decimal, rate: float | Decimal) -> float:
	"""Convert ``amount`` with an exchange ``rate`` and round with banker's rounding.

	Raises ValueError for a non-positive rate or a non-finite amount.
	"""
	if not math.isfinite(float(amount)):
		raise ValueError("Invalid number for currency rounding")
	if float(rate) <= 0:
		raise ValueError("Exchange rate must be positive")
	return round_money(to_decimal(amount) * to_decimal(rate))
