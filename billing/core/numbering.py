from __future__ import annotations

import calendar
from datetime import date, datetime
from typing import Optional, Union

DateLike = Union[date, datetime, str]

# Fixed English names so numbers and dates do not depend on the process locale
_MONTHS = (
	"January", "February", "March", "April", "May", "June",
	"July", "August", "September", "October", "November", "December",
)


def _to_int32(n: int) -> int:
	n &= 0xFFFFFFFF
	return n - 0x100000000 if n & 0x80000000 else n


def string_hash(s: str) -> int:
	"""31-multiplier rolling hash folded to a signed 32-bit int at every step."""
	h = 0
	for ch in s:
		h = _to_int32((h << 5) - h + ord(ch))
	return h


def as_date(val: DateLike) -> date:
	"""Coerce a date, datetime or ISO string (``2025-01-31`` / ``2025-01-31T10:00:00Z``) to a date."""
	if isinstance(val, datetime):
		return val.date()
	if isinstance(val, date):
		return val
	s = str(val).strip()
	if s.endswith("Z"):
		s = s[:-1] + "+00:00"
	try:
		return datetime.fromisoformat(s).date()
	except ValueError:
		return date.fromisoformat(s[:10])


def month_abbr(val: DateLike) -> str:
	return _MONTHS[as_date(val).month - 1][:3]


def format_long_date(val: DateLike) -> str:
	"""``date(2025, 1, 5)`` -> ``"5 January 2025"``."""
	d = as_date(val)
	return f"{d.day} {_MONTHS[d.month - 1]} {d.year}"


def format_month_year(val: DateLike) -> str:
	"""``date(2025, 1, 5)`` -> ``"Jan 2025"``."""
	d = as_date(val)
	return f"{month_abbr(d)} {d.year}"


def derive_invoice_number(payee: str, when: DateLike) -> str:
	"""
	Deterministic invoice number for records that were never assigned one.

	Format ``INV-<MON>-<NNNN>`` where NNNN is a hash of payee + month, e.g. ``INV-JAN-0421``.
	"""
	month = month_abbr(when).upper()
	n = abs(string_hash(f"{payee or ''}{month}")) % 10000
	return f"INV-{month}-{n:04d}"


def invoice_date_for(when: DateLike, due_date: Optional[DateLike] = None) -> str:
	"""Issue date shown on an invoice: the due date if set, else the last day of the month."""
	if due_date:
		return format_long_date(due_date)
	d = as_date(when)
	last = calendar.monthrange(d.year, d.month)[1]
	return format_long_date(date(d.year, d.month, last))
