from __future__ import annotations

from datetime import date as _date
from typing import Optional

from sqlmodel import Field, SQLModel


class Transaction(SQLModel, table=True):
	id: Optional[int] = Field(default=None, primary_key=True)
	# INCOME or EXPENSE
	type: str = "INCOME"
	date: _date
	due_date: Optional[_date] = None
	category: str
	payee: str = Field(index=True)
	description: Optional[str] = None
	amount: float
	currency: str = "BDT"
	exchange_rate: Optional[float] = None
	# Amount converted to BDT with exchange_rate (equal to amount for BDT rows)
	amount_bdt: float = 0.0
	# UNPAID, PARTIALLY_PAID, PAID, OVERDUE, CANCELLED
	payment_status: str = "UNPAID"
	invoice_number: Optional[str] = Field(default=None, index=True)
	invoice_generated: bool = False
	notes: Optional[str] = None
	project_name: Optional[str] = None
	duration: Optional[str] = None
	# JSON list of line items ({title, description?, details?, amount}); NULL for single-amount rows
	line_items_json: Optional[str] = None
