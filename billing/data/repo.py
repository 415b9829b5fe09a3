from __future__ import annotations

from datetime import date
import json
import logging
from typing import Any, Dict, Iterable, List, Optional, Tuple

from sqlmodel import select

from billing.core.currency import convert_currency, round_money
from billing.core.numbering import derive_invoice_number, invoice_date_for
from billing.data.db import get_session, session_scope
from billing.data.models import Transaction
from billing.pdf.bulk import bundle_zip, invoice_filename, merge_pdfs
from billing.pdf.invoice_generator import generate_invoice_pdf

logger = logging.getLogger(__name__)


def create_transaction(tx_dto: Dict[str, Any]) -> Transaction:
	"""
	Create a transaction row.

	tx_dto structure:
	  {
		'date': datetime.date,  # required
		'category': str,  # required
		'payee': str,  # required
		'amount': float,  # required, in 'currency'
		'currency': str,  # default BDT
		'exchange_rate': float | None,  # required for non-BDT currencies to fill amount_bdt
		'line_items': [ {title, description?, details?, amount}, ... ] | None,
		... any other Transaction column
	  }
	"""
	tx_date = tx_dto.get("date")
	payee = (tx_dto.get("payee") or "").strip()
	category = (tx_dto.get("category") or "").strip()
	if not (isinstance(tx_date, date) and payee and category):
		raise ValueError("Missing required fields: date, payee, category")

	amount = round_money(float(tx_dto.get("amount", 0) or 0))
	currency = str(tx_dto.get("currency") or "BDT").upper()
	rate = tx_dto.get("exchange_rate")
	if currency == "BDT":
		amount_bdt = amount
	elif rate:
		amount_bdt = convert_currency(amount, rate)
	else:
		amount_bdt = float(tx_dto.get("amount_bdt", 0) or 0)

	items = tx_dto.get("line_items")
	columns = {k: v for k, v in tx_dto.items() if k in Transaction.model_fields}
	columns.update(
		payee=payee,
		category=category,
		amount=amount,
		currency=currency,
		amount_bdt=amount_bdt,
		line_items_json=json.dumps(items) if items else None,
	)
	with session_scope() as s:
		tx = Transaction(**columns)
		s.add(tx)
		s.flush()
		s.refresh(tx)
	return tx


def get_transaction(tx_id: int) -> Optional[Transaction]:
	with get_session() as s:
		return s.get(Transaction, tx_id)


def list_transactions(payment_status: Optional[str] = None, limit: Optional[int] = None) -> List[Transaction]:
	"""Return transactions ordered by date DESC, id DESC."""
	with get_session() as s:
		stmt = select(Transaction).order_by(Transaction.date.desc(), Transaction.id.desc())
		if payment_status:
			stmt = stmt.where(Transaction.payment_status == payment_status.upper())
		if isinstance(limit, int) and limit > 0:
			stmt = stmt.limit(limit)
		return list(s.exec(stmt).all())


def _display_amount(tx: Transaction) -> float:
	return float(tx.amount_bdt if tx.currency == "BDT" else tx.amount)


def invoice_input_for_transaction(tx: Transaction) -> Dict[str, Any]:
	"""Invoice input for a stored transaction.

	Rows with stored line items produce the modern shape; single-amount rows
	produce the legacy ``{"transaction": ...}`` shape.
	"""
	number = tx.invoice_number or derive_invoice_number(tx.payee, tx.date)
	issue_date = invoice_date_for(tx.date, tx.due_date)
	is_paid = tx.payment_status == "PAID"

	if tx.line_items_json:
		return {
			"metadata": {
				"client": tx.payee,
				"project": tx.project_name,
				"duration": tx.duration,
				"invoiceNumber": number,
				"notes": tx.notes,
			},
			"currency": tx.currency,
			"lineItems": json.loads(tx.line_items_json),
			"totals": {"total": _display_amount(tx)},
			"isPaid": is_paid,
			"invoiceDate": issue_date,
		}

	return {
		"transaction": {
			"payee": tx.payee,
			"category": tx.category,
			"amount": float(tx.amount),
			"amountBDT": float(tx.amount_bdt),
			"currency": tx.currency,
			"date": tx.date.isoformat(),
			"dueDate": tx.due_date.isoformat() if tx.due_date else None,
			"description": tx.description,
			"invoiceNumber": tx.invoice_number,
			"paymentStatus": tx.payment_status,
			"projectName": tx.project_name,
			"duration": tx.duration,
			"notes": tx.notes,
		},
		"isPaid": is_paid,
		"invoiceNumber": number,
		"invoiceDate": issue_date,
	}


def mark_invoice_generated(tx_id: int) -> None:
	with session_scope() as s:
		tx = s.get(Transaction, tx_id)
		if tx is None:
			return
		tx.invoice_generated = True
		if not tx.invoice_number:
			tx.invoice_number = derive_invoice_number(tx.payee, tx.date)
		s.add(tx)


def generate_invoice_for_transaction(tx_id: int, settings=None) -> Tuple[str, bytes]:
	"""Render the invoice for one stored transaction. Returns (filename, pdf bytes).

	Raises LookupError when the transaction does not exist.
	"""
	tx = get_transaction(tx_id)
	if tx is None:
		raise LookupError(f"Transaction not found: {tx_id}")
	pdf = generate_invoice_pdf(invoice_input_for_transaction(tx), settings)
	mark_invoice_generated(tx_id)
	logger.info("Generated invoice for transaction %s (%d bytes)", tx_id, len(pdf))
	return invoice_filename(tx.payee, tx.date), pdf


def generate_invoices(tx_ids: Iterable[int], settings=None) -> List[Tuple[str, bytes]]:
	"""Render several invoices; ids that are missing or fail to render are logged and skipped."""
	out: List[Tuple[str, bytes]] = []
	for tx_id in tx_ids:
		try:
			out.append(generate_invoice_for_transaction(tx_id, settings))
		except (LookupError, ValueError) as exc:
			logger.error("Failed to generate invoice for %s: %s", tx_id, exc)
	return out


def export_invoices(tx_ids: Iterable[int], settings=None, merged: bool = False) -> bytes:
	"""Bulk export: a zip of one PDF per transaction, or one merged PDF when ``merged``."""
	rendered = generate_invoices(tx_ids, settings)
	if not rendered:
		raise LookupError("No invoices could be generated")
	if merged:
		return merge_pdfs(pdf for _, pdf in rendered)
	return bundle_zip(rendered)
