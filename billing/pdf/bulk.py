from __future__ import annotations

import io
import re
import zipfile
from typing import Iterable, Tuple

from pypdf import PdfReader, PdfWriter

from billing.core.numbering import DateLike, month_abbr

_UNSAFE = re.compile(r"[^a-zA-Z0-9 ]")


def invoice_filename(payee: str, when: DateLike) -> str:
	"""``Invoice_<payee>_<Mon>.pdf`` with everything but letters, digits and spaces removed."""
	safe = _UNSAFE.sub("", payee or "").strip() or "Invoice"
	return f"Invoice_{safe}_{month_abbr(when)}.pdf"


def bundle_zip(named_pdfs: Iterable[Tuple[str, bytes]]) -> bytes:
	"""Zip (filename, pdf bytes) pairs. Duplicate names get a numeric suffix."""
	buf = io.BytesIO()
	seen: dict[str, int] = {}
	with zipfile.ZipFile(buf, "w", compression=zipfile.ZIP_DEFLATED) as zf:
		for name, pdf in named_pdfs:
			n = seen.get(name, 0)
			seen[name] = n + 1
			if n:
				stem, dot, ext = name.rpartition(".")
				name = f"{stem}-{n + 1}.{ext}" if dot else f"{name}-{n + 1}"
			zf.writestr(name, pdf)
	return buf.getvalue()


def merge_pdfs(pdfs: Iterable[bytes]) -> bytes:
	"""Concatenate several PDFs, pages kept in order."""
	writer = PdfWriter()
	for pdf in pdfs:
		reader = PdfReader(io.BytesIO(pdf))
		for page in reader.pages:
			writer.add_page(page)
	out = io.BytesIO()
	writer.write(out)
	return out.getvalue()
