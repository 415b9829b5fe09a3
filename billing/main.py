from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from billing.core.errors import InvoiceError, ValidationError
from billing.core.settings import load_settings
from billing.pdf.invoice_generator import build_invoice_pdf

logger = logging.getLogger(__name__)


def _default_out(src: Path, data: dict) -> Path:
    number = (data.get("metadata") or {}).get("invoiceNumber") or data.get("invoiceNumber") or "download"
    return src.with_name(f"invoice-{number}.pdf")


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog="billing", description="Render an invoice JSON file to an A4 PDF.")
    parser.add_argument("input", type=Path, help="Invoice JSON (modern lineItems shape or legacy transaction shape).")
    parser.add_argument("-o", "--output", type=Path, default=None, help="Output PDF path (default: invoice-<number>.pdf).")
    parser.add_argument("--settings", type=Path, default=None, help="settings.json to use for business details and logo.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log progress to stderr.")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        data = json.loads(args.input.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        print(f"Cannot read {args.input}: {exc}", file=sys.stderr)
        return 2

    settings = load_settings(args.settings)
    out = args.output or _default_out(args.input, data if isinstance(data, dict) else {})
    try:
        build_invoice_pdf(out, data, settings)
    except ValidationError as exc:
        print(f"Invalid invoice: {exc}", file=sys.stderr)
        return 1
    except InvoiceError:
        logger.exception("Failed to generate invoice")
        return 1
    print(f"Wrote invoice to: {out}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
