from datetime import date
from pathlib import Path
import sys

# Ensure project root is on sys.path when running this script directly
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from billing.data.db import create_db_and_tables
from billing.data.repo import create_transaction, generate_invoice_for_transaction


def main() -> None:
    create_db_and_tables()

    single = create_transaction({
        'date': date.today(),
        'category': 'Consulting',
        'payee': 'SmokeTest Client',
        'amount': 250,
        'currency': 'GBP',
        'exchange_rate': 150.0,
        'payment_status': 'PAID',
    })
    detailed = create_transaction({
        'date': date.today(),
        'category': 'Development',
        'payee': 'SmokeTest Client',
        'amount': 300,
        'currency': 'USD',
        'exchange_rate': 120.0,
        'line_items': [
            {'title': 'A', 'details': ['one', 'two'], 'amount': 100},
            {'title': 'B', 'amount': 200},
        ],
    })

    out_dir = ROOT / "assets" / "samples"
    out_dir.mkdir(parents=True, exist_ok=True)
    for tx in (single, detailed):
        name, pdf = generate_invoice_for_transaction(tx.id)
        out = out_dir / f"smoke-{tx.id}-{name}"
        out.write_bytes(pdf)
        print(f"Transaction {tx.id}: {out} ({len(pdf)} bytes)")


if __name__ == "__main__":
    main()
