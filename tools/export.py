"""CSV export of transactions."""

import csv
import io
from typing import List, Optional

from models.transaction import Transaction

EXPORT_HEADERS = ["Date", "Description", "Merchant", "Category", "Amount", "Currency"]


def _flatten(value: Optional[str]) -> str:
    # Commas become semicolons so columns stay aligned for naive readers
    return (value or "").replace(",", ";")


def export_transactions_csv(transactions: List[Transaction]) -> str:
    """Render transactions as CSV text.

    Embedded commas in free-text fields are replaced with semicolons. This
    is lossy but keeps every row at six columns even for tools that split
    on commas.

    Args:
        transactions: Transactions to export, in output order.

    Returns:
        CSV text with a header row.
    """
    output = io.StringIO()
    writer = csv.writer(output, lineterminator="\n")
    writer.writerow(EXPORT_HEADERS)

    for t in transactions:
        writer.writerow(
            [
                t.date.date().isoformat(),
                _flatten(t.description),
                _flatten(t.merchant),
                _flatten(t.category),
                str(t.amount),
                t.currency,
            ]
        )

    return output.getvalue()
