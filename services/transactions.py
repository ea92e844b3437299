"""Transaction service for database operations."""

from collections import OrderedDict
from datetime import date, timedelta
from decimal import Decimal
from typing import Dict, List, Optional
from db.timestamps import (
    date_to_timestamp,
    datetime_to_timestamp,
    timestamp_to_datetime,
)
from errors import ConstraintError
from models.date_range import DateRange
from models.transaction import Transaction

# SQL Query Constants
_TRANSACTION_FIELDS = """id, statement_id, date, description, merchant, amount,
       currency, category, created_at"""

_TRANSACTION_SELECT_FIELDS = ", ".join(
    f"t.{field.strip()}" for field in _TRANSACTION_FIELDS.split(",")
)

# Automatically generate placeholders from field count
_TRANSACTION_INSERT_PLACEHOLDERS = (
    f"({', '.join(['?'] * len(_TRANSACTION_FIELDS.split(',')))})"
)

_UPDATABLE_FIELDS = {"date", "description", "merchant", "amount", "currency", "category"}


def _range_bounds(date_range: DateRange):
    """Epoch bounds for an inclusive day range: [start midnight, day-after-end midnight)."""
    return (
        date_to_timestamp(date_range.start),
        date_to_timestamp(date_range.end + timedelta(days=1)),
    )


class TransactionService:
    """Service for managing transactions."""

    def __init__(self, db_manager):
        """Initialize the transaction service.

        Args:
            db_manager: Database manager instance for database operations.
        """
        self.db_manager = db_manager

    def create(self, transaction: Transaction) -> Transaction:
        """Create a single transaction in the database.

        Args:
            transaction: Transaction object to insert.

        Returns:
            The same Transaction object.

        Raises:
            ConstraintError: If the referenced statement does not exist.
        """
        self.bulk_create([transaction])
        return transaction

    def bulk_create(self, transactions: List[Transaction]) -> int:
        """Create multiple transactions in the database in a single transaction.

        Args:
            transactions: List of Transaction objects to insert.

        Returns:
            Number of transactions inserted.

        Raises:
            ConstraintError: If any referenced statement does not exist. Nothing
                             is inserted in that case.
        """
        if not transactions:
            return 0

        statement_ids = sorted({t.statement_id for t in transactions})

        with self.db_manager.transaction() as conn:
            placeholders = ", ".join(["?"] * len(statement_ids))
            cursor = conn.execute(
                f"SELECT id FROM statements WHERE id IN ({placeholders})",
                statement_ids,
            )
            missing = set(statement_ids) - {row[0] for row in cursor.fetchall()}
            if missing:
                raise ConstraintError(
                    f"Statement(s) do not exist: {', '.join(sorted(missing))}"
                )

            data = [
                (
                    t.id,
                    t.statement_id,
                    datetime_to_timestamp(t.date),
                    t.description,
                    t.merchant,
                    float(t.amount),
                    t.currency,
                    t.category,
                    datetime_to_timestamp(t.created_at),
                )
                for t in transactions
            ]

            conn.executemany(
                f"""
                INSERT INTO transactions ({_TRANSACTION_FIELDS})
                VALUES {_TRANSACTION_INSERT_PLACEHOLDERS}
                """,
                data,
            )

        return len(transactions)

    def batch_update(
        self, transactions: List[Transaction], field_names: List[str]
    ) -> int:
        """Update specified fields for multiple transactions.

        Transactions that no longer exist are skipped silently.

        Args:
            transactions: List of Transaction objects to update.
            field_names: List of field names to update. Supported fields:
                        'date', 'description', 'merchant', 'amount', 'currency', 'category'

        Returns:
            Number of transactions updated.

        Raises:
            ValueError: If unsupported field names are provided.
        """
        if not transactions:
            return 0

        if not field_names:
            raise ValueError("field_names cannot be empty")

        invalid_fields = set(field_names) - _UPDATABLE_FIELDS
        if invalid_fields:
            raise ValueError(f"Unsupported field names: {invalid_fields}")

        set_clause = ", ".join([f"{field} = ?" for field in field_names])

        data = []
        for t in transactions:
            row_data = []
            for field in field_names:
                value = getattr(t, field)
                if field == "date":
                    value = datetime_to_timestamp(value)
                elif field == "amount":
                    value = float(value)
                row_data.append(value)
            row_data.append(t.id)
            data.append(tuple(row_data))

        with self.db_manager.transaction() as conn:
            updated = 0
            for row in data:
                cursor = conn.execute(
                    f"UPDATE transactions SET {set_clause} WHERE id = ?", row
                )
                updated += cursor.rowcount
            return updated

    def update(self, transaction: Transaction, field_names: List[str]) -> bool:
        """Update specified fields for a single transaction.

        Args:
            transaction: Transaction object to update.
            field_names: List of field names to update (see batch_update).

        Returns:
            True if the transaction was updated, False if it does not exist.
        """
        return self.batch_update([transaction], field_names) > 0

    def update_category(self, transaction_id: str, category: Optional[str]) -> bool:
        """Set (or clear) the category label of one transaction.

        Args:
            transaction_id: The transaction ID.
            category: Category name, or None to clear it.

        Returns:
            True if the transaction was updated, False if it does not exist.
        """
        return self.bulk_update_category([transaction_id], category) > 0

    def bulk_update_category(
        self, transaction_ids: List[str], category: Optional[str]
    ) -> int:
        """Set (or clear) the category label of several transactions.

        Args:
            transaction_ids: IDs of the transactions to relabel.
            category: Category name, or None to clear it.

        Returns:
            Number of transactions updated.
        """
        ids = list(dict.fromkeys(transaction_ids))
        if not ids:
            return 0

        placeholders = ", ".join(["?"] * len(ids))
        with self.db_manager.transaction() as conn:
            cursor = conn.execute(
                f"UPDATE transactions SET category = ? WHERE id IN ({placeholders})",
                [category, *ids],
            )
            return cursor.rowcount

    def delete(self, transaction_id: str) -> bool:
        """Delete a single transaction.

        Returns:
            True if deleted, False if not found.
        """
        return self.bulk_delete([transaction_id]) > 0

    def bulk_delete(self, transaction_ids: List[str]) -> int:
        """Delete several transactions.

        Returns:
            Number of transactions deleted.
        """
        ids = list(dict.fromkeys(transaction_ids))
        if not ids:
            return 0

        placeholders = ", ".join(["?"] * len(ids))
        with self.db_manager.transaction() as conn:
            cursor = conn.execute(
                f"DELETE FROM transactions WHERE id IN ({placeholders})", ids
            )
            return cursor.rowcount

    def find(self, transaction_id: str) -> Optional[Transaction]:
        """Get a single transaction by ID.

        Args:
            transaction_id: The transaction ID.

        Returns:
            Transaction object if found, None otherwise.
        """
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                f"""
                SELECT {_TRANSACTION_SELECT_FIELDS}
                FROM transactions t
                WHERE t.id = ?
                """,
                (transaction_id,),
            )
            row = cursor.fetchone()

            if row:
                return self._row_to_transaction(row)
            return None

    def find_all(
        self,
        *,
        card_id: Optional[str] = None,
        statement_id: Optional[str] = None,
        category: Optional[str] = None,
        search: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> List[Transaction]:
        """Get transactions matching the given filters.

        Args:
            card_id: Only transactions on statements of this card.
            statement_id: Only transactions of this statement.
            category: Exact category name.
            search: Case-insensitive substring of description or merchant.
            limit: Maximum number of rows to return.

        Returns:
            List of Transaction objects ordered by date (newest first).
        """
        query = f"SELECT {_TRANSACTION_SELECT_FIELDS} FROM transactions t"
        params = []

        if card_id is not None:
            query += " INNER JOIN statements s ON t.statement_id = s.id"

        query += " WHERE 1 = 1"

        if statement_id is not None:
            query += " AND t.statement_id = ?"
            params.append(statement_id)

        if card_id is not None:
            query += " AND s.card_id = ?"
            params.append(card_id)

        if category is not None:
            query += " AND t.category = ?"
            params.append(category)

        if search:
            needle = search.casefold()
            query += (
                " AND (instr(casefold(t.description), ?) > 0"
                " OR instr(casefold(t.merchant), ?) > 0)"
            )
            params.extend([needle, needle])

        query += " ORDER BY t.date DESC, t.rowid"

        if limit is not None:
            query += " LIMIT ?"
            params.append(limit)

        with self.db_manager.connect() as conn:
            cursor = conn.execute(query, params)
            return [self._row_to_transaction(row) for row in cursor.fetchall()]

    def count_by_statement(self, statement_id: str) -> int:
        """Number of transactions belonging to a statement."""
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                "SELECT COUNT(*) FROM transactions WHERE statement_id = ?",
                (statement_id,),
            )
            return cursor.fetchone()[0]

    def find_in_range(
        self, date_range: DateRange, limit: Optional[int] = None
    ) -> List[Transaction]:
        """Get transactions dated within an inclusive day range.

        Args:
            date_range: Days to include.
            limit: Maximum number of rows to return.

        Returns:
            List of Transaction objects ordered by date (newest first).
        """
        start, end = _range_bounds(date_range)
        query = f"""
            SELECT {_TRANSACTION_SELECT_FIELDS}
            FROM transactions t
            WHERE t.date >= ? AND t.date < ?
            ORDER BY t.date DESC, t.rowid
        """
        params = [start, end]

        if limit is not None:
            query += " LIMIT ?"
            params.append(limit)

        with self.db_manager.connect() as conn:
            cursor = conn.execute(query, params)
            return [self._row_to_transaction(row) for row in cursor.fetchall()]

    def count_in_range(self, date_range: DateRange) -> int:
        """Number of transactions dated within an inclusive day range."""
        start, end = _range_bounds(date_range)
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                "SELECT COUNT(*) FROM transactions WHERE date >= ? AND date < ?",
                (start, end),
            )
            return cursor.fetchone()[0]

    def sum_in_range(self, date_range: DateRange) -> Decimal:
        """Exact sum of amounts dated within an inclusive day range.

        Returns:
            Decimal total, Decimal("0") when there are no transactions.
        """
        return sum(self.sum_by_category(date_range).values(), Decimal("0"))

    def sum_by_category(self, date_range: DateRange) -> Dict[Optional[str], Decimal]:
        """Exact sums of amounts per raw category label within a day range.

        Summing happens in Decimal, not in SQL, so no float error accumulates.

        Args:
            date_range: Days to include.

        Returns:
            Mapping of category name (None for uncategorized) to total.
        """
        start, end = _range_bounds(date_range)
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                """
                SELECT category, amount
                FROM transactions
                WHERE date >= ? AND date < ?
                ORDER BY rowid
                """,
                (start, end),
            )
            rows = cursor.fetchall()

        totals: Dict[Optional[str], Decimal] = OrderedDict()
        for category, amount in rows:
            totals[category] = totals.get(category, Decimal("0")) + Decimal(str(amount))
        return totals

    def distinct_months(self) -> List[date]:
        """Calendar months that have at least one transaction.

        Returns:
            First day of each month, most recent first. Empty if the ledger
            has no transactions.
        """
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                """
                SELECT DISTINCT strftime('%Y-%m', date, 'unixepoch') AS month
                FROM transactions
                ORDER BY month DESC
                """
            )
            rows = cursor.fetchall()

        months = []
        for (month,) in rows:
            year, month_num = month.split("-")
            months.append(date(int(year), int(month_num), 1))
        return months

    def _row_to_transaction(self, row: tuple) -> Transaction:
        """Convert a database row to a Transaction object."""
        return Transaction(
            id=row[0],
            statement_id=row[1],
            date=timestamp_to_datetime(row[2]),
            description=row[3],
            merchant=row[4],
            amount=Decimal(str(row[5])),
            currency=row[6],
            category=row[7],
            created_at=timestamp_to_datetime(row[8]),
        )
