"""Statement service for database operations."""

from decimal import Decimal
from typing import List, Optional
from db.timestamps import (
    datetime_to_timestamp,
    optional_date_to_timestamp,
    optional_timestamp_to_date,
    timestamp_to_datetime,
)
from errors import ConstraintError
from models.card import Card
from models.statement import Statement
from models.transaction import Transaction
from logger import get_logger

logger = get_logger()

_STATEMENT_FIELDS = """id, card_id, period_start, period_end, total_amount, min_payment,
       due_date, document_path, raw_json, created_at"""

_STATEMENT_PLACEHOLDERS = f"({', '.join(['?'] * len(_STATEMENT_FIELDS.split(',')))})"


def _optional_money(value: Optional[Decimal]) -> Optional[float]:
    return float(value) if value is not None else None


class StatementService:
    """Service for managing statements."""

    def __init__(self, db_manager, cards, transactions):
        """Initialize the statement service.

        Args:
            db_manager: Database manager instance for database operations.
            cards: CardService used to create new cards during ingestion.
            transactions: TransactionService used to write statement line items.
        """
        self.db_manager = db_manager
        self.cards = cards
        self.transactions = transactions

    def create(self, statement: Statement) -> Statement:
        """Insert a statement.

        Args:
            statement: Statement with its ID already assigned.

        Returns:
            The same Statement object.

        Raises:
            ConstraintError: If the referenced card does not exist.
        """
        with self.db_manager.transaction() as conn:
            cursor = conn.execute(
                "SELECT 1 FROM cards WHERE id = ?", (statement.card_id,)
            )
            if cursor.fetchone() is None:
                raise ConstraintError(
                    f"Card {statement.card_id} does not exist "
                    f"(statement {statement.id})"
                )

            conn.execute(
                f"INSERT INTO statements ({_STATEMENT_FIELDS}) VALUES {_STATEMENT_PLACEHOLDERS}",
                (
                    statement.id,
                    statement.card_id,
                    optional_date_to_timestamp(statement.period_start),
                    optional_date_to_timestamp(statement.period_end),
                    _optional_money(statement.total_amount),
                    _optional_money(statement.min_payment),
                    optional_date_to_timestamp(statement.due_date),
                    statement.document_path,
                    statement.raw_json,
                    datetime_to_timestamp(statement.created_at),
                ),
            )

        return statement

    def create_with_transactions(
        self,
        statement: Statement,
        transactions: List[Transaction],
        card: Optional[Card] = None,
    ) -> Statement:
        """Write a statement and its transactions as one atomic unit.

        Readers never see the statement without its transactions, and a
        failure leaves the ledger untouched.

        Args:
            statement: Statement to insert.
            transactions: Its line items.
            card: A new card to insert first, if the statement needs one.

        Returns:
            The inserted Statement.

        Raises:
            ConstraintError: If a referenced parent does not exist.
        """
        with self.db_manager.transaction():
            if card is not None:
                self.cards.create(card)
            self.create(statement)
            self.transactions.bulk_create(transactions)

        logger.info(
            f"Stored statement {statement.id} with {len(transactions)} transaction(s)"
        )
        return statement

    def find(self, statement_id: str) -> Optional[Statement]:
        """Get a single statement by ID.

        Args:
            statement_id: The statement ID to find.

        Returns:
            Statement object if found, None otherwise.
        """
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                f"SELECT {_STATEMENT_FIELDS} FROM statements WHERE id = ?",
                (statement_id,),
            )
            row = cursor.fetchone()
            return self._row_to_statement(row) if row else None

    def find_all(self, card_id: Optional[str] = None) -> List[Statement]:
        """Get statements, optionally for one card.

        Args:
            card_id: Optional card ID to filter by.

        Returns:
            List of Statement objects ordered by created_at (newest first).
        """
        query = f"SELECT {_STATEMENT_FIELDS} FROM statements"
        params = []

        if card_id is not None:
            query += " WHERE card_id = ?"
            params.append(card_id)

        query += " ORDER BY created_at DESC, id"

        with self.db_manager.connect() as conn:
            cursor = conn.execute(query, params)
            return [self._row_to_statement(row) for row in cursor.fetchall()]

    def update(self, statement: Statement) -> bool:
        """Update a statement's header fields.

        The raw extraction output and creation time are never rewritten.

        Args:
            statement: Statement with updated fields.

        Returns:
            True if the statement was updated, False if not found.

        Raises:
            ConstraintError: If the referenced card does not exist.
        """
        with self.db_manager.transaction() as conn:
            cursor = conn.execute(
                "SELECT 1 FROM cards WHERE id = ?", (statement.card_id,)
            )
            if cursor.fetchone() is None:
                raise ConstraintError(
                    f"Card {statement.card_id} does not exist "
                    f"(statement {statement.id})"
                )

            cursor = conn.execute(
                """
                UPDATE statements
                SET card_id = ?, period_start = ?, period_end = ?, total_amount = ?,
                    min_payment = ?, due_date = ?, document_path = ?
                WHERE id = ?
                """,
                (
                    statement.card_id,
                    optional_date_to_timestamp(statement.period_start),
                    optional_date_to_timestamp(statement.period_end),
                    _optional_money(statement.total_amount),
                    _optional_money(statement.min_payment),
                    optional_date_to_timestamp(statement.due_date),
                    statement.document_path,
                    statement.id,
                ),
            )
            return cursor.rowcount > 0

    def delete(self, statement_id: str) -> bool:
        """Delete a statement and its transactions in one transaction.

        Args:
            statement_id: The statement ID to delete.

        Returns:
            True if the statement was deleted, False if not found.
        """
        with self.db_manager.transaction() as conn:
            txn_cursor = conn.execute(
                "DELETE FROM transactions WHERE statement_id = ?", (statement_id,)
            )
            cursor = conn.execute(
                "DELETE FROM statements WHERE id = ?", (statement_id,)
            )
            deleted = cursor.rowcount > 0

        if deleted:
            logger.info(
                f"Deleted statement {statement_id} with {txn_cursor.rowcount} transaction(s)"
            )
        return deleted

    def _row_to_statement(self, row: tuple) -> Statement:
        """Convert a database row to a Statement object."""
        return Statement(
            id=row[0],
            card_id=row[1],
            period_start=optional_timestamp_to_date(row[2]),
            period_end=optional_timestamp_to_date(row[3]),
            total_amount=Decimal(str(row[4])) if row[4] is not None else None,
            min_payment=Decimal(str(row[5])) if row[5] is not None else None,
            due_date=optional_timestamp_to_date(row[6]),
            document_path=row[7],
            raw_json=row[8],
            created_at=timestamp_to_datetime(row[9]),
        )
