"""Card service for database operations."""

from typing import List, Optional
from db.timestamps import datetime_to_timestamp, timestamp_to_datetime
from models.card import Card
from logger import get_logger

logger = get_logger()

_CARD_SELECT_FIELDS = "id, name, bank, last_four, created_at"


class CardService:
    """Service for managing cards."""

    def __init__(self, db_manager):
        """Initialize the card service.

        Args:
            db_manager: Database manager instance for database operations.
        """
        self.db_manager = db_manager

    def find_all(self) -> List[Card]:
        """Get all cards from the database.

        Returns:
            List of Card objects, newest first.
        """
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                f"SELECT {_CARD_SELECT_FIELDS} FROM cards ORDER BY created_at DESC, id"
            )
            return [self._row_to_card(row) for row in cursor.fetchall()]

    def find(self, card_id: str) -> Optional[Card]:
        """Get a single card by ID.

        Args:
            card_id: The card ID to find.

        Returns:
            Card object if found, None otherwise.
        """
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                f"SELECT {_CARD_SELECT_FIELDS} FROM cards WHERE id = ?", (card_id,)
            )
            row = cursor.fetchone()
            return self._row_to_card(row) if row else None

    def find_by_last_four(self, last_four: str) -> Optional[Card]:
        """Get the oldest card whose last four digits match exactly.

        Args:
            last_four: Last four digits of the card number.

        Returns:
            Card object if found, None otherwise.
        """
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                f"""
                SELECT {_CARD_SELECT_FIELDS}
                FROM cards
                WHERE last_four = ?
                ORDER BY created_at, id
                LIMIT 1
                """,
                (last_four,),
            )
            row = cursor.fetchone()
            return self._row_to_card(row) if row else None

    def create(self, card: Card) -> Card:
        """Insert a card.

        Args:
            card: Card with its ID already assigned.

        Returns:
            The same Card object.

        Raises:
            sqlite3.IntegrityError: If a card with the same ID exists.
        """
        with self.db_manager.transaction() as conn:
            conn.execute(
                f"INSERT INTO cards ({_CARD_SELECT_FIELDS}) VALUES (?, ?, ?, ?, ?)",
                (
                    card.id,
                    card.name,
                    card.bank,
                    card.last_four,
                    datetime_to_timestamp(card.created_at),
                ),
            )
        logger.debug(f"Created card {card.id} ({card.name})")
        return card

    def update(self, card: Card) -> bool:
        """Update name, bank and last four digits of a card.

        Args:
            card: Card carrying the new values.

        Returns:
            True if the card was updated, False if it no longer exists.
        """
        with self.db_manager.transaction() as conn:
            cursor = conn.execute(
                "UPDATE cards SET name = ?, bank = ?, last_four = ? WHERE id = ?",
                (card.name, card.bank, card.last_four, card.id),
            )
            return cursor.rowcount > 0

    def delete(self, card_id: str) -> bool:
        """Delete a card together with its statements and their transactions.

        The cascade runs in a single transaction.

        Args:
            card_id: The card ID to delete.

        Returns:
            True if the card was deleted, False if not found.
        """
        with self.db_manager.transaction() as conn:
            txn_cursor = conn.execute(
                """
                DELETE FROM transactions
                WHERE statement_id IN (SELECT id FROM statements WHERE card_id = ?)
                """,
                (card_id,),
            )
            stmt_cursor = conn.execute(
                "DELETE FROM statements WHERE card_id = ?", (card_id,)
            )
            cursor = conn.execute("DELETE FROM cards WHERE id = ?", (card_id,))
            deleted = cursor.rowcount > 0

        if deleted:
            logger.info(
                f"Deleted card {card_id} with {stmt_cursor.rowcount} statement(s) "
                f"and {txn_cursor.rowcount} transaction(s)"
            )
        return deleted

    def _row_to_card(self, row: tuple) -> Card:
        """Convert a database row to a Card object."""
        return Card(
            id=row[0],
            name=row[1],
            bank=row[2],
            last_four=row[3],
            created_at=timestamp_to_datetime(row[4]),
        )
