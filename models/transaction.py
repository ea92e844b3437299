"""Transaction model representing one statement line item."""

from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional
import uuid

DEFAULT_CURRENCY = "TRY"


@dataclass
class Transaction:
    """Represents one line item of a statement.

    Attributes:
        id: Unique identifier (uuid4 hex, assigned by the caller).
        statement_id: ID of the statement the line item came from.
        date: When the transaction happened (aware, UTC).
        description: Description as printed on the statement.
        merchant: Merchant name, if it could be extracted.
        amount: Positive for spending, negative for refunds and credits.
        currency: ISO currency code.
        category: Category name (not ID), or None if uncategorized.
        created_at: When the transaction was ingested.
    """

    id: str
    statement_id: str
    date: datetime
    description: str
    merchant: Optional[str]
    amount: Decimal
    currency: str
    category: Optional[str]
    created_at: datetime

    @classmethod
    def new(
        cls,
        statement_id: str,
        date: datetime,
        description: str,
        amount: Decimal,
        merchant: Optional[str] = None,
        category: Optional[str] = None,
        currency: str = DEFAULT_CURRENCY,
        created_at: Optional[datetime] = None,
    ) -> "Transaction":
        """Create a Transaction with a freshly generated ID."""
        return cls(
            id=uuid.uuid4().hex,
            statement_id=statement_id,
            date=date,
            description=description,
            merchant=merchant,
            amount=amount,
            currency=currency,
            category=category,
            created_at=created_at or datetime.now(timezone.utc),
        )

    def to_dict(self) -> dict:
        """Convert transaction to a plain dictionary."""
        return {
            "id": self.id,
            "statement_id": self.statement_id,
            "date": self.date.isoformat(),
            "description": self.description,
            "merchant": self.merchant,
            "amount": str(self.amount),
            "currency": self.currency,
            "category": self.category,
        }
