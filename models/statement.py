"""Statement model representing one ingested billing-period document."""

from dataclasses import dataclass
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Optional
import uuid


@dataclass
class Statement:
    """Represents one credit-card statement.

    Attributes:
        id: Unique identifier (uuid4 hex, assigned by the caller).
        card_id: ID of the card this statement belongs to.
        period_start: First day of the billing period, if it could be parsed.
        period_end: Last day of the billing period, if it could be parsed.
        total_amount: Statement balance, if present.
        min_payment: Minimum payment due, if present.
        due_date: Payment due date, if it could be parsed.
        document_path: Where the source document is stored.
        raw_json: Verbatim extraction payload, kept for auditing.
        created_at: When the statement was ingested.
    """

    id: str
    card_id: str
    period_start: Optional[date]
    period_end: Optional[date]
    total_amount: Optional[Decimal]
    min_payment: Optional[Decimal]
    due_date: Optional[date]
    document_path: Optional[str]
    raw_json: Optional[str]
    created_at: datetime

    @classmethod
    def new(cls, card_id: str, created_at: Optional[datetime] = None, **fields) -> "Statement":
        """Create a Statement with a freshly generated ID.

        Any field not given defaults to None.
        """
        values = {
            "period_start": None,
            "period_end": None,
            "total_amount": None,
            "min_payment": None,
            "due_date": None,
            "document_path": None,
            "raw_json": None,
        }
        values.update(fields)
        return cls(
            id=uuid.uuid4().hex,
            card_id=card_id,
            created_at=created_at or datetime.now(timezone.utc),
            **values,
        )
