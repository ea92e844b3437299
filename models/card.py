"""Card model representing one credit card."""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional
import uuid


@dataclass
class Card:
    """Represents a credit card that statements are filed under.

    Attributes:
        id: Unique identifier (uuid4 hex, assigned by the caller).
        name: Display name.
        bank: Issuing bank, if known.
        last_four: Up to four digits of the card number, used to match
                   incoming statements to an existing card.
        created_at: When the card was created.
    """

    id: str
    name: str
    bank: Optional[str]
    last_four: Optional[str]
    created_at: datetime

    @classmethod
    def new(
        cls,
        name: str,
        bank: Optional[str] = None,
        last_four: Optional[str] = None,
        created_at: Optional[datetime] = None,
    ) -> "Card":
        """Create a Card with a freshly generated ID."""
        return cls(
            id=uuid.uuid4().hex,
            name=name,
            bank=bank,
            last_four=last_four,
            created_at=created_at or datetime.now(timezone.utc),
        )

    def to_dict(self) -> dict:
        """Convert card to a plain dictionary."""
        return {
            "id": self.id,
            "name": self.name,
            "bank": self.bank,
            "last_four": self.last_four,
            "created_at": self.created_at.isoformat(),
        }
