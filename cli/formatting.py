"""Small helpers for printing ledger values."""

from decimal import Decimal
from typing import Optional


def format_amount(amount: Optional[Decimal], currency: str = "TRY") -> str:
    """Format money with thousands separators and two decimals."""
    if amount is None:
        return "-"
    return f"{amount:,.2f} {currency}"


def format_percentage(value: float) -> str:
    return f"{value:+.1f}%"


def format_optional(value) -> str:
    return str(value) if value is not None else "-"
