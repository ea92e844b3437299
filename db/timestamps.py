"""Conversions between Python dates and the epoch seconds stored in the ledger.

All stored instants are UTC. A calendar date is stored as the epoch of its
UTC midnight.
"""

from datetime import date, datetime, time, timezone
from typing import Optional


def datetime_to_timestamp(value: datetime) -> float:
    """Convert a datetime to epoch seconds; naive values are taken as UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.timestamp()


def timestamp_to_datetime(value: float) -> datetime:
    """Convert epoch seconds to an aware UTC datetime."""
    return datetime.fromtimestamp(value, tz=timezone.utc)


def date_to_timestamp(value: date) -> float:
    """Epoch seconds of the UTC midnight starting ``value``."""
    return datetime.combine(value, time.min, tzinfo=timezone.utc).timestamp()


def timestamp_to_date(value: float) -> date:
    return timestamp_to_datetime(value).date()


def optional_date_to_timestamp(value: Optional[date]) -> Optional[float]:
    return date_to_timestamp(value) if value is not None else None


def optional_timestamp_to_date(value: Optional[float]) -> Optional[date]:
    return timestamp_to_date(value) if value is not None else None
