"""Inclusive calendar date range used by ledger queries."""

from dataclasses import dataclass
from datetime import date
import calendar


@dataclass(frozen=True)
class DateRange:
    """A [start, end] range of calendar days, inclusive on both ends.

    Attributes:
        start: First day in the range.
        end: Last day in the range.
    """

    start: date
    end: date

    def __post_init__(self):
        if self.end < self.start:
            raise ValueError(f"Range end {self.end} is before start {self.start}")

    def __contains__(self, day: date) -> bool:
        return self.start <= day <= self.end

    @classmethod
    def for_month(cls, day: date) -> "DateRange":
        """The calendar month containing ``day``."""
        last_day = calendar.monthrange(day.year, day.month)[1]
        return cls(date(day.year, day.month, 1), date(day.year, day.month, last_day))
