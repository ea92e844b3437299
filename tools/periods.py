"""Resolve logical reporting periods into concrete date ranges.

Calendar-anchored periods (this month, last month, this year, a specific
month) align to calendar boundaries. Rolling periods (last 3/6 months, last
year) are offsets from the reference date. ``LAST_YEAR`` is rolling while
``THIS_YEAR`` is calendar-anchored.
"""

import re
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import List, Union

from dateutil.relativedelta import relativedelta

from models.date_range import DateRange


class Period(Enum):
    """Preset reporting periods."""

    THIS_MONTH = "this-month"
    LAST_MONTH = "last-month"
    LAST_3_MONTHS = "last-3-months"
    LAST_6_MONTHS = "last-6-months"
    THIS_YEAR = "this-year"
    LAST_YEAR = "last-year"


@dataclass(frozen=True)
class SpecificMonth:
    """The calendar month containing ``month``."""

    month: date


PeriodSelector = Union[Period, SpecificMonth]

_MONTH_PATTERN = re.compile(r"^(\d{4})[-/](\d{1,2})$")


def _as_date(value: Union[date, datetime]) -> date:
    return value.date() if isinstance(value, datetime) else value


def month_range(day: Union[date, datetime]) -> DateRange:
    """First through last day of the calendar month containing ``day``."""
    return DateRange.for_month(_as_date(day))


def last_n_months(now: Union[date, datetime], n: int) -> DateRange:
    """Rolling window from ``now`` minus ``n`` calendar months through ``now``."""
    if n < 1:
        raise ValueError(f"Number of months must be positive, got {n}")
    today = _as_date(now)
    return DateRange(today - relativedelta(months=n), today)


def resolve_period(selector: PeriodSelector, now: Union[date, datetime]) -> DateRange:
    """Map a period selector to an inclusive day range.

    Args:
        selector: A Period preset or a SpecificMonth.
        now: Reference instant; only its calendar day is used.

    Returns:
        DateRange for the selector.

    Raises:
        ValueError: If the selector is not recognised.
    """
    today = _as_date(now)

    if isinstance(selector, SpecificMonth):
        return month_range(selector.month)

    if selector is Period.THIS_MONTH:
        return month_range(today)

    if selector is Period.LAST_MONTH:
        return month_range(today.replace(day=1) - relativedelta(months=1))

    if selector is Period.LAST_3_MONTHS:
        return last_n_months(today, 3)

    if selector is Period.LAST_6_MONTHS:
        return last_n_months(today, 6)

    if selector is Period.THIS_YEAR:
        return DateRange(date(today.year, 1, 1), today)

    if selector is Period.LAST_YEAR:
        return DateRange(today - relativedelta(years=1), today)

    raise ValueError(f"Unknown period selector: {selector!r}")


def recent_months(now: Union[date, datetime], count: int = 12) -> List[date]:
    """First day of the ``count`` calendar months ending at ``now``, newest first."""
    first = _as_date(now).replace(day=1)
    return [first - relativedelta(months=i) for i in range(count)]


def parse_period(text: str) -> PeriodSelector:
    """Parse a period name or a YYYY-MM month into a selector.

    Args:
        text: e.g. "this-month", "last-6-months", "2024-02" or "2024/02".

    Returns:
        The matching selector.

    Raises:
        ValueError: If the text is neither a preset name nor a month.
    """
    value = text.strip().lower().replace("_", "-")

    for period in Period:
        if period.value == value:
            return period

    match = _MONTH_PATTERN.match(value)
    if match:
        year, month = int(match.group(1)), int(match.group(2))
        if not 1 <= month <= 12:
            raise ValueError("Month must be between 1 and 12")
        return SpecificMonth(date(year, month, 1))

    choices = ", ".join(p.value for p in Period)
    raise ValueError(f"Unknown period '{text}'. Use one of: {choices}, or YYYY-MM")
