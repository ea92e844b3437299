"""Spending analytics over a date range."""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Dict, List, Optional, Union

from dateutil.relativedelta import relativedelta

from models.category import FALLBACK_COLOR, OTHER_CATEGORY
from models.date_range import DateRange
from models.transaction import Transaction
from tools.periods import month_range, recent_months

MONTH_ABBREVIATIONS = [
    "Oca", "Şub", "Mar", "Nis", "May", "Haz",
    "Tem", "Ağu", "Eyl", "Eki", "Kas", "Ara",
]

SERIES_MONTHS = 6
RECENT_TRANSACTION_LIMIT = 10


@dataclass
class CategoryBreakdown:
    category: str
    amount: Decimal
    percentage: float
    color: str


@dataclass
class MonthlyAmount:
    year: int
    month: int
    label: str
    amount: Decimal


@dataclass
class DashboardStats:
    """Snapshot of spending for one date range.

    Attributes:
        total_spending: Sum of all amounts in the range (refunds reduce it).
        transaction_count: Number of transactions in the range.
        category_breakdown: Per-category sums, largest first.
        monthly_series: Totals for the six calendar months ending at the
                        range's end date, oldest first.
        recent_transactions: The ten newest transactions in the range.
    """

    total_spending: Decimal
    transaction_count: int
    category_breakdown: List[CategoryBreakdown]
    monthly_series: List[MonthlyAmount]
    recent_transactions: List[Transaction]


def percentage_of(part: Decimal, total: Decimal) -> float:
    """``part`` as a percentage of ``total``; 0 when total is 0."""
    if total == 0:
        return 0.0
    return float(part / total * 100)


def group_by_category(raw_totals: Dict[Optional[str], Decimal]) -> Dict[str, Decimal]:
    """Fold uncategorized sums into the Other bucket.

    Args:
        raw_totals: Sums keyed by stored category label (None allowed).

    Returns:
        Sums keyed by display category name.
    """
    grouped: Dict[str, Decimal] = {}
    for category, amount in raw_totals.items():
        name = category or OTHER_CATEGORY
        grouped[name] = grouped.get(name, Decimal("0")) + amount
    return grouped


def get_category_breakdown(services, date_range: DateRange) -> List[CategoryBreakdown]:
    """Per-category spending within a range with percentage shares.

    Args:
        services: Services container.
        date_range: Days to include.

    Returns:
        List of CategoryBreakdown sorted by amount, largest first.
    """
    grouped = group_by_category(services.transactions.sum_by_category(date_range))
    total = sum(grouped.values(), Decimal("0"))
    colors = {c.name: c.color for c in services.categories.find_all()}

    breakdown = [
        CategoryBreakdown(
            category=name,
            amount=amount,
            percentage=percentage_of(amount, total),
            color=colors.get(name, FALLBACK_COLOR),
        )
        for name, amount in grouped.items()
    ]
    breakdown.sort(key=lambda item: (-item.amount, item.category))
    return breakdown


def get_monthly_series(
    services, end: Union[date, datetime], months: int = SERIES_MONTHS
) -> List[MonthlyAmount]:
    """Totals of the calendar months ending at the month containing ``end``.

    Args:
        services: Services container.
        end: Anchor date; its month is the last entry.
        months: Number of months in the series.

    Returns:
        List of MonthlyAmount, oldest first.
    """
    anchor = end.date() if isinstance(end, datetime) else end
    series = []
    for i in range(months - 1, -1, -1):
        target = anchor - relativedelta(months=i)
        series.append(
            MonthlyAmount(
                year=target.year,
                month=target.month,
                label=MONTH_ABBREVIATIONS[target.month - 1],
                amount=services.transactions.sum_in_range(month_range(target)),
            )
        )
    return series


def get_dashboard_stats(services, date_range: DateRange) -> DashboardStats:
    """Compute the dashboard snapshot for a date range.

    Args:
        services: Services container.
        date_range: Days to include.

    Returns:
        DashboardStats for the range.
    """
    breakdown = get_category_breakdown(services, date_range)

    return DashboardStats(
        total_spending=sum((item.amount for item in breakdown), Decimal("0")),
        transaction_count=services.transactions.count_in_range(date_range),
        category_breakdown=breakdown,
        monthly_series=get_monthly_series(services, date_range.end),
        recent_transactions=services.transactions.find_in_range(
            date_range, limit=RECENT_TRANSACTION_LIMIT
        ),
    )


def available_months(services, now: Union[date, datetime]) -> List[date]:
    """Months that have transactions, or the last 12 months if there are none.

    Returns:
        First day of each month, newest first.
    """
    months = services.transactions.distinct_months()
    if months:
        return months
    return recent_months(now, 12)
