"""Month-to-month spending comparison."""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import List

from tools.dashboard import group_by_category
from tools.periods import month_range


def percentage_change(before: Decimal, after: Decimal) -> float:
    """Change from ``before`` to ``after`` in percent; 0 when ``before`` is 0."""
    if before == 0:
        return 0.0
    return float((after - before) / before * 100)


@dataclass
class CategoryComparison:
    category: str
    month1_amount: Decimal
    month2_amount: Decimal

    @property
    def difference(self) -> Decimal:
        return self.month2_amount - self.month1_amount

    @property
    def percentage_change(self) -> float:
        return percentage_change(self.month1_amount, self.month2_amount)


@dataclass
class MonthComparison:
    """Totals and per-category changes between two calendar months.

    Differences are ``month2 - month1``; percentages are relative to month1.
    """

    month1: date
    month2: date
    month1_total: Decimal
    month2_total: Decimal
    category_comparisons: List[CategoryComparison]

    @property
    def total_difference(self) -> Decimal:
        return self.month2_total - self.month1_total

    @property
    def total_percentage_change(self) -> float:
        return percentage_change(self.month1_total, self.month2_total)


def compare_months(services, month1: date, month2: date) -> MonthComparison:
    """Compare spending of the calendar months containing two dates.

    Categories present in only one month count as 0 in the other. The
    comparison list is sorted by absolute difference, largest swing first,
    so big drops rank alongside big increases.

    Args:
        services: Services container.
        month1: Any day in the baseline month.
        month2: Any day in the month compared against the baseline.

    Returns:
        MonthComparison for the two months.
    """
    first = group_by_category(services.transactions.sum_by_category(month_range(month1)))
    second = group_by_category(services.transactions.sum_by_category(month_range(month2)))

    comparisons = [
        CategoryComparison(
            category=name,
            month1_amount=first.get(name, Decimal("0")),
            month2_amount=second.get(name, Decimal("0")),
        )
        for name in set(first) | set(second)
    ]
    comparisons.sort(key=lambda c: (-abs(c.difference), c.category))

    return MonthComparison(
        month1=month1,
        month2=month2,
        month1_total=sum(first.values(), Decimal("0")),
        month2_total=sum(second.values(), Decimal("0")),
        category_comparisons=comparisons,
    )
