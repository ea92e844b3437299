"""AI-generated observations about spending in a date range."""

from typing import List

from models.category import OTHER_CATEGORY
from models.date_range import DateRange
from models.insight import Insight
from models.transaction import Transaction
from logger import get_logger

logger = get_logger()


def summarize_transactions(transactions: List[Transaction]) -> List[dict]:
    """Reduce transactions to the fields sent to the model."""
    return [
        {
            "date": t.date.isoformat(),
            "merchant": t.merchant or t.description,
            "amount": float(t.amount),
            "category": t.category or OTHER_CATEGORY,
        }
        for t in transactions
    ]


def get_insights(services, provider, date_range: DateRange) -> List[Insight]:
    """Ask a provider for insights on the transactions in a range.

    Args:
        services: Services container.
        provider: ExtractionProvider used to generate the insights.
        date_range: Days to include.

    Returns:
        List of Insight. Empty without calling the provider when the range
        has no transactions.

    Raises:
        ExtractionError: If the provider response cannot be parsed.
    """
    transactions = services.transactions.find_in_range(date_range)
    if not transactions:
        logger.debug(f"No transactions in {date_range.start} - {date_range.end}")
        return []

    return provider.generate_insights(summarize_transactions(transactions))
