"""Turn an extraction result into ledger records.

Parsing is best-effort: a field that cannot be parsed is stored as absent
(statement dates and amounts) or defaulted to the ingestion instant
(transaction dates). A single bad field never aborts an ingestion.
"""

from dataclasses import dataclass
from datetime import date, datetime, time, timezone
from decimal import Decimal, InvalidOperation
from typing import List, Optional, Tuple

from models.card import Card
from models.extraction import ExtractionResult
from models.statement import Statement
from models.transaction import DEFAULT_CURRENCY, Transaction
from logger import get_logger

logger = get_logger()

DATE_FORMAT = "%Y-%m-%d"
UNKNOWN_CARD_NAME = "Bilinmeyen Kart"


@dataclass
class IngestionResult:
    """Records written for one ingested statement."""

    card: Card
    card_created: bool
    statement: Statement
    transactions: List[Transaction]


def parse_date(value: Optional[str]) -> Tuple[Optional[date], bool]:
    """Parse a YYYY-MM-DD string.

    Returns:
        (date, True) on success, (None, False) otherwise. Never raises.
    """
    if not value:
        return None, False
    try:
        return datetime.strptime(value.strip(), DATE_FORMAT).date(), True
    except (ValueError, AttributeError):
        return None, False


def parse_amount(value) -> Tuple[Optional[Decimal], bool]:
    """Convert an extracted number into an exact Decimal.

    Floats go through ``str`` so 0.1 becomes Decimal("0.1").

    Returns:
        (Decimal, True) on success, (None, False) otherwise. Never raises.
    """
    if value is None or isinstance(value, bool):
        return None, False
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError):
        return None, False
    if not amount.is_finite():
        return None, False
    return amount, True


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def resolve_card(services, extraction: ExtractionResult, now: datetime) -> Tuple[Card, bool]:
    """Find the card a statement belongs to, or build a new one.

    A card is reused only when the extraction carries last four digits and
    an existing card has exactly those digits. The new card is not stored
    here; it is written together with the statement.

    Returns:
        (card, created) where created is True for a new, unsaved card.
    """
    info = extraction.card_info
    last_four = _clean(info.last_four)

    if last_four:
        existing = services.cards.find_by_last_four(last_four)
        if existing is not None:
            logger.info(f"Matched existing card '{existing.name}' by last four {last_four}")
            return existing, False

    card = Card.new(
        name=_clean(info.card_name) or UNKNOWN_CARD_NAME,
        bank=_clean(info.bank),
        last_four=last_four,
        created_at=now,
    )
    logger.info(f"Creating new card '{card.name}'")
    return card, True


def build_statement(
    extraction: ExtractionResult,
    card_id: str,
    document_path: Optional[str],
    now: datetime,
) -> Statement:
    """Build the Statement for an extraction result."""
    info = extraction.statement_info

    period_start, _ = parse_date(info.period_start)
    period_end, _ = parse_date(info.period_end)
    due_date, _ = parse_date(info.due_date)
    total_amount, _ = parse_amount(info.total_amount)
    min_payment, _ = parse_amount(info.min_payment)

    return Statement.new(
        card_id=card_id,
        created_at=now,
        period_start=period_start,
        period_end=period_end,
        total_amount=total_amount,
        min_payment=min_payment,
        due_date=due_date,
        document_path=document_path,
        raw_json=extraction.raw_json,
    )


def build_transactions(
    extraction: ExtractionResult,
    statement_id: str,
    now: datetime,
    currency: str = DEFAULT_CURRENCY,
) -> List[Transaction]:
    """Map each extracted line item to a Transaction, in order.

    Amounts keep their sign and categories are copied as given.
    """
    transactions = []
    defaulted = 0

    for item in extraction.transactions:
        day, ok = parse_date(item.date)
        if ok:
            when = datetime.combine(day, time.min, tzinfo=timezone.utc)
        else:
            when = now
            defaulted += 1

        amount, _ = parse_amount(item.amount)

        transactions.append(
            Transaction.new(
                statement_id=statement_id,
                date=when,
                description=item.description,
                merchant=item.merchant,
                amount=amount if amount is not None else Decimal("0"),
                category=item.category,
                currency=currency,
                created_at=now,
            )
        )

    if defaulted:
        logger.warning(
            f"{defaulted} transaction date(s) could not be parsed; used ingestion time"
        )

    return transactions


def normalize(
    extraction: ExtractionResult,
    services,
    document_path: Optional[str] = None,
    now: Optional[datetime] = None,
) -> IngestionResult:
    """Store one extraction result as a card, a statement and its transactions.

    The new card (if any), the statement and all transactions are written in
    a single ledger transaction.

    Args:
        extraction: Parsed extraction result.
        services: Services container.
        document_path: Where the source document is kept.
        now: Ingestion instant (defaults to the current UTC time).

    Returns:
        IngestionResult describing what was written.
    """
    now = now or datetime.now(timezone.utc)
    currency = getattr(services.config, "default_currency", None) or DEFAULT_CURRENCY

    # Card lookup and writes share one transaction so a concurrent
    # ingestion cannot create the same card twice
    with services.db_manager.transaction():
        card, card_created = resolve_card(services, extraction, now)
        statement = build_statement(extraction, card.id, document_path, now)
        transactions = build_transactions(extraction, statement.id, now, currency)

        services.statements.create_with_transactions(
            statement, transactions, card=card if card_created else None
        )

    return IngestionResult(
        card=card,
        card_created=card_created,
        statement=statement,
        transactions=transactions,
    )
