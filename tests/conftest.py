"""Shared pytest fixtures for all tests."""

import sqlite3
from datetime import datetime, timezone
from decimal import Decimal

import pytest

from config import Config, get_migrations_dir
from db.manager import DatabaseManager
from llm.providers.base import ExtractionProvider
from models.extraction import ExtractionResult
from models.insight import InsightsResult
from services.base import Services
from tests.helpers import run_migrations


@pytest.fixture
def test_db():
    """Create an in-memory SQLite database for testing.

    Yields:
        sqlite3.Connection: Connection to in-memory database.
    """
    conn = sqlite3.connect(":memory:", check_same_thread=False)
    yield conn
    conn.close()


@pytest.fixture
def test_config(tmp_path):
    """Create a test configuration pointing to a temporary directory.

    Args:
        tmp_path: pytest tmp_path fixture for temporary directory.

    Returns:
        Config: Test configuration object.
    """
    return Config(
        base_dir=tmp_path / "finans",
        db_data_dir=tmp_path / "finans" / "db",
        db_filename="test.db",
        log_level="DEBUG",
        log_dir=tmp_path / "finans" / "logs",
        archive_enabled=False,
        archive_dir=tmp_path / "finans" / "statements",
        llm_provider="openai",
        llm_openai_api_key="",
        llm_openai_model="gpt-4o-mini",
    )


@pytest.fixture
def db_manager_with_schema(test_config, test_db):
    """Create a DatabaseManager over an in-memory ledger with all migrations applied.

    Args:
        test_config: Test configuration fixture.
        test_db: In-memory database connection fixture.

    Returns:
        DatabaseManager: Database manager with schema ready.
    """
    run_migrations(test_db, get_migrations_dir())
    return DatabaseManager(test_config, connection=test_db)


@pytest.fixture
def services(test_config, db_manager_with_schema):
    """Create a Services container with test database.

    Args:
        test_config: Test configuration fixture.
        db_manager_with_schema: Database manager with schema set up.

    Returns:
        Services: Services container for testing.
    """
    return Services(test_config, db_manager=db_manager_with_schema)


class StubProvider(ExtractionProvider):
    """Provider that returns canned extraction and insights payloads."""

    name = "stub"

    def __init__(self, payload=None, error=None, insights_payload=None):
        self.payload = payload
        self.error = error
        self.insights_payload = insights_payload
        self.calls = []
        self.insight_calls = []

    def extract_statement(self, document: bytes, filename: str) -> ExtractionResult:
        self.calls.append((document, filename))
        if self.error is not None:
            raise self.error
        return ExtractionResult.from_json(self.payload)

    def generate_insights(self, transactions):
        self.insight_calls.append(transactions)
        if self.error is not None:
            raise self.error
        return InsightsResult.from_json(self.insights_payload).insights


@pytest.fixture
def stub_provider():
    """Factory for StubProvider instances."""
    return StubProvider


@pytest.fixture
def statement_pdf(tmp_path):
    """A small file that looks like a PDF."""
    path = tmp_path / "ekstre.pdf"
    path.write_bytes(b"%PDF-1.4\n% test statement\n")
    return path


@pytest.fixture
def add_transaction(services):
    """Insert a transaction on a shared card and statement.

    Returns:
        Callable taking (day, amount, category=None, description=..., merchant=None).
    """
    from models.card import Card
    from models.statement import Statement
    from models.transaction import Transaction

    card = services.cards.create(Card.new("Test Kart", last_four="1234"))
    statement = services.statements.create(Statement.new(card.id))

    def _add(day, amount, category=None, description="Alışveriş", merchant=None):
        when = datetime(day.year, day.month, day.day, 12, 0, tzinfo=timezone.utc)
        transaction = Transaction.new(
            statement_id=statement.id,
            date=when,
            description=description,
            amount=Decimal(str(amount)),
            merchant=merchant,
            category=category,
        )
        return services.transactions.create(transaction)

    _add.card = card
    _add.statement = statement
    return _add
