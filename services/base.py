"""Base services container for dependency injection."""

from config import Config
from db.manager import DatabaseManager
from logger import get_logger

logger = get_logger()


class Services:
    """Container for all application services.

    Built once at startup and passed to everything that needs the ledger,
    which makes it easy to inject a test database.

    Args:
        config: Application configuration object.
        db_manager: Optional database manager for testing. If provided, config is ignored.
    """

    def __init__(self, config: Config, db_manager=None):
        """Initialize services with configuration.

        Args:
            config: Config object containing application configuration.
            db_manager: Optional database manager for dependency injection (testing).
                       If None, creates DatabaseManager from config.
        """
        self.config = config
        self.db_manager = db_manager or DatabaseManager(config)

        # Lazy import to avoid circular dependencies
        from services.cards import CardService
        from services.statements import StatementService
        from services.transactions import TransactionService
        from services.categories import CategoryService

        self.cards = CardService(self.db_manager)
        self.transactions = TransactionService(self.db_manager)
        self.statements = StatementService(self.db_manager, self.cards, self.transactions)
        self.categories = CategoryService(self.db_manager)

    def clear_all_data(self) -> None:
        """Delete every card, statement, transaction and custom category."""
        with self.db_manager.transaction() as conn:
            conn.execute("DELETE FROM transactions")
            conn.execute("DELETE FROM statements")
            conn.execute("DELETE FROM cards")
            conn.execute("DELETE FROM categories")
        logger.info("Cleared all ledger data")
