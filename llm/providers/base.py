"""Base provider interface for statement extraction and spending insights."""

from abc import ABC, abstractmethod
from typing import List
from models.extraction import ExtractionResult
from models.insight import Insight


class ExtractionProvider(ABC):
    """Abstract base class for AI providers that read statement documents.

    Each provider sends the document its own way but must return an
    ExtractionResult. Retry and timeout policy belongs to the provider.
    """

    name = "base"

    @abstractmethod
    def extract_statement(self, document: bytes, filename: str) -> ExtractionResult:
        """Extract card, statement and transaction data from a PDF.

        Args:
            document: Raw PDF bytes.
            filename: Original file name, passed along to the provider.

        Returns:
            Parsed ExtractionResult.

        Raises:
            ExtractionError: If the response cannot be parsed.
            Exception: If the provider API call fails.
        """
        pass

    @abstractmethod
    def generate_insights(self, transactions: List[dict]) -> List[Insight]:
        """Ask the model for observations about a set of transactions.

        Args:
            transactions: Transaction summaries with date, merchant, amount
                          and category keys.

        Returns:
            Insights in the order the model gave them.

        Raises:
            ExtractionError: If the response cannot be parsed.
            Exception: If the provider API call fails.
        """
        pass
