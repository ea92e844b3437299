"""Error types raised by the ledger and the ingestion pipeline."""


class FinansError(Exception):
    """Base class for all Finans errors."""


class ConstraintError(FinansError):
    """A write referenced a parent record that does not exist."""


class DocumentReadError(FinansError):
    """The source statement document could not be read."""


class ExtractionError(FinansError):
    """The AI extraction call failed or returned unusable data."""
