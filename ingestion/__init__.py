"""Statement ingestion: document -> AI extraction -> ledger records."""

from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Union

from errors import ExtractionError
from ingestion.documents import archive_document, read_document
from ingestion.normalizer import IngestionResult, normalize, parse_date
from logger import get_logger

logger = get_logger()

__all__ = ["IngestionResult", "import_statement", "normalize", "parse_date"]


def import_statement(
    path: Union[str, Path],
    services,
    provider,
    now: Optional[datetime] = None,
) -> IngestionResult:
    """Ingest one statement document end to end.

    The document is read, sent to the extraction provider, optionally
    archived, and the result is written to the ledger in one transaction.
    Nothing is written if any step fails.

    Args:
        path: Location of the statement PDF.
        services: Services container.
        provider: ExtractionProvider used to read the document.
        now: Ingestion instant (defaults to the current UTC time).

    Returns:
        IngestionResult describing what was written.

    Raises:
        DocumentReadError: If the document cannot be read.
        ExtractionError: If the provider fails or returns unusable data.
    """
    now = now or datetime.now(timezone.utc)
    document_path = Path(path)

    document = read_document(document_path)
    logger.info(f"Read {len(document)} bytes from {document_path.name}")

    try:
        extraction = provider.extract_statement(document, filename=document_path.name)
    except ExtractionError:
        raise
    except Exception as e:
        raise ExtractionError(str(e)) from e

    logger.info(f"Extracted {len(extraction.transactions)} transaction(s)")

    archived = None
    if services.config.archive_enabled:
        archived = archive_document(document_path, services.config, now)

    try:
        return normalize(
            extraction,
            services,
            document_path=str(archived or document_path),
            now=now,
        )
    except Exception:
        if archived is not None:
            archived.unlink(missing_ok=True)
        raise
