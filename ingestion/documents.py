"""Reading and archiving source statement documents."""

import gzip
import shutil
from datetime import datetime
from pathlib import Path
from typing import Union

from config import Config
from errors import DocumentReadError
from logger import get_logger

logger = get_logger()


def read_document(path: Union[str, Path]) -> bytes:
    """Read a statement document into memory.

    Args:
        path: Location of the PDF.

    Returns:
        The document bytes.

    Raises:
        DocumentReadError: If the file is missing, empty or unreadable.
    """
    document_path = Path(path)

    if not document_path.is_file():
        raise DocumentReadError(f"File not found: {document_path}")

    try:
        data = document_path.read_bytes()
    except OSError as e:
        raise DocumentReadError(f"Could not read {document_path}: {e}") from e

    if not data:
        raise DocumentReadError(f"File is empty: {document_path}")

    if not data.startswith(b"%PDF"):
        logger.warning(f"{document_path.name} does not look like a PDF")

    return data


def archive_document(path: Union[str, Path], config: Config, now: datetime) -> Path:
    """Store a gzip copy of a statement document in the archive directory.

    Archive names look like ``{timestamp}_{original_filename}.gz``.

    Args:
        path: The source document.
        config: Configuration with archive_dir.
        now: Timestamp used in the archive name.

    Returns:
        Path to the archived copy.
    """
    source = Path(path)
    config.archive_dir.mkdir(parents=True, exist_ok=True)

    archive_path = config.archive_dir / f"{now.strftime('%Y%m%d_%H%M%S')}_{source.name}.gz"

    with open(source, "rb") as f_in:
        with gzip.open(archive_path, "wb") as f_out:
            shutil.copyfileobj(f_in, f_out)

    logger.info(f"Archived statement to: {archive_path}")
    return archive_path
