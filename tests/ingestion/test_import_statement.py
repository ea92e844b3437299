import gzip
import json
from datetime import datetime, timezone

import pytest

from errors import DocumentReadError, ExtractionError
from ingestion import import_statement
from ingestion.documents import archive_document, read_document

NOW = datetime(2024, 3, 1, 9, 30, 15, tzinfo=timezone.utc)

PAYLOAD = json.dumps(
    {
        "card_info": {"bank": "Yapı Kredi", "card_name": "World", "last_four": "1234"},
        "statement_info": {"period_start": "2024-02-01", "period_end": "2024-02-29"},
        "transactions": [
            {"date": "2024-02-03", "description": "A101", "amount": 250.75, "category": "Market"}
        ],
    },
    ensure_ascii=False,
)


def _ledger_is_empty(services):
    return (
        services.cards.find_all() == []
        and services.statements.find_all() == []
        and services.transactions.find_all() == []
    )


class TestReadDocument:
    """Tests for read_document."""

    def test_reads_bytes(self, statement_pdf):
        assert read_document(statement_pdf).startswith(b"%PDF")

    def test_missing_file(self, tmp_path):
        with pytest.raises(DocumentReadError, match="File not found"):
            read_document(tmp_path / "yok.pdf")

    def test_empty_file(self, tmp_path):
        path = tmp_path / "bos.pdf"
        path.write_bytes(b"")

        with pytest.raises(DocumentReadError, match="empty"):
            read_document(path)


class TestArchiveDocument:
    """Tests for archive_document."""

    def test_writes_gzip_copy(self, statement_pdf, test_config):
        archived = archive_document(statement_pdf, test_config, NOW)

        assert archived.name == "20240301_093015_ekstre.pdf.gz"
        assert archived.parent == test_config.archive_dir
        with gzip.open(archived, "rb") as f:
            assert f.read() == statement_pdf.read_bytes()


class TestImportStatement:
    """Tests for import_statement."""

    def test_imports_document(self, services, stub_provider, statement_pdf):
        """Test a successful end-to-end import."""
        provider = stub_provider(payload=PAYLOAD)

        result = import_statement(statement_pdf, services, provider, now=NOW)

        assert provider.calls == [(statement_pdf.read_bytes(), "ekstre.pdf")]
        assert result.card.name == "World"
        assert result.statement.document_path == str(statement_pdf)
        assert services.transactions.count_by_statement(result.statement.id) == 1

    def test_unreadable_document_writes_nothing(self, services, stub_provider, tmp_path):
        """Test that a missing file fails before extraction."""
        provider = stub_provider(payload=PAYLOAD)

        with pytest.raises(DocumentReadError):
            import_statement(tmp_path / "yok.pdf", services, provider, now=NOW)

        assert provider.calls == []
        assert _ledger_is_empty(services)

    def test_invalid_response_writes_nothing(self, services, stub_provider, statement_pdf):
        """Test that a malformed extraction leaves the ledger untouched."""
        provider = stub_provider(payload="Üzgünüm, bu belgeyi okuyamadım.")

        with pytest.raises(ExtractionError):
            import_statement(statement_pdf, services, provider, now=NOW)

        assert _ledger_is_empty(services)

    def test_provider_failure_is_wrapped(self, services, stub_provider, statement_pdf):
        """Test that transport errors surface as ExtractionError."""
        provider = stub_provider(error=ConnectionError("timeout"))

        with pytest.raises(ExtractionError, match="timeout"):
            import_statement(statement_pdf, services, provider, now=NOW)

        assert _ledger_is_empty(services)

    def test_archives_when_enabled(self, services, stub_provider, statement_pdf):
        """Test that the stored statement points at the archived copy."""
        services.config.archive_enabled = True

        result = import_statement(statement_pdf, services, stub_provider(payload=PAYLOAD), now=NOW)

        archived = services.config.archive_dir / "20240301_093015_ekstre.pdf.gz"
        assert archived.exists()
        assert result.statement.document_path == str(archived)

    def test_failed_write_removes_archive(self, services, stub_provider, statement_pdf, monkeypatch):
        """Test that the archive copy is removed when the ledger write fails."""
        services.config.archive_enabled = True

        def fail(*args, **kwargs):
            raise RuntimeError("disk full")

        monkeypatch.setattr(services.statements, "create_with_transactions", fail)

        with pytest.raises(RuntimeError, match="disk full"):
            import_statement(statement_pdf, services, stub_provider(payload=PAYLOAD), now=NOW)

        assert list(services.config.archive_dir.glob("*.gz")) == []
        assert _ledger_is_empty(services)


class TestImportWithBadDates:
    """Tests that wrongly typed dates fall back to defaults during import."""

    def test_numeric_period_start_is_stored_as_absent(self, services, stub_provider, statement_pdf):
        payload = json.dumps(
            {
                "statement_info": {"period_start": 20240101, "period_end": "2024-01-31"},
                "transactions": [{"date": "2024-01-05", "description": "A101", "amount": 10}],
            }
        )

        result = import_statement(statement_pdf, services, stub_provider(payload=payload), now=NOW)

        statement = services.statements.find(result.statement.id)
        assert statement.period_start is None
        assert statement.period_end is not None
        assert services.transactions.count_by_statement(statement.id) == 1

    def test_numeric_transaction_date_uses_ingestion_time(
        self, services, stub_provider, statement_pdf
    ):
        payload = json.dumps(
            {"transactions": [{"date": 20240105, "description": "A101", "amount": 10}]}
        )

        result = import_statement(statement_pdf, services, stub_provider(payload=payload), now=NOW)

        transaction = services.transactions.find(result.transactions[0].id)
        assert transaction.date == NOW
