import argparse
import logging
from datetime import date, datetime, timezone

import pytest

import cli.statements as statements_cli
from cli import cards, data, reports, transactions


def _args(**kwargs):
    return argparse.Namespace(**kwargs)


def _filters(**overrides):
    values = dict(card_id=None, statement_id=None, category=None, search=None, period=None)
    values.update(overrides)
    return values


@pytest.fixture
def finans_logs(caplog):
    caplog.set_level(logging.INFO, logger="finans")
    return caplog


class TestTransactionCommands:
    """Tests for the transactions command handlers."""

    def test_export_writes_csv(self, services, add_transaction, tmp_path):
        add_transaction(date(2024, 2, 1), "10", category="Market", description="A101")
        add_transaction(date(2024, 2, 2), "20", category="Fatura", description="Elektrik")
        output = tmp_path / "islemler.csv"

        transactions.cmd_export(_args(output=str(output), **_filters(category="Market")), services)

        lines = output.read_text(encoding="utf-8").splitlines()
        assert lines[0].startswith("Date,Description")
        assert lines[1:] == ["2024-02-01,A101,,Market,10.0,TRY"]

    def test_export_period_filter(self, services, add_transaction, tmp_path):
        now = datetime.now(timezone.utc).date()
        add_transaction(now, "10")
        add_transaction(date(2000, 1, 1), "20")
        output = tmp_path / "out.csv"

        transactions.cmd_export(_args(output=str(output), **_filters(period="this-month")), services)

        assert len(output.read_text(encoding="utf-8").splitlines()) == 2

    def test_set_category(self, services, add_transaction, finans_logs):
        first = add_transaction(date(2024, 2, 1), "10")
        second = add_transaction(date(2024, 2, 2), "20")

        transactions.cmd_set_category(
            _args(transaction_ids=[first.id, second.id], category="Sağlık", clear=False),
            services,
        )

        assert services.transactions.find(first.id).category == "Sağlık"
        assert services.transactions.find(second.id).category == "Sağlık"
        assert "on 2 transaction(s)" in finans_logs.text

    def test_set_category_warns_on_unknown_label(self, services, add_transaction, finans_logs):
        transaction = add_transaction(date(2024, 2, 1), "10")

        transactions.cmd_set_category(
            _args(transaction_ids=[transaction.id, "missing"], category="Yeni", clear=False),
            services,
        )

        assert "not a known category" in finans_logs.text
        assert "1 transaction ID(s) were not found" in finans_logs.text

    def test_delete_with_yes(self, services, add_transaction):
        transaction = add_transaction(date(2024, 2, 1), "10")

        transactions.cmd_delete(_args(transaction_ids=[transaction.id], yes=True), services)

        assert services.transactions.find(transaction.id) is None


class TestReportCommands:
    """Tests for the dashboard, compare and months handlers."""

    def test_dashboard_specific_month(self, services, add_transaction, finans_logs):
        add_transaction(date(2024, 2, 10), "1700", category="Market")
        add_transaction(date(2024, 2, 11), "-200", category="İade")

        reports.cmd_dashboard(_args(period="2024-02"), services)

        assert "Total: 1,500.00 TRY" in finans_logs.text
        assert "113.3%" in finans_logs.text

    def test_dashboard_invalid_period(self, services):
        with pytest.raises(SystemExit):
            reports.cmd_dashboard(_args(period="geçen hafta"), services)

    def test_compare(self, services, add_transaction, finans_logs):
        add_transaction(date(2024, 1, 10), "100", category="Market")
        add_transaction(date(2024, 2, 10), "150", category="Market")

        reports.cmd_compare(_args(month1="2024-01", month2="2024-02"), services)

        assert "Oca 2024 vs Şub 2024" in finans_logs.text
        assert "+50.0%" in finans_logs.text

    def test_compare_rejects_presets(self, services):
        with pytest.raises(SystemExit):
            reports.cmd_compare(_args(month1="last-month", month2="2024-02"), services)

    def test_months(self, services, add_transaction, finans_logs):
        add_transaction(date(2024, 2, 10), "1")

        reports.cmd_months(_args(), services)

        assert "2024-02  Şub 2024" in finans_logs.text

    def test_insights(self, services, add_transaction, stub_provider, finans_logs, monkeypatch):
        add_transaction(date(2024, 2, 10), "149.99", category="Abonelik", merchant="Netflix")
        payload = (
            '{"insights": [{"type": "subscription", "title": "Netflix aboneliği",'
            ' "description": "Her ay ödeniyor.", "category": "Abonelik", "amount": 149.99}]}'
        )
        monkeypatch.setattr(
            reports,
            "get_extraction_provider",
            lambda config, name: stub_provider(insights_payload=payload),
        )

        reports.cmd_insights(_args(period="2024-02", provider=None), services)

        assert "[subscription] Netflix aboneliği" in finans_logs.text
        assert "Amount: 149.99 TRY" in finans_logs.text

    def test_insights_without_transactions(self, services, stub_provider, finans_logs, monkeypatch):
        provider = stub_provider(insights_payload="{}")
        monkeypatch.setattr(reports, "get_extraction_provider", lambda config, name: provider)

        reports.cmd_insights(_args(period="2024-02", provider=None), services)

        assert "No transactions to analyse." in finans_logs.text
        assert provider.insight_calls == []

    def test_insights_without_api_key_exits(self, services):
        with pytest.raises(SystemExit):
            reports.cmd_insights(_args(period="2024-02", provider=None), services)

    def test_insights_bad_response_exits(self, services, add_transaction, stub_provider, monkeypatch):
        add_transaction(date(2024, 2, 10), "10")
        monkeypatch.setattr(
            reports,
            "get_extraction_provider",
            lambda config, name: stub_provider(insights_payload="nope"),
        )

        with pytest.raises(SystemExit):
            reports.cmd_insights(_args(period="2024-02", provider=None), services)


class TestCardCommands:
    """Tests for the cards command handlers."""

    def test_update(self, services, add_transaction):
        card = add_transaction.card

        cards.cmd_update(
            _args(card_id=card.id, name="Maximum", bank="", last_four=None), services
        )

        updated = services.cards.find(card.id)
        assert updated.name == "Maximum"
        assert updated.bank is None
        assert updated.last_four == "1234"

    def test_delete_missing(self, services):
        with pytest.raises(SystemExit):
            cards.cmd_delete(_args(card_id="missing", yes=True), services)

    def test_delete_with_yes(self, services, add_transaction):
        add_transaction(date(2024, 2, 1), "10")

        cards.cmd_delete(_args(card_id=add_transaction.card.id, yes=True), services)

        assert services.transactions.find_all() == []


class TestStatementCommands:
    """Tests for the statements command handlers."""

    def test_upload(self, services, stub_provider, statement_pdf, monkeypatch):
        payload = (
            '{"card_info": {"card_name": "Bonus", "last_four": "4821"},'
            ' "transactions": [{"date": "2024-02-01", "description": "A101", "amount": 10}]}'
        )
        monkeypatch.setattr(
            statements_cli,
            "get_extraction_provider",
            lambda config, name: stub_provider(payload=payload),
        )

        statements_cli.cmd_upload(_args(pdf_file=str(statement_pdf), provider=None), services)

        [statement] = services.statements.find_all()
        assert services.transactions.count_by_statement(statement.id) == 1

    def test_upload_failure_exits(self, services, stub_provider, statement_pdf, monkeypatch):
        monkeypatch.setattr(
            statements_cli,
            "get_extraction_provider",
            lambda config, name: stub_provider(payload="nope"),
        )

        with pytest.raises(SystemExit):
            statements_cli.cmd_upload(_args(pdf_file=str(statement_pdf), provider=None), services)

        assert services.statements.find_all() == []

    def test_upload_without_api_key_exits(self, services, statement_pdf):
        with pytest.raises(SystemExit):
            statements_cli.cmd_upload(_args(pdf_file=str(statement_pdf), provider=None), services)


class TestClearDataCommand:
    """Tests for the clear-data handler."""

    def test_clear_with_yes(self, services, add_transaction):
        add_transaction(date(2024, 2, 1), "10")

        data.cmd_clear_data(_args(yes=True), services)

        assert services.cards.find_all() == []
        assert services.transactions.find_all() == []

    def test_cancelled(self, services, add_transaction, monkeypatch):
        add_transaction(date(2024, 2, 1), "10")
        monkeypatch.setattr("builtins.input", lambda prompt: "no")

        data.cmd_clear_data(_args(yes=False), services)

        assert len(services.transactions.find_all()) == 1
