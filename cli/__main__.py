#!/usr/bin/env python3
"""
Finans CLI - Command-line interface for credit-card statements and spending analytics.

Usage:
    python -m cli <command> <subcommand> [options]

Commands:
    cards         Manage cards
    statements    Upload and manage statements
    transactions  Browse, relabel and export transactions
    categories    Manage categories
    dashboard     Spending summary for a period
    compare       Compare two months
    months        List months that have transactions
    clear-data    Delete all ledger data
    migrate       Database migrations

Examples:
    python -m cli migrate apply
    python -m cli statements upload ekstre.pdf --provider gemini
    python -m cli dashboard --period last-3-months
    python -m cli compare 2024-01 2024-02
    python -m cli transactions export islemler.csv --category Market
"""

import sys
import argparse
from cli import cards, statements, transactions, categories, reports, data, migrate
from config import load_config
from services.base import Services
from db.manager import DatabaseManager
from logger import setup_logging


def main():
    """Main CLI entry point with subcommands."""
    parser = argparse.ArgumentParser(
        prog="cli",
        description="Finans - Credit-card statement ingestion and spending analytics",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    subparsers = parser.add_subparsers(
        title="commands",
        description="Available commands",
        dest="command",
        required=True,
    )

    cards.setup_parser(subparsers)
    statements.setup_parser(subparsers)
    transactions.setup_parser(subparsers)
    categories.setup_parser(subparsers)
    reports.setup_parser(subparsers)
    data.setup_parser(subparsers)
    migrate.setup_parser(subparsers)

    args = parser.parse_args()

    if hasattr(args, "func"):
        try:
            config = load_config()
            setup_logging(config)

            # Migrate commands need db_manager for raw database operations
            if args.command == "migrate":
                args.func(args, DatabaseManager(config))
            else:
                args.func(args, Services(config))
        except Exception as e:
            print(f"Error: {e}")
            sys.exit(1)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
