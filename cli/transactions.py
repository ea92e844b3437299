#!/usr/bin/env python3

import sys
from datetime import datetime, timezone
from pathlib import Path
from cli.formatting import format_amount
from tools.export import export_transactions_csv
from tools.periods import parse_period, resolve_period
from logger import get_logger

logger = get_logger()


def _filtered_transactions(args, services):
    """Load transactions matching the filter options shared by list and export."""
    transactions = services.transactions.find_all(
        card_id=args.card_id,
        statement_id=args.statement_id,
        category=args.category,
        search=args.search,
    )

    if args.period:
        try:
            date_range = resolve_period(parse_period(args.period), datetime.now(timezone.utc))
        except ValueError as e:
            logger.error(str(e))
            sys.exit(1)
        transactions = [t for t in transactions if t.date.date() in date_range]

    return transactions


def _warn_unknown_category(services, category):
    if category and services.categories.find_by_name(category) is None:
        logger.warning(f"'{category}' is not a known category; using it as-is")


def cmd_list(args, services):
    """List transactions matching the filters."""
    transactions = _filtered_transactions(args, services)

    if args.limit is not None:
        transactions = transactions[: args.limit]

    if not transactions:
        logger.info("No transactions found.")
        return

    logger.info(f"\n{'Date':<12} {'Description':<40} {'Category':<12} {'Amount':>16}")
    logger.info("-" * 84)
    for t in transactions:
        logger.info(
            f"{t.date.date().isoformat():<12} {t.description[:40]:<40} "
            f"{(t.category or '-'):<12} {format_amount(t.amount, t.currency):>16}"
        )
        if args.verbose:
            logger.info(f"  ID: {t.id}  Merchant: {t.merchant or '-'}")

    logger.info(f"\nTotal transactions: {len(transactions)}")


def cmd_set_category(args, services):
    """Set or clear the category of one or more transactions."""
    category = None if args.clear else args.category
    _warn_unknown_category(services, category)

    updated = services.transactions.bulk_update_category(args.transaction_ids, category)
    missing = len(set(args.transaction_ids)) - updated

    label = category or "(none)"
    logger.info(f"✓ Set category {label} on {updated} transaction(s)")
    if missing:
        logger.warning(f"{missing} transaction ID(s) were not found")


def cmd_delete(args, services):
    """Delete one or more transactions."""
    if not args.yes:
        confirm = input(
            f"Delete {len(args.transaction_ids)} transaction(s)? (yes/no): "
        ).strip().lower()
        if confirm != "yes":
            logger.info("Deletion cancelled.")
            return

    deleted = services.transactions.bulk_delete(args.transaction_ids)
    logger.info(f"✓ Deleted {deleted} transaction(s)")


def cmd_export(args, services):
    """Write matching transactions to a CSV file."""
    transactions = _filtered_transactions(args, services)
    output = Path(args.output)

    output.write_text(export_transactions_csv(transactions), encoding="utf-8")
    logger.info(f"✓ Exported {len(transactions)} transaction(s) to {output}")


def _add_filter_arguments(parser):
    parser.add_argument("--card-id", help="Only transactions of this card")
    parser.add_argument("--statement-id", help="Only transactions of this statement")
    parser.add_argument("--category", help="Only transactions with this category")
    parser.add_argument("--search", help="Text to find in description or merchant")
    parser.add_argument(
        "--period",
        help="this-month, last-month, last-3-months, last-6-months, "
        "this-year, last-year or YYYY-MM",
    )


def setup_parser(subparsers):
    """Setup transactions subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "transactions",
        help="Browse and edit transactions",
        description="List, search, relabel, delete and export transactions",
    )

    transactions_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available transaction commands",
        dest="subcommand",
        required=True,
    )

    list_parser = transactions_subparsers.add_parser(
        "list", help="List transactions, newest first"
    )
    _add_filter_arguments(list_parser)
    list_parser.add_argument("--limit", type=int, help="Maximum rows to show")
    list_parser.add_argument(
        "-v", "--verbose", action="store_true", help="Show IDs and merchants"
    )
    list_parser.set_defaults(func=cmd_list)

    category_parser = transactions_subparsers.add_parser(
        "set-category", help="Set the category of transactions"
    )
    category_parser.add_argument("transaction_ids", nargs="+", help="Transaction IDs")
    group = category_parser.add_mutually_exclusive_group(required=True)
    group.add_argument("--category", help="Category name")
    group.add_argument("--clear", action="store_true", help="Remove the category")
    category_parser.set_defaults(func=cmd_set_category)

    delete_parser = transactions_subparsers.add_parser(
        "delete", help="Delete transactions"
    )
    delete_parser.add_argument("transaction_ids", nargs="+", help="Transaction IDs")
    delete_parser.add_argument("--yes", action="store_true", help="Skip confirmation")
    delete_parser.set_defaults(func=cmd_delete)

    export_parser = transactions_subparsers.add_parser(
        "export", help="Export transactions to CSV"
    )
    export_parser.add_argument("output", help="CSV file to write")
    _add_filter_arguments(export_parser)
    export_parser.set_defaults(func=cmd_export)
