#!/usr/bin/env python3

import sys
from cli.formatting import format_amount, format_optional
from errors import FinansError
from ingestion import import_statement
from llm import get_extraction_provider
from logger import get_logger

logger = get_logger()


def cmd_upload(args, services):
    """Extract a statement PDF with the AI provider and store it.

    Args:
        args: Parsed command-line arguments with pdf_file and provider
        services: Services container
    """
    try:
        provider = get_extraction_provider(services.config, args.provider)
    except ValueError as e:
        logger.error(str(e))
        sys.exit(1)

    logger.info(f"Uploading {args.pdf_file} using {provider.name}")
    logger.info("-" * 80)

    try:
        result = import_statement(args.pdf_file, services, provider)
    except FinansError as e:
        logger.error(f"Ingestion failed: {e}")
        sys.exit(1)

    card_note = "new card" if result.card_created else "existing card"
    logger.info(f"✓ Card: {result.card.name} ({card_note})")
    logger.info(f"✓ Statement ID: {result.statement.id}")
    logger.info(
        f"  Period: {format_optional(result.statement.period_start)} - "
        f"{format_optional(result.statement.period_end)}"
    )
    logger.info(f"  Total: {format_amount(result.statement.total_amount)}")
    logger.info(f"✓ Stored {len(result.transactions)} transaction(s)")


def cmd_list(args, services):
    """List statements, optionally for one card."""
    statements = services.statements.find_all(card_id=args.card_id)

    if not statements:
        logger.info("No statements found.")
        return

    card_names = {card.id: card.name for card in services.cards.find_all()}

    logger.info("\nStatements:")
    logger.info("=" * 80)
    for statement in statements:
        count = services.transactions.count_by_statement(statement.id)
        logger.info(f"ID: {statement.id}")
        logger.info(f"Card: {card_names.get(statement.card_id, 'Unknown')}")
        logger.info(
            f"Period: {format_optional(statement.period_start)} - "
            f"{format_optional(statement.period_end)}"
        )
        logger.info(f"Total: {format_amount(statement.total_amount)}")
        logger.info(f"Minimum payment: {format_amount(statement.min_payment)}")
        logger.info(f"Due date: {format_optional(statement.due_date)}")
        logger.info(f"Transactions: {count}")
        logger.info("-" * 80)

    logger.info(f"\nTotal statements: {len(statements)}")


def cmd_show_raw(args, services):
    """Print the extraction payload stored with a statement."""
    statement = services.statements.find(args.statement_id)
    if not statement:
        logger.error(f"Statement with ID '{args.statement_id}' not found.")
        sys.exit(1)

    print(statement.raw_json or "")


def cmd_delete(args, services):
    """Delete a statement and its transactions."""
    statement = services.statements.find(args.statement_id)
    if not statement:
        logger.error(f"Statement with ID '{args.statement_id}' not found.")
        sys.exit(1)

    count = services.transactions.count_by_statement(statement.id)
    logger.info(f"\nStatement {statement.id} has {count} transaction(s).")

    if not args.yes:
        confirm = input("Delete it with all transactions? (yes/no): ").strip().lower()
        if confirm != "yes":
            logger.info("Deletion cancelled.")
            return

    if services.statements.delete(statement.id):
        logger.info("✓ Statement deleted.")


def setup_parser(subparsers):
    """Setup statements subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "statements",
        help="Upload and manage statements",
        description="Upload statement PDFs and manage stored statements",
    )

    statements_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available statement commands",
        dest="subcommand",
        required=True,
    )

    upload_parser = statements_subparsers.add_parser(
        "upload", help="Extract and store a statement PDF"
    )
    upload_parser.add_argument("pdf_file", help="Path to the statement PDF")
    upload_parser.add_argument(
        "--provider",
        choices=["openai", "gemini"],
        help="AI provider (defaults to llm.provider in the config)",
    )
    upload_parser.set_defaults(func=cmd_upload)

    list_parser = statements_subparsers.add_parser("list", help="List statements")
    list_parser.add_argument("--card-id", help="Only statements of this card")
    list_parser.set_defaults(func=cmd_list)

    raw_parser = statements_subparsers.add_parser(
        "raw", help="Print the stored extraction payload"
    )
    raw_parser.add_argument("statement_id", help="Statement ID")
    raw_parser.set_defaults(func=cmd_show_raw)

    delete_parser = statements_subparsers.add_parser(
        "delete", help="Delete a statement and its transactions"
    )
    delete_parser.add_argument("statement_id", help="Statement ID")
    delete_parser.add_argument("--yes", action="store_true", help="Skip confirmation")
    delete_parser.set_defaults(func=cmd_delete)
