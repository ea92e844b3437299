#!/usr/bin/env python3

from logger import get_logger

logger = get_logger()


def cmd_clear_data(args, services):
    """Delete all cards, statements, transactions and custom categories."""
    counts = (
        len(services.cards.find_all()),
        len(services.statements.find_all()),
        len(services.transactions.find_all()),
    )
    logger.info(
        f"\nThis deletes {counts[0]} card(s), {counts[1]} statement(s), "
        f"{counts[2]} transaction(s) and all custom categories."
    )

    if not args.yes:
        confirm = input("Are you sure? (yes/no): ").strip().lower()
        if confirm != "yes":
            logger.info("Clear cancelled.")
            return

    services.clear_all_data()
    logger.info("✓ All ledger data deleted.")


def setup_parser(subparsers):
    """Setup clear-data command parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "clear-data",
        help="Delete all ledger data",
        description="Delete every card, statement, transaction and custom category",
    )
    parser.add_argument("--yes", action="store_true", help="Skip confirmation")
    parser.set_defaults(func=cmd_clear_data)
