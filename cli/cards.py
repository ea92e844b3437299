#!/usr/bin/env python3

import sys
from models.card import Card
from logger import get_logger

logger = get_logger()


def cmd_list(args, services):
    """List all cards with their statement counts."""
    cards = services.cards.find_all()

    if not cards:
        logger.info("No cards found.")
        return

    logger.info("\nCards:")
    logger.info("=" * 80)
    for card in cards:
        statement_count = len(services.statements.find_all(card_id=card.id))
        logger.info(f"ID: {card.id}")
        logger.info(f"Name: {card.name}")
        logger.info(f"Bank: {card.bank or '-'}")
        logger.info(f"Last four: {card.last_four or '-'}")
        logger.info(f"Statements: {statement_count}")
        logger.info("-" * 80)

    logger.info(f"\nTotal cards: {len(cards)}")


def cmd_create(args, services):
    """Interactively create a new card."""
    print("\nCreate New Card")
    print("=" * 80)

    name = input("Card name (e.g., Bonus Platinum): ").strip()
    if not name:
        logger.error("Card name cannot be empty.")
        sys.exit(1)

    bank = input("Bank (optional, press Enter to skip): ").strip() or None

    last_four = input("Last four digits (optional, press Enter to skip): ").strip() or None
    if last_four and (len(last_four) > 4 or not last_four.isdigit()):
        logger.error("Last four must be at most 4 digits.")
        sys.exit(1)

    try:
        card = services.cards.create(Card.new(name=name, bank=bank, last_four=last_four))
        logger.info(f"\n✓ Card created successfully with ID: {card.id}")
    except Exception as e:
        logger.error(f"Error creating card: {e}")
        sys.exit(1)


def cmd_update(args, services):
    """Update the name, bank or last four digits of a card."""
    card = services.cards.find(args.card_id)
    if not card:
        logger.error(f"Card with ID '{args.card_id}' not found.")
        sys.exit(1)

    if args.name is not None:
        card.name = args.name
    if args.bank is not None:
        card.bank = args.bank or None
    if args.last_four is not None:
        card.last_four = args.last_four or None

    services.cards.update(card)
    logger.info(f"✓ Card '{card.name}' updated.")


def cmd_delete(args, services):
    """Delete a card with all of its statements and transactions."""
    card = services.cards.find(args.card_id)
    if not card:
        logger.error(f"Card with ID '{args.card_id}' not found.")
        sys.exit(1)

    statements = services.statements.find_all(card_id=card.id)
    logger.info(f"\nCard to delete: {card.name} ({len(statements)} statement(s))")
    logger.info("All statements and transactions of this card will be deleted.")

    if not args.yes:
        confirm = input("\nAre you sure? (yes/no): ").strip().lower()
        if confirm != "yes":
            logger.info("Deletion cancelled.")
            return

    if services.cards.delete(card.id):
        logger.info(f"✓ Card '{card.name}' deleted.")


def setup_parser(subparsers):
    """Setup cards subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "cards",
        help="Manage cards",
        description="Create, list, update and delete payment cards",
    )

    cards_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available card commands",
        dest="subcommand",
        required=True,
    )

    list_parser = cards_subparsers.add_parser("list", help="List all cards")
    list_parser.set_defaults(func=cmd_list)

    create_parser = cards_subparsers.add_parser(
        "create", help="Create a new card interactively"
    )
    create_parser.set_defaults(func=cmd_create)

    update_parser = cards_subparsers.add_parser("update", help="Update a card")
    update_parser.add_argument("card_id", help="Card ID")
    update_parser.add_argument("--name", help="New card name")
    update_parser.add_argument("--bank", help="New bank name (empty to clear)")
    update_parser.add_argument("--last-four", help="New last four digits (empty to clear)")
    update_parser.set_defaults(func=cmd_update)

    delete_parser = cards_subparsers.add_parser(
        "delete", help="Delete a card and everything under it"
    )
    delete_parser.add_argument("card_id", help="Card ID")
    delete_parser.add_argument("--yes", action="store_true", help="Skip confirmation")
    delete_parser.set_defaults(func=cmd_delete)
