#!/usr/bin/env python3

import sys
from models.category import FALLBACK_COLOR, Category
from logger import get_logger

logger = get_logger()


def cmd_list(args, services):
    """List built-in and custom categories."""
    categories = services.categories.find_all()

    logger.info("\nCategories:")
    logger.info("=" * 80)
    logger.info(f"{'ID':<34} {'Name':<16} {'Icon':<22} {'Color':<8} Custom")
    logger.info("-" * 80)
    for category in categories:
        custom = "yes" if category.is_custom else ""
        logger.info(
            f"{category.id:<34} {category.name:<16} {category.icon:<22} "
            f"{category.color:<8} {custom}"
        )
    logger.info(f"\nTotal categories: {len(categories)}")


def cmd_create(args, services):
    """Interactively create a custom category."""
    print("\nCreate New Category")
    print("=" * 80)

    name = input("Category name: ").strip()
    icon = input("Icon name (press Enter for 'tag'): ").strip() or "tag"
    color = input(f"Color hex (press Enter for {FALLBACK_COLOR}): ").strip() or FALLBACK_COLOR

    try:
        category = services.categories.create(Category.new(name, icon, color))
    except ValueError as e:
        logger.error(str(e))
        sys.exit(1)

    logger.info(f"\n✓ Category '{category.name}' created with ID: {category.id}")


def cmd_delete(args, services):
    """Delete a custom category.

    Transactions keep their category label after the category is deleted.
    """
    category = services.categories.find(args.category_id)
    if not category:
        logger.error(f"Category with ID '{args.category_id}' not found.")
        sys.exit(1)

    if not category.is_custom:
        logger.error(f"'{category.name}' is a built-in category and cannot be deleted.")
        sys.exit(1)

    if services.categories.delete(category.id):
        logger.info(f"✓ Category '{category.name}' deleted.")


def setup_parser(subparsers):
    """Setup categories subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "categories",
        help="Manage categories",
        description="List built-in categories and manage custom ones",
    )

    categories_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available category commands",
        dest="subcommand",
        required=True,
    )

    list_parser = categories_subparsers.add_parser("list", help="List all categories")
    list_parser.set_defaults(func=cmd_list)

    create_parser = categories_subparsers.add_parser(
        "create", help="Create a custom category interactively"
    )
    create_parser.set_defaults(func=cmd_create)

    delete_parser = categories_subparsers.add_parser(
        "delete", help="Delete a custom category"
    )
    delete_parser.add_argument("category_id", help="Category ID")
    delete_parser.set_defaults(func=cmd_delete)
