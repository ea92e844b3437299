#!/usr/bin/env python3

from logger import get_logger

logger = get_logger()


def init_schema_migrations_table(conn):
    conn.execute("""
        CREATE TABLE IF NOT EXISTS schema_migrations (
            migration_file TEXT PRIMARY KEY,
            applied_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
    """)


def get_applied_migrations(conn):
    cursor = conn.execute(
        "SELECT migration_file FROM schema_migrations ORDER BY migration_file"
    )
    return {row[0] for row in cursor.fetchall()}


def get_available_migrations(db_manager):
    migrations_dir = db_manager.get_migrations_dir()
    if not migrations_dir.exists():
        return []

    return sorted(file_path.name for file_path in migrations_dir.glob("*.sql"))


def apply_migration(conn, migration_file, db_manager):
    """Run one migration script and record it, all or nothing."""
    migration_path = db_manager.get_migrations_dir() / migration_file

    with open(migration_path, "r", encoding="utf-8") as f:
        sql = f.read()

    try:
        # The connection is in autocommit mode, so the script opens its own
        # transaction and the bookkeeping row joins it
        conn.executescript(f"BEGIN;\n{sql}\n")
        conn.execute(
            "INSERT INTO schema_migrations (migration_file) VALUES (?)",
            (migration_file,),
        )
        conn.execute("COMMIT")
        logger.info(f"Applied migration: {migration_file}")
    except Exception as e:
        if conn.in_transaction:
            conn.execute("ROLLBACK")
        logger.error(f"Error applying migration {migration_file}: {e}")
        raise


def get_pending_migrations(conn, db_manager):
    """Migration files not yet recorded, in the order they must run."""
    init_schema_migrations_table(conn)
    applied = get_applied_migrations(conn)
    return [m for m in get_available_migrations(db_manager) if m not in applied]


def apply_pending_migrations(db_manager) -> int:
    """Apply every migration not yet recorded.

    Returns:
        Number of migrations applied.
    """
    with db_manager.connect() as conn:
        pending = get_pending_migrations(conn, db_manager)

        for migration in pending:
            apply_migration(conn, migration, db_manager)

        return len(pending)


def cmd_status(args, db_manager):
    """Show migration status."""
    db_path = db_manager.get_db_path()

    if not db_path.exists():
        logger.info(
            "Database does not exist. Run 'python -m cli migrate apply' to create it."
        )
        return

    with db_manager.connect() as conn:
        pending = set(get_pending_migrations(conn, db_manager))

    available = get_available_migrations(db_manager)
    if not available:
        logger.info("No migrations found.")
        return

    logger.info(f"Ledger: {db_path}")
    logger.info("=" * 60)
    for migration in available:
        status_text = "pending" if migration in pending else "applied"
        logger.info(f"{migration:<40} {status_text}")

    logger.info(f"\n{len(available) - len(pending)} applied, {len(pending)} pending")


def cmd_apply(args, db_manager):
    """Apply pending migrations."""
    count = apply_pending_migrations(db_manager)

    if not count:
        logger.info("No pending migrations.")
        return

    logger.info(f"Successfully applied {count} migration(s).")


def setup_parser(subparsers):
    """Setup migrate subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "migrate",
        help="Database migrations",
        description="Manage ledger schema migrations",
    )

    migrate_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available migration commands",
        dest="subcommand",
        required=True,
    )

    status_parser = migrate_subparsers.add_parser(
        "status", help="Show migration status"
    )
    status_parser.set_defaults(func=cmd_status)

    apply_parser = migrate_subparsers.add_parser(
        "apply", help="Apply pending migrations"
    )
    apply_parser.set_defaults(func=cmd_apply)
