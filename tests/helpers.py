"""Helper utilities for tests."""

from pathlib import Path
import sqlite3


def run_migrations(conn: sqlite3.Connection, migrations_dir: Path) -> None:
    """Run all SQL migrations in order.

    Args:
        conn: SQLite connection to run migrations against.
        migrations_dir: Path to directory containing .sql migration files.
    """
    for migration_file in sorted(migrations_dir.glob("*.sql")):
        conn.executescript(migration_file.read_text(encoding="utf-8"))

    conn.commit()
