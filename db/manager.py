"""Database manager for the SQLite ledger connection."""

import sqlite3
import threading
from contextlib import contextmanager
from typing import Optional
from config import Config, get_migrations_dir


def _casefold(value):
    return value.casefold() if isinstance(value, str) else value


class DatabaseManager:
    """Owns the single ledger connection and serializes access to it.

    Every read and write in the process goes through one connection guarded
    by a re-entrant lock. Writes run inside ``transaction()``, which commits
    before returning so data is durable once a service call returns.

    Args:
        config: Application configuration object.
        connection: Optional pre-opened connection (used by tests).
    """

    def __init__(self, config: Config, connection: Optional[sqlite3.Connection] = None):
        """Initialize the database manager.

        Args:
            config: Config object containing database configuration.
            connection: Optional connection to use instead of opening
                        ``config.db_path``.
        """
        self.config = config
        self._lock = threading.RLock()
        self._depth = 0
        self._conn = None
        if connection is not None:
            self._conn = self._prepare(connection)

    def _prepare(self, conn: sqlite3.Connection) -> sqlite3.Connection:
        # Autocommit mode; transactions are opened explicitly below
        conn.isolation_level = None
        conn.create_function("casefold", 1, _casefold, deterministic=True)
        return conn

    def _open(self) -> sqlite3.Connection:
        db_path = self.config.db_path
        db_path.parent.mkdir(parents=True, exist_ok=True)
        return self._prepare(sqlite3.connect(db_path, check_same_thread=False))

    @contextmanager
    def connect(self):
        """Get the ledger connection while holding the ledger lock.

        Yields:
            sqlite3.Connection: Database connection.
        """
        with self._lock:
            if self._conn is None:
                self._conn = self._open()
            yield self._conn

    @contextmanager
    def transaction(self):
        """Run a block of statements as one atomic unit.

        Nested calls join the outermost transaction; only the outermost
        block commits or rolls back.

        Yields:
            sqlite3.Connection: Database connection.
        """
        with self.connect() as conn:
            if self._depth > 0:
                self._depth += 1
                try:
                    yield conn
                finally:
                    self._depth -= 1
                return

            conn.execute("BEGIN")
            self._depth = 1
            try:
                yield conn
            except BaseException:
                conn.execute("ROLLBACK")
                raise
            else:
                conn.execute("COMMIT")
            finally:
                self._depth = 0

    def close(self) -> None:
        """Close the ledger connection if it is open."""
        with self._lock:
            if self._conn is not None:
                self._conn.close()
                self._conn = None

    def get_db_path(self):
        """Get the current database path.

        Returns:
            Path: Path to the database file.
        """
        return self.config.db_path

    def get_migrations_dir(self):
        """Get the migrations directory path.

        Returns:
            Path: Path to the migrations directory.
        """
        return get_migrations_dir()
