"""Thread-local database connection management."""

from __future__ import annotations

import sqlite3
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Callable, Iterator

from cekap_app.core.config import AppConfig, get_required_env
from cekap_app.core.errors import PersistenceError

try:
    from pysqlcipher3 import dbapi2 as sqlcipher

    SQLCIPHER_AVAILABLE = True
except ImportError:
    sqlcipher = None
    SQLCIPHER_AVAILABLE = False

DB_ERRORS: tuple[type[BaseException], ...] = (sqlite3.Error,)
if SQLCIPHER_AVAILABLE:
    DB_ERRORS = DB_ERRORS + (sqlcipher.Error,)


class ThreadLocalConnection:
    """Maintain one DB connection per thread for SQLite/SQLCipher safety."""

    supports_transactions = True

    def __init__(self, config: AppConfig):
        self._config = config
        self._local = threading.local()

    def _open_connection(self) -> sqlite3.Connection:
        db_path = Path(self._config.database.path)
        db_path.parent.mkdir(parents=True, exist_ok=True)

        if SQLCIPHER_AVAILABLE:
            connection = sqlcipher.connect(str(db_path), check_same_thread=False)
            key = get_required_env(self._config.database.key_env).replace("'", "''")
            connection.execute(f"PRAGMA key = '{key}'")
            connection.execute("PRAGMA cipher_compatibility = 4")
            connection.execute("PRAGMA foreign_keys = ON")
            connection.row_factory = sqlite3.Row
            return connection

        if not self._config.database.allow_sqlite_fallback:
            raise RuntimeError(
                "SQLCipher is required but unavailable. Install pysqlcipher3 or enable fallback."
            )

        connection = sqlite3.connect(str(db_path), check_same_thread=False)
        connection.execute("PRAGMA foreign_keys = ON")
        connection.row_factory = sqlite3.Row
        return connection

    def get_connection(self) -> sqlite3.Connection:
        """Return current thread's connection, creating it when needed."""
        connection = getattr(self._local, "connection", None)
        if connection is None:
            connection = self._open_connection()
            self._local.connection = connection
        return connection

    def close_connection(self) -> None:
        """Close current thread's connection."""
        connection = getattr(self._local, "connection", None)
        if connection is not None:
            connection.close()
            self._local.connection = None

    def _in_transaction(self) -> bool:
        return getattr(self._local, "transaction_depth", 0) > 0

    @contextmanager
    def transaction(self) -> Iterator[None]:
        """Group the enclosed writes into one commit, rolling back on error."""
        connection = self.get_connection()
        depth = getattr(self._local, "transaction_depth", 0)
        if depth == 0:
            self._local.pending_callbacks = []
        self._local.transaction_depth = depth + 1
        try:
            yield
            if depth == 0:
                connection.commit()
        except BaseException:
            if depth == 0:
                connection.rollback()
                self._local.pending_callbacks = []
            raise
        finally:
            self._local.transaction_depth = depth

        if depth == 0:
            callbacks, self._local.pending_callbacks = self._local.pending_callbacks, []
            for callback in callbacks:
                callback()

    def after_commit(self, callback: Callable[[], None]) -> None:
        """Run callback now, or once the open transaction has committed."""
        if self._in_transaction():
            self._local.pending_callbacks.append(callback)
        else:
            callback()

    def execute(self, query: str, params: tuple[Any, ...] = ()) -> sqlite3.Cursor:
        """Execute a query and commit unless a transaction is open."""
        connection = self.get_connection()
        try:
            cursor = connection.cursor()
            cursor.execute(query, params)
            if not self._in_transaction():
                connection.commit()
        except DB_ERRORS as error:
            raise PersistenceError(str(error)) from error
        return cursor

    def fetchall(self, query: str, params: tuple[Any, ...] = ()) -> list[sqlite3.Row]:
        """Fetch all rows for a query."""
        return self.execute(query, params).fetchall()

    def fetchone(self, query: str, params: tuple[Any, ...] = ()) -> sqlite3.Row | None:
        """Fetch first row for a query."""
        return self.execute(query, params).fetchone()
