"""SQLite relational store.

This module owns the single process-wide SQLite connection used by an
ingestion run. It exposes schema introspection, DDL execution,
explicit transaction control, and single-row inserts.
"""

from __future__ import annotations

import sqlite3
from pathlib import Path
from typing import Mapping

from core.errors import RowInsertError, SchemaError, StoreError, TransactionError
from core.logging_config import get_logger
from core.naming import quote_identifier

_LOGGER = get_logger(__name__)


class SqliteStore:
    """Autocommit SQLite connection with explicit transactions.

    The connection runs with ``isolation_level=None`` so DDL issued by
    schema synchronization commits immediately, while row streaming is
    wrapped in an explicit ``BEGIN``/``COMMIT`` pair.
    """

    def __init__(self, db_path: Path) -> None:
        self._db_path = db_path
        self._connection: sqlite3.Connection | None = None

    @property
    def db_path(self) -> Path:
        """Database file path."""
        return self._db_path

    @property
    def available(self) -> bool:
        """Whether the connection is open."""
        return self._connection is not None

    @property
    def in_transaction(self) -> bool:
        """Whether an explicit transaction is currently open."""
        return self._connection is not None and self._connection.in_transaction

    def connect(self) -> None:
        """Open the database and enable WAL journal mode.

        Raises:
            StoreError: If the database file cannot be opened.
        """
        try:
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
            connection = sqlite3.connect(str(self._db_path), isolation_level=None)
        except (OSError, sqlite3.Error) as error:
            raise StoreError(
                f"Failed to open database at {self._db_path}: {error}. "
                "Check the path and write permissions."
            ) from error
        self._connection = connection
        try:
            connection.execute("PRAGMA journal_mode = WAL")
        except sqlite3.Error as error:
            _LOGGER.warning("wal_mode_failed", db_path=str(self._db_path), error=str(error))
        _LOGGER.info("store_connected", db_path=str(self._db_path))

    def close(self) -> None:
        """Close the connection if it is open."""
        if self._connection is None:
            return
        self._connection.close()
        self._connection = None
        _LOGGER.info("store_closed", db_path=str(self._db_path))

    def table_exists(self, table_name: str) -> bool:
        """Return whether a relation exists."""
        cursor = self._query(
            "SELECT 1 FROM sqlite_master WHERE type = 'table' AND name = ? COLLATE NOCASE LIMIT 1",
            (table_name,),
        )
        return cursor.fetchone() is not None

    def table_columns(self, table_name: str) -> tuple[str, ...]:
        """Return a relation's columns in declaration order."""
        rows = self._query(f"PRAGMA table_info({quote_identifier(table_name)})").fetchall()
        return tuple(str(row[1]) for row in rows)

    def count_rows(self, table_name: str) -> int:
        """Return the number of rows stored in a relation."""
        row = self._query(f"SELECT COUNT(*) FROM {quote_identifier(table_name)}").fetchone()
        return int(row[0])

    def execute_ddl(self, statement: str) -> None:
        """Execute a schema statement.

        Raises:
            SchemaError: If SQLite rejects the statement.
        """
        connection = self._require_connection()
        try:
            connection.execute(statement)
        except sqlite3.Error as error:
            raise SchemaError(f"Schema statement failed: {error}", statement=statement) from error

    def begin(self) -> None:
        """Open an explicit transaction.

        Raises:
            TransactionError: If the transaction cannot be started.
        """
        connection = self._require_connection()
        try:
            connection.execute("BEGIN")
        except sqlite3.Error as error:
            raise TransactionError(f"Failed to begin transaction: {error}") from error

    def commit(self) -> None:
        """Commit the open transaction.

        Raises:
            TransactionError: If the commit fails.
        """
        connection = self._require_connection()
        try:
            connection.execute("COMMIT")
        except sqlite3.Error as error:
            raise TransactionError(f"Failed to commit transaction: {error}") from error

    def rollback(self) -> None:
        """Roll back the open transaction, if any."""
        connection = self._require_connection()
        if not connection.in_transaction:
            return
        try:
            connection.execute("ROLLBACK")
        except sqlite3.Error as error:
            _LOGGER.error("rollback_failed", db_path=str(self._db_path), error=str(error))

    def clear_table(self, table_name: str) -> None:
        """Delete every row of a relation inside the open transaction.

        Raises:
            TransactionError: If the delete fails.
        """
        connection = self._require_connection()
        statement = f"DELETE FROM {quote_identifier(table_name)}"
        try:
            connection.execute(statement)
        except sqlite3.Error as error:
            raise TransactionError(
                f"Failed to clear {table_name} before overwrite: {error}"
            ) from error

    def insert_row(self, table_name: str, row: Mapping[str, str]) -> None:
        """Insert one row of text values.

        Args:
            table_name: Target relation.
            row: Column name to value mapping; must not be empty.

        Raises:
            RowInsertError: If SQLite rejects the row.
        """
        connection = self._require_connection()
        statement = build_insert_statement(table_name, list(row))
        try:
            connection.execute(statement, tuple(row.values()))
        except sqlite3.Error as error:
            raise RowInsertError(
                f"Failed to insert row into {table_name}: {error}",
                statement=statement,
            ) from error

    def fetch_rows(self, table_name: str) -> list[dict[str, str | None]]:
        """Return every row of a relation as column mappings."""
        cursor = self._query(f"SELECT * FROM {quote_identifier(table_name)}")
        column_names = [description[0] for description in cursor.description]
        return [dict(zip(column_names, values)) for values in cursor.fetchall()]

    def _query(self, statement: str, parameters: tuple[str, ...] = ()) -> sqlite3.Cursor:
        """Run a read statement, wrapping SQLite failures.

        Raises:
            StoreError: If the database cannot be read.
        """
        connection = self._require_connection()
        try:
            return connection.execute(statement, parameters)
        except sqlite3.Error as error:
            raise StoreError(
                f"Failed to read database at {self._db_path}: {error}. "
                "Check that the file is a valid SQLite database."
            ) from error

    def _require_connection(self) -> sqlite3.Connection:
        if self._connection is None:
            raise StoreError(
                f"Database at {self._db_path} is not open. "
                "Fix the database path reported at startup and rerun ingest."
            )
        return self._connection


def build_insert_statement(table_name: str, columns: list[str]) -> str:
    """Build a parameterized INSERT statement for the given columns."""
    column_sql = ", ".join(quote_identifier(column) for column in columns)
    placeholders = ", ".join("?" for _ in columns)
    return f"INSERT INTO {quote_identifier(table_name)} ({column_sql}) VALUES ({placeholders})"


def open_store(db_path: Path) -> SqliteStore:
    """Open the process-wide store, reporting failure instead of raising.

    A store that failed to open is still returned; every later operation
    on it raises ``StoreError`` so each dataset aborts on its own.

    Args:
        db_path: SQLite database file.

    Returns:
        Store handle, connected when possible.
    """
    store = SqliteStore(db_path)
    try:
        store.connect()
    except StoreError as error:
        _LOGGER.error("store_open_failed", db_path=str(db_path), error=str(error))
    return store
