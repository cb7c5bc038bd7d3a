"""Relation schema synchronization.

This module guarantees that a relation exists and carries every
incoming column. Columns are only ever added, never dropped or
retyped, so repeated runs grow the schema monotonically.
"""

from __future__ import annotations

from typing import Sequence

from core.constants import COLUMN_TYPE
from core.errors import SchemaError
from core.logging_config import get_logger
from core.naming import identifier_key, quote_identifier
from core.types import SchemaSyncResult
from store.sqlite_store import SqliteStore

_LOGGER = get_logger(__name__)


def synchronize_schema(
    store: SqliteStore,
    table_name: str,
    columns: Sequence[str],
) -> SchemaSyncResult:
    """Create or extend a relation so it holds every incoming column.

    Args:
        store: Open relational store.
        table_name: Sanitized relation name.
        columns: Sanitized incoming header names.

    Returns:
        Up to date relation columns; the remapper gates rules on these.

    Raises:
        SchemaError: If no columns were supplied or DDL fails.
    """
    incoming_columns = _unique_columns(columns)
    if not incoming_columns:
        raise SchemaError(
            f"Cannot synchronize {table_name}: no columns supplied. "
            "Check that the source has a header row."
        )
    if not store.table_exists(table_name):
        statement = build_create_table_statement(table_name, incoming_columns)
        store.execute_ddl(statement)
        _LOGGER.info("table_created", table_name=table_name, column_count=len(incoming_columns))
        return SchemaSyncResult(
            table_name=table_name,
            columns=store.table_columns(table_name),
            added_columns=tuple(incoming_columns),
            created=True,
        )
    existing_keys = {identifier_key(column) for column in store.table_columns(table_name)}
    added_columns: list[str] = []
    for column in incoming_columns:
        if identifier_key(column) in existing_keys:
            continue
        store.execute_ddl(build_add_column_statement(table_name, column))
        existing_keys.add(identifier_key(column))
        added_columns.append(column)
        _LOGGER.info("column_added", table_name=table_name, column=column)
    return SchemaSyncResult(
        table_name=table_name,
        columns=store.table_columns(table_name),
        added_columns=tuple(added_columns),
    )


def build_create_table_statement(table_name: str, columns: Sequence[str]) -> str:
    """Build CREATE TABLE DDL with every column typed as text."""
    column_sql = ", ".join(f"{quote_identifier(column)} {COLUMN_TYPE}" for column in columns)
    return f"CREATE TABLE IF NOT EXISTS {quote_identifier(table_name)} ({column_sql})"


def build_add_column_statement(table_name: str, column: str) -> str:
    """Build ALTER TABLE DDL adding one nullable text column."""
    return (
        f"ALTER TABLE {quote_identifier(table_name)} "
        f"ADD COLUMN {quote_identifier(column)} {COLUMN_TYPE}"
    )


def _unique_columns(columns: Sequence[str]) -> list[str]:
    """Drop blank and case-insensitively repeated names, keeping first spelling."""
    seen_keys: set[str] = set()
    unique_columns: list[str] = []
    for column in columns:
        key = identifier_key(column)
        if not column or key in seen_keys:
            continue
        seen_keys.add(key)
        unique_columns.append(column)
    return unique_columns
