"""Row filtering, remapping, and insertion.

This module folds a lazy sequence of raw CSV rows into the target
relation. Blank values are dropped, field names are sanitized and
remapped, and each surviving row is inserted on its own so one bad
row never stops the rest of the dataset.
"""

from __future__ import annotations

from typing import Iterable, Literal, Mapping, Sequence

from core.errors import RowInsertError
from core.logging_config import get_logger
from core.naming import identifier_key, sanitize_identifier
from core.types import RowLoadResult
from ingest.column_remap import ColumnRemapper
from store.sqlite_store import SqliteStore

_LOGGER = get_logger(__name__)

RowStatus = Literal["inserted", "skipped", "failed"]


def filter_row(raw_row: Mapping[str, str]) -> dict[str, str]:
    """Drop blank values and sanitize field names.

    Args:
        raw_row: Raw field mapping from the CSV reader.

    Returns:
        Mapping of sanitized names to trimmed, non-empty values. When two
        raw names sanitize identically the later field wins.
    """
    filtered: dict[str, str] = {}
    for raw_name, raw_value in raw_row.items():
        value = raw_value.strip() if raw_value is not None else ""
        if not value:
            continue
        filtered[sanitize_identifier(raw_name)] = value
    return filtered


class RowLoader:
    """Insert rows into one relation and count the results."""

    def __init__(
        self,
        store: SqliteStore,
        table_name: str,
        columns: Sequence[str],
        remapper: ColumnRemapper,
    ) -> None:
        self._store = store
        self._table_name = table_name
        self._columns_by_key = {identifier_key(column): column for column in columns}
        self._remapper = remapper

    def load(self, raw_rows: Iterable[Mapping[str, str]]) -> RowLoadResult:
        """Insert every row of a dataset.

        Args:
            raw_rows: Lazy sequence of raw CSV rows.

        Returns:
            Inserted, skipped, and failed row counts.
        """
        counts = {"inserted": 0, "skipped": 0, "failed": 0}
        for raw_row in raw_rows:
            counts[self.load_row(raw_row)] += 1
        return RowLoadResult(
            inserted=counts["inserted"],
            skipped=counts["skipped"],
            failed=counts["failed"],
        )

    def load_row(self, raw_row: Mapping[str, str]) -> RowStatus:
        """Filter, remap, and insert a single row."""
        row = self._remapper.apply(self._canonicalize(filter_row(raw_row)))
        if not row:
            _LOGGER.debug("empty_row_skipped", table_name=self._table_name)
            return "skipped"
        try:
            self._store.insert_row(self._table_name, row)
        except RowInsertError as error:
            _LOGGER.error(
                "row_insert_failed",
                table_name=self._table_name,
                statement=error.statement,
                error=str(error),
            )
            return "failed"
        return "inserted"

    def _canonicalize(self, row: dict[str, str]) -> dict[str, str]:
        """Rename fields to the relation's stored column spelling."""
        canonical: dict[str, str] = {}
        for name, value in row.items():
            canonical[self._columns_by_key.get(identifier_key(name), name)] = value
        return canonical
