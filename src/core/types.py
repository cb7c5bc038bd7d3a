"""Shared typed models.

This module defines immutable data models used by the ingest, store,
and CLI layers to keep interfaces explicit and stable.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

DatasetState = Literal[
    "fetching",
    "header_detected",
    "schema_synced",
    "streaming",
    "committed",
    "aborted",
]


@dataclass(frozen=True)
class DatasetDescriptor:
    """One dataset to ingest.

    Attributes:
        name: Human dataset name; sanitized into the relation identifier.
        source: ``http(s)://`` URL, ``s3://bucket/key`` URI, or local path.
    """

    name: str
    source: str


@dataclass(frozen=True)
class RemapRule:
    """Schema-gated rename of an incoming field.

    Attributes:
        source: Sanitized incoming field name.
        target: Sanitized target column name.
    """

    source: str
    target: str


@dataclass(frozen=True)
class FetchResponse:
    """Result of one HTTP fetch.

    Attributes:
        ok: Whether the response status was a success.
        status: HTTP status code.
        body_text: Decoded response body.
    """

    ok: bool
    status: int
    body_text: str


@dataclass(frozen=True)
class SchemaSyncResult:
    """Relation state after schema synchronization.

    Attributes:
        table_name: Sanitized relation name.
        columns: Full column list in relation order, stored spelling.
        added_columns: Columns added by this synchronization.
        created: Whether the relation was created by this synchronization.
    """

    table_name: str
    columns: tuple[str, ...]
    added_columns: tuple[str, ...] = ()
    created: bool = False


@dataclass(frozen=True)
class RowLoadResult:
    """Counters for one dataset's streaming phase."""

    inserted: int
    skipped: int
    failed: int


@dataclass(frozen=True)
class DatasetOutcome:
    """Final result of ingesting one dataset.

    Attributes:
        name: Dataset name as declared.
        table_name: Sanitized relation name.
        state: Terminal state, ``committed`` or ``aborted``.
        rows_inserted: Rows written to the relation.
        rows_skipped: Rows empty after filtering and remap.
        rows_failed: Rows whose insert failed.
        columns_added: Columns created during schema synchronization.
        error: Failure description for aborted datasets.
    """

    name: str
    table_name: str
    state: DatasetState
    rows_inserted: int = 0
    rows_skipped: int = 0
    rows_failed: int = 0
    columns_added: tuple[str, ...] = ()
    error: str | None = None


@dataclass(frozen=True)
class RunSummary:
    """Outcomes of one ingestion run in declaration order."""

    outcomes: tuple[DatasetOutcome, ...]
    store_available: bool

    @property
    def committed_count(self) -> int:
        """Number of datasets that reached ``committed``."""
        return sum(1 for outcome in self.outcomes if outcome.state == "committed")

    @property
    def aborted_count(self) -> int:
        """Number of datasets that ended ``aborted``."""
        return sum(1 for outcome in self.outcomes if outcome.state == "aborted")
