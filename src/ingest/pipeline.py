"""Ingest orchestration.

This module sequences one dataset at a time through reading, preamble
stripping, header detection, schema synchronization, and row streaming.
Every failure is scoped to the dataset that raised it, so the run
always advances to the next dataset in declaration order.
"""

from __future__ import annotations

from typing import Sequence

from core.config import AutoStatsCanConfig
from core.errors import AutoStatsCanError, SchemaError, SourceError
from core.logging_config import get_logger
from core.naming import sanitize_headers, sanitize_identifier
from core.types import (
    DatasetDescriptor,
    DatasetOutcome,
    DatasetState,
    RowLoadResult,
    RunSummary,
    SchemaSyncResult,
)
from ingest.catalog_files import load_dataset_list, load_remap_rules
from ingest.column_remap import ColumnRemapper
from ingest.csv_rows import CsvHeader, iter_csv_rows, read_csv_header
from ingest.http_fetch import HttpFetcher
from ingest.preamble import strip_preamble
from ingest.raw_archive import RawArchive
from ingest.row_loader import RowLoader
from ingest.session import IngestSession
from ingest.source_reader import Fetcher, read_source_text
from store.schema_sync import synchronize_schema
from store.sqlite_store import open_store

_LOGGER = get_logger(__name__)


class DatasetIngestRunner:
    """Stateful runner for ingesting a single dataset."""

    def __init__(
        self,
        session: IngestSession,
        descriptor: DatasetDescriptor,
        sequence: int,
    ) -> None:
        self._session = session
        self._descriptor = descriptor
        self._sequence = sequence
        self._table_name = sanitize_identifier(descriptor.name)
        self._state: DatasetState = "fetching"
        self._columns_added: tuple[str, ...] = ()

    @property
    def state(self) -> DatasetState:
        """Current state of this dataset."""
        return self._state

    def run(self) -> DatasetOutcome:
        """Ingest the dataset and return its terminal outcome."""
        try:
            payload = self._read_payload()
            header, columns = self._detect_header(payload)
            sync_result = self._synchronize(columns)
            load_result = self._stream_rows(payload, header, sync_result)
        except AutoStatsCanError as error:
            return self._abort(error)
        self._state = "committed"
        _LOGGER.info(
            "dataset_ingested",
            dataset_name=self._descriptor.name,
            table_name=self._table_name,
            rows_inserted=load_result.inserted,
            rows_skipped=load_result.skipped,
            rows_failed=load_result.failed,
        )
        return DatasetOutcome(
            name=self._descriptor.name,
            table_name=self._table_name,
            state=self._state,
            rows_inserted=load_result.inserted,
            rows_skipped=load_result.skipped,
            rows_failed=load_result.failed,
            columns_added=self._columns_added,
        )

    def _read_payload(self) -> str:
        _LOGGER.info(
            "dataset_fetching",
            dataset_name=self._descriptor.name,
            sequence=self._sequence,
            source=self._descriptor.source,
        )
        raw_text = read_source_text(
            self._descriptor.source,
            self._session.fetcher,
            self._session.config,
        )
        self._archive_payload(raw_text)
        stripped = strip_preamble(raw_text)
        if stripped is None:
            return raw_text
        _LOGGER.info("preamble_stripped", dataset_name=self._descriptor.name)
        return stripped

    def _archive_payload(self, raw_text: str) -> None:
        archive = self._session.archive
        if archive is None:
            return
        try:
            archive.save_payload(self._sequence, raw_text)
        except OSError as error:
            _LOGGER.warning(
                "raw_payload_save_failed",
                dataset_name=self._descriptor.name,
                sequence=self._sequence,
                error=str(error),
            )

    def _detect_header(self, payload: str) -> tuple[CsvHeader, list[str]]:
        header = read_csv_header(payload)
        if not header.named:
            raise SourceError(f"No headers found in CSV for {self._descriptor.name}")
        columns = sanitize_headers(header.named, self._table_name)
        self._state = "header_detected"
        return header, columns

    def _synchronize(self, columns: list[str]) -> SchemaSyncResult:
        sync_result = synchronize_schema(self._session.store, self._table_name, columns)
        self._columns_added = sync_result.added_columns
        self._state = "schema_synced"
        return sync_result

    def _stream_rows(
        self,
        payload: str,
        header: CsvHeader,
        sync_result: SchemaSyncResult,
    ) -> RowLoadResult:
        store = self._session.store
        remapper = ColumnRemapper(self._session.remap_rules, sync_result.columns, self._table_name)
        loader = RowLoader(store, self._table_name, sync_result.columns, remapper)
        store.begin()
        try:
            if self._session.overwrite:
                store.clear_table(self._table_name)
                _LOGGER.info("table_cleared", table_name=self._table_name)
            self._state = "streaming"
            load_result = loader.load(iter_csv_rows(payload, header))
            store.commit()
        except AutoStatsCanError:
            store.rollback()
            raise
        remapper.log_totals()
        return load_result

    def _abort(self, error: AutoStatsCanError) -> DatasetOutcome:
        failed_state = self._state
        self._state = "aborted"
        statement = error.statement if isinstance(error, SchemaError) else None
        _LOGGER.error(
            "dataset_aborted",
            dataset_name=self._descriptor.name,
            table_name=self._table_name,
            failed_state=failed_state,
            error_type=type(error).__name__,
            error=str(error),
            statement=statement,
        )
        return DatasetOutcome(
            name=self._descriptor.name,
            table_name=self._table_name,
            state=self._state,
            columns_added=self._columns_added,
            error=str(error),
        )


def ingest_datasets(
    session: IngestSession,
    datasets: Sequence[DatasetDescriptor],
) -> RunSummary:
    """Ingest datasets strictly one at a time in declaration order.

    Args:
        session: Run-scoped store, flags, rules, and collaborators.
        datasets: Ordered dataset descriptors.

    Returns:
        Per-dataset outcomes; a failed dataset never stops the run.
    """
    outcomes: list[DatasetOutcome] = []
    for sequence, descriptor in enumerate(datasets):
        if session.archive is not None:
            session.archive.register(sequence, descriptor.name)
        outcomes.append(DatasetIngestRunner(session, descriptor, sequence).run())
    if session.archive is not None:
        _write_archive_index(session.archive)
    summary = RunSummary(outcomes=tuple(outcomes), store_available=session.store.available)
    _LOGGER.info(
        "ingest_completed",
        dataset_count=len(outcomes),
        committed=summary.committed_count,
        aborted=summary.aborted_count,
        overwrite=session.overwrite,
    )
    return summary


def run_ingest(config: AutoStatsCanConfig, fetcher: Fetcher | None = None) -> RunSummary:
    """Run a full ingestion from configuration.

    Args:
        config: Runtime configuration naming the dataset list, remap
            table, database, and mode flags.
        fetcher: Optional HTTP collaborator; a retrying session is built
            when omitted.

    Returns:
        Summary of the run.

    Raises:
        ConfigError: If the dataset list or remap table is invalid.
    """
    datasets = load_dataset_list(config.datasets_path)
    remap_rules = load_remap_rules(config.remap_path)
    archive = _open_archive(config) if config.keep_raw else None
    store = open_store(config.db_path)
    http_fetcher = HttpFetcher(config.http_timeout_seconds) if fetcher is None else None
    session = IngestSession(
        config=config,
        store=store,
        fetcher=fetcher or http_fetcher,
        remap_rules=tuple(remap_rules),
        overwrite=config.overwrite,
        archive=archive,
    )
    try:
        return ingest_datasets(session, datasets)
    finally:
        store.close()
        if http_fetcher is not None:
            http_fetcher.close()


def _open_archive(config: AutoStatsCanConfig) -> RawArchive | None:
    try:
        return RawArchive(config.raw_dir)
    except OSError as error:
        _LOGGER.warning("raw_archive_failed", raw_dir=str(config.raw_dir), error=str(error))
        return None


def _write_archive_index(archive: RawArchive) -> None:
    try:
        archive.write_index()
    except OSError as error:
        _LOGGER.warning("raw_archive_failed", raw_dir=str(archive.run_dir), error=str(error))
