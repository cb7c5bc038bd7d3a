"""Public SDK surface for AutoStatsCan.

This module provides a stable import path for programmatic users.
It re-exports the run entry points and typed models.
"""

from __future__ import annotations

from core.config import AutoStatsCanConfig
from core.naming import sanitize_identifier
from core.types import DatasetDescriptor, DatasetOutcome, RemapRule, RunSummary
from ingest.column_remap import ColumnRemapper
from ingest.http_fetch import HttpFetcher
from ingest.pipeline import ingest_datasets, run_ingest
from ingest.preamble import extract_tabular_payload, strip_preamble
from ingest.session import IngestSession
from store.schema_sync import synchronize_schema
from store.sqlite_store import SqliteStore, open_store

__all__ = [
    "AutoStatsCanConfig",
    "ColumnRemapper",
    "DatasetDescriptor",
    "DatasetOutcome",
    "HttpFetcher",
    "IngestSession",
    "RemapRule",
    "RunSummary",
    "SqliteStore",
    "extract_tabular_payload",
    "ingest_datasets",
    "open_store",
    "run_ingest",
    "sanitize_identifier",
    "strip_preamble",
    "synchronize_schema",
]
