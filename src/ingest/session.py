"""Ingestion session context.

A session carries the store handle, run-wide mode flags, the remap
table, and external collaborators. Components receive it explicitly
instead of reading process-wide state.
"""

from __future__ import annotations

from dataclasses import dataclass

from core.config import AutoStatsCanConfig
from core.types import RemapRule
from ingest.raw_archive import RawArchive
from ingest.source_reader import Fetcher
from store.sqlite_store import SqliteStore


@dataclass(frozen=True)
class IngestSession:
    """Run-scoped dependencies for ingesting datasets.

    Attributes:
        config: Runtime configuration.
        store: Process-wide relational store.
        fetcher: HTTP collaborator for remote sources.
        remap_rules: Static remap table shared by all datasets.
        overwrite: Clear each relation before loading it.
        archive: Raw payload archive when retention is enabled.
    """

    config: AutoStatsCanConfig
    store: SqliteStore
    fetcher: Fetcher
    remap_rules: tuple[RemapRule, ...] = ()
    overwrite: bool = False
    archive: RawArchive | None = None
