"""Unit tests for the public SDK module."""

from __future__ import annotations

from pathlib import Path

import autostatscan
from tests.fakes import FakeFetcher, ok_response


def test_sdk_exports_resolve() -> None:
    """Every exported name should be importable from the SDK module."""
    missing = [name for name in autostatscan.__all__ if not hasattr(autostatscan, name)]

    assert missing == []


def test_sdk_ingests_through_public_names(tmp_path: Path) -> None:
    """Programmatic users should be able to run a session end to end."""
    store = autostatscan.open_store(tmp_path / "sdk.db")
    fetcher = FakeFetcher({"https://example.org/a.csv": ok_response("A,B\n1,2\n")})
    session = autostatscan.IngestSession(
        config=autostatscan.AutoStatsCanConfig.from_env(),
        store=store,
        fetcher=fetcher,
    )
    try:
        summary = autostatscan.ingest_datasets(
            session,
            [autostatscan.DatasetDescriptor("A table", "https://example.org/a.csv")],
        )
    finally:
        store.close()

    assert summary.committed_count == 1 and summary.outcomes[0].table_name == "A_table"
