"""Unit tests for row filtering and insertion."""

from __future__ import annotations

from pathlib import Path

from structlog.testing import capture_logs

from core.types import RemapRule
from ingest.column_remap import ColumnRemapper
from ingest.row_loader import RowLoader, filter_row
from store.schema_sync import synchronize_schema
from tests.fakes import build_store


def _loader(tmp_path: Path, columns: list[str], rules: list[RemapRule] | None = None):
    store = build_store(tmp_path)
    result = synchronize_schema(store, "demo", columns)
    remapper = ColumnRemapper(rules or [], result.columns, "demo")
    return store, RowLoader(store, "demo", result.columns, remapper)


def test_filter_row_drops_blank_values_and_sanitizes_names() -> None:
    """Blank values should be absent and names sanitized."""
    row = filter_row({"REF DATE": " 2020-01 ", "VALUE": "   ", "GEO": ""})

    assert row == {"REF_DATE": "2020-01"}


def test_filter_row_collision_keeps_later_value() -> None:
    """Colliding sanitized names should resolve to the later field."""
    row = filter_row({"REF DATE": "first", "REF-DATE": "second"})

    assert row == {"REF_DATE": "second"}


def test_load_row_skips_all_blank_row_without_error(tmp_path: Path) -> None:
    """A row of blanks should be skipped and not logged as an error."""
    store, loader = _loader(tmp_path, ["A", "B"])

    with capture_logs() as logs:
        status = loader.load_row({"A": "", "B": "  "})

    assert status == "skipped" and store.count_rows("demo") == 0
    assert not [entry for entry in logs if entry["log_level"] == "error"]


def test_load_row_inserts_remapped_row(tmp_path: Path) -> None:
    """Remapped fields should be written to their target column."""
    store, loader = _loader(tmp_path, ["A", "B"], [RemapRule("A", "B")])

    status = loader.load_row({"A": "5"})

    assert status == "inserted" and store.fetch_rows("demo") == [{"A": None, "B": "5"}]


def test_load_row_canonicalizes_field_case(tmp_path: Path) -> None:
    """Fields should be written under the stored column spelling."""
    store, loader = _loader(tmp_path, ["VALUE"])

    loader.load_row({"value": "7"})

    assert store.fetch_rows("demo") == [{"VALUE": "7"}]


def test_load_row_logs_and_continues_on_insert_failure(tmp_path: Path) -> None:
    """A failing insert should be logged with its statement and skipped."""
    store, loader = _loader(tmp_path, ["A"])

    with capture_logs() as logs:
        failed = loader.load_row({"UNKNOWN": "x"})
    inserted = loader.load_row({"A": "ok"})

    failures = [entry for entry in logs if entry["event"] == "row_insert_failed"]
    assert (failed, inserted) == ("failed", "inserted")
    assert '"UNKNOWN"' in failures[0]["statement"]


def test_load_counts_each_outcome(tmp_path: Path) -> None:
    """Load should report inserted, skipped, and failed counts."""
    _, loader = _loader(tmp_path, ["A"])

    result = loader.load(iter([{"A": "1"}, {"A": ""}, {"B": "x"}, {"A": "2"}]))

    assert (result.inserted, result.skipped, result.failed) == (2, 1, 1)
