"""Unit tests for CSV header detection and row iteration."""

from __future__ import annotations

import pytest

from core.errors import SourceError
from ingest.csv_rows import iter_csv_rows, read_csv_header


def test_read_csv_header_returns_named_columns() -> None:
    """Header row should be read in source order."""
    header = read_csv_header("REF DATE,VALUE\n2020-01,100.2\n")

    assert header.named == ("REF DATE", "VALUE")


def test_read_csv_header_reports_zero_columns_for_empty_payload() -> None:
    """Empty payloads should yield no usable columns."""
    assert read_csv_header("").named == ()


def test_read_csv_header_skips_blank_header_names() -> None:
    """Blank header cells should not become columns."""
    header = read_csv_header("A,,B\n1,2,3\n")

    assert header.named == ("A", "B")


def test_iter_csv_rows_maps_values_by_header() -> None:
    """Rows should be keyed by raw header names."""
    payload = "REF DATE,VALUE\n2020-01,100.2\n2020-02,101.0\n"
    header = read_csv_header(payload)

    rows = list(iter_csv_rows(payload, header))

    assert rows == [
        {"REF DATE": "2020-01", "VALUE": "100.2"},
        {"REF DATE": "2020-02", "VALUE": "101.0"},
    ]


def test_iter_csv_rows_tolerates_short_and_long_rows() -> None:
    """Missing trailing values are absent and surplus values are dropped."""
    payload = "A,B\n1\n1,2,3\n"
    header = read_csv_header(payload)

    rows = list(iter_csv_rows(payload, header))

    assert rows == [{"A": "1"}, {"A": "1", "B": "2"}]


def test_iter_csv_rows_is_restartable() -> None:
    """Each call should start a fresh pass over the payload."""
    payload = "A\n1\n2\n"
    header = read_csv_header(payload)

    first = list(iter_csv_rows(payload, header))
    second = list(iter_csv_rows(payload, header))

    assert first == second and len(first) == 2


def test_iter_csv_rows_handles_quoted_delimiters() -> None:
    """Quoted commas belong to the value."""
    payload = 'GEO,VALUE\n"Ottawa, Ontario",5\n'
    header = read_csv_header(payload)

    rows = list(iter_csv_rows(payload, header))

    assert rows == [{"GEO": "Ottawa, Ontario", "VALUE": "5"}]


def test_iter_csv_rows_raises_source_error_for_oversized_field() -> None:
    """Malformed CSV content should surface as a source error."""
    payload = "A\n\"" + "x" * 200_000 + "\"\n"
    header = read_csv_header(payload)

    with pytest.raises(SourceError):
        list(iter_csv_rows(payload, header))

    assert header.named == ("A",)
