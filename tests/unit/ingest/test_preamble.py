"""Unit tests for metadata preamble stripping."""

from __future__ import annotations

from ingest.preamble import extract_tabular_payload, normalize_line_endings, strip_preamble
from tests.fixture_paths import fixture_path


def test_strip_preamble_returns_none_without_marker() -> None:
    """Plain CSV should report that no preamble exists."""
    assert strip_preamble("REF_DATE,VALUE\n2020-01,1\n") is None


def test_strip_preamble_starts_at_first_non_blank_line() -> None:
    """Payload should start after the marker, skipping blank lines."""
    text = "Title line\nNotes\nOBSERVATIONS\n\n   \nREF_DATE,VALUE\n2020-01,1\n"

    assert strip_preamble(text) == "REF_DATE,VALUE\n2020-01,1\n"


def test_strip_preamble_accepts_quoted_marker_any_case() -> None:
    """Quoted, mixed-case markers with padding should be detected."""
    text = 'meta\n  "Observations"\t\nA,B\n1,2\n'

    assert strip_preamble(text) == "A,B\n1,2\n"


def test_strip_preamble_normalizes_crlf() -> None:
    """Windows line endings should not hide the marker line."""
    text = "meta\r\nOBSERVATIONS\r\nA,B\r\n1,2\r\n"

    assert strip_preamble(text) == "A,B\n1,2\n"


def test_strip_preamble_ignores_marker_inside_other_text() -> None:
    """Only a line consisting of the marker alone should match."""
    text = "OBSERVATIONS,VALUE\n1,2\n"

    assert strip_preamble(text) is None


def test_strip_preamble_uses_first_marker() -> None:
    """Later marker lines belong to the payload."""
    text = "OBSERVATIONS\nA\nobservations\n"

    assert strip_preamble(text) == "A\nobservations\n"


def test_extract_tabular_payload_returns_original_when_unwrapped() -> None:
    """Unwrapped text should pass through unchanged."""
    text = "A,B\r\n1,2\r\n"

    assert extract_tabular_payload(text) == text


def test_extract_tabular_payload_strips_fixture_export() -> None:
    """Wrapped export fixture should begin at its real header."""
    raw_text = fixture_path("sources/wrapped_observations.csv").read_text(encoding="utf-8")

    payload = extract_tabular_payload(raw_text)

    assert payload.startswith('"REF_DATE","GEO","VALUE"\n')


def test_normalize_line_endings_handles_lone_carriage_returns() -> None:
    """Classic Mac line endings should become newlines."""
    assert normalize_line_endings("a\rb\r\nc") == "a\nb\nc"
