"""Unit tests for dataset source readers."""

from __future__ import annotations

import io
import sys
from pathlib import Path
from typing import Any

import boto3
import pytest
from botocore.exceptions import ClientError, ProfileNotFound

import ingest.source_reader as source_reader
from core.errors import DependencyError, SourceError
from ingest.source_reader import is_remote_location, read_source_text
from tests.fakes import FakeFetcher, build_config, ok_response
from tests.fixture_paths import fixture_path


def test_read_source_text_reads_local_file(tmp_path: Path) -> None:
    """Local paths should be read from disk."""
    config = build_config(tmp_path)

    text = read_source_text(str(fixture_path("sources/cpi_all_items.csv")), FakeFetcher(), config)

    assert text.startswith("REF DATE,GEO,VALUE")


def test_read_source_text_strips_utf8_bom(tmp_path: Path) -> None:
    """A byte order mark should not leak into the first header."""
    source = tmp_path / "bom.csv"
    source.write_bytes("\ufeffREF_DATE,VALUE\n".encode("utf-8"))

    text = read_source_text(str(source), FakeFetcher(), build_config(tmp_path))

    assert text == "REF_DATE,VALUE\n"


def test_read_source_text_raises_for_missing_file(tmp_path: Path) -> None:
    """Missing local files should be a source error."""
    missing = tmp_path / "missing.csv"

    with pytest.raises(SourceError):
        read_source_text(str(missing), FakeFetcher(), build_config(tmp_path))

    assert missing.exists() is False


def test_read_source_text_fetches_urls(tmp_path: Path) -> None:
    """URLs should be delegated to the HTTP collaborator."""
    fetcher = FakeFetcher({"https://example.org/a.csv": ok_response("A\n1\n")})

    text = read_source_text("https://example.org/a.csv", fetcher, build_config(tmp_path))

    assert text == "A\n1\n" and fetcher.requested == ["https://example.org/a.csv"]


def test_read_source_text_raises_for_non_ok_status(tmp_path: Path) -> None:
    """Non-success statuses should be reported as fetch failures."""
    fetcher = FakeFetcher()

    with pytest.raises(SourceError, match="404"):
        read_source_text("https://example.org/missing.csv", fetcher, build_config(tmp_path))

    assert fetcher.requested == ["https://example.org/missing.csv"]


def test_is_remote_location_uses_scheme_separator() -> None:
    """Only locations with a scheme separator are remote."""
    assert is_remote_location("https://x/y.csv") and not is_remote_location("data/y.csv")


class _FakeS3Client:
    def __init__(self, body: bytes | None = None) -> None:
        self.body = body
        self.requests: list[tuple[str, str]] = []

    def get_object(self, Bucket: str, Key: str) -> dict[str, Any]:
        self.requests.append((Bucket, Key))
        if self.body is None:
            raise ClientError({"Error": {"Code": "NoSuchKey", "Message": "missing"}}, "GetObject")
        return {"Body": io.BytesIO(self.body)}


def test_read_source_text_downloads_s3_objects(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """s3:// locations should be split into bucket and key and decoded."""
    client = _FakeS3Client("\ufeffA,B\n1,2\n".encode("utf-8"))
    monkeypatch.setattr(source_reader, "_create_s3_client", lambda config: client)

    text = read_source_text("s3://stats-bucket/cpi/all.csv", FakeFetcher(), build_config(tmp_path))

    assert text == "A,B\n1,2\n" and client.requests == [("stats-bucket", "cpi/all.csv")]


def test_read_source_text_wraps_s3_download_errors(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """A failed object download should surface as a source error."""
    monkeypatch.setattr(source_reader, "_create_s3_client", lambda config: _FakeS3Client())

    with pytest.raises(SourceError, match="s3://stats-bucket/missing.csv"):
        read_source_text("s3://stats-bucket/missing.csv", FakeFetcher(), build_config(tmp_path))


def test_read_source_text_wraps_s3_profile_errors(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """An unknown AWS profile should be a source error, not a botocore crash."""

    def _raise_profile_not_found(**kwargs: str) -> None:
        raise ProfileNotFound(profile=kwargs.get("profile_name", ""))

    monkeypatch.setattr(boto3.session, "Session", _raise_profile_not_found)
    config = build_config(tmp_path, s3_profile="no-such-profile")

    with pytest.raises(SourceError, match="no-such-profile"):
        read_source_text("s3://stats-bucket/cpi.csv", FakeFetcher(), config)


def test_read_source_text_requires_boto3_for_s3(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """Missing boto3 should raise a dependency error for s3:// sources."""
    monkeypatch.setitem(sys.modules, "boto3", None)

    with pytest.raises(DependencyError):
        read_source_text("s3://stats-bucket/cpi.csv", FakeFetcher(), build_config(tmp_path))
