"""Unit tests for S3 URI parsing."""

from __future__ import annotations

import pytest

from core.errors import SourceError
from core.s3_uri import is_s3_uri, parse_s3_uri


def test_parse_s3_uri_splits_bucket_and_key() -> None:
    """Parser should split bucket from object key."""
    location = parse_s3_uri("s3://stats-bucket/cpi/2024.csv")

    assert (location.bucket, location.key) == ("stats-bucket", "cpi/2024.csv")


def test_parse_s3_uri_requires_key() -> None:
    """Parser should fail when no object key is given."""
    with pytest.raises(SourceError):
        parse_s3_uri("s3://stats-bucket")

    assert is_s3_uri("s3://stats-bucket")


def test_is_s3_uri_rejects_http() -> None:
    """HTTP URLs are not S3 locations."""
    assert is_s3_uri("https://example.org/data.csv") is False
