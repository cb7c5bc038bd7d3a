"""S3 URI parsing helpers.

This module parses ``s3://bucket/key`` dataset locations so the
source reader can fetch single objects through boto3.
"""

from __future__ import annotations

from dataclasses import dataclass

from core.constants import S3_SCHEME
from core.errors import SourceError


@dataclass(frozen=True)
class S3Location:
    """Parsed S3 object location."""

    bucket: str
    key: str


def is_s3_uri(location: str) -> bool:
    """Return whether a dataset location points at S3."""
    return location.lower().startswith(S3_SCHEME)


def parse_s3_uri(uri: str) -> S3Location:
    """Parse and validate an S3 object URI.

    Args:
        uri: URI in format ``s3://bucket/key``.

    Returns:
        Parsed bucket and key pair.

    Raises:
        SourceError: If bucket or key is missing.
    """
    stripped_uri = uri[len(S3_SCHEME):]
    bucket, _, key = stripped_uri.partition("/")
    if not bucket or not key:
        raise SourceError(
            f"Invalid S3 URI '{uri}': expected s3://bucket/key. "
            "Provide both bucket and object key."
        )
    return S3Location(bucket=bucket, key=key)
