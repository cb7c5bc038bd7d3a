"""Dataset source readers.

This module resolves a dataset location to raw text. Locations with a
scheme separator are remote (``s3://`` through boto3, anything else
through the HTTP fetcher); all other locations are local file paths.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Protocol

from core.config import AutoStatsCanConfig
from core.constants import REMOTE_SCHEME_SEPARATOR, SOURCE_TEXT_ENCODING
from core.errors import DependencyError, SourceError
from core.s3_uri import is_s3_uri, parse_s3_uri
from core.types import FetchResponse


class Fetcher(Protocol):
    """HTTP collaborator contract."""

    def fetch(self, url: str) -> FetchResponse:
        """Fetch a URL."""


def is_remote_location(location: str) -> bool:
    """Return whether a dataset location is a URL rather than a path."""
    return REMOTE_SCHEME_SEPARATOR in location


def read_source_text(location: str, fetcher: Fetcher, config: AutoStatsCanConfig) -> str:
    """Load the raw text of a dataset source.

    Args:
        location: URL, ``s3://bucket/key`` URI, or local path.
        fetcher: HTTP collaborator used for remote URLs.
        config: Runtime configuration for S3 session defaults.

    Returns:
        Decoded source text.

    Raises:
        SourceError: If the source cannot be fetched or read.
        DependencyError: If an S3 source is requested without boto3.
    """
    if is_s3_uri(location):
        return _read_s3_text(location, config)
    if is_remote_location(location):
        return _read_http_text(location, fetcher)
    return _read_local_text(Path(location).expanduser())


def _read_http_text(url: str, fetcher: Fetcher) -> str:
    response = fetcher.fetch(url)
    if not response.ok:
        raise SourceError(f"Failed to fetch '{url}' ({response.status})")
    return response.body_text


def _read_local_text(source_path: Path) -> str:
    """Read a local source file.

    Args:
        source_path: Local file path.

    Returns:
        Decoded file text.

    Raises:
        SourceError: If the path is missing or unreadable.
    """
    if not source_path.is_file():
        raise SourceError(
            f"Failed to read source at {source_path}: file does not exist. "
            "Fix the dataset list entry or restore the file."
        )
    try:
        return source_path.read_bytes().decode(SOURCE_TEXT_ENCODING, errors="replace")
    except OSError as error:
        raise SourceError(f"Failed to read source at {source_path}: {error}") from error


def _read_s3_text(uri: str, config: AutoStatsCanConfig) -> str:
    """Download one S3 object as text.

    Args:
        uri: ``s3://bucket/key`` object URI.
        config: Runtime config for region/profile.

    Returns:
        Decoded object body.

    Raises:
        SourceError: If the object cannot be downloaded.
    """
    location = parse_s3_uri(uri)
    s3_client = _create_s3_client(config)
    try:
        body = s3_client.get_object(Bucket=location.bucket, Key=location.key)["Body"].read()
    except Exception as error:
        raise SourceError(f"Failed to download '{uri}': {error}") from error
    return body.decode(SOURCE_TEXT_ENCODING, errors="replace")


def _create_s3_client(config: AutoStatsCanConfig) -> Any:
    """Create a boto3 S3 client.

    Args:
        config: Runtime config containing optional profile/region.

    Returns:
        Boto3 S3 client.

    Raises:
        DependencyError: If boto3 is missing.
        SourceError: If the session or client cannot be created.
    """
    try:
        import boto3
    except ImportError as error:
        raise DependencyError(
            "S3 support requires boto3, but it is not installed. "
            "Install boto3 to ingest from s3:// sources."
        ) from error
    session_kwargs: dict[str, str] = {}
    if config.s3_profile:
        session_kwargs["profile_name"] = config.s3_profile
    if config.s3_region:
        session_kwargs["region_name"] = config.s3_region
    try:
        session = boto3.session.Session(**session_kwargs)
        return session.client("s3")
    except Exception as error:
        raise SourceError(
            f"Failed to create S3 client: {error}. "
            "Check AUTOSTATSCAN_S3_PROFILE and AUTOSTATSCAN_S3_REGION."
        ) from error
