"""HTTP fetch wrapper for remote dataset sources.

Open data portals are slow and occasionally flaky, so requests go
through a session with conservative urllib3 retries on transient
statuses before a non-success response is reported.
"""

from __future__ import annotations

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from core.constants import (
    DEFAULT_HTTP_TIMEOUT_SECONDS,
    HTTP_RETRY_BACKOFF_FACTOR,
    HTTP_RETRY_STATUS_CODES,
    HTTP_RETRY_TOTAL,
    SOURCE_TEXT_ENCODING,
)
from core.errors import SourceError
from core.types import FetchResponse


def build_retry_session() -> requests.Session:
    """Build a requests Session with conservative GET retries."""
    session = requests.Session()
    retry = Retry(
        total=HTTP_RETRY_TOTAL,
        connect=HTTP_RETRY_TOTAL,
        read=HTTP_RETRY_TOTAL,
        status=HTTP_RETRY_TOTAL,
        backoff_factor=HTTP_RETRY_BACKOFF_FACTOR,
        status_forcelist=HTTP_RETRY_STATUS_CODES,
        allowed_methods=frozenset({"GET"}),
        raise_on_status=False,
    )
    adapter = HTTPAdapter(max_retries=retry)
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    return session


class HttpFetcher:
    """Fetch remote payloads as decoded text."""

    def __init__(
        self,
        timeout_seconds: int = DEFAULT_HTTP_TIMEOUT_SECONDS,
        session: requests.Session | None = None,
    ) -> None:
        self._timeout_seconds = timeout_seconds
        self._session = session or build_retry_session()

    def fetch(self, url: str) -> FetchResponse:
        """GET a URL and decode its body.

        Args:
            url: Remote dataset location.

        Returns:
            Response status and body; ``ok`` is false for status >= 400.

        Raises:
            SourceError: If the request fails at the network level.
        """
        try:
            response = self._session.get(url, timeout=self._timeout_seconds)
        except requests.RequestException as error:
            raise SourceError(f"HTTP error while fetching '{url}': {error}") from error
        return FetchResponse(
            ok=response.ok,
            status=response.status_code,
            body_text=response.content.decode(SOURCE_TEXT_ENCODING, errors="replace"),
        )

    def close(self) -> None:
        """Release pooled connections."""
        self._session.close()
