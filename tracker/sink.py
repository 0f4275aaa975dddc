"""Upload sinks that forward fixes to the external collector."""

import logging
from types import TracebackType
from typing import Protocol

import httpx

from positioning.nmea import Fix
from tracker.formatters import format_upload_payload

__all__ = ["HttpUploadSink", "UploadError", "UploadSink"]

logger = logging.getLogger(__name__)

_TIMEOUT = 10.0
_HEADERS = {
    "Content-Type": "application/json",
    "Accept": "application/json",
}


class UploadError(Exception):
    """The fix could not be delivered to the collector."""


class UploadSink(Protocol):
    def upload(self, device_name: str, fix: Fix, timestamp: int) -> None:
        """Deliver one fix; raise ``UploadError`` on failure."""
        ...


class HttpUploadSink:
    """POST fixes as JSON to a collector URL.

    The upload succeeds whenever the request completes at the transport
    level; the response status is logged but not inspected and the body is
    discarded.

    Args:
        url: Collector endpoint.
        client: Optional ``httpx.Client`` to send requests with. An injected
            client is not closed by ``close()``.
        timeout: Request timeout in seconds for an internally created client.
    """

    def __init__(
        self,
        url: str,
        client: httpx.Client | None = None,
        timeout: float = _TIMEOUT,
    ) -> None:
        self._url = url
        self._owns_client = client is None
        self._client = client if client is not None else httpx.Client(timeout=timeout)

    @property
    def url(self) -> str:
        return self._url

    def upload(self, device_name: str, fix: Fix, timestamp: int) -> None:
        """Serialize ``fix`` and POST it to the collector.

        Raises:
            UploadError: If the URL is invalid or the request fails at the
                transport level.
        """
        payload = format_upload_payload(device_name, fix, timestamp)
        try:
            response = self._client.post(self._url, json=payload, headers=_HEADERS)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise UploadError(f"Upload to {self._url} failed: {e}") from e
        logger.debug("Collector answered %d", response.status_code)

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "HttpUploadSink":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()
