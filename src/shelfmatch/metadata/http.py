# ABOUTME: HTTP client abstraction for metadata provider and cover requests.
# ABOUTME: Provides per-client timeouts, rate limiting, and injectable transport for testing.

import logging
import threading
import time
from typing import Any, Protocol, runtime_checkable

import httpx

logger = logging.getLogger(__name__)

USER_AGENT = "shelfmatch/0.1.0"
DEFAULT_TIMEOUT = 10.0


class MetadataFetchError(Exception):
    """Raised when an HTTP request to a metadata provider fails."""


@runtime_checkable
class HttpClient(Protocol):
    """Protocol for the HTTP operations metadata sources need."""

    def get(
        self,
        url: str,
        params: dict[str, str] | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any: ...

    def post(self, url: str, json: dict[str, Any]) -> Any: ...

    def get_bytes(self, url: str) -> bytes: ...


class ShelfmatchHttpClient:
    """HTTP client with a fixed timeout and rate limiting for metadata APIs.

    Wraps httpx.Client. Every failure (transport error, timeout, non-200
    status, undecodable JSON) surfaces as MetadataFetchError. Requests are
    never retried; a failed call simply yields no data for that round.
    """

    def __init__(
        self,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        min_request_interval: float = 0.0,
        headers: dict[str, str] | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        client_kwargs: dict[str, Any] = {
            "headers": {"User-Agent": USER_AGENT, **(headers or {})},
            "timeout": timeout,
            "follow_redirects": True,
        }
        if transport is not None:
            client_kwargs["transport"] = transport
        self._client = httpx.Client(**client_kwargs)
        self._min_interval = min_request_interval
        self._last_request_time: float = 0.0
        self._lock = threading.Lock()

    def get(
        self,
        url: str,
        params: dict[str, str] | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        """Send a GET request and return the decoded JSON body.

        Raises:
            MetadataFetchError: On transport errors, non-200 status, or bad JSON.
        """
        response = self._send("GET", url, params=params, headers=headers)
        return self._decode_json(response, url)

    def post(self, url: str, json: dict[str, Any]) -> Any:
        """Send a JSON POST request and return the decoded JSON body.

        Raises:
            MetadataFetchError: On transport errors, non-200 status, or bad JSON.
        """
        response = self._send("POST", url, json=json)
        return self._decode_json(response, url)

    def get_bytes(self, url: str) -> bytes:
        """Download a raw body (e.g. a cover image).

        Raises:
            MetadataFetchError: On transport errors or non-200 status.
        """
        return self._send("GET", url).content

    def close(self) -> None:
        self._client.close()

    @property
    def is_closed(self) -> bool:
        return self._client.is_closed

    def __enter__(self) -> "ShelfmatchHttpClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _send(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        self._rate_limit()
        try:
            response = self._client.request(method, url, **kwargs)
        except httpx.HTTPError as exc:
            raise MetadataFetchError(f"Request failed: {url}: {exc}") from exc

        if response.status_code != 200:
            raise MetadataFetchError(f"HTTP {response.status_code} from {url}")
        return response

    @staticmethod
    def _decode_json(response: httpx.Response, url: str) -> Any:
        try:
            return response.json()
        except ValueError as exc:
            raise MetadataFetchError(f"Invalid JSON from {url}: {exc}") from exc

    def _rate_limit(self) -> None:
        """Sleep if needed to maintain minimum interval between requests."""
        if self._min_interval <= 0:
            return
        with self._lock:
            now = time.monotonic()
            elapsed = now - self._last_request_time
            if elapsed < self._min_interval and self._last_request_time > 0:
                wait = self._min_interval - elapsed
                logger.debug("Rate limit: waiting %.2fs", wait)
                time.sleep(wait)
            self._last_request_time = time.monotonic()
