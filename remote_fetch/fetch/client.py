"""Bounded HTTP client for fetching remote resources into memory."""

import asyncio
import time
from collections.abc import Callable
from io import BytesIO
from urllib.parse import urlsplit

import httpx
import structlog

from remote_fetch.errors import (
    FetchTimeoutError,
    MalformedUrlError,
    PayloadTooLargeError,
    RemoteFetchError,
    ResourceNotFoundError,
    TransportError,
)
from remote_fetch.fetch.config import FetchConfig
from remote_fetch.fetch.constants import (
    ALLOWED_SCHEMES,
    HTTP_STATUS_OK_MAX,
    HTTP_STATUS_OK_MIN,
    IDENTITY_ENCODING,
    NOT_FOUND_STATUSES,
)
from remote_fetch.fetch.metrics import FetchMetrics
from remote_fetch.fetch.redact import redact_headers, redact_url_credentials


logger = structlog.get_logger()

# Called with every outgoing request URL, redirect hops included.
# Raises to abort the fetch.
UrlGuard = Callable[[str], object]


class BoundedFetcher:
    """Fetches a remote resource with a byte ceiling and a deadline.

    Each call opens its own client, so concurrent fetches share no
    connection or buffer state. The timeout covers connecting, receiving
    headers and reading the body. The body is streamed and the transfer
    is aborted as soon as it would exceed ``max_bytes``; nothing beyond
    the ceiling is ever buffered. Client, stream and buffer are released
    on every exit path.
    """

    def __init__(
        self,
        config: FetchConfig | None = None,
        url_guard: UrlGuard | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the fetcher.

        Args:
            config: Fetch limits; defaults are used when omitted.
            url_guard: Optional check run for every outgoing request,
                including redirect hops.
            transport: Optional httpx transport (used by tests).
        """
        self._config = config or FetchConfig()
        self._url_guard = url_guard
        self._transport = transport
        self._metrics = FetchMetrics.get_instance()
        self._log = logger.bind(component="fetch")

    @property
    def config(self) -> FetchConfig:
        """Get the fetch configuration."""
        return self._config

    async def fetch(self, url: str) -> bytes:
        """Fetch a URL and return its complete body.

        Args:
            url: Absolute http(s) URL.

        Returns:
            The full response body, starting at offset zero.

        Raises:
            MalformedUrlError: If the URL is not an absolute http(s) URL.
            ForbiddenHostError: If the URL guard rejects a request.
            FetchTimeoutError: If the deadline passes before completion.
            PayloadTooLargeError: If the body exceeds ``max_bytes``.
            ResourceNotFoundError: If the server returns no body.
            TransportError: For any other network failure.
        """
        start_time_ns = time.perf_counter_ns()
        log = self._log.bind(url=redact_url_credentials(url))

        try:
            body = await self._fetch_with_deadline(url)
        except RemoteFetchError as e:
            duration_ms = (time.perf_counter_ns() - start_time_ns) / 1_000_000
            self._metrics.record_failure(e.error_class, duration_ms)
            log.warning(
                "fetch_failed",
                error_class=e.error_class.value,
                error=e.message,
                duration_ms=round(duration_ms, 2),
            )
            raise

        duration_ms = (time.perf_counter_ns() - start_time_ns) / 1_000_000
        self._metrics.record_success(len(body), duration_ms)
        log.info(
            "fetch_complete",
            bytes=len(body),
            duration_ms=round(duration_ms, 2),
        )
        return body

    async def _fetch_with_deadline(self, url: str) -> bytes:
        """Run a single fetch under the configured deadline.

        Args:
            url: URL to fetch.

        Returns:
            Response body.
        """
        self._check_url(url)

        try:
            async with asyncio.timeout(self._config.timeout_seconds):
                return await self._execute(url)
        except RemoteFetchError:
            raise
        except (TimeoutError, httpx.TimeoutException) as e:
            raise FetchTimeoutError(url, self._config.timeout_millis) from e
        except httpx.TooManyRedirects as e:
            raise TransportError(url, f"Too many redirects: {e}") from e
        except httpx.InvalidURL as e:
            raise MalformedUrlError(url, str(e)) from e
        except httpx.HTTPError as e:
            raise TransportError(url, f"Request failed: {e}") from e

    async def _execute(self, url: str) -> bytes:
        """Open a client, stream the response and read the body.

        Args:
            url: URL to fetch.

        Returns:
            Response body.
        """
        headers = self._build_headers()
        self._log.debug(
            "fetch_start",
            url=redact_url_credentials(url),
            headers=redact_headers(headers),
            max_bytes=self._config.max_bytes,
            timeout_millis=self._config.timeout_millis,
        )

        async with (
            httpx.AsyncClient(
                timeout=httpx.Timeout(self._config.timeout_seconds),
                follow_redirects=self._config.follow_redirects,
                max_redirects=self._config.max_redirects,
                headers=headers,
                event_hooks=self._build_event_hooks(),
                transport=self._transport,
            ) as client,
            client.stream("GET", url) as response,
        ):
            self._metrics.record_response(response.status_code)
            self._check_status(url, response)
            self._check_content_encoding(url, response)
            self._check_content_length(url, response)
            return await self._read_body_with_limit(url, response)

    def _build_headers(self) -> dict[str, str]:
        """Build request headers.

        Returns:
            Headers dictionary; User-Agent only when configured.
        """
        headers: dict[str, str] = {
            "Accept": "image/*,*/*;q=0.8",
            "Accept-Encoding": IDENTITY_ENCODING,
        }
        if self._config.user_agent:
            headers["User-Agent"] = self._config.user_agent
        return headers

    def _build_event_hooks(
        self,
    ) -> dict[str, list[Callable[[httpx.Request], object]]]:
        """Build httpx event hooks that apply the URL guard.

        Returns:
            Event hooks mapping, empty when no guard is configured.
        """
        if self._url_guard is None:
            return {}

        guard = self._url_guard

        async def check_request(request: httpx.Request) -> None:
            guard(str(request.url))

        return {"request": [check_request]}

    def _check_url(self, url: str) -> None:
        """Ensure the URL is an absolute http(s) URL with a host.

        Args:
            url: URL to check.

        Raises:
            MalformedUrlError: If the URL cannot be fetched.
        """
        try:
            parsed = urlsplit(url)
            host = parsed.hostname
        except ValueError as e:
            raise MalformedUrlError(url, str(e)) from e

        if parsed.scheme.lower() not in ALLOWED_SCHEMES:
            raise MalformedUrlError(url, f"unsupported scheme '{parsed.scheme}'")
        if not host:
            raise MalformedUrlError(url, "missing host")

    def _check_status(self, url: str, response: httpx.Response) -> None:
        """Classify a non-success status as an error.

        Args:
            url: Requested URL.
            response: Streaming response.

        Raises:
            ResourceNotFoundError: For 204, 404 and 410.
            TransportError: For any other non-2xx status.
        """
        status_code = response.status_code
        if status_code in NOT_FOUND_STATUSES:
            raise ResourceNotFoundError(url, status_code)
        if not HTTP_STATUS_OK_MIN <= status_code < HTTP_STATUS_OK_MAX:
            raise TransportError(
                url,
                f"Unexpected status {status_code} from {response.url.host}",
                status_code=status_code,
            )

    def _check_content_encoding(self, url: str, response: httpx.Response) -> None:
        """Reject bodies the server encoded despite the identity request.

        The body is read undecoded, so a compressed body would be returned
        as compressed bytes and its decoded size could not be bounded.

        Args:
            url: Requested URL.
            response: Streaming response.

        Raises:
            TransportError: If Content-Encoding is anything but identity.
        """
        encoding = response.headers.get("content-encoding", "").strip().lower()
        if encoding and encoding != IDENTITY_ENCODING:
            raise TransportError(
                url,
                f"Unsupported content encoding '{encoding}' from {response.url.host}",
                status_code=response.status_code,
            )

    def _check_content_length(self, url: str, response: httpx.Response) -> None:
        """Reject a declared body size above the ceiling before reading.

        Args:
            url: Requested URL.
            response: Streaming response.

        Raises:
            PayloadTooLargeError: If Content-Length exceeds ``max_bytes``.
        """
        content_length = response.headers.get("content-length")
        if not content_length:
            return
        try:
            size = int(content_length)
        except ValueError:
            return
        if size > self._config.max_bytes:
            raise PayloadTooLargeError(url, self._config.max_bytes, size)

    async def _read_body_with_limit(
        self, url: str, response: httpx.Response
    ) -> bytes:
        """Read the response body, enforcing the byte ceiling while streaming.

        Chunks are taken undecoded, so the count is what arrived on the wire.

        Args:
            url: Requested URL.
            response: Streaming response.

        Returns:
            Complete body bytes.

        Raises:
            PayloadTooLargeError: As soon as the body would exceed the ceiling.
            ResourceNotFoundError: If the body is empty.
        """
        max_bytes = self._config.max_bytes
        total_read = 0

        with BytesIO() as buffer:
            async for chunk in response.aiter_raw(
                chunk_size=self._config.chunk_size
            ):
                total_read += len(chunk)
                if total_read > max_bytes:
                    raise PayloadTooLargeError(url, max_bytes, total_read)
                buffer.write(chunk)

            if total_read == 0:
                raise ResourceNotFoundError(url, response.status_code)

            return buffer.getvalue()


async def fetch_bounded(
    url: str,
    config: FetchConfig | None = None,
    url_guard: UrlGuard | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> bytes:
    """Fetch a URL with the given limits.

    Convenience function that creates a fetcher for a single call.

    Args:
        url: Absolute http(s) URL.
        config: Fetch limits; defaults are used when omitted.
        url_guard: Optional check run for every outgoing request.
        transport: Optional httpx transport.

    Returns:
        The full response body.
    """
    fetcher = BoundedFetcher(config=config, url_guard=url_guard, transport=transport)
    return await fetcher.fetch(url)
