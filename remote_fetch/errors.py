"""Error types for remote fetching.

Every failure surfaced by the allow-list or the fetcher is a distinct
subclass of RemoteFetchError so callers can match on the failure kind
and translate it into a response status.
"""

from enum import Enum


class FetchErrorClass(str, Enum):
    """Classification of remote fetch failures.

    - MALFORMED_URL: Candidate is not a parseable absolute URL
    - FORBIDDEN_HOST: Host does not match any allow-list entry
    - TIMEOUT: Response did not complete within the deadline
    - PAYLOAD_TOO_LARGE: Body exceeded the byte ceiling
    - RESOURCE_NOT_FOUND: Remote returned no retrievable body
    - TRANSPORT: Any other network-layer failure
    """

    MALFORMED_URL = "MALFORMED_URL"
    FORBIDDEN_HOST = "FORBIDDEN_HOST"
    TIMEOUT = "TIMEOUT"
    PAYLOAD_TOO_LARGE = "PAYLOAD_TOO_LARGE"
    RESOURCE_NOT_FOUND = "RESOURCE_NOT_FOUND"
    TRANSPORT = "TRANSPORT"


class RemoteFetchError(Exception):
    """Base exception for remote fetch errors.

    Provides structured error information for logging and status mapping.
    """

    error_class: FetchErrorClass = FetchErrorClass.TRANSPORT

    def __init__(
        self,
        message: str,
        url: str | None = None,
        details: dict[str, str | int | None] | None = None,
    ) -> None:
        """Initialize the error.

        Args:
            message: Human-readable error message.
            url: URL being validated or fetched.
            details: Additional structured error details.
        """
        super().__init__(message)
        self.message = message
        self.url = url
        self.details = details or {}

    def to_dict(self) -> dict[str, str | None | dict[str, str | int | None]]:
        """Convert error to dictionary for logging/serialization.

        Returns:
            Dictionary representation of the error.
        """
        return {
            "error_class": self.error_class.value,
            "message": self.message,
            "url": self.url,
            "details": self.details,
        }


class MalformedUrlError(RemoteFetchError):
    """Raised when a candidate path is not a parseable absolute URL."""

    error_class = FetchErrorClass.MALFORMED_URL

    def __init__(self, url: str, reason: str = "not an absolute URL") -> None:
        """Initialize the error.

        Args:
            url: The rejected candidate.
            reason: Why the candidate could not be used.
        """
        super().__init__(f"Malformed URL {url!r}: {reason}", url=url)
        self.reason = reason


class ForbiddenHostError(RemoteFetchError):
    """Raised when a URL's host is not on the allow-list."""

    error_class = FetchErrorClass.FORBIDDEN_HOST

    def __init__(self, url: str, host: str) -> None:
        """Initialize the error.

        Args:
            url: The rejected URL.
            host: Host extracted from the URL.
        """
        super().__init__(
            f"Host '{host}' is not on the allow-list",
            url=url,
            details={"host": host},
        )
        self.host = host


class FetchTimeoutError(RemoteFetchError, TimeoutError):
    """Raised when a fetch does not complete within the configured timeout.

    Also a builtin TimeoutError, so ``except TimeoutError`` catches it.
    """

    error_class = FetchErrorClass.TIMEOUT

    def __init__(self, url: str, timeout_millis: int) -> None:
        """Initialize the error.

        Args:
            url: The URL being fetched.
            timeout_millis: The deadline that was exceeded.
        """
        super().__init__(
            f"Fetch of {url} timed out after {timeout_millis}ms",
            url=url,
            details={"timeout_millis": timeout_millis},
        )
        self.timeout_millis = timeout_millis


class PayloadTooLargeError(RemoteFetchError):
    """Raised when a response body exceeds the byte ceiling."""

    error_class = FetchErrorClass.PAYLOAD_TOO_LARGE

    def __init__(self, url: str, max_bytes: int, size: int) -> None:
        """Initialize the error.

        Args:
            url: The URL being fetched.
            max_bytes: Configured byte ceiling.
            size: Declared or observed size that broke the ceiling.
        """
        super().__init__(
            f"Response size exceeded limit of {max_bytes} bytes (saw {size} bytes)",
            url=url,
            details={"max_bytes": max_bytes, "size": size},
        )
        self.max_bytes = max_bytes
        self.size = size


class ResourceNotFoundError(RemoteFetchError):
    """Raised when the remote server returned no retrievable body."""

    error_class = FetchErrorClass.RESOURCE_NOT_FOUND

    def __init__(self, url: str, status_code: int | None = None) -> None:
        """Initialize the error.

        Args:
            url: The requested URL.
            status_code: HTTP status of the response, if any.
        """
        super().__init__(
            f"No image exists at {url}",
            url=url,
            details={"status_code": status_code},
        )
        self.status_code = status_code


class TransportError(RemoteFetchError):
    """Raised for network-layer failures (DNS, refused, TLS, bad status)."""

    error_class = FetchErrorClass.TRANSPORT

    def __init__(
        self,
        url: str,
        message: str,
        status_code: int | None = None,
    ) -> None:
        """Initialize the error.

        Args:
            url: The URL being fetched.
            message: Description of the underlying failure.
            status_code: HTTP status if the server answered.
        """
        super().__init__(message, url=url, details={"status_code": status_code})
        self.status_code = status_code


class AllowListConfigError(ValueError):
    """Raised when an allow-list entry cannot be parsed into a host."""

    def __init__(self, pattern: str, reason: str) -> None:
        """Initialize the error.

        Args:
            pattern: The offending allow-list entry.
            reason: Why the entry was rejected.
        """
        self.pattern = pattern
        self.reason = reason
        super().__init__(f"Invalid allow-list entry {pattern!r}: {reason}")


_STATUS_BY_CLASS: dict[FetchErrorClass, int] = {
    FetchErrorClass.MALFORMED_URL: 400,
    FetchErrorClass.FORBIDDEN_HOST: 403,
    FetchErrorClass.RESOURCE_NOT_FOUND: 404,
    FetchErrorClass.PAYLOAD_TOO_LARGE: 413,
    FetchErrorClass.TRANSPORT: 502,
    FetchErrorClass.TIMEOUT: 504,
}


def http_status_for_error(error: RemoteFetchError) -> int:
    """Map a fetch error to the status code a pipeline should answer with.

    Args:
        error: The error raised by the allow-list or the fetcher.

    Returns:
        HTTP status code for the error class.
    """
    return _STATUS_BY_CLASS.get(error.error_class, 502)
