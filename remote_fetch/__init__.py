"""Allow-listed, bounded fetching of remote images.

Validates remote URLs against a host allow-list and downloads them into
memory with a byte ceiling and a deadline.
"""

from remote_fetch.allowlist import AllowListEntry, AllowListValidator
from remote_fetch.errors import (
    AllowListConfigError,
    FetchErrorClass,
    FetchTimeoutError,
    ForbiddenHostError,
    MalformedUrlError,
    PayloadTooLargeError,
    RemoteFetchError,
    ResourceNotFoundError,
    TransportError,
    http_status_for_error,
)
from remote_fetch.fetch import BoundedFetcher, FetchConfig, fetch_bounded
from remote_fetch.service import RemoteImageService


__version__ = "0.1.0"

__all__ = [
    # Service
    "RemoteImageService",
    # Allow-list
    "AllowListEntry",
    "AllowListValidator",
    # Fetch
    "BoundedFetcher",
    "FetchConfig",
    "fetch_bounded",
    # Errors
    "AllowListConfigError",
    "FetchErrorClass",
    "FetchTimeoutError",
    "ForbiddenHostError",
    "MalformedUrlError",
    "PayloadTooLargeError",
    "RemoteFetchError",
    "ResourceNotFoundError",
    "TransportError",
    "http_status_for_error",
]
