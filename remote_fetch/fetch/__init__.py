"""Bounded HTTP fetch layer.

This module provides in-memory remote fetches with:
- A byte ceiling enforced while streaming
- An overall deadline with guaranteed connection release
- A per-request URL guard that also covers redirects
- Header and credential redaction for logging
- Metrics collection for observability
"""

from remote_fetch.fetch.client import BoundedFetcher, UrlGuard, fetch_bounded
from remote_fetch.fetch.config import SETTINGS_KEY_MAP, FetchConfig
from remote_fetch.fetch.constants import (
    DEFAULT_CHUNK_SIZE,
    DEFAULT_MAX_BYTES,
    DEFAULT_MAX_REDIRECTS,
    DEFAULT_SCHEME,
    DEFAULT_TIMEOUT_MILLIS,
    NOT_FOUND_STATUSES,
)
from remote_fetch.fetch.metrics import FetchMetrics
from remote_fetch.fetch.redact import redact_headers, redact_url_credentials


__all__ = [
    # Client
    "BoundedFetcher",
    "UrlGuard",
    "fetch_bounded",
    # Config
    "FetchConfig",
    "SETTINGS_KEY_MAP",
    # Constants
    "DEFAULT_CHUNK_SIZE",
    "DEFAULT_MAX_BYTES",
    "DEFAULT_MAX_REDIRECTS",
    "DEFAULT_SCHEME",
    "DEFAULT_TIMEOUT_MILLIS",
    "NOT_FOUND_STATUSES",
    # Metrics
    "FetchMetrics",
    # Redaction
    "redact_headers",
    "redact_url_credentials",
]
