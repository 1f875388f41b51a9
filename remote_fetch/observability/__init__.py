"""Observability module for logging."""

from remote_fetch.observability.logging import (
    SERVICE_NAME,
    bind_request_context,
    clear_request_context,
    configure_logging,
)


__all__ = [
    "SERVICE_NAME",
    "bind_request_context",
    "clear_request_context",
    "configure_logging",
]
