"""Structured logging for the remote fetcher.

Events are rendered as JSON lines (or console output for humans) and
carry a ``service`` field plus whatever request context the caller bound
with bind_request_context.
"""

import logging
import sys
from typing import TextIO

import structlog
from structlog.typing import EventDict, Processor, WrappedLogger

from remote_fetch.fetch.redact import redact_url_credentials


SERVICE_NAME = "remote-fetch"

# Standard library loggers of the HTTP stack, which log every request
_HTTP_STACK_LOGGERS = ("httpx", "httpcore")


def _add_service_name(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    event_dict.setdefault("service", SERVICE_NAME)
    return event_dict


def configure_logging(
    level: int = logging.INFO,
    output: TextIO = sys.stderr,
    json_format: bool = True,
) -> None:
    """Configure structlog for the fetcher.

    Args:
        level: Minimum level emitted (default: INFO).
        output: Stream the events are written to (default: stderr).
        json_format: Render JSON lines instead of console output.
    """
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        _add_service_name,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.format_exc_info,
        (
            structlog.processors.JSONRenderer(sort_keys=True)
            if json_format
            else structlog.dev.ConsoleRenderer(colors=output.isatty())
        ),
    ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=output),
        cache_logger_on_first_use=False,
    )

    for name in _HTTP_STACK_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))


def bind_request_context(request_id: str, url: str | None = None) -> None:
    """Attach an image request to every event logged in this context.

    Args:
        request_id: Identifier of the image request being served.
        url: Requested URL; credentials are redacted before binding.
    """
    context: dict[str, str] = {"request_id": request_id}
    if url is not None:
        context["request_url"] = redact_url_credentials(url)
    structlog.contextvars.bind_contextvars(**context)


def clear_request_context() -> None:
    """Remove the request context bound by bind_request_context."""
    structlog.contextvars.unbind_contextvars("request_id", "request_url")
