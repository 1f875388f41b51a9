"""Allow-list validation of candidate URLs."""

from collections.abc import Iterable
from urllib.parse import urlsplit

import structlog

from remote_fetch.allowlist.matcher import host_matches, normalize_host
from remote_fetch.allowlist.models import AllowListEntry
from remote_fetch.errors import ForbiddenHostError, MalformedUrlError
from remote_fetch.fetch.redact import redact_url_credentials


logger = structlog.get_logger()


class AllowListValidator:
    """Decides whether a URL's host may be fetched.

    Entries are parsed once at construction and kept as an immutable
    tuple, so validation never mutates state and is safe to run from
    concurrent tasks. An empty allow-list rejects every URL.
    """

    def __init__(self, patterns: Iterable[str] = ()) -> None:
        """Initialize the validator.

        Args:
            patterns: Host patterns, absolute (``https://cdn.example.com``)
                or partial (``.example.com``).

        Raises:
            AllowListConfigError: If any pattern has no extractable host.
        """
        self._entries: tuple[AllowListEntry, ...] = tuple(
            AllowListEntry.parse(pattern) for pattern in patterns
        )
        self._log = logger.bind(component="allowlist")
        self._log.debug(
            "allowlist_loaded",
            entries=len(self._entries),
            hosts=[entry.host for entry in self._entries],
        )

    @property
    def entries(self) -> tuple[AllowListEntry, ...]:
        """Get the parsed allow-list entries."""
        return self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def match(self, candidate_url: str) -> AllowListEntry | None:
        """Find the first entry matching a URL's host.

        Args:
            candidate_url: Absolute URL to check.

        Returns:
            The first matching entry, or None if no entry matches.

        Raises:
            MalformedUrlError: If the candidate is not an absolute URL.
        """
        candidate_host = normalize_host(self._candidate_host(candidate_url))
        for entry in self._entries:
            if host_matches(candidate_host, entry.host):
                return entry
        return None

    def is_allowed(self, candidate_url: str) -> bool:
        """Check whether a URL's host is on the allow-list.

        Args:
            candidate_url: Absolute URL to check.

        Returns:
            True if some entry matches the candidate host.

        Raises:
            MalformedUrlError: If the candidate is not an absolute URL.
        """
        return self.match(candidate_url) is not None

    def ensure_allowed(self, candidate_url: str) -> str:
        """Validate a URL against the allow-list.

        Args:
            candidate_url: Absolute URL to check.

        Returns:
            The URL, unchanged.

        Raises:
            MalformedUrlError: If the candidate is not an absolute URL.
            ForbiddenHostError: If no entry matches the candidate host.
        """
        if self.is_allowed(candidate_url):
            return candidate_url

        host = self._candidate_host(candidate_url)
        self._log.warning(
            "host_rejected",
            url=redact_url_credentials(candidate_url),
            host=host,
        )
        raise ForbiddenHostError(candidate_url, host)

    def _candidate_host(self, candidate_url: str) -> str:
        """Extract the host of a candidate URL.

        Args:
            candidate_url: URL to parse.

        Returns:
            Host of the URL.

        Raises:
            MalformedUrlError: If the URL has no scheme or host.
        """
        try:
            parsed = urlsplit(candidate_url)
            host = parsed.hostname
        except ValueError as e:
            raise MalformedUrlError(candidate_url, str(e)) from e

        if not parsed.scheme:
            raise MalformedUrlError(candidate_url, "missing scheme")
        if not host:
            raise MalformedUrlError(candidate_url, "missing host")
        return host
