"""Data models for the host allow-list."""

from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field

from remote_fetch.allowlist.matcher import (
    extract_host,
    is_absolute_url,
    normalize_host,
    rebase_partial_pattern,
)
from remote_fetch.errors import AllowListConfigError


class AllowListEntry(BaseModel):
    """A parsed allow-list host pattern.

    Holds the original pattern alongside the uppercased host it matches
    against, so parsing happens once at configuration time.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    pattern: Annotated[str, Field(min_length=1, description="Configured pattern")]
    host: Annotated[
        str, Field(min_length=1, description="Uppercased host used for matching")
    ]
    is_absolute: bool = Field(
        description="Whether the pattern was an absolute URL"
    )

    @classmethod
    def parse(cls, pattern: str) -> "AllowListEntry":
        """Parse a configured pattern into an entry.

        Absolute patterns (``https://images.example.com``) contribute their
        host directly. Partial patterns (``.example.com``) are stripped of
        leading dots and slashes and rebased onto ``http://``.

        Args:
            pattern: Host pattern from configuration.

        Returns:
            Parsed entry.

        Raises:
            AllowListConfigError: If no host can be extracted.
        """
        if not pattern or not pattern.strip():
            raise AllowListConfigError(pattern, "empty pattern")

        absolute = is_absolute_url(pattern)
        if not absolute and "://" in pattern:
            raise AllowListConfigError(pattern, "URL has no authority")
        url = pattern if absolute else rebase_partial_pattern(pattern)
        host = extract_host(url)
        if host is None:
            raise AllowListConfigError(pattern, "no host could be extracted")

        return cls(pattern=pattern, host=normalize_host(host), is_absolute=absolute)
