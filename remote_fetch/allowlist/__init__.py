"""Host allow-list for remote fetch targets.

Provides the loose starts-with/ends-with host matching used to decide
whether a remote URL may be fetched.
"""

from remote_fetch.allowlist.matcher import (
    extract_host,
    host_matches,
    normalize_host,
    rebase_partial_pattern,
)
from remote_fetch.allowlist.models import AllowListEntry
from remote_fetch.allowlist.validator import AllowListValidator


__all__ = [
    # Validator
    "AllowListValidator",
    # Models
    "AllowListEntry",
    # Matching
    "extract_host",
    "host_matches",
    "normalize_host",
    "rebase_partial_pattern",
]
