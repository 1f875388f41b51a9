"""Host extraction and matching for the allow-list.

Matching is a plain starts-with/ends-with comparison on uppercased host
strings. It is intentionally not a domain-suffix match: an entry of
``example.com`` accepts ``notexample.com`` (ends with) and
``example.com.attacker.net`` (starts with). Callers rely on exactly this
behavior, so keep it here and nowhere else.
"""

from urllib.parse import urlsplit


# Characters stripped from the front of a partial pattern before rebasing
PARTIAL_PATTERN_STRIP_CHARS = "./"

# Scheme used to rebase partial patterns into parseable URLs
REBASE_SCHEME = "http"


def normalize_host(host: str) -> str:
    """Uppercase a host for case-insensitive comparison.

    Args:
        host: Host name or IP literal.

    Returns:
        Uppercased host.
    """
    return host.upper()


def host_matches(candidate_host: str, entry_host: str) -> bool:
    """Check whether a candidate host matches an allow-list host.

    Both arguments must already be normalized with normalize_host.

    Args:
        candidate_host: Host of the URL being validated.
        entry_host: Host extracted from an allow-list entry.

    Returns:
        True if the candidate starts with or ends with the entry host.
    """
    if not entry_host:
        return False
    return candidate_host.startswith(entry_host) or candidate_host.endswith(
        entry_host
    )


def is_absolute_url(value: str) -> bool:
    """Check whether a string is an absolute URL (scheme and authority).

    Args:
        value: String to inspect.

    Returns:
        True if the string has both a scheme and a network location.
    """
    try:
        parsed = urlsplit(value.strip())
    except ValueError:
        return False
    return bool(parsed.scheme) and bool(parsed.netloc)


def extract_host(url: str) -> str | None:
    """Extract the host from an absolute URL.

    Args:
        url: Absolute URL.

    Returns:
        Host without port or credentials, or None if the URL has no host
        or cannot be parsed.
    """
    try:
        parsed = urlsplit(url.strip())
        host = parsed.hostname
    except ValueError:
        return None
    return host or None


def rebase_partial_pattern(pattern: str) -> str:
    """Turn a partial host pattern into an absolute URL.

    ``.example.com`` and ``//example.com`` both become
    ``http://example.com``.

    Args:
        pattern: Partial pattern without a scheme.

    Returns:
        Absolute URL built from the stripped pattern.
    """
    stripped = pattern.strip().lstrip(PARTIAL_PATTERN_STRIP_CHARS)
    return f"{REBASE_SCHEME}://{stripped}"
