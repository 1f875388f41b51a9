"""Unit tests for the allow-list validator."""

import pytest

from remote_fetch.allowlist.validator import AllowListValidator
from remote_fetch.errors import (
    AllowListConfigError,
    ForbiddenHostError,
    MalformedUrlError,
)


class TestIsAllowed:
    """Tests for AllowListValidator.is_allowed."""

    @pytest.fixture
    def validator(self) -> AllowListValidator:
        """Create a validator trusting example.com."""
        return AllowListValidator(["example.com"])

    def test_subdomain_allowed(self, validator: AllowListValidator) -> None:
        """A subdomain of an allowed host is accepted by suffix."""
        assert validator.is_allowed("http://images.example.com/x.png") is True

    def test_exact_host_allowed(self, validator: AllowListValidator) -> None:
        """The allowed host itself is accepted."""
        assert validator.is_allowed("https://example.com/x.png") is True

    def test_unrelated_host_rejected(self, validator: AllowListValidator) -> None:
        """An unrelated host is rejected."""
        assert validator.is_allowed("http://evil.com/x.png") is False

    def test_embedded_host_rejected(self, validator: AllowListValidator) -> None:
        """A host that merely contains the entry is rejected."""
        assert validator.is_allowed("http://sub.example.com.attacker.net/x") is False

    def test_prefixed_host_allowed(self, validator: AllowListValidator) -> None:
        """A host starting with the entry is accepted (loose matching)."""
        assert validator.is_allowed("http://example.com.attacker.net/x") is True

    def test_unlabelled_suffix_allowed(self, validator: AllowListValidator) -> None:
        """A host ending with the entry text is accepted (loose matching)."""
        assert validator.is_allowed("http://notexample.com/x") is True

    def test_case_insensitive(self, validator: AllowListValidator) -> None:
        """Host comparison ignores case."""
        assert validator.is_allowed("HTTP://IMAGES.Example.COM/X.PNG") is True

    def test_port_and_credentials_ignored(self, validator: AllowListValidator) -> None:
        """Only the host takes part in matching."""
        assert validator.is_allowed("http://user:pw@example.com:8080/x") is True

    def test_path_does_not_count(self, validator: AllowListValidator) -> None:
        """The allowed host appearing in the path is not enough."""
        assert validator.is_allowed("http://evil.net/example.com") is False


class TestEmptyAllowList:
    """Tests for a validator with no entries."""

    @pytest.mark.parametrize(
        "url",
        [
            "http://example.com/x.png",
            "https://localhost/",
            "http://127.0.0.1/x",
        ],
    )
    def test_rejects_everything(self, url: str) -> None:
        """An empty allow-list rejects every URL."""
        validator = AllowListValidator([])

        assert validator.is_allowed(url) is False
        assert len(validator) == 0


class TestEntryForms:
    """Tests for absolute and partial entries."""

    def test_partial_entry_with_leading_dot(self) -> None:
        """.example.com trusts example.com and its subdomains."""
        validator = AllowListValidator([".example.com"])

        assert validator.is_allowed("http://example.com/a.png") is True
        assert validator.is_allowed("http://cdn.example.com/a.png") is True

    def test_absolute_entry(self) -> None:
        """Absolute entries match on their host only."""
        validator = AllowListValidator(["https://images.example.com/gallery/"])

        assert validator.is_allowed("http://images.example.com/other.png") is True
        assert validator.is_allowed("http://example.com/a.png") is False

    def test_first_match_wins(self) -> None:
        """match returns the first entry that matches."""
        validator = AllowListValidator(
            ["other.org", "example.com", "https://images.example.com"]
        )

        entry = validator.match("http://images.example.com/a.png")

        assert entry is not None
        assert entry.pattern == "example.com"

    def test_no_match_returns_none(self) -> None:
        """match returns None when nothing matches."""
        validator = AllowListValidator(["example.com"])

        assert validator.match("http://evil.com/") is None

    def test_entries_are_immutable_snapshot(self) -> None:
        """Entries are exposed as a tuple built at construction."""
        patterns = ["example.com"]
        validator = AllowListValidator(patterns)
        patterns.append("evil.com")

        assert isinstance(validator.entries, tuple)
        assert len(validator.entries) == 1
        assert validator.is_allowed("http://evil.com/") is False

    def test_invalid_entry_fails_at_construction(self) -> None:
        """Malformed entries fail fast."""
        with pytest.raises(AllowListConfigError):
            AllowListValidator(["example.com", "http://"])


class TestMalformedCandidates:
    """Tests for candidates that are not absolute URLs."""

    @pytest.fixture
    def validator(self) -> AllowListValidator:
        """Create a validator trusting example.com."""
        return AllowListValidator(["example.com"])

    @pytest.mark.parametrize(
        "url",
        [
            "example.com/x.png",
            "/images/x.png",
            "not a url",
            "http:///x.png",
            "http://[::1",
            "",
        ],
    )
    def test_malformed_raises(self, validator: AllowListValidator, url: str) -> None:
        """Malformed candidates raise MalformedUrlError."""
        with pytest.raises(MalformedUrlError) as exc_info:
            validator.is_allowed(url)

        assert exc_info.value.url == url

    def test_malformed_raises_even_when_empty(self) -> None:
        """Parsing happens before the entry loop."""
        with pytest.raises(MalformedUrlError):
            AllowListValidator([]).is_allowed("/relative.png")


class TestEnsureAllowed:
    """Tests for AllowListValidator.ensure_allowed."""

    def test_returns_url_when_allowed(self) -> None:
        """Allowed URLs are returned unchanged."""
        validator = AllowListValidator(["example.com"])
        url = "http://images.example.com/x.png"

        assert validator.ensure_allowed(url) == url

    def test_raises_forbidden(self) -> None:
        """Rejected URLs raise ForbiddenHostError with the host."""
        validator = AllowListValidator(["example.com"])

        with pytest.raises(ForbiddenHostError) as exc_info:
            validator.ensure_allowed("http://Evil.com/x.png")

        assert exc_info.value.host == "evil.com"
        assert exc_info.value.url == "http://Evil.com/x.png"
