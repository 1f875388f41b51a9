"""Unit tests for application settings."""

import logging

import pytest
from pydantic import ValidationError

from remote_fetch.fetch.constants import DEFAULT_MAX_BYTES, DEFAULT_TIMEOUT_MILLIS
from remote_fetch.settings import AppSettings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove fetcher variables from the environment."""
    for name in (
        "MAX_BYTES",
        "TIMEOUT_MS",
        "PROTOCOL",
        "USER_AGENT",
        "ALLOWED_HOSTS",
        "LOG_LEVEL",
        "JSON_LOGS",
    ):
        monkeypatch.delenv(f"REMOTE_FETCH_{name}", raising=False)


class TestAppSettings:
    """Tests for AppSettings."""

    def test_defaults(self) -> None:
        """Without environment the fetch defaults apply."""
        settings = AppSettings(_env_file=None)

        assert settings.max_bytes == DEFAULT_MAX_BYTES
        assert settings.timeout_ms == DEFAULT_TIMEOUT_MILLIS
        assert settings.allowed_hosts_list == []
        assert settings.log_level_int == logging.INFO

    def test_reads_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Prefixed variables override defaults."""
        monkeypatch.setenv("REMOTE_FETCH_MAX_BYTES", "2048")
        monkeypatch.setenv("REMOTE_FETCH_TIMEOUT_MS", "1500")
        monkeypatch.setenv("REMOTE_FETCH_PROTOCOL", "HTTPS")
        monkeypatch.setenv("REMOTE_FETCH_USER_AGENT", "Bot/1.0")
        monkeypatch.setenv("REMOTE_FETCH_LOG_LEVEL", "debug")

        settings = AppSettings(_env_file=None)
        config = settings.to_fetch_config()

        assert config.max_bytes == 2048
        assert config.timeout_millis == 1500
        assert config.preferred_scheme == "https"
        assert config.user_agent == "Bot/1.0"
        assert settings.log_level_int == logging.DEBUG

    def test_allowed_hosts_list(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """The allow-list is comma separated with blanks dropped."""
        monkeypatch.setenv(
            "REMOTE_FETCH_ALLOWED_HOSTS", " .example.com ,, https://cdn.test ,"
        )

        settings = AppSettings(_env_file=None)

        assert settings.allowed_hosts_list == [".example.com", "https://cdn.test"]

    def test_unknown_log_level_falls_back(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Unknown log levels mean INFO."""
        monkeypatch.setenv("REMOTE_FETCH_LOG_LEVEL", "chatty")

        assert AppSettings(_env_file=None).log_level_int == logging.INFO

    def test_rejects_non_positive_limits(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Zero byte ceilings are rejected."""
        monkeypatch.setenv("REMOTE_FETCH_MAX_BYTES", "0")

        with pytest.raises(ValidationError):
            AppSettings(_env_file=None)

    def test_invalid_protocol_rejected(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Only http and https are accepted when settings load."""
        monkeypatch.setenv("REMOTE_FETCH_PROTOCOL", "ftp")

        with pytest.raises(ValidationError):
            AppSettings(_env_file=None)

    def test_protocol_normalized(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """The scheme is stripped and lowercased."""
        monkeypatch.setenv("REMOTE_FETCH_PROTOCOL", " HTTPS ")

        assert AppSettings(_env_file=None).protocol == "https"
