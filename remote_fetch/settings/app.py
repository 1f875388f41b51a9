"""Application settings powered by Pydantic BaseSettings."""

import logging
from typing import Annotated, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from remote_fetch.fetch.config import FetchConfig
from remote_fetch.fetch.constants import (
    DEFAULT_MAX_BYTES,
    DEFAULT_SCHEME,
    DEFAULT_TIMEOUT_MILLIS,
)


class AppSettings(BaseSettings):
    """Environment configuration for the remote fetcher.

    Every field reads from a ``REMOTE_FETCH_``-prefixed variable, e.g.
    ``REMOTE_FETCH_ALLOWED_HOSTS=.example.com,https://cdn.example.net``.
    """

    model_config = SettingsConfigDict(
        env_prefix="REMOTE_FETCH_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    max_bytes: Annotated[int, Field(gt=0)] = DEFAULT_MAX_BYTES
    timeout_ms: Annotated[int, Field(gt=0)] = DEFAULT_TIMEOUT_MILLIS
    protocol: Literal["http", "https"] = DEFAULT_SCHEME
    user_agent: str | None = None
    allowed_hosts: str = ""
    log_level: str = "INFO"
    json_logs: bool = True

    @field_validator("protocol", mode="before")
    @classmethod
    def normalize_protocol(cls, v: object) -> object:
        """Lowercase the scheme hint before validation."""
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @property
    def allowed_hosts_list(self) -> list[str]:
        """Parse the comma-separated allow-list into patterns."""
        return [host.strip() for host in self.allowed_hosts.split(",") if host.strip()]

    @property
    def log_level_int(self) -> int:
        """Convert log level string to logging constant."""
        return getattr(logging, self.log_level.upper(), logging.INFO)

    def to_fetch_config(self) -> FetchConfig:
        """Build the fetcher configuration from these settings.

        Returns:
            Validated fetch configuration.
        """
        return FetchConfig(
            max_bytes=self.max_bytes,
            timeout_millis=self.timeout_ms,
            preferred_scheme=self.protocol,
            user_agent=self.user_agent,
        )


def get_settings() -> AppSettings:
    """Get a settings instance."""
    return AppSettings()
