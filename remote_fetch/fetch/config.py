"""Configuration model for the bounded fetcher."""

from collections.abc import Mapping
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from remote_fetch.fetch.constants import (
    DEFAULT_CHUNK_SIZE,
    DEFAULT_MAX_BYTES,
    DEFAULT_MAX_REDIRECTS,
    DEFAULT_SCHEME,
    DEFAULT_TIMEOUT_MILLIS,
)


# Recognized keys of a settings map, lowercased, to FetchConfig fields.
# Lookup is case-insensitive so "UserAgent" and "Useragent" are one key.
SETTINGS_KEY_MAP: dict[str, str] = {
    "maxbytes": "max_bytes",
    "timeout": "timeout_millis",
    "protocol": "preferred_scheme",
    "useragent": "user_agent",
}


class FetchConfig(BaseModel):
    """Limits and request options for a bounded fetch.

    Constructed once and validated eagerly; malformed values are rejected
    at construction rather than when a fetch runs.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    max_bytes: Annotated[int, Field(gt=0, description="Byte ceiling for the body")] = (
        DEFAULT_MAX_BYTES
    )
    timeout_millis: Annotated[
        int, Field(gt=0, description="Overall deadline in milliseconds")
    ] = DEFAULT_TIMEOUT_MILLIS
    user_agent: Annotated[str | None, Field(max_length=500)] = None
    preferred_scheme: Literal["http", "https"] = DEFAULT_SCHEME
    follow_redirects: bool = True
    max_redirects: Annotated[int, Field(ge=0, le=20)] = DEFAULT_MAX_REDIRECTS
    chunk_size: Annotated[int, Field(ge=512, le=1024 * 1024)] = DEFAULT_CHUNK_SIZE

    @field_validator("user_agent")
    @classmethod
    def blank_user_agent_is_none(cls, v: str | None) -> str | None:
        """Treat an empty or whitespace user agent as unset."""
        if v is None or not v.strip():
            return None
        return v.strip()

    @field_validator("preferred_scheme", mode="before")
    @classmethod
    def normalize_scheme(cls, v: object) -> object:
        """Lowercase the scheme hint before validation."""
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @property
    def timeout_seconds(self) -> float:
        """Get the deadline in seconds."""
        return self.timeout_millis / 1000.0

    @classmethod
    def from_settings(cls, settings: Mapping[str, str | int | None]) -> "FetchConfig":
        """Build a config from a keyed settings map.

        Recognized keys are ``MaxBytes``, ``Timeout`` (milliseconds),
        ``Protocol`` and ``UserAgent``, matched case-insensitively.
        Unrecognized keys are ignored and missing keys fall back to the
        defaults.

        Args:
            settings: Settings map, typically string values.

        Returns:
            Validated config.

        Raises:
            pydantic.ValidationError: If a recognized value is malformed.
        """
        values: dict[str, str | int | None] = {}
        for key, value in settings.items():
            field_name = SETTINGS_KEY_MAP.get(key.strip().lower())
            if field_name is None or value is None:
                continue
            values[field_name] = value
        return cls.model_validate(values)
