"""Remote image service combining the allow-list and the bounded fetcher."""

from collections.abc import Iterable, Mapping

import httpx
import structlog

from remote_fetch.allowlist.validator import AllowListValidator
from remote_fetch.errors import MalformedUrlError
from remote_fetch.fetch.client import BoundedFetcher
from remote_fetch.fetch.config import FetchConfig
from remote_fetch.fetch.redact import redact_url_credentials
from remote_fetch.settings.app import AppSettings


logger = structlog.get_logger()

# Request prefix the router uses to hand paths to this service
DEFAULT_PREFIX = "remote.axd"


class RemoteImageService:
    """Serves image bytes fetched from allow-listed remote hosts.

    The router decides when the service applies (by ``prefix``) and passes
    the remote URL; the service validates the host and downloads the bytes
    within the configured limits. Redirects are re-checked against the
    allow-list on every hop.
    """

    def __init__(
        self,
        allow_list: AllowListValidator,
        config: FetchConfig | None = None,
        prefix: str = DEFAULT_PREFIX,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the service.

        Args:
            allow_list: Validator holding the trusted host patterns.
            config: Fetch limits; defaults are used when omitted.
            prefix: Request prefix identifying this service.
            transport: Optional httpx transport (used by tests).
        """
        self._allow_list = allow_list
        self._config = config or FetchConfig()
        self._prefix = prefix
        self._fetcher = BoundedFetcher(
            config=self._config,
            url_guard=allow_list.ensure_allowed,
            transport=transport,
        )
        self._log = logger.bind(component="service", prefix=prefix)

    @classmethod
    def from_settings(
        cls,
        settings: Mapping[str, str | int | None],
        allow_list: Iterable[str],
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> "RemoteImageService":
        """Create a service from a keyed settings map and host patterns.

        Args:
            settings: Map with ``MaxBytes``, ``Timeout``, ``Protocol`` and
                ``UserAgent`` keys; others are ignored.
            allow_list: Host patterns.
            transport: Optional httpx transport.

        Returns:
            Configured service.
        """
        return cls(
            allow_list=AllowListValidator(allow_list),
            config=FetchConfig.from_settings(settings),
            transport=transport,
        )

    @classmethod
    def from_app_settings(cls, settings: AppSettings) -> "RemoteImageService":
        """Create a service from environment settings.

        Args:
            settings: Loaded application settings.

        Returns:
            Configured service.
        """
        return cls(
            allow_list=AllowListValidator(settings.allowed_hosts_list),
            config=settings.to_fetch_config(),
        )

    @property
    def prefix(self) -> str:
        """Get the request prefix for this service."""
        return self._prefix

    @property
    def is_file_local_service(self) -> bool:
        """Whether the service reads from the local file system."""
        return False

    @property
    def config(self) -> FetchConfig:
        """Get the fetch configuration."""
        return self._config

    @property
    def allow_list(self) -> AllowListValidator:
        """Get the allow-list validator."""
        return self._allow_list

    def resolve_url(self, path: str) -> str:
        """Turn a request path into an absolute URL.

        Scheme-relative paths (``//host/image.png``) get the preferred
        scheme; anything else is returned stripped.

        Args:
            path: Path handed over by the router.

        Returns:
            URL to validate and fetch.
        """
        path = path.strip()
        if path.startswith("//"):
            return f"{self._config.preferred_scheme}:{path}"
        return path

    def is_valid_request(self, path: str) -> bool:
        """Check whether a request path targets an allow-listed host.

        Args:
            path: Path handed over by the router.

        Returns:
            True if the URL is well formed and its host is allowed.
        """
        url = self.resolve_url(path)
        try:
            allowed = self._allow_list.is_allowed(url)
        except MalformedUrlError as e:
            self._log.info(
                "request_rejected",
                url=redact_url_credentials(url),
                reason=e.reason,
            )
            return False

        if not allowed:
            self._log.info("request_rejected", url=redact_url_credentials(url))
        return allowed

    async def get_image(self, path: str) -> bytes:
        """Fetch the image bytes for a request path.

        Args:
            path: Path handed over by the router.

        Returns:
            Raw bytes of the remote resource.

        Raises:
            MalformedUrlError: If the path is not an absolute URL.
            ForbiddenHostError: If the host is not on the allow-list.
            FetchTimeoutError: If the deadline passes.
            PayloadTooLargeError: If the body exceeds the byte ceiling.
            ResourceNotFoundError: If the remote has no body for the URL.
            TransportError: For any other network failure.
        """
        url = self._allow_list.ensure_allowed(self.resolve_url(path))
        return await self._fetcher.fetch(url)
