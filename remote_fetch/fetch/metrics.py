"""Metrics collection for the fetch layer."""

from dataclasses import dataclass, field
from typing import ClassVar

from remote_fetch.errors import FetchErrorClass


@dataclass
class FetchMetrics:
    """Metrics for remote fetch operations.

    Singleton class that tracks request counts by status, bytes
    received, failures by error class, and time spent fetching.
    """

    http_requests_total: dict[int, int] = field(default_factory=dict)
    http_failures_total: dict[str, int] = field(default_factory=dict)
    http_bytes_total: int = 0
    http_duration_ms_total: float = 0.0
    http_fetch_count: int = 0

    _instance: ClassVar["FetchMetrics | None"] = None

    @classmethod
    def get_instance(cls) -> "FetchMetrics":
        """Get singleton metrics instance."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Reset metrics (primarily for testing)."""
        cls._instance = None

    def record_response(self, status_code: int) -> None:
        """Record a response status received from a remote server.

        Args:
            status_code: HTTP status code.
        """
        self.http_requests_total[status_code] = (
            self.http_requests_total.get(status_code, 0) + 1
        )

    def record_success(self, bytes_received: int, duration_ms: float) -> None:
        """Record a completed fetch.

        Args:
            bytes_received: Size of the returned body.
            duration_ms: Duration in milliseconds.
        """
        self.http_bytes_total += bytes_received
        self.http_duration_ms_total += duration_ms
        self.http_fetch_count += 1

    def record_failure(self, error_class: FetchErrorClass, duration_ms: float) -> None:
        """Record a failed fetch.

        Args:
            error_class: Classification of the failure.
            duration_ms: Duration in milliseconds.
        """
        key = error_class.value
        self.http_failures_total[key] = self.http_failures_total.get(key, 0) + 1
        self.http_duration_ms_total += duration_ms
        self.http_fetch_count += 1

    def to_dict(self) -> dict[str, int | float | dict[str, int] | dict[int, int]]:
        """Convert metrics to dictionary.

        Returns:
            Dictionary of metric name to value.
        """
        return {
            "http_requests_total": dict(self.http_requests_total),
            "http_failures_total": dict(self.http_failures_total),
            "http_bytes_total": self.http_bytes_total,
            "http_duration_ms_total": self.http_duration_ms_total,
            "http_fetch_count": self.http_fetch_count,
        }

    @property
    def avg_duration_ms(self) -> float:
        """Calculate average fetch duration.

        Returns:
            Average duration in milliseconds.
        """
        if self.http_fetch_count == 0:
            return 0.0
        return self.http_duration_ms_total / self.http_fetch_count
