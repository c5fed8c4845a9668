"""Configuration settings using Pydantic Settings.

Provides typed configuration with environment variable support for the
scheduler and the performance monitor.

Usage:
    from prioload.config import LoaderSettings, PerformanceTargets

    # Load from environment variables (PRIOLOAD_*, PRIOLOAD_TARGET_*)
    settings = LoaderSettings()
    targets = PerformanceTargets()

    # Or override with explicit values
    settings = LoaderSettings(max_concurrent_requests=2, retry_delay=0.0)
"""

from __future__ import annotations

try:
    from pydantic_settings import BaseSettings, SettingsConfigDict
except ImportError as e:
    raise ImportError(
        "pydantic-settings is required for config module. "
        "Install with: pip install pydantic-settings"
    ) from e

from pydantic import Field


class LoaderSettings(BaseSettings):  # type: ignore[misc]
    """Configuration for the resource scheduler and its adapters.

    Attributes:
        max_concurrent_requests: Default admission cap (HTTP/1.1 host limit).
        critical_resource_timeout: Per-attempt deadline in seconds for
            descriptors that don't set their own.
        preload_timeout: Per-attempt deadline in seconds for batch preloads.
        retry_delay: Fixed delay in seconds between attempts. No backoff growth.
        http_timeout: Transport-level timeout in seconds for clients built by
            prioload.adapters.create_http_client.

    Environment Variables:
        PRIOLOAD_MAX_CONCURRENT_REQUESTS
        PRIOLOAD_CRITICAL_RESOURCE_TIMEOUT
        PRIOLOAD_PRELOAD_TIMEOUT
        PRIOLOAD_RETRY_DELAY
        PRIOLOAD_HTTP_TIMEOUT
    """

    model_config = SettingsConfigDict(
        env_prefix="PRIOLOAD_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    max_concurrent_requests: int = Field(default=6, ge=1)
    critical_resource_timeout: float = Field(default=3.0, gt=0)
    preload_timeout: float = Field(default=5.0, gt=0)
    retry_delay: float = Field(default=1.0, ge=0)
    http_timeout: float = Field(default=10.0, gt=0)


class PerformanceTargets(BaseSettings):  # type: ignore[misc]
    """Loading performance targets, in milliseconds.

    Environment Variables:
        PRIOLOAD_TARGET_FIRST_PAINT
        PRIOLOAD_TARGET_FIRST_CONTENTFUL_PAINT
        PRIOLOAD_TARGET_LARGEST_CONTENTFUL_PAINT
        PRIOLOAD_TARGET_TIME_TO_INTERACTIVE
    """

    model_config = SettingsConfigDict(
        env_prefix="PRIOLOAD_TARGET_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    first_paint: float = 800.0
    first_contentful_paint: float = 1200.0
    largest_contentful_paint: float = 2500.0
    time_to_interactive: float = 2000.0

    def as_metric_table(self) -> dict[str, float]:
        """Targets keyed by the metric names the host timing facility reports."""
        return {
            "first-paint": self.first_paint,
            "first-contentful-paint": self.first_contentful_paint,
            "largest-contentful-paint": self.largest_contentful_paint,
            "time-to-interactive": self.time_to_interactive,
        }
