"""Configuration module using Pydantic Settings.

Provides typed configuration with environment variable support.

Usage:
    from prioload.config import LoaderSettings, PerformanceTargets

    settings = LoaderSettings(max_concurrent_requests=4)
    targets = PerformanceTargets(first_paint=600)
"""

from prioload.config.settings import LoaderSettings, PerformanceTargets

__all__ = [
    "LoaderSettings",
    "PerformanceTargets",
]
