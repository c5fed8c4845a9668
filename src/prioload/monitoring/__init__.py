"""Loading performance monitoring against static targets."""

from prioload.monitoring.models import (
    APP_LOADING_TOTAL,
    CRITICAL_PATH_LOAD,
    FIRST_CONTENTFUL_PAINT,
    FIRST_PAINT,
    LARGEST_CONTENTFUL_PAINT,
    TIME_TO_INTERACTIVE,
    Breach,
    LoadingReport,
    MetricListener,
    MetricUpdate,
    TimingEntry,
)
from prioload.monitoring.monitor import PerformanceMonitor

__all__ = [
    "PerformanceMonitor",
    # Models
    "Breach",
    "LoadingReport",
    "MetricListener",
    "MetricUpdate",
    "TimingEntry",
    # Metric names
    "FIRST_PAINT",
    "FIRST_CONTENTFUL_PAINT",
    "LARGEST_CONTENTFUL_PAINT",
    "TIME_TO_INTERACTIVE",
    "CRITICAL_PATH_LOAD",
    "APP_LOADING_TOTAL",
]
