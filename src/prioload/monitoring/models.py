"""Data models for loading performance monitoring.

All values are milliseconds, as reported by the host timing facility.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

FIRST_PAINT = "first-paint"
FIRST_CONTENTFUL_PAINT = "first-contentful-paint"
LARGEST_CONTENTFUL_PAINT = "largest-contentful-paint"
TIME_TO_INTERACTIVE = "time-to-interactive"
CRITICAL_PATH_LOAD = "critical-path-load"
APP_LOADING_TOTAL = "app-loading-total"


@dataclass(frozen=True, slots=True)
class Breach:
    """A metric observed above its target. Derived on demand, never stored."""

    metric: str
    value: float
    target: float


@dataclass(frozen=True, slots=True)
class MetricUpdate:
    """Notification sent to monitor subscribers on every recorded value."""

    name: str
    value: float
    timestamp: float = field(default_factory=time.time)


@dataclass(frozen=True, slots=True)
class TimingEntry:
    """One entry from the host timing facility.

    Attributes:
        name: Entry name (e.g. "first-paint", or a measure name).
        start_time: Milliseconds since navigation start.
        duration: Milliseconds the entry spans. Zero for point-in-time marks.
        entry_type: Host category ("paint", "measure", "largest-contentful-paint", ...).
    """

    name: str
    start_time: float
    duration: float = 0.0
    entry_type: str | None = None

    @property
    def metric_name(self) -> str:
        # LCP entries are unnamed; the entry type identifies them
        if self.entry_type == LARGEST_CONTENTFUL_PAINT:
            return LARGEST_CONTENTFUL_PAINT
        return self.name

    @property
    def value(self) -> float:
        """Duration for spans, start time for point-in-time marks."""
        return self.duration if self.duration else self.start_time


MetricListener = Callable[[MetricUpdate], None]
"""Signature: (update) -> None"""


@dataclass(frozen=True, slots=True)
class LoadingReport:
    """Point-in-time view over the fixed set of loading metrics.

    Missing metrics read as 0.0; a target counts as met only when its metric
    has been recorded and is within target.
    """

    first_paint: float
    first_contentful_paint: float
    largest_contentful_paint: float
    time_to_interactive: float
    critical_path_time: float
    total_load_time: float
    targets_met: dict[str, bool]

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-serializable dictionary."""
        return {
            "first_paint": self.first_paint,
            "first_contentful_paint": self.first_contentful_paint,
            "largest_contentful_paint": self.largest_contentful_paint,
            "time_to_interactive": self.time_to_interactive,
            "critical_path_time": self.critical_path_time,
            "total_load_time": self.total_load_time,
            "targets_met": dict(self.targets_met),
        }
