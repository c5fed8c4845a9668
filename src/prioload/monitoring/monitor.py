"""Observer of externally delivered loading metrics.

The monitor never influences the scheduler. It keeps the latest value per
metric, warns when a targeted metric goes over target, and answers report
and breach queries on demand.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from prioload.config import PerformanceTargets
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
from prioload.scheduling.models import Unsubscribe

logger = logging.getLogger(__name__)


class PerformanceMonitor:
    """Last-write-wins store of loading metrics compared against targets.

    Args:
        targets: Target table. Read from PRIOLOAD_TARGET_* env vars if None.
        log: Logger to report through. Module logger if None.
    """

    def __init__(
        self, targets: PerformanceTargets | None = None, log: logging.Logger | None = None
    ) -> None:
        self._targets = (targets or PerformanceTargets()).as_metric_table()
        self._metrics: dict[str, float] = {}
        self._listeners: list[MetricListener] = []
        self._log = log or logger

    @property
    def targets(self) -> dict[str, float]:
        return dict(self._targets)

    def record(self, name: str, value: float) -> None:
        """Store the latest value of a metric and notify subscribers."""
        self._metrics[name] = value

        target = self._targets.get(name)
        if target is not None and value > target:
            self._log.warning("%s exceeded target | %.1fms > %.1fms", name, value, target)

        update = MetricUpdate(name=name, value=value)
        for listener in list(self._listeners):
            try:
                listener(update)
            except Exception:
                self._log.exception("Loading metric subscriber failed")

    def record_entry(self, entry: TimingEntry) -> None:
        """Record a host timing entry."""
        self.record(entry.metric_name, entry.value)

    def record_entries(self, entries: Iterable[TimingEntry]) -> None:
        for entry in entries:
            self.record_entry(entry)

    def get_metrics(self) -> dict[str, float]:
        return dict(self._metrics)

    def get_breaches(self) -> list[Breach]:
        """Targeted metrics currently above target, in target-table order."""
        breaches = []
        for metric, target in self._targets.items():
            value = self._metrics.get(metric)
            if value is not None and value > target:
                breaches.append(Breach(metric=metric, value=value, target=target))
        return breaches

    def get_report(self) -> LoadingReport:
        metrics = self._metrics
        return LoadingReport(
            first_paint=metrics.get(FIRST_PAINT, 0.0),
            first_contentful_paint=metrics.get(FIRST_CONTENTFUL_PAINT, 0.0),
            largest_contentful_paint=metrics.get(LARGEST_CONTENTFUL_PAINT, 0.0),
            time_to_interactive=metrics.get(TIME_TO_INTERACTIVE, 0.0),
            critical_path_time=metrics.get(CRITICAL_PATH_LOAD, 0.0),
            total_load_time=metrics.get(APP_LOADING_TOTAL, 0.0),
            targets_met={
                metric: metric in metrics and metrics[metric] <= target
                for metric, target in self._targets.items()
            },
        )

    def subscribe(self, listener: MetricListener) -> Unsubscribe:
        """Register a listener for metric updates. Returns an unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def reset(self) -> None:
        """Forget all metrics and subscribers."""
        self._metrics.clear()
        self._listeners.clear()
