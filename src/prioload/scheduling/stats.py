"""Change-suppressed broadcast of scheduler stats."""

from __future__ import annotations

import logging

from prioload.scheduling.models import SchedulerStats, StatsListener, Unsubscribe

logger = logging.getLogger(__name__)


class StatsPublisher:
    """Delivers SchedulerStats snapshots to subscribers.

    A snapshot is broadcast only when it differs from the last broadcast one.
    New subscribers get the current snapshot synchronously on registration,
    so they never observe "no data".
    """

    def __init__(self, initial: SchedulerStats, log: logging.Logger | None = None) -> None:
        self._current = initial
        self._last_broadcast: SchedulerStats | None = None
        self._listeners: list[StatsListener] = []
        self._log = log or logger

    @property
    def current(self) -> SchedulerStats:
        return self._current

    @property
    def subscriber_count(self) -> int:
        return len(self._listeners)

    def subscribe(self, listener: StatsListener) -> Unsubscribe:
        """Register a listener and call it once with the current snapshot."""
        self._listeners.append(listener)
        self._deliver(listener, self._current, during_registration=True)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def publish(self, snapshot: SchedulerStats) -> bool:
        """Record a snapshot and broadcast it if anything changed.

        Returns:
            True if the snapshot was broadcast.
        """
        self._current = snapshot
        if snapshot == self._last_broadcast:
            return False
        self._last_broadcast = snapshot
        for listener in list(self._listeners):
            self._deliver(listener, snapshot)
        return True

    def _deliver(
        self, listener: StatsListener, snapshot: SchedulerStats, during_registration: bool = False
    ) -> None:
        try:
            listener(snapshot)
        except Exception:
            when = " during registration" if during_registration else ""
            self._log.exception("Resource loader stats subscriber failed%s", when)
