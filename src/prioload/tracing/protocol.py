"""Protocols for load diagnostics.

The scheduler, supervisor and preloader report what they do to an optional
sink. Sinks decide where events go (metrics backend, log shipper, memory).
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from prioload.tracing.models import LoadEvent

logger = logging.getLogger(__name__)


@runtime_checkable
class LoadEventSink(Protocol):
    """Receiver of structured load events.

    Usage:
        class PrintSink:
            def emit(self, event: LoadEvent) -> None:
                print(event.to_dict())

        scheduler = create_scheduler(sink=PrintSink())

    Note:
        emit() is called synchronously from the event loop. Implementations
        should not block. Exceptions raised by a sink are logged and ignored.
    """

    def emit(self, event: LoadEvent) -> None:
        """Record a single event."""
        ...


def emit_event(sink: LoadEventSink | None, event: LoadEvent) -> None:
    """Deliver an event to a sink, if any. Sink failures are logged, not raised."""
    if sink is None:
        return
    try:
        sink.emit(event)
    except Exception:
        logger.exception("Load event sink failed on %s event", event.kind.value)
