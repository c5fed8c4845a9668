"""Structured diagnostics for resource loading.

Usage:
    from prioload.tracing import LoadEvent, LoadEventSink

    class MemorySink:
        def __init__(self) -> None:
            self.events: list[LoadEvent] = []

        def emit(self, event: LoadEvent) -> None:
            self.events.append(event)
"""

from prioload.tracing.models import LoadEvent, LoadEventKind
from prioload.tracing.protocol import LoadEventSink, emit_event

__all__ = [
    "LoadEvent",
    "LoadEventKind",
    "LoadEventSink",
    "emit_event",
]
