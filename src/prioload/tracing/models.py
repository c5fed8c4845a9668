"""Data models for load diagnostics.

Events are storage-agnostic and serialize to plain JSON-compatible dicts.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class LoadEventKind(Enum):
    """What happened to a resource."""

    LOADED = "loaded"
    SLOW = "slow"
    RETRY = "retry"
    FAILED = "failed"
    UNAVAILABLE = "unavailable"
    CONCURRENCY = "concurrency"
    STAGE = "stage"


@dataclass(slots=True)
class LoadEvent:
    """Structured record of a single diagnostic event.

    Attributes:
        kind: Event category.
        url: Resource url, if the event concerns a single resource.
        resource_type: Adapter tag of the resource.
        priority: Priority value of the resource.
        duration: Elapsed seconds for the attempt or stage.
        attempt: 1-based attempt number.
        error: Error message for failures and retries.
        timestamp: Unix timestamp when the event was created.
        extra: Arbitrary additional fields.

    Example:
        event = LoadEvent(
            kind=LoadEventKind.LOADED,
            url="/assets/js/runtime.js",
            resource_type="script",
            priority="critical",
            duration=0.142,
        )
    """

    kind: LoadEventKind
    url: str | None = None
    resource_type: str | None = None
    priority: str | None = None
    duration: float | None = None
    attempt: int | None = None
    error: str | None = None
    timestamp: float = field(default_factory=time.time)
    extra: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-serializable dictionary, omitting unset fields."""
        result: dict[str, Any] = {"kind": self.kind.value, "timestamp": self.timestamp}
        for key in ("url", "resource_type", "priority", "duration", "attempt", "error"):
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.extra:
            result.update(self.extra)
        return result
