"""Resource descriptors and load lifecycle types.

A ResourceDescriptor names one resource to materialize. The scheduler never
mutates a descriptor; retries and batch demotion work on copies.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from enum import Enum
from types import MappingProxyType
from typing import Any


class Priority(Enum):
    """Admission class. Members are declared in admission order."""

    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    PREFETCH = "prefetch"

    @property
    def rank(self) -> int:
        """Position in admission order (0 is admitted first)."""
        return _PRIORITY_RANK[self]

    def outranks(self, other: Priority) -> bool:
        """True if this class is admitted strictly before `other`."""
        return self.rank < other.rank


_PRIORITY_RANK = {priority: index for index, priority in enumerate(Priority)}


class ResourceType(str, Enum):
    """Built-in adapter type tags.

    Descriptors carry the tag as a plain string, so registering an adapter
    under a new tag needs no change here.
    """

    SCRIPT = "script"
    STYLE = "style"
    FONT = "font"
    IMAGE = "image"
    FETCH = "fetch"


class LoadState(Enum):
    """Per-url lifecycle tracked by the scheduler."""

    UNKNOWN = "unknown"
    QUEUED = "queued"
    LOADING = "loading"
    LOADED = "loaded"
    FAILED = "failed"


class LoadOutcome(Enum):
    """How a settled load ended when it did not fail."""

    LOADED = "loaded"
    """Resource is materialized and usable."""

    UNAVAILABLE = "unavailable"
    """The host lacks the capability for this type. Not a failure, not retried."""


@dataclass(frozen=True, slots=True)
class ResourceDescriptor:
    """Immutable description of a resource to load.

    Attributes:
        url: Resource location, also the deduplication key.
        priority: Admission class.
        type: Adapter tag selecting the materialization primitive.
        timeout: Per-attempt deadline in seconds. None uses the scheduler default.
        max_retries: Additional attempts after the first failure.
        options: Adapter-specific settings (e.g. ``cross_origin``).
    """

    url: str
    priority: Priority = Priority.MEDIUM
    type: str = ResourceType.FETCH.value
    timeout: float | None = None
    max_retries: int = 0
    options: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.url:
            raise ValueError("ResourceDescriptor.url must be non-empty")
        if self.max_retries < 0:
            raise ValueError(f"max_retries must be >= 0, got {self.max_retries}")
        if self.timeout is not None and self.timeout <= 0:
            raise ValueError(f"timeout must be positive, got {self.timeout}")
        if isinstance(self.priority, str):
            object.__setattr__(self, "priority", Priority(self.priority))
        if isinstance(self.type, ResourceType):
            object.__setattr__(self, "type", self.type.value)
        object.__setattr__(self, "options", MappingProxyType(dict(self.options)))

    def __hash__(self) -> int:
        return hash((self.url, self.priority, self.type, self.timeout, self.max_retries))

    def with_retries_remaining(self, remaining: int) -> ResourceDescriptor:
        """Copy of this descriptor with a different retry budget."""
        return replace(self, max_retries=remaining, options=dict(self.options))

    def with_priority(self, priority: Priority) -> ResourceDescriptor:
        """Copy of this descriptor in another admission class."""
        return replace(self, priority=priority, options=dict(self.options))
