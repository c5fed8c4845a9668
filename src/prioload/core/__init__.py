"""Core descriptor, lifecycle and error types."""

from prioload.core.errors import (
    CriticalPathError,
    LoadError,
    LoadTimeoutError,
    PreloadError,
    UnsupportedTypeError,
)
from prioload.core.models import (
    LoadOutcome,
    LoadState,
    Priority,
    ResourceDescriptor,
    ResourceType,
)

__all__ = [
    # Models
    "Priority",
    "ResourceType",
    "ResourceDescriptor",
    "LoadState",
    "LoadOutcome",
    # Errors
    "PreloadError",
    "LoadError",
    "LoadTimeoutError",
    "UnsupportedTypeError",
    "CriticalPathError",
]
