"""Exception hierarchy for resource loading."""

from __future__ import annotations


class PreloadError(Exception):
    """Base class for all prioload errors."""


class LoadError(PreloadError):
    """An adapter reported that a resource could not be materialized."""

    def __init__(self, url: str, message: str | None = None) -> None:
        self.url = url
        super().__init__(message or f"Resource load failed: {url}")


class LoadTimeoutError(LoadError, TimeoutError):
    """The per-attempt deadline elapsed before the adapter settled."""

    def __init__(self, url: str, timeout: float) -> None:
        self.timeout = timeout
        super().__init__(url, f"Resource load timeout after {timeout:.3f}s: {url}")


class UnsupportedTypeError(PreloadError):
    """No adapter is registered for the descriptor's type. Never retried."""

    def __init__(self, resource_type: str, url: str | None = None) -> None:
        self.resource_type = resource_type
        self.url = url
        message = f"Unknown resource type: {resource_type}"
        if url is not None:
            message = f"{message} ({url})"
        super().__init__(message)


class CriticalPathError(PreloadError):
    """A member of the critical start-up group failed."""

    def __init__(self, url: str) -> None:
        self.url = url
        super().__init__(f"Critical path loading failed at {url}")
