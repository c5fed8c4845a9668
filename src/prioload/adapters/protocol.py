"""Adapter protocol for resource materialization.

An adapter turns a url into a usable resource of one type. The scheduler
never knows which adapter services a type; it looks the type tag up in an
AdapterRegistry and awaits the result.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable

from prioload.core.models import LoadOutcome


@runtime_checkable
class ResourceAdapter(Protocol):
    """Protocol for per-type resource loading primitives.

    Adapters are cancellation-agnostic: the supervisor abandons attempts that
    exceed their deadline, so implementations only need to load.

    Usage:
        class WarmCacheAdapter:
            async def load(self, url: str, options: Mapping[str, Any]) -> LoadOutcome:
                await cache.warm(url)
                return LoadOutcome.LOADED

        registry.register("cache", WarmCacheAdapter())
    """

    async def load(self, url: str, options: Mapping[str, Any]) -> LoadOutcome:
        """Materialize a resource.

        Args:
            url: Resource location.
            options: Adapter-specific settings from the descriptor.

        Returns:
            LoadOutcome.LOADED once the resource is usable, or
            LoadOutcome.UNAVAILABLE when the host lacks the capability.

        Raises:
            LoadError: The resource could not be loaded. Other exceptions are
                wrapped into LoadError by the supervisor.
        """
        ...
