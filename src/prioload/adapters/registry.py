"""Type tag to adapter lookup."""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Iterator, Mapping
from typing import Any

from prioload.adapters.protocol import ResourceAdapter
from prioload.core.errors import UnsupportedTypeError
from prioload.core.models import LoadOutcome, ResourceType

LoadFunction = Callable[[str, Mapping[str, Any]], Awaitable[LoadOutcome | None]]
"""Signature: async (url, options) -> LoadOutcome | None (None means LOADED)"""


class CallableAdapter:
    """Adapts a plain async function to the ResourceAdapter protocol.

    Handy for one-off resource types and for tests:

        async def warm(url, options):
            await cache.warm(url)

        registry.register("cache", CallableAdapter(warm))
    """

    def __init__(self, func: LoadFunction) -> None:
        self._func = func

    async def load(self, url: str, options: Mapping[str, Any]) -> LoadOutcome:
        result = await self._func(url, options)
        return LoadOutcome.LOADED if result is None else result


class AdapterRegistry:
    """Maps resource type tags to adapters.

    Adding a resource type means registering one adapter; the scheduler
    doesn't change.
    """

    def __init__(self, adapters: Mapping[str, ResourceAdapter] | None = None) -> None:
        self._adapters: dict[str, ResourceAdapter] = {}
        for resource_type, adapter in (adapters or {}).items():
            self.register(resource_type, adapter)

    def register(self, resource_type: str | ResourceType, adapter: ResourceAdapter) -> None:
        """Register (or replace) the adapter for a type tag."""
        if not isinstance(adapter, ResourceAdapter):
            raise TypeError(f"{adapter!r} does not implement ResourceAdapter")
        self._adapters[_tag(resource_type)] = adapter

    def get(self, resource_type: str | ResourceType, url: str | None = None) -> ResourceAdapter:
        """Look up the adapter for a type tag.

        Raises:
            UnsupportedTypeError: No adapter is registered for the tag.
        """
        tag = _tag(resource_type)
        try:
            return self._adapters[tag]
        except KeyError:
            raise UnsupportedTypeError(tag, url) from None

    def types(self) -> list[str]:
        """Registered type tags in registration order."""
        return list(self._adapters)

    def __contains__(self, resource_type: object) -> bool:
        if isinstance(resource_type, ResourceType):
            resource_type = resource_type.value
        return resource_type in self._adapters

    def __iter__(self) -> Iterator[str]:
        return iter(self._adapters)

    def __len__(self) -> int:
        return len(self._adapters)


def _tag(resource_type: str | ResourceType) -> str:
    return resource_type.value if isinstance(resource_type, ResourceType) else resource_type
