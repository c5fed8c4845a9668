"""HTTP adapters implementing ResourceAdapter.

Each built-in resource type is fetched over httpx and kept in a shared
AssetCache, so a loaded resource is available to the application without a
second round trip. Typed variants also check the response content type.

Usage:
    import httpx
    from prioload.adapters.http import AssetCache, default_registry

    async with httpx.AsyncClient(base_url="https://app.example") as client:
        cache = AssetCache()
        registry = default_registry(client, cache)
        scheduler = create_scheduler(adapters=registry)
        await scheduler.load(ResourceDescriptor("/assets/css/critical.css", type="style"))
        css = cache.get("/assets/css/critical.css")
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, ClassVar

import httpx

from prioload.adapters.registry import AdapterRegistry
from prioload.config import LoaderSettings
from prioload.core.errors import LoadError
from prioload.core.models import LoadOutcome, ResourceType

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CachedAsset:
    """Body and content type of a loaded resource."""

    content: bytes
    content_type: str


class AssetCache:
    """In-memory store of loaded resources keyed by url."""

    def __init__(self) -> None:
        self._assets: dict[str, CachedAsset] = {}

    def put(self, url: str, content: bytes, content_type: str) -> None:
        self._assets[url] = CachedAsset(content=content, content_type=content_type)

    def get(self, url: str) -> CachedAsset | None:
        return self._assets.get(url)

    def clear(self) -> None:
        self._assets.clear()

    def __contains__(self, url: object) -> bool:
        return url in self._assets

    def __len__(self) -> int:
        return len(self._assets)


def _request_headers(options: Mapping[str, Any]) -> dict[str, str]:
    """Build request headers from descriptor options.

    ``cross_origin`` follows the fetch mode mapping: "anonymous" requests are
    CORS requests, "use-credentials" requests stay same-origin.
    """
    headers = dict(options.get("headers") or {})
    cross_origin = options.get("cross_origin")
    if cross_origin == "anonymous":
        headers["Sec-Fetch-Mode"] = "cors"
    elif cross_origin == "use-credentials":
        headers["Sec-Fetch-Mode"] = "same-origin"
    elif cross_origin is not None:
        raise ValueError(f"Unknown cross_origin mode: {cross_origin!r}")
    return headers


def _media_type(response: httpx.Response) -> str:
    return response.headers.get("content-type", "").split(";", 1)[0].strip().lower()


class HttpAssetAdapter:
    """Generic fetch: any 2xx response counts as loaded.

    Subclasses narrow accepted content types. A response without a
    content-type header is accepted, as browsers sniff such responses.
    """

    resource_type: ClassVar[str] = ResourceType.FETCH.value
    accepted_media_types: ClassVar[tuple[str, ...]] = ()

    def __init__(self, client: httpx.AsyncClient | None, cache: AssetCache | None = None) -> None:
        """Initialize adapter.

        Args:
            client: Shared async client. None means this environment has no
                network capability; loads then report UNAVAILABLE.
            cache: Where loaded bodies are kept. A private cache if None.
        """
        self._client = client
        self._cache = cache if cache is not None else AssetCache()

    @property
    def cache(self) -> AssetCache:
        return self._cache

    async def load(self, url: str, options: Mapping[str, Any]) -> LoadOutcome:
        if self._client is None:
            logger.warning("%s load skipped - no HTTP client available | %s", self.resource_type, url)
            return LoadOutcome.UNAVAILABLE

        try:
            response = await self._client.get(url, headers=_request_headers(options))
        except httpx.HTTPError as e:
            raise LoadError(url, f"{self.resource_type} load failed: {url} ({e})") from e

        if not response.is_success:
            raise LoadError(
                url,
                f"{self.resource_type} load failed: {response.status_code} "
                f"{response.reason_phrase} | {url}",
            )

        media_type = _media_type(response)
        if media_type and not self._accepts(media_type):
            raise LoadError(
                url, f"{self.resource_type} load failed: unexpected content type {media_type!r} | {url}"
            )

        self._cache.put(url, response.content, media_type)
        return LoadOutcome.LOADED

    def _accepts(self, media_type: str) -> bool:
        if not self.accepted_media_types:
            return True
        return any(token in media_type for token in self.accepted_media_types)


class FetchAdapter(HttpAssetAdapter):
    """Plain data fetch (JSON, manifests, anything)."""


class ScriptAdapter(HttpAssetAdapter):
    resource_type = ResourceType.SCRIPT.value
    accepted_media_types = ("javascript", "ecmascript")


class StyleAdapter(HttpAssetAdapter):
    resource_type = ResourceType.STYLE.value
    accepted_media_types = ("text/css",)


class FontAdapter(HttpAssetAdapter):
    resource_type = ResourceType.FONT.value
    # Fonts are commonly served as octet-stream
    accepted_media_types = ("font/", "application/font", "application/x-font", "octet-stream")


class ImageAdapter(HttpAssetAdapter):
    resource_type = ResourceType.IMAGE.value
    accepted_media_types = ("image/",)


def create_http_client(settings: LoaderSettings | None = None, **kwargs: Any) -> httpx.AsyncClient:
    """Async client for the HTTP adapters, with the configured transport timeout.

    The caller owns the client and closes it (``async with`` or ``aclose()``).
    Extra keyword arguments go to ``httpx.AsyncClient``.
    """
    settings = settings or LoaderSettings()
    kwargs.setdefault("timeout", settings.http_timeout)
    return httpx.AsyncClient(**kwargs)


def default_registry(
    client: httpx.AsyncClient | None, cache: AssetCache | None = None
) -> AdapterRegistry:
    """Registry with one HTTP adapter per built-in resource type, sharing a cache."""
    shared = cache if cache is not None else AssetCache()
    registry = AdapterRegistry()
    for adapter_cls in (ScriptAdapter, StyleAdapter, FontAdapter, ImageAdapter, FetchAdapter):
        registry.register(adapter_cls.resource_type, adapter_cls(client, shared))
    return registry
