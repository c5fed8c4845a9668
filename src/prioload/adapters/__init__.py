"""Resource materialization adapters.

Provides the ResourceAdapter protocol, the registry the scheduler uses to
pick an adapter by type tag, and httpx-backed implementations.

Usage:
    from prioload.adapters import AdapterRegistry, CallableAdapter, ResourceAdapter
    from prioload.adapters.http import default_registry
"""

from prioload.adapters.http import (
    AssetCache,
    CachedAsset,
    FetchAdapter,
    FontAdapter,
    HttpAssetAdapter,
    ImageAdapter,
    ScriptAdapter,
    StyleAdapter,
    create_http_client,
    default_registry,
)
from prioload.adapters.protocol import ResourceAdapter
from prioload.adapters.registry import AdapterRegistry, CallableAdapter, LoadFunction

__all__ = [
    # Protocols
    "ResourceAdapter",
    "LoadFunction",
    # Registry
    "AdapterRegistry",
    "CallableAdapter",
    # HTTP implementations
    "AssetCache",
    "CachedAsset",
    "HttpAssetAdapter",
    "FetchAdapter",
    "ScriptAdapter",
    "StyleAdapter",
    "FontAdapter",
    "ImageAdapter",
    "create_http_client",
    "default_registry",
]
