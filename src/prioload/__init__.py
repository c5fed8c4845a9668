"""prioload: adaptive, priority-based resource loading for application start-up.

Usage:
    import httpx
    from prioload import (
        CriticalResourcePreloader,
        Priority,
        ResourceDescriptor,
        StartupManifest,
        create_scheduler,
    )

    async with httpx.AsyncClient(base_url="https://app.example") as client:
        scheduler = create_scheduler(client=client, effective_type="3g")
        unsubscribe = scheduler.on_stats_change(print)

        await scheduler.load(
            ResourceDescriptor("/assets/js/runtime.js", Priority.CRITICAL, "script", max_retries=2)
        )

        preloader = CriticalResourcePreloader(
            scheduler, StartupManifest.from_json_file("startup-manifest.json")
        )
        await preloader.run()
"""

__version__ = "0.1.0"

# Core types
from prioload.core import (
    CriticalPathError,
    LoadError,
    LoadOutcome,
    LoadState,
    LoadTimeoutError,
    PreloadError,
    Priority,
    ResourceDescriptor,
    ResourceType,
    UnsupportedTypeError,
)

# Adapters
from prioload.adapters import (
    AdapterRegistry,
    CallableAdapter,
    ResourceAdapter,
    default_registry,
)

# Configuration
from prioload.config import LoaderSettings, PerformanceTargets

# Scheduling
from prioload.scheduling import (
    ResourceScheduler,
    RetryPolicy,
    SchedulerConfig,
    SchedulerStats,
    create_scheduler,
)

# Preloading
from prioload.preloading import (
    CriticalResourcePreloader,
    PreloadStage,
    StartupManifest,
)

# Monitoring
from prioload.monitoring import (
    Breach,
    LoadingReport,
    PerformanceMonitor,
    TimingEntry,
)

# Tracing (optional)
from prioload.tracing import LoadEvent, LoadEventKind, LoadEventSink

__all__ = [
    # Version
    "__version__",
    # Core
    "Priority",
    "ResourceType",
    "ResourceDescriptor",
    "LoadState",
    "LoadOutcome",
    "PreloadError",
    "LoadError",
    "LoadTimeoutError",
    "UnsupportedTypeError",
    "CriticalPathError",
    # Adapters
    "ResourceAdapter",
    "AdapterRegistry",
    "CallableAdapter",
    "default_registry",
    # Configuration
    "LoaderSettings",
    "PerformanceTargets",
    # Scheduling
    "ResourceScheduler",
    "SchedulerConfig",
    "SchedulerStats",
    "RetryPolicy",
    "create_scheduler",
    # Preloading
    "CriticalResourcePreloader",
    "PreloadStage",
    "StartupManifest",
    # Monitoring
    "PerformanceMonitor",
    "Breach",
    "LoadingReport",
    "TimingEntry",
    # Tracing
    "LoadEvent",
    "LoadEventKind",
    "LoadEventSink",
]
