"""Integration tests: application start-up over mocked HTTP.

These tests wire the real pieces together the way an application does:
settings -> create_scheduler (HTTP adapters) -> preloader -> monitor.
"""

import asyncio
import logging

import httpx
import pytest

from prioload import (
    CriticalPathError,
    CriticalResourcePreloader,
    LoaderSettings,
    PerformanceMonitor,
    PerformanceTargets,
    PreloadStage,
    Priority,
    ResourceDescriptor,
    SchedulerStats,
    StartupManifest,
    TimingEntry,
    create_scheduler,
)
from prioload.adapters import AssetCache
from prioload.logging_config import configure_logging

MANIFEST = {
    "critical": [
        {"url": "/assets/css/critical.css", "type": "style", "priority": "critical", "timeout": 1.0},
        {"url": "/assets/js/runtime.js", "type": "script", "priority": "critical", "max_retries": 1},
    ],
    "essential": [
        {
            "url": "/assets/fonts/inter.woff2",
            "type": "font",
            "priority": "high",
            "options": {"cross_origin": "anonymous"},
        },
        {"url": "/assets/css/components.css", "type": "style", "priority": "high"},
    ],
    "non_critical": [
        {"url": "/assets/js/features.chunk.js", "type": "script", "priority": "low"},
        {"url": "/assets/img/hero.webp", "type": "image", "priority": "low"},
    ],
    "routes": {
        "/tactics": [{"url": "/assets/js/tactics.chunk.js", "type": "script", "priority": "high"}],
    },
}

CONTENT_TYPES = {
    ".css": "text/css",
    ".js": "application/javascript",
    ".woff2": "font/woff2",
    ".webp": "image/webp",
}


class AssetServer:
    """Mock origin serving every known asset, with scripted failures."""

    def __init__(self) -> None:
        self.requests: list[str] = []
        self.missing: set[str] = set()
        self.flaky: dict[str, int] = {}

    def __call__(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        self.requests.append(path)
        if path in self.missing:
            return httpx.Response(404)
        if self.flaky.get(path):
            self.flaky[path] -= 1
            return httpx.Response(503)
        suffix = path[path.rfind(".") :]
        return httpx.Response(
            200, content=f"/* {path} */".encode(), headers={"content-type": CONTENT_TYPES[suffix]}
        )


def settings(**overrides) -> LoaderSettings:
    return LoaderSettings(_env_file=None, retry_delay=0.0, **overrides)


@pytest.mark.asyncio
async def test_application_startup_journey() -> None:
    server = AssetServer()
    server.flaky["/assets/js/runtime.js"] = 1
    server.missing.add("/assets/img/hero.webp")
    cache = AssetCache()
    monitor = PerformanceMonitor(PerformanceTargets(_env_file=None))

    async with httpx.AsyncClient(transport=httpx.MockTransport(server), base_url="https://app.test") as client:
        scheduler = create_scheduler(settings(), client=client, cache=cache, effective_type="3g")
        stats: list[SchedulerStats] = []
        scheduler.on_stats_change(stats.append)
        preloader = CriticalResourcePreloader(
            scheduler, StartupManifest.model_validate(MANIFEST), monitor=monitor
        )

        await preloader.run()
        await preloader.preload_route("/tactics")

    # Critical path survived one 503 thanks to its retry budget
    assert server.requests.count("/assets/js/runtime.js") == 2
    assert preloader.stage is PreloadStage.COMPLETE
    assert preloader.failed_urls == ["/assets/img/hero.webp"]

    assert scheduler.max_concurrent == 2
    assert max(s.active for s in stats) <= 2
    assert stats[-1].loaded == 6
    assert stats[-1].failed == 1
    assert "/assets/js/tactics.chunk.js" in cache
    assert cache.get("/assets/fonts/inter.woff2").content_type == "font/woff2"

    # Host-delivered paint timings join the preloader's own measurements
    monitor.record_entry(TimingEntry("first-paint", start_time=640.0, entry_type="paint"))
    report = monitor.get_report()
    assert report.first_paint == 640.0
    assert report.critical_path_time > 0
    assert report.targets_met["first-paint"] is True


@pytest.mark.asyncio
async def test_startup_aborts_when_critical_asset_missing() -> None:
    server = AssetServer()
    server.missing.add("/assets/css/critical.css")

    async with httpx.AsyncClient(transport=httpx.MockTransport(server), base_url="https://app.test") as client:
        scheduler = create_scheduler(settings(), client=client)
        preloader = CriticalResourcePreloader(scheduler, StartupManifest.model_validate(MANIFEST))

        with pytest.raises(CriticalPathError, match="critical.css"):
            await preloader.run()
        await scheduler.flush()

    assert preloader.stage is PreloadStage.FAILED
    assert "/assets/fonts/inter.woff2" not in server.requests
    assert scheduler.has_failed("/assets/css/critical.css")


@pytest.mark.asyncio
async def test_without_network_client_loads_are_unavailable() -> None:
    """Loads in an environment without HTTP neither succeed nor fail."""
    scheduler = create_scheduler(settings())

    await scheduler.preload_batch(
        [ResourceDescriptor("/assets/img/hero.webp", Priority.LOW, "image")]
    )

    assert not scheduler.is_loaded("/assets/img/hero.webp")
    assert not scheduler.has_failed("/assets/img/hero.webp")
    assert scheduler.stats() == SchedulerStats(max_concurrent=6)


@pytest.mark.asyncio
async def test_network_downgrade_mid_startup() -> None:
    """Dropping to 2g throttles admission without cancelling active loads."""
    release = asyncio.Event()
    server = AssetServer()

    async def slow_origin(request: httpx.Request) -> httpx.Response:
        await release.wait()
        return server(request)

    async with httpx.AsyncClient(
        transport=httpx.MockTransport(slow_origin), base_url="https://app.test"
    ) as client:
        scheduler = create_scheduler(settings(max_concurrent_requests=4), client=client)
        batch = asyncio.ensure_future(
            scheduler.preload_batch(
                ResourceDescriptor(f"/assets/js/chunk-{i}.js", type="script") for i in range(8)
            )
        )
        await asyncio.sleep(0)
        assert scheduler.stats().active == 4

        scheduler.apply_network_quality("2g")
        assert scheduler.stats().active == 4
        assert scheduler.stats().max_concurrent == 1

        release.set()
        outcomes = await batch

    assert all(outcome is not None for outcome in outcomes)
    assert scheduler.stats().loaded == 8


def test_configure_logging_quiets_http_stack() -> None:
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    try:
        configure_logging(logging.DEBUG)

        assert root.level == logging.DEBUG
        assert logging.getLogger("httpx").level == logging.WARNING
        assert logging.getLogger("httpcore").level == logging.WARNING
    finally:
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)
