"""Staged start-up preloading on top of the resource scheduler.

Usage:
    scheduler = create_scheduler(client=client)
    manifest = StartupManifest.from_json_file("build/startup-manifest.json")
    preloader = CriticalResourcePreloader(scheduler, manifest, monitor=PerformanceMonitor())

    preloader.on_progress(lambda stage, percent: print(stage.value, percent))
    await preloader.run()               # raises CriticalPathError if the critical group fails
    await preloader.preload_route("/tactics")
"""

from __future__ import annotations

import asyncio
import logging
import time

from prioload.core.errors import CriticalPathError
from prioload.core.models import LoadOutcome, ResourceDescriptor
from prioload.monitoring import APP_LOADING_TOTAL, CRITICAL_PATH_LOAD, PerformanceMonitor
from prioload.preloading.models import (
    STAGE_PROGRESS,
    PreloadStage,
    ProgressListener,
    StartupManifest,
)
from prioload.scheduling.models import Unsubscribe
from prioload.scheduling.scheduler import ResourceScheduler
from prioload.tracing import LoadEvent, LoadEventKind, LoadEventSink, emit_event

logger = logging.getLogger(__name__)


def _consume_outcome(future: asyncio.Future[LoadOutcome]) -> None:
    if not future.cancelled():
        future.exception()


class CriticalResourcePreloader:
    """Sequences manifest groups through the scheduler.

    NOT_STARTED -> LOADING_CRITICAL -> CRITICAL_READY -> LOADING_ESSENTIAL
    -> LOADING_NON_CRITICAL -> COMPLETE

    The critical group is all-or-nothing: the first member failure moves the
    preloader to FAILED and nothing further is dispatched. Essential and
    non-critical members settle independently; their failures are logged
    and never block siblings or later stages.

    Args:
        scheduler: Scheduler all submissions go through.
        manifest: Resource groups and routes.
        monitor: Optional monitor receiving critical-path and total load times.
        sink: Optional receiver of stage events.
        log: Logger to report through. Module logger if None.
    """

    def __init__(
        self,
        scheduler: ResourceScheduler,
        manifest: StartupManifest,
        monitor: PerformanceMonitor | None = None,
        sink: LoadEventSink | None = None,
        log: logging.Logger | None = None,
    ) -> None:
        self._scheduler = scheduler
        self._manifest = manifest
        self._monitor = monitor
        self._sink = sink
        self._log = log or logger
        self._stage = PreloadStage.NOT_STARTED
        self._progress = 0
        self._listeners: list[ProgressListener] = []
        self._failed_urls: list[str] = []

    @property
    def stage(self) -> PreloadStage:
        return self._stage

    @property
    def progress(self) -> int:
        """Completion percentage: 40 once critical, 70 once essential, 100 when complete."""
        return self._progress

    @property
    def failed_urls(self) -> list[str]:
        """Essential and non-critical urls that failed during run()."""
        return list(self._failed_urls)

    def on_progress(self, listener: ProgressListener) -> Unsubscribe:
        """Register a stage/progress listener. Returns an unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def run(self) -> None:
        """Run the full start-up sequence once.

        Raises:
            CriticalPathError: A critical member exhausted its retries or
                could not be dispatched. Chained from the member's error.
            RuntimeError: run() was already called.
        """
        if self._stage is not PreloadStage.NOT_STARTED:
            raise RuntimeError(f"Preloader already ran (stage: {self._stage.value})")

        started = time.perf_counter()
        await self._load_critical_path()

        self._advance(PreloadStage.LOADING_ESSENTIAL)
        await self._load_best_effort(self._manifest.group("essential"), "essential")

        self._advance(PreloadStage.LOADING_NON_CRITICAL)
        await self._load_best_effort(self._manifest.group("non_critical"), "non-critical")

        self._advance(PreloadStage.COMPLETE)
        total = time.perf_counter() - started
        self._record_metric(APP_LOADING_TOTAL, total)
        self._log.info(
            "Progressive loading complete | %.1fms | %d failed", total * 1000, len(self._failed_urls)
        )

    async def _load_critical_path(self) -> None:
        """Load the critical group; all members must succeed."""
        self._advance(PreloadStage.LOADING_CRITICAL)
        started = time.perf_counter()
        group = self._manifest.group("critical")

        futures: dict[asyncio.Future[LoadOutcome], ResourceDescriptor] = {}
        for descriptor in group:
            futures.setdefault(self._scheduler.submit(descriptor), descriptor)

        if futures:
            done, _ = await asyncio.wait(futures, return_when=asyncio.FIRST_EXCEPTION)
            for future in done:
                error = asyncio.CancelledError() if future.cancelled() else future.exception()
                if error is not None:
                    for other in futures:
                        other.add_done_callback(_consume_outcome)
                    self._fail(futures[future].url, error)

        elapsed = time.perf_counter() - started
        self._record_metric(CRITICAL_PATH_LOAD, elapsed)
        self._log.info("Critical path loaded | %d resources | %.1fms", len(group), elapsed * 1000)
        self._advance(PreloadStage.CRITICAL_READY)

    async def preload_route(self, name: str) -> None:
        """Load every resource of a route. Unknown routes are a no-op.

        Raises:
            LoadError: A route resource failed (first failure wins).
        """
        descriptors = self._manifest.route(name)
        if not descriptors:
            self._log.debug("No resources registered for route %s", name)
            return
        await asyncio.gather(*(self._scheduler.submit(d) for d in descriptors))

    async def _load_best_effort(self, group: list[ResourceDescriptor], label: str) -> None:
        results = await asyncio.gather(
            *(self._scheduler.submit(d) for d in group), return_exceptions=True
        )
        for descriptor, result in zip(group, results, strict=True):
            if isinstance(result, BaseException):
                self._failed_urls.append(descriptor.url)
                self._log.warning(
                    "%s resource failed, continuing | %s | %s", label.capitalize(), descriptor.url, result
                )

    def _fail(self, url: str, error: BaseException) -> None:
        self._log.error("Critical path loading failed | %s | %s", url, error)
        self._advance(PreloadStage.FAILED)
        raise CriticalPathError(url) from error

    def _advance(self, stage: PreloadStage) -> None:
        self._stage = stage
        self._progress = STAGE_PROGRESS.get(stage, self._progress)
        emit_event(
            self._sink,
            LoadEvent(
                kind=LoadEventKind.STAGE,
                extra={"stage": stage.value, "progress": self._progress},
            ),
        )
        for listener in list(self._listeners):
            try:
                listener(stage, self._progress)
            except Exception:
                self._log.exception("Preload progress listener failed")

    def _record_metric(self, name: str, seconds: float) -> None:
        if self._monitor is not None:
            self._monitor.record(name, seconds * 1000)
