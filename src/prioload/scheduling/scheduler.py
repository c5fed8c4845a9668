"""Priority resource scheduler with bounded, network-adaptive admission.

Usage:
    # Default scheduler (HTTP adapters, settings from PRIOLOAD_* env vars)
    async with httpx.AsyncClient(base_url="https://app.example") as client:
        scheduler = create_scheduler(client=client)
        await scheduler.load(ResourceDescriptor("/assets/js/runtime.js", Priority.CRITICAL, "script"))

    # Custom adapters and config
    from prioload.adapters import AdapterRegistry, CallableAdapter
    registry = AdapterRegistry({"model": CallableAdapter(load_model)})
    scheduler = ResourceScheduler(registry, SchedulerConfig(max_concurrent=2))

    # Follow the host's network-quality signal
    scheduler.apply_network_quality("3g")  # cap drops to 2, active loads keep running
"""

from __future__ import annotations

import asyncio
import bisect
import logging
from collections.abc import Iterable
from dataclasses import replace

import httpx

from prioload.adapters.http import AssetCache, default_registry
from prioload.adapters.registry import AdapterRegistry
from prioload.config import LoaderSettings
from prioload.core.errors import UnsupportedTypeError
from prioload.core.models import LoadOutcome, LoadState, Priority, ResourceDescriptor
from prioload.scheduling.models import (
    SchedulerConfig,
    SchedulerStats,
    StatsListener,
    Unsubscribe,
    concurrency_for_network,
)
from prioload.scheduling.registry import LoadRegistry
from prioload.scheduling.stats import StatsPublisher
from prioload.scheduling.supervisor import LoadSupervisor
from prioload.tracing import LoadEvent, LoadEventKind, LoadEventSink, emit_event

logger = logging.getLogger(__name__)


class ResourceScheduler:
    """Admits resource loads in priority order up to a concurrency cap.

    The queue is ordered by priority, FIFO within a priority class. Admitted
    loads run through a LoadSupervisor; their outcome is shared by every
    caller that submitted the same url while it was in flight. Priority only
    orders the queue: in-flight loads are never preempted.

    All state is mutated on the event loop thread in synchronous sections,
    so no locking is needed.

    Args:
        adapters: Registry mapping type tags to adapters.
        config: Scheduler configuration (cap, timeouts, retry delay).
        sink: Optional receiver of structured load events.
        log: Logger to report through. Module logger if None.
    """

    def __init__(
        self,
        adapters: AdapterRegistry | None = None,
        config: SchedulerConfig | None = None,
        sink: LoadEventSink | None = None,
        log: logging.Logger | None = None,
    ) -> None:
        self._config = config or SchedulerConfig()
        self._adapters = adapters if adapters is not None else AdapterRegistry()
        self._sink = sink
        self._log = log or logger
        self._max_concurrent = self._config.max_concurrent
        self._queue: list[ResourceDescriptor] = []
        self._registry = LoadRegistry()
        self._active = 0
        self._tasks: set[asyncio.Task[None]] = set()
        self._admission_pending = False
        self._supervisor = LoadSupervisor(
            self._adapters,
            retry_policy=self._config.retry_policy,
            default_timeout=self._config.default_timeout,
            sink=sink,
            log=self._log,
        )
        self._stats = StatsPublisher(self._snapshot(), log=self._log)
        self._stats.publish(self._snapshot())

    @property
    def adapters(self) -> AdapterRegistry:
        return self._adapters

    @property
    def max_concurrent(self) -> int:
        return self._max_concurrent

    # Submission

    def submit(self, descriptor: ResourceDescriptor) -> asyncio.Future[LoadOutcome]:
        """Queue a descriptor and return the future of its outcome.

        - Already loaded: an already-resolved future, no adapter call.
        - Already queued or loading: the same shared future, nothing new queued.
          A still-queued url resubmitted at a strictly higher priority moves up.
        - Otherwise: inserted after every queued item of equal or higher
          priority, then admission runs.

        Must be called from a running event loop.
        """
        loop = asyncio.get_running_loop()
        url = descriptor.url

        if self._registry.is_loaded(url):
            done: asyncio.Future[LoadOutcome] = loop.create_future()
            done.set_result(LoadOutcome.LOADED)
            return done

        existing = self._registry.in_flight(url)
        if existing is not None:
            if self._registry.state(url) is LoadState.QUEUED:
                self._promote(descriptor)
            return existing

        future: asyncio.Future[LoadOutcome] = loop.create_future()
        self._registry.mark_queued(url, future)
        bisect.insort_right(self._queue, descriptor, key=lambda d: d.priority.rank)
        self._publish_stats()
        self.process_queue()
        return future

    async def load(self, descriptor: ResourceDescriptor) -> LoadOutcome:
        """Submit a descriptor and wait for its outcome.

        Raises:
            UnsupportedTypeError: No adapter for the descriptor's type.
            LoadError: Retries exhausted (LoadTimeoutError if the last attempt timed out).
        """
        return await self.submit(descriptor)

    async def preload_batch(
        self, descriptors: Iterable[ResourceDescriptor]
    ) -> list[LoadOutcome | None]:
        """Best-effort prefetch of many resources.

        Every descriptor is demoted to PREFETCH priority. Individual failures
        are logged and reported as None; the batch itself never raises, so
        callers must not read success into its completion.
        """
        batch = [self._as_prefetch(descriptor) for descriptor in descriptors]
        results = await asyncio.gather(*(self.submit(d) for d in batch), return_exceptions=True)

        outcomes: list[LoadOutcome | None] = []
        for descriptor, result in zip(batch, results, strict=True):
            if isinstance(result, BaseException):
                self._log.warning("Preload failed | %s | %s", descriptor.url, result)
                outcomes.append(None)
            else:
                outcomes.append(result)
        return outcomes

    def _promote(self, descriptor: ResourceDescriptor) -> None:
        """Move a still-queued url up to a strictly higher priority class.

        The new descriptor replaces the queued one and goes behind every
        queued item of equal or higher priority. Lower or equal priorities
        leave the queue untouched.
        """
        for index, queued in enumerate(self._queue):
            if queued.url == descriptor.url:
                break
        else:
            return
        if not descriptor.priority.outranks(queued.priority):
            return

        del self._queue[index]
        bisect.insort_right(self._queue, descriptor, key=lambda d: d.priority.rank)
        self._log.debug(
            "Queued resource promoted | %s | %s -> %s",
            descriptor.url,
            queued.priority.value,
            descriptor.priority.value,
        )

    def _as_prefetch(self, descriptor: ResourceDescriptor) -> ResourceDescriptor:
        prefetch = descriptor.with_priority(Priority.PREFETCH)
        if prefetch.timeout is None:
            prefetch = replace(prefetch, timeout=self._config.batch_timeout)
        return prefetch

    async def flush(self) -> None:
        """Wait until everything currently queued or loading has settled.

        Failures are not raised here; they surface on each submit's future.
        """
        pending = self._registry.pending()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)

    # Admission

    def process_queue(self) -> None:
        """Admit queued descriptors while capacity is free."""
        self._admission_pending = False
        while self._queue and self._active < self._max_concurrent:
            descriptor = self._queue.pop(0)
            if self._registry.state(descriptor.url) is not LoadState.QUEUED:
                continue

            self._registry.mark_loading(descriptor.url)
            self._active += 1
            task = asyncio.get_running_loop().create_task(
                self._dispatch(descriptor), name=f"prioload:{descriptor.url}"
            )
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)
            self._publish_stats()

    async def _dispatch(self, descriptor: ResourceDescriptor) -> None:
        url = descriptor.url
        try:
            outcome = await self._supervisor.run(descriptor)
        except asyncio.CancelledError:
            future = self._registry.mark_failed(url)
            if future is not None and not future.done():
                future.cancel()
            raise
        except Exception as e:
            if isinstance(e, UnsupportedTypeError):
                self._log.error("Resource load rejected | %s", e)
            future = self._registry.mark_failed(url)
            if future is not None and not future.done():
                future.set_exception(e)
        else:
            if outcome is LoadOutcome.UNAVAILABLE:
                future = self._registry.mark_unavailable(url)
            else:
                future = self._registry.mark_loaded(url)
            if future is not None and not future.done():
                future.set_result(outcome)
        finally:
            self._active -= 1
            self._publish_stats()
            self._schedule_admission()

    def _schedule_admission(self) -> None:
        """Re-run admission on a later loop turn, never synchronously."""
        if self._admission_pending:
            return
        self._admission_pending = True
        asyncio.get_running_loop().call_soon(self.process_queue)

    # Concurrency policy

    def set_concurrency_limit(self, limit: int) -> None:
        """Change the admission cap and admit into any freed capacity.

        Lowering the cap only throttles future admission; active loads finish.
        """
        limit = max(1, int(limit))
        previous = self._max_concurrent
        self._max_concurrent = limit
        if limit != previous:
            self._log.info("Resource loader concurrency adjusted | %d -> %d", previous, limit)
            emit_event(
                self._sink,
                LoadEvent(
                    kind=LoadEventKind.CONCURRENCY,
                    extra={"previous": previous, "next": limit},
                ),
            )
        self._publish_stats()
        if self._queue:
            self.process_queue()

    def apply_network_quality(self, effective_type: str | None) -> int:
        """Adapt the cap to a host network-quality signal.

        slow-2g/2g -> 1, 3g -> 2, anything else -> configured default.

        Returns:
            The cap now in effect.
        """
        limit = concurrency_for_network(effective_type, self._config.max_concurrent)
        self.set_concurrency_limit(limit)
        return limit

    # Queries

    def is_loaded(self, url: str) -> bool:
        return self._registry.is_loaded(url)

    def has_failed(self, url: str) -> bool:
        """Advisory: a fresh submit of a failed url starts a new attempt sequence."""
        return self._registry.has_failed(url)

    def state(self, url: str) -> LoadState:
        return self._registry.state(url)

    def stats(self) -> SchedulerStats:
        return self._snapshot()

    def queued_urls(self) -> list[str]:
        """Urls waiting for admission, in admission order."""
        return [descriptor.url for descriptor in self._queue]

    # Stats

    def on_stats_change(self, listener: StatsListener) -> Unsubscribe:
        """Subscribe to stats changes. The listener is called once immediately."""
        return self._stats.subscribe(listener)

    def _snapshot(self) -> SchedulerStats:
        return SchedulerStats(
            loaded=self._registry.loaded_count,
            failed=self._registry.failed_count,
            queued=len(self._queue),
            active=self._active,
            max_concurrent=self._max_concurrent,
        )

    def _publish_stats(self) -> None:
        self._stats.publish(self._snapshot())


def create_scheduler(
    settings: LoaderSettings | None = None,
    adapters: AdapterRegistry | None = None,
    client: httpx.AsyncClient | None = None,
    cache: AssetCache | None = None,
    sink: LoadEventSink | None = None,
    log: logging.Logger | None = None,
    effective_type: str | None = None,
) -> ResourceScheduler:
    """Build the application's scheduler.

    Args:
        settings: Loader settings. Read from PRIOLOAD_* env vars if None.
        adapters: Adapter registry. HTTP adapters over `client` if None.
        client: Async HTTP client for the default adapters. Without one the
            default adapters report LoadOutcome.UNAVAILABLE.
        cache: Shared cache for the default adapters.
        sink: Optional receiver of structured load events.
        log: Logger to report through.
        effective_type: Initial network-quality signal, if the host has one.

    Returns:
        A ResourceScheduler ready for submissions.
    """
    settings = settings or LoaderSettings()
    if adapters is None:
        adapters = default_registry(client, cache)
    scheduler = ResourceScheduler(
        adapters=adapters,
        config=SchedulerConfig.from_settings(settings),
        sink=sink,
        log=log,
    )
    if effective_type is not None:
        scheduler.apply_network_quality(effective_type)
    return scheduler
