"""Deadline and retry supervision around a single adapter.

Each attempt races the adapter against a fresh deadline. Failed and timed
out attempts are retried with tenacity, at a fixed delay, up to the
descriptor's max_retries.
"""

from __future__ import annotations

import asyncio
import logging
import time

import tenacity

from prioload.adapters.protocol import ResourceAdapter
from prioload.adapters.registry import AdapterRegistry
from prioload.core.errors import LoadError, LoadTimeoutError
from prioload.core.models import LoadOutcome, ResourceDescriptor
from prioload.scheduling.models import RetryPolicy
from prioload.tracing import LoadEvent, LoadEventKind, LoadEventSink, emit_event

logger = logging.getLogger(__name__)


def _discard_late_settlement(task: asyncio.Future[object]) -> None:
    """Consume the outcome of an abandoned attempt so it has no effect."""
    if not task.cancelled():
        task.exception()


class LoadSupervisor:
    """Runs one descriptor to success or retry exhaustion.

    Args:
        adapters: Registry resolving the descriptor's type tag.
        retry_policy: Delay between attempts.
        default_timeout: Deadline in seconds for descriptors without one.
        sink: Optional receiver of structured load events.
        log: Logger to report through. Module logger if None.
    """

    def __init__(
        self,
        adapters: AdapterRegistry,
        retry_policy: RetryPolicy | None = None,
        default_timeout: float = 3.0,
        sink: LoadEventSink | None = None,
        log: logging.Logger | None = None,
    ) -> None:
        self._adapters = adapters
        self._retry_policy = retry_policy or RetryPolicy()
        self._default_timeout = default_timeout
        self._sink = sink
        self._log = log or logger

    def timeout_for(self, descriptor: ResourceDescriptor) -> float:
        return descriptor.timeout if descriptor.timeout is not None else self._default_timeout

    async def run(self, descriptor: ResourceDescriptor) -> LoadOutcome:
        """Load a descriptor, retrying LoadError and LoadTimeoutError.

        Raises:
            UnsupportedTypeError: No adapter for the type. Raised before any attempt.
            LoadError: The last attempt failed (LoadTimeoutError if it timed out).
        """
        adapter = self._adapters.get(descriptor.type, descriptor.url)
        timeout = self.timeout_for(descriptor)
        started = time.perf_counter()

        try:
            async for attempt in self._build_retryer(descriptor):
                with attempt:
                    number = attempt.retry_state.attempt_number
                    current = descriptor.with_retries_remaining(descriptor.max_retries - (number - 1))
                    outcome = await self.attempt(adapter, current, timeout)
                    self._report_settled(current, outcome, time.perf_counter() - started, number, timeout)
                    return outcome
        except LoadError as e:
            self._report_failed(descriptor, e)
            raise

        raise AssertionError("unreachable: retryer stopped without outcome")  # pragma: no cover

    async def attempt(
        self, adapter: ResourceAdapter, descriptor: ResourceDescriptor, timeout: float
    ) -> LoadOutcome:
        """Race one adapter call against a deadline.

        Whichever settles first wins; a late adapter settlement is discarded.
        """
        try:
            task = asyncio.ensure_future(adapter.load(descriptor.url, descriptor.options))
        except Exception as e:
            raise LoadError(descriptor.url, f"Resource load failed: {descriptor.url} ({e})") from e

        try:
            done, _ = await asyncio.wait({task}, timeout=timeout)
        except asyncio.CancelledError:
            task.cancel()
            task.add_done_callback(_discard_late_settlement)
            raise

        if not done:
            task.cancel()
            task.add_done_callback(_discard_late_settlement)
            raise LoadTimeoutError(descriptor.url, timeout)

        try:
            outcome = task.result()
        except LoadError:
            raise
        except Exception as e:
            raise LoadError(descriptor.url, f"Resource load failed: {descriptor.url} ({e})") from e
        return outcome if isinstance(outcome, LoadOutcome) else LoadOutcome.LOADED

    def _build_retryer(self, descriptor: ResourceDescriptor) -> tenacity.AsyncRetrying:
        """Build a tenacity retryer for one descriptor's retry budget."""
        return tenacity.AsyncRetrying(
            stop=tenacity.stop_after_attempt(descriptor.max_retries + 1),
            wait=tenacity.wait_fixed(self._retry_policy.delay),
            retry=tenacity.retry_if_exception_type(LoadError),
            before_sleep=lambda state: self._report_retry(descriptor, state),
            reraise=True,
        )

    def _report_retry(self, descriptor: ResourceDescriptor, state: tenacity.RetryCallState) -> None:
        error = state.outcome.exception() if state.outcome is not None else None
        remaining = descriptor.max_retries - state.attempt_number
        self._log.warning(
            "Retrying resource load | %s | attempt %d failed: %s | %d retries left",
            descriptor.url,
            state.attempt_number,
            error,
            remaining,
        )
        emit_event(
            self._sink,
            LoadEvent(
                kind=LoadEventKind.RETRY,
                url=descriptor.url,
                resource_type=descriptor.type,
                priority=descriptor.priority.value,
                attempt=state.attempt_number,
                error=str(error) if error is not None else None,
                extra={"remaining_retries": remaining},
            ),
        )

    def _report_settled(
        self,
        descriptor: ResourceDescriptor,
        outcome: LoadOutcome,
        duration: float,
        attempt: int,
        timeout: float,
    ) -> None:
        event = LoadEvent(
            kind=LoadEventKind.LOADED,
            url=descriptor.url,
            resource_type=descriptor.type,
            priority=descriptor.priority.value,
            duration=duration,
            attempt=attempt,
        )
        if outcome is LoadOutcome.UNAVAILABLE:
            event.kind = LoadEventKind.UNAVAILABLE
            self._log.warning("Resource unavailable in this environment | %s", descriptor.url)
            emit_event(self._sink, event)
            return

        self._log.debug(
            "Resource loaded | %s | %s/%s | %.1fms",
            descriptor.url,
            descriptor.type,
            descriptor.priority.value,
            duration * 1000,
        )
        emit_event(self._sink, event)

        # Total time across retries exceeded a single attempt's budget
        if duration > timeout:
            self._log.warning(
                "Slow resource load detected | %s | %.1fms > %.1fms",
                descriptor.url,
                duration * 1000,
                timeout * 1000,
            )
            emit_event(
                self._sink,
                LoadEvent(
                    kind=LoadEventKind.SLOW,
                    url=descriptor.url,
                    resource_type=descriptor.type,
                    priority=descriptor.priority.value,
                    duration=duration,
                    attempt=attempt,
                ),
            )

    def _report_failed(self, descriptor: ResourceDescriptor, error: LoadError) -> None:
        self._log.error(
            "Resource load failed | %s | %s/%s | %s",
            descriptor.url,
            descriptor.type,
            descriptor.priority.value,
            error,
        )
        emit_event(
            self._sink,
            LoadEvent(
                kind=LoadEventKind.FAILED,
                url=descriptor.url,
                resource_type=descriptor.type,
                priority=descriptor.priority.value,
                attempt=descriptor.max_retries + 1,
                error=str(error),
            ),
        )
