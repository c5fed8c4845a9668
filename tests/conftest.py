"""Shared test fixtures."""

import sys

import pytest

# Ensure src is in path
sys.path.insert(0, "src")

import asyncio
from collections.abc import Mapping
from typing import Any

from prioload import (
    AdapterRegistry,
    LoadError,
    LoadOutcome,
    ResourceScheduler,
    RetryPolicy,
    SchedulerConfig,
)


class RecordingAdapter:
    """Test adapter that records calls, tracks overlap and can be scripted.

    - urls in `fail` always raise LoadError
    - urls in `fail_times` raise LoadError that many times, then succeed
    - urls in `hang` never settle
    - urls with a gate wait until release(url) is called
    """

    def __init__(self, delay: float = 0.0, outcome: LoadOutcome = LoadOutcome.LOADED) -> None:
        self.delay = delay
        self.outcome = outcome
        self.calls: list[str] = []
        self.options: list[Mapping[str, Any]] = []
        self.fail: set[str] = set()
        self.fail_times: dict[str, int] = {}
        self.hang: set[str] = set()
        self.active = 0
        self.max_active = 0
        self._gates: dict[str, asyncio.Event] = {}

    def gate(self, *urls: str) -> None:
        for url in urls:
            self._gates[url] = asyncio.Event()

    def release(self, url: str) -> None:
        self._gates[url].set()

    async def load(self, url: str, options: Mapping[str, Any]) -> LoadOutcome:
        self.calls.append(url)
        self.options.append(options)
        self.active += 1
        self.max_active = max(self.max_active, self.active)
        try:
            if url in self._gates:
                await self._gates[url].wait()
            if url in self.hang:
                await asyncio.Event().wait()
            if self.delay:
                await asyncio.sleep(self.delay)
            if url in self.fail:
                raise LoadError(url)
            remaining = self.fail_times.get(url, 0)
            if remaining:
                self.fail_times[url] = remaining - 1
                raise LoadError(url, f"transient failure: {url}")
            return self.outcome
        finally:
            self.active -= 1


async def settle(turns: int = 10) -> None:
    """Let scheduled callbacks and tasks run."""
    for _ in range(turns):
        await asyncio.sleep(0)


@pytest.fixture
def adapter() -> RecordingAdapter:
    """Fresh RecordingAdapter."""
    return RecordingAdapter()


@pytest.fixture
def make_scheduler(adapter: RecordingAdapter):
    """Factory for schedulers wired to the recording adapter under every built-in type."""

    def factory(max_concurrent: int = 6, retry_delay: float = 0.0, **config: Any) -> ResourceScheduler:
        registry = AdapterRegistry(
            {tag: adapter for tag in ("script", "style", "font", "image", "fetch")}
        )
        return ResourceScheduler(
            registry,
            SchedulerConfig(
                max_concurrent=max_concurrent,
                retry_policy=RetryPolicy(delay=retry_delay),
                **config,
            ),
        )

    return factory
