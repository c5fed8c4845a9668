"""Per-url load state and in-flight deduplication."""

from __future__ import annotations

import asyncio

from prioload.core.models import LoadOutcome, LoadState


class LoadRegistry:
    """Tracks the lifecycle of every url the scheduler has seen.

    Owned and mutated by the scheduler only. Holds:
    - the state of each url
    - the loaded set (sticky) and failed set (advisory)
    - one shared future per in-flight url, from enqueue until settlement
    """

    def __init__(self) -> None:
        self._states: dict[str, LoadState] = {}
        self._loaded: set[str] = set()
        self._failed: set[str] = set()
        self._in_flight: dict[str, asyncio.Future[LoadOutcome]] = {}

    # Queries

    def state(self, url: str) -> LoadState:
        return self._states.get(url, LoadState.UNKNOWN)

    def is_loaded(self, url: str) -> bool:
        return url in self._loaded

    def has_failed(self, url: str) -> bool:
        return url in self._failed

    def in_flight(self, url: str) -> asyncio.Future[LoadOutcome] | None:
        return self._in_flight.get(url)

    def pending(self) -> list[asyncio.Future[LoadOutcome]]:
        """Futures of every queued or loading url."""
        return list(self._in_flight.values())

    @property
    def loaded_count(self) -> int:
        return len(self._loaded)

    @property
    def failed_count(self) -> int:
        return len(self._failed)

    @property
    def loading_count(self) -> int:
        return sum(1 for state in self._states.values() if state is LoadState.LOADING)

    # Transitions

    def mark_queued(self, url: str, future: asyncio.Future[LoadOutcome]) -> None:
        """Register a new in-flight entry. The url must not already be in flight."""
        if url in self._in_flight:
            raise RuntimeError(f"{url} is already in flight")
        self._in_flight[url] = future
        self._states[url] = LoadState.QUEUED

    def mark_loading(self, url: str) -> None:
        self._states[url] = LoadState.LOADING

    def mark_loaded(self, url: str) -> asyncio.Future[LoadOutcome] | None:
        """Record success. Returns the in-flight future to resolve."""
        self._loaded.add(url)
        self._failed.discard(url)
        self._states[url] = LoadState.LOADED
        return self._in_flight.pop(url, None)

    def mark_failed(self, url: str) -> asyncio.Future[LoadOutcome] | None:
        """Record retry exhaustion. Returns the in-flight future to reject."""
        self._failed.add(url)
        self._states[url] = LoadState.FAILED
        return self._in_flight.pop(url, None)

    def mark_unavailable(self, url: str) -> asyncio.Future[LoadOutcome] | None:
        """Forget a url whose adapter lacked the capability. Returns its future."""
        self._states.pop(url, None)
        return self._in_flight.pop(url, None)
