"""Tests for change-suppressed stats publication.

Why these tests exist:
- Subscribers must never observe "no data"
- Unchanged snapshots must not be re-broadcast
- A failing subscriber must not break the scheduler
"""

import logging

import pytest

from prioload import Priority, ResourceDescriptor, SchedulerStats
from prioload.scheduling import StatsPublisher


def test_subscriber_receives_snapshot_on_registration() -> None:
    publisher = StatsPublisher(SchedulerStats(max_concurrent=6))
    received: list[SchedulerStats] = []

    publisher.subscribe(received.append)

    assert received == [SchedulerStats(max_concurrent=6)]


def test_identical_snapshot_is_suppressed() -> None:
    publisher = StatsPublisher(SchedulerStats())
    received: list[SchedulerStats] = []
    publisher.subscribe(received.append)

    assert publisher.publish(SchedulerStats(queued=1)) is True
    assert publisher.publish(SchedulerStats(queued=1)) is False
    assert publisher.publish(SchedulerStats(queued=0, active=1)) is True

    assert received == [
        SchedulerStats(),
        SchedulerStats(queued=1),
        SchedulerStats(active=1),
    ]


def test_unsubscribe_stops_delivery() -> None:
    publisher = StatsPublisher(SchedulerStats())
    received: list[SchedulerStats] = []
    unsubscribe = publisher.subscribe(received.append)

    unsubscribe()
    unsubscribe()  # idempotent
    publisher.publish(SchedulerStats(loaded=1))

    assert received == [SchedulerStats()]
    assert publisher.subscriber_count == 0


def test_failing_subscriber_is_logged_and_isolated(caplog: pytest.LogCaptureFixture) -> None:
    publisher = StatsPublisher(SchedulerStats())
    received: list[SchedulerStats] = []

    def broken(_: SchedulerStats) -> None:
        raise RuntimeError("listener bug")

    with caplog.at_level(logging.ERROR):
        publisher.subscribe(broken)
        publisher.subscribe(received.append)
        publisher.publish(SchedulerStats(failed=1))

    assert received == [SchedulerStats(), SchedulerStats(failed=1)]
    assert "during registration" in caplog.text
    assert "stats subscriber failed" in caplog.text


@pytest.mark.asyncio
async def test_two_subscriptions_without_change_get_one_broadcast_each(make_scheduler) -> None:
    """CRITICAL: back-to-back subscriptions yield exactly the initial snapshot each."""
    scheduler = make_scheduler(max_concurrent=2)
    first: list[SchedulerStats] = []
    second: list[SchedulerStats] = []

    scheduler.on_stats_change(first.append)
    scheduler.on_stats_change(second.append)

    assert first == [SchedulerStats(max_concurrent=2)]
    assert second == [SchedulerStats(max_concurrent=2)]


@pytest.mark.asyncio
async def test_scheduler_publishes_lifecycle_transitions(make_scheduler, adapter) -> None:
    scheduler = make_scheduler(max_concurrent=1)
    received: list[SchedulerStats] = []
    scheduler.on_stats_change(received.append)

    await scheduler.load(ResourceDescriptor("/a.js", Priority.HIGH, "script"))

    assert received[0] == SchedulerStats(max_concurrent=1)
    assert SchedulerStats(queued=1, max_concurrent=1) in received
    assert SchedulerStats(active=1, max_concurrent=1) in received
    assert received[-1] == SchedulerStats(loaded=1, max_concurrent=1)
    # Consecutive broadcasts always differ
    assert all(a != b for a, b in zip(received, received[1:]))
