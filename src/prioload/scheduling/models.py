"""Scheduling models and configuration.

Types for scheduler configuration, stats snapshots and network-adaptive
concurrency.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from prioload.config import LoaderSettings


@dataclass(frozen=True, slots=True)
class RetryPolicy:
    """Configuration for retrying failed loads.

    The number of attempts comes from each descriptor's max_retries; the
    policy only fixes the pause between attempts.
    """

    delay: float = 1.0
    """Fixed delay in seconds between attempts. No backoff growth."""


@dataclass
class SchedulerConfig:
    """Configuration for scheduler behavior.

    Passed to the scheduler at construction, usually built from LoaderSettings.
    """

    max_concurrent: int = 6
    """Admission cap. Can be changed at runtime via set_concurrency_limit()."""

    default_timeout: float = 3.0
    """Per-attempt deadline in seconds for descriptors without a timeout."""

    batch_timeout: float = 5.0
    """Per-attempt deadline in seconds applied by preload_batch when unset."""

    retry_policy: RetryPolicy = field(default_factory=RetryPolicy)
    """Delay policy between attempts."""

    def __post_init__(self) -> None:
        if self.max_concurrent < 1:
            raise ValueError(f"max_concurrent must be >= 1, got {self.max_concurrent}")
        if self.default_timeout <= 0 or self.batch_timeout <= 0:
            raise ValueError("default_timeout and batch_timeout must be positive")

    @classmethod
    def from_settings(cls, settings: LoaderSettings) -> SchedulerConfig:
        """Build a config from environment-backed settings."""
        return cls(
            max_concurrent=settings.max_concurrent_requests,
            default_timeout=settings.critical_resource_timeout,
            batch_timeout=settings.preload_timeout,
            retry_policy=RetryPolicy(delay=settings.retry_delay),
        )


@dataclass(frozen=True, slots=True)
class SchedulerStats:
    """Point-in-time snapshot of scheduler counters.

    Equality is field-by-field, which is what change suppression compares.
    """

    loaded: int = 0
    failed: int = 0
    queued: int = 0
    active: int = 0
    max_concurrent: int = 0


StatsListener = Callable[[SchedulerStats], None]
"""Signature: (snapshot) -> None"""

Unsubscribe = Callable[[], None]
"""Signature: () -> None. Removes the listener it was returned for."""


NETWORK_CONCURRENCY: dict[str, int] = {
    "slow-2g": 1,
    "2g": 1,
    "3g": 2,
}
"""Admission cap per effective connection type. Unlisted types use the default cap."""


def concurrency_for_network(effective_type: str | None, default: int) -> int:
    """Admission cap for a host-reported effective connection type.

    A missing signal is treated as a fast connection. Never below 1.
    """
    cap = NETWORK_CONCURRENCY.get((effective_type or "4g").lower(), default)
    return max(1, cap)
