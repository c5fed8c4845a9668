"""Resource scheduling: priority queue, admission, supervision and stats."""

from prioload.scheduling.models import (
    NETWORK_CONCURRENCY,
    RetryPolicy,
    SchedulerConfig,
    SchedulerStats,
    StatsListener,
    Unsubscribe,
    concurrency_for_network,
)
from prioload.scheduling.registry import LoadRegistry
from prioload.scheduling.scheduler import ResourceScheduler, create_scheduler
from prioload.scheduling.stats import StatsPublisher
from prioload.scheduling.supervisor import LoadSupervisor

__all__ = [
    # Scheduler
    "ResourceScheduler",
    "create_scheduler",
    # Components
    "LoadSupervisor",
    "LoadRegistry",
    "StatsPublisher",
    # Models
    "RetryPolicy",
    "SchedulerConfig",
    "SchedulerStats",
    "StatsListener",
    "Unsubscribe",
    # Network policy
    "NETWORK_CONCURRENCY",
    "concurrency_for_network",
]
