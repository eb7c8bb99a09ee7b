"""System scheduling and execution."""

from slotecs.scheduling.models import DEFAULT_CHUNK_SIZE, SchedulerConfig, partition
from slotecs.scheduling.scheduler import SystemScheduler

__all__ = [
    # Scheduler
    "SystemScheduler",
    # Models
    "SchedulerConfig",
    "DEFAULT_CHUNK_SIZE",
    "partition",
]
