"""Delayed task scheduling."""

from midilink.scheduler.pool import (
    NUM_PLAYER_THREADS,
    ScheduledTask,
    SchedulerPool,
    after,
    default_scheduler,
)

__all__ = [
    "NUM_PLAYER_THREADS",
    "ScheduledTask",
    "SchedulerPool",
    "after",
    "default_scheduler",
]
