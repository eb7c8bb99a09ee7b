"""Scheduling models and configuration."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, TypeVar

if TYPE_CHECKING:
    from slotecs.config import EngineSettings

T = TypeVar("T")

DEFAULT_CHUNK_SIZE = 5
"""Entities handed to one worker task at a time during parallel stepping."""


@dataclass(frozen=True, slots=True)
class SchedulerConfig:
    """Configuration for scheduler behavior.

    Passed to the scheduler at construction or via World.
    """

    max_workers: int = 1
    """Worker threads for per-entity steps inside run(). 1 = sequential (default)."""

    chunk_size: int = DEFAULT_CHUNK_SIZE
    """Entities per worker task when stepping in parallel."""

    def __post_init__(self) -> None:
        if self.max_workers < 1:
            raise ValueError(f"max_workers must be >= 1, got {self.max_workers}")
        if self.chunk_size < 1:
            raise ValueError(f"chunk_size must be >= 1, got {self.chunk_size}")

    @property
    def parallel(self) -> bool:
        return self.max_workers > 1

    @classmethod
    def from_settings(cls, settings: EngineSettings | None = None) -> SchedulerConfig:
        """Build a config from EngineSettings (read from the environment by default)."""
        from slotecs.config import EngineSettings

        settings = settings or EngineSettings()
        return cls(max_workers=settings.max_workers, chunk_size=settings.chunk_size)


def partition(items: Sequence[T], chunk_size: int) -> list[list[T]]:
    """Split items into consecutive, disjoint chunks of at most chunk_size.

    Every item lands in exactly one chunk, which is what lets each chunk be
    handed to a different worker.

    Raises:
        ValueError: If chunk_size is not positive.
    """
    if chunk_size < 1:
        raise ValueError(f"chunk_size must be >= 1, got {chunk_size}")
    return [list(items[i : i + chunk_size]) for i in range(0, len(items), chunk_size)]
