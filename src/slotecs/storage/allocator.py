"""Entity allocation service.

EntityAllocator is a stateful service that manages entity ID lifecycle.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator

from slotecs.core.errors import EntityNotFoundError
from slotecs.core.identity import Entity

logger = logging.getLogger(__name__)

MAX_GENERATION = 2**32 - 1
"""Highest generation a slot may carry. Slots that would exceed it are retired."""


class EntityAllocator:
    """Allocates entity IDs with generation tracking for recycling.

    Slots are indexed by position in two parallel lists: the current
    generation of each slot and whether it is alive. Freed slots go on a free
    list with their generation already incremented, so every stale handle
    fails the generation check.

    Args:
        max_generation: Generation ceiling before a slot is retired.
    """

    def __init__(self, max_generation: int = MAX_GENERATION):
        self._max_generation = max_generation
        self._generations: list[int] = []
        self._alive: list[bool] = []
        self._free_list: list[int] = []
        self._live_count = 0
        self._retired_count = 0

    def allocate(self) -> Entity:
        """Allocate new entity ID, reusing recycled slots when available.

        Returns:
            Newly allocated Entity.
        """
        if self._free_list:
            index = self._free_list.pop()
            self._alive[index] = True
        else:
            index = len(self._generations)
            self._generations.append(0)
            self._alive.append(True)
        self._live_count += 1
        return Entity(index=index, generation=self._generations[index])

    def deallocate(self, entity: Entity) -> None:
        """Mark an entity dead and return its slot for reuse.

        The slot's generation is incremented. If that would pass the
        generation ceiling the slot is retired instead of recycled.

        Args:
            entity: Entity to deallocate.

        Raises:
            EntityNotFoundError: If the entity is not alive.
        """
        if not self.is_alive(entity):
            raise EntityNotFoundError(entity)

        index = entity.index
        self._alive[index] = False
        self._live_count -= 1

        if entity.generation >= self._max_generation:
            self._retired_count += 1
            logger.warning(
                "Entity slot %d reached generation %d and is retired", index, entity.generation
            )
            return

        self._generations[index] = entity.generation + 1
        self._free_list.append(index)

    def is_alive(self, entity: Entity) -> bool:
        """Check if entity ID is still valid (not recycled).

        Args:
            entity: Entity ID to check.

        Returns:
            True if the slot is alive and its generation matches.
        """
        index = entity.index
        if index < 0 or index >= len(self._generations):
            return False
        return self._alive[index] and self._generations[index] == entity.generation

    def entity_at(self, index: int) -> Entity:
        """Live entity currently occupying a slot.

        Raises:
            LookupError: If the slot is out of range or dead.
        """
        if index < 0 or index >= len(self._generations) or not self._alive[index]:
            raise LookupError(f"No live entity at index {index}")
        return Entity(index=index, generation=self._generations[index])

    def live_entities(self) -> Iterator[Entity]:
        """Iterate live entities in slot order."""
        for index, alive in enumerate(self._alive):
            if alive:
                yield Entity(index=index, generation=self._generations[index])

    @property
    def retired_count(self) -> int:
        """Number of slots permanently taken out of circulation."""
        return self._retired_count

    def __len__(self) -> int:
        return self._live_count
