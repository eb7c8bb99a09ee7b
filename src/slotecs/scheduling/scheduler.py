"""System scheduler: sequential passes and explicit parallel per-entity stepping.

Usage:
    scheduler = SystemScheduler()
    handle = scheduler.add_system(Movement())

    # One sequential pass over every system
    scheduler.run(entities_and_components)

    # Two-phase parallel stepping of one system
    entities = scheduler.pre_step(handle, entities_and_components)
    with ThreadPoolExecutor() as pool:
        for chunk in partition(entities, 64):
            pool.submit(step_chunk, chunk)  # calls scheduler.single_entity_step

    # Or let the scheduler do the scatter/gather
    scheduler.step_parallel(handle, entities_and_components, max_workers=4)
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Sequence
from concurrent.futures import Future, ThreadPoolExecutor
from typing import TYPE_CHECKING

from slotecs.core.identity import Entity
from slotecs.core.system import System, SystemHandle
from slotecs.scheduling.models import SchedulerConfig, partition
from slotecs.world.access import ReadOnlyAccess, SingleMutEntity, bind_entity

if TYPE_CHECKING:
    from slotecs.world.entities import EntitiesAndComponents

logger = logging.getLogger(__name__)


class SystemScheduler:
    """Ordered collection of systems and the passes that run them.

    Registration order is invocation order. Systems are never run
    concurrently with each other; only per-entity steps of a single system
    may be spread over worker threads, each worker owning a disjoint chunk
    of the matched entities.

    Exceptions raised by a system are not caught: they abort the current
    pass and propagate to the caller.

    Args:
        config: Scheduler configuration (worker count, chunk size).
    """

    def __init__(self, config: SchedulerConfig | None = None) -> None:
        self._config = config or SchedulerConfig()
        self._systems: dict[int, System] = {}
        self._next_id = 0
        self._structure_lock = threading.Lock()

    @property
    def config(self) -> SchedulerConfig:
        return self._config

    # Registration

    def add_system(self, system: System) -> SystemHandle:
        """Register a system to run after every system registered before it.

        Raises:
            TypeError: If `system` is not a System instance.
        """
        if not isinstance(system, System):
            raise TypeError(
                f"Expected a System instance, got {type(system).__name__}. "
                f"Did you forget to instantiate it or to use @system()?"
            )
        handle = SystemHandle(system_id=self._next_id)
        self._next_id += 1
        self._systems[handle.system_id] = system
        logger.debug("Registered system %s as %d", system.name, handle.system_id)
        return handle

    def remove_system(self, handle: SystemHandle) -> bool:
        """Unregister a system. Returns True if it was registered."""
        system = self._systems.pop(handle.system_id, None)
        if system is None:
            return False
        logger.debug("Removed system %s (%d)", system.name, handle.system_id)
        return True

    def remove_all_systems_of_type(self, system_type: type[System]) -> int:
        """Unregister every system that is an instance of system_type. O(n).

        Returns:
            Number of systems removed.
        """
        doomed = [key for key, s in self._systems.items() if isinstance(s, system_type)]
        for key in doomed:
            del self._systems[key]
        return len(doomed)

    def remove_all_systems(self) -> None:
        self._systems.clear()

    def get_system(self, handle: SystemHandle) -> System:
        """Look up a registered system.

        Raises:
            LookupError: If the handle is not registered.
        """
        try:
            return self._systems[handle.system_id]
        except KeyError:
            raise LookupError(f"No system registered for {handle}") from None

    def systems(self) -> list[System]:
        """Registered systems in invocation order."""
        return list(self._systems.values())

    def __len__(self) -> int:
        return len(self._systems)

    # Sequential pass

    def run(self, entities_and_components: EntitiesAndComponents) -> None:
        """Run every registered system once.

        Three phases, each in registration order:
        1. prestep with a read-only view
        2. single_entity_step over a snapshot of each system's matching entities
        3. run with full access
        """
        systems = self.systems()
        if not systems:
            return

        view = ReadOnlyAccess(entities_and_components)
        for system in systems:
            if system.implements_prestep():
                system.prestep(view)

        for system in systems:
            if system.implements_single_entity_step():
                entities = entities_and_components.get_entities_with_component(
                    system.resolved_query()
                )
                self._step_entities(
                    system, entities, entities_and_components, self._config.max_workers
                )

        for system in systems:
            if system.implements_run():
                system.run(entities_and_components)

    # Two-phase parallel path

    def pre_step(
        self, handle: SystemHandle, entities_and_components: EntitiesAndComponents
    ) -> list[Entity]:
        """Run a system's prestep and return the entities its query matches.

        The returned list is a snapshot materialized before any per-entity
        mutation, so it can be partitioned across workers safely.
        """
        system = self.get_system(handle)
        if system.implements_prestep():
            system.prestep(ReadOnlyAccess(entities_and_components))
        return entities_and_components.get_entities_with_component(system.resolved_query())

    def single_entity_step(
        self,
        handle: SystemHandle,
        entity: Entity,
        entities_and_components: EntitiesAndComponents,
    ) -> None:
        """Run a system's single_entity_step for one entity.

        Safe to call from several threads at once as long as no two calls
        address the same entity.

        Raises:
            EntityNotFoundError: If the entity is no longer alive.
        """
        system = self.get_system(handle)
        system.single_entity_step(
            bind_entity(entities_and_components, entity, self._structure_lock)
        )

    def step_parallel(
        self,
        handle: SystemHandle,
        entities_and_components: EntitiesAndComponents,
        max_workers: int | None = None,
    ) -> int:
        """pre_step, then scatter single_entity_step over a thread pool.

        Blocks until every chunk has finished. If any worker raised, the
        first exception (in chunk order) is re-raised after all chunks end.

        Args:
            handle: System to step.
            entities_and_components: Aggregate to step over.
            max_workers: Thread count; defaults to the scheduler config, and
                to the executor's own default if that is sequential.

        Returns:
            Number of entities in the pre_step snapshot.
        """
        system = self.get_system(handle)
        entities = self.pre_step(handle, entities_and_components)
        if max_workers is None and self._config.parallel:
            max_workers = self._config.max_workers
        self._dispatch(system, entities, entities_and_components, max_workers)
        return len(entities)

    def _step_entities(
        self,
        system: System,
        entities: Sequence[Entity],
        entities_and_components: EntitiesAndComponents,
        max_workers: int,
    ) -> None:
        # Fast path: single worker, or not enough work to split
        if max_workers <= 1 or len(entities) <= self._config.chunk_size:
            self._step_chunk(system, entities, entities_and_components)
            return
        self._dispatch(system, entities, entities_and_components, max_workers)

    def _dispatch(
        self,
        system: System,
        entities: Sequence[Entity],
        entities_and_components: EntitiesAndComponents,
        max_workers: int | None,
    ) -> None:
        chunks = partition(entities, self._config.chunk_size)
        if not chunks:
            return
        logger.debug(
            "Stepping %s over %d entities in %d chunks", system.name, len(entities), len(chunks)
        )
        with ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="ecs-step") as pool:
            futures: list[Future[None]] = [
                pool.submit(self._step_chunk, system, chunk, entities_and_components)
                for chunk in chunks
            ]
            for future in futures:
                future.result()

    def _step_chunk(
        self,
        system: System,
        chunk: Sequence[Entity],
        entities_and_components: EntitiesAndComponents,
    ) -> None:
        for entity in chunk:
            # Removed earlier in this pass
            if not entities_and_components.is_alive(entity):
                continue
            system.single_entity_step(
                SingleMutEntity(entities_and_components, entity, self._structure_lock)
            )
