"""World: entities, components and the systems that update them.

Usage:
    world = World()

    # Populate through the aggregate
    ec = world.entities_and_components
    entity = ec.add_entity_with(Position(0, 0), Velocity(1, 1))

    # Register and run systems
    world.add_system(Movement())
    world.run()

    # Explicit parallel stepping of one system
    handle = world.add_system(ParallelMovement())
    world.step_parallel(handle, max_workers=4)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from slotecs.core.identity import Entity
from slotecs.core.system import System, SystemHandle
from slotecs.scheduling.models import SchedulerConfig
from slotecs.scheduling.scheduler import SystemScheduler
from slotecs.storage.protocol import Storage
from slotecs.world.entities import EntitiesAndComponents

if TYPE_CHECKING:
    from slotecs.config import EngineSettings


class World:
    """Central aggregate: one EntitiesAndComponents and one SystemScheduler.

    Systems interact with `entities_and_components` (or the restricted views
    derived from it), never with World directly.

    Args:
        config: Scheduler configuration.
        storage: Storage backend for entities and components.
    """

    def __init__(
        self,
        config: SchedulerConfig | None = None,
        storage: Storage | None = None,
    ):
        self.entities_and_components = EntitiesAndComponents(storage=storage)
        self._scheduler = SystemScheduler(config=config)

    @classmethod
    def from_settings(
        cls, settings: EngineSettings | None = None, storage: Storage | None = None
    ) -> World:
        """Create a world configured from EngineSettings (environment by default)."""
        return cls(config=SchedulerConfig.from_settings(settings), storage=storage)

    @property
    def scheduler(self) -> SystemScheduler:
        return self._scheduler

    def add_system(self, system: System) -> SystemHandle:
        """Register a system. Registration order is invocation order."""
        return self._scheduler.add_system(system)

    def remove_system(self, handle: SystemHandle) -> bool:
        return self._scheduler.remove_system(handle)

    def remove_all_systems_of_type(self, system_type: type[System]) -> int:
        return self._scheduler.remove_all_systems_of_type(system_type)

    def remove_all_systems(self) -> None:
        self._scheduler.remove_all_systems()

    def run(self) -> None:
        """Update every resource, then run every system once in order."""
        self.entities_and_components.update_resources()
        self._scheduler.run(self.entities_and_components)

    def pre_step(self, handle: SystemHandle) -> list[Entity]:
        """Run a system's prestep and return the materialized matching entities."""
        return self._scheduler.pre_step(handle, self.entities_and_components)

    def single_entity_step(self, handle: SystemHandle, entity: Entity) -> None:
        """Step one entity through a system. Callers must not share entities across threads."""
        self._scheduler.single_entity_step(handle, entity, self.entities_and_components)

    def step_parallel(self, handle: SystemHandle, max_workers: int | None = None) -> int:
        """pre_step plus a thread-pool scatter of single_entity_step."""
        return self._scheduler.step_parallel(
            handle, self.entities_and_components, max_workers=max_workers
        )
