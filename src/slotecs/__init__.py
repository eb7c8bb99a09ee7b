"""slotecs: a small Entity Component System with generational entity IDs.

Usage:
    from dataclasses import dataclass
    from slotecs import System, World

    @dataclass
    class Position:
        x: float
        y: float

    @dataclass
    class Velocity:
        x: float
        y: float

    class Movement(System):
        query = (Position, Velocity)

        def single_entity_step(self, entity):
            pos, vel = entity.get_components(Position, Velocity)
            pos.x += vel.x
            pos.y += vel.y

    world = World()
    world.entities_and_components.add_entity_with(Position(0, 0), Velocity(1, 1))
    world.add_system(Movement())
    world.run()
"""

__version__ = "0.1.0"

# Core primitives
from slotecs.core import (
    ComponentNotFoundError,
    Copy,
    EcsError,
    Entity,
    EntityNotFoundError,
    Query,
    ResourceNotFoundError,
    System,
    SystemHandle,
    system,
)

# Storage
from slotecs.storage import (
    EntityAllocator,
    LocalStorage,
    Storage,
)

# World and access (before scheduling: the scheduler imports the access views)
from slotecs.world import (
    EntitiesAndComponents,
    ReadOnlyAccess,
    Resource,
    SingleMutEntity,
    World,
)

# Scheduling
from slotecs.scheduling import (
    SchedulerConfig,
    SystemScheduler,
    partition,
)

__all__ = [
    # Version
    "__version__",
    # Core
    "Copy",
    "Entity",
    "Query",
    "System",
    "SystemHandle",
    "system",
    # Errors
    "EcsError",
    "EntityNotFoundError",
    "ComponentNotFoundError",
    "ResourceNotFoundError",
    # Storage
    "Storage",
    "LocalStorage",
    "EntityAllocator",
    # World
    "World",
    "EntitiesAndComponents",
    "Resource",
    "ReadOnlyAccess",
    "SingleMutEntity",
    # Scheduling
    "SystemScheduler",
    "SchedulerConfig",
    "partition",
]
