"""World state and access management.

Architecture Note:
    world/ is a stateful service layer that coordinates entities, components,
    and systems. Unlike core/ (stateless functionalities), world/ maintains
    runtime state and orchestrates execution.
"""

from slotecs.world.access import ReadOnlyAccess, SingleMutEntity
from slotecs.world.entities import Children, EntitiesAndComponents, Parent, Resource
from slotecs.world.world import World

__all__ = [
    "EntitiesAndComponents",
    "Resource",
    "Parent",
    "Children",
    "ReadOnlyAccess",
    "SingleMutEntity",
    "World",
]
