"""Error taxonomy for entity and component lookups."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from slotecs.core.identity import Entity


class EcsError(Exception):
    """Base class for all slotecs errors."""


class EntityNotFoundError(EcsError, LookupError):
    """Raised when an operation references a dead or unknown entity."""

    def __init__(self, entity: Entity) -> None:
        super().__init__(f"Entity {entity!r} does not exist or was removed")
        self.entity = entity


class ComponentNotFoundError(EcsError, LookupError):
    """Raised when an entity does not currently hold a required component."""

    def __init__(self, entity: Entity, component_type: type) -> None:
        super().__init__(
            f"Component of type {component_type.__name__} does not exist on entity {entity!r}"
        )
        self.entity = entity
        self.component_type = component_type


class ResourceNotFoundError(EcsError, LookupError):
    """Raised when a required resource has not been added."""

    def __init__(self, resource_type: type) -> None:
        super().__init__(f"Resource of type {resource_type.__name__} does not exist")
        self.resource_type = resource_type
