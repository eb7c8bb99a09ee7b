"""Storage protocol for swappable backends.

The storage layer abstracts entity allocation and component tables so that
EntitiesAndComponents can run over any backend.

Usage:
    storage = LocalStorage()
    entities_and_components = EntitiesAndComponents(storage=storage)
"""

from __future__ import annotations

import enum
from collections.abc import Iterator
from typing import Any, Final, Literal, Protocol, TypeAlias, TypeVar

from slotecs.core.identity import Entity
from slotecs.core.query import Query

T = TypeVar("T")
V = TypeVar("V")


class _Missing(enum.Enum):
    MISSING = enum.auto()

    def __repr__(self) -> str:
        return "MISSING"


MISSING: Final = _Missing.MISSING
"""Returned by storage lookups for an absent component. `None` is a valid component."""

Maybe: TypeAlias = V | Literal[_Missing.MISSING]


class Storage(Protocol):
    """Abstract storage interface. Implementations handle actual data."""

    def create_entity(self) -> Entity:
        """Allocate new entity."""
        ...

    def destroy_entity(self, entity: Entity) -> None:
        """Remove entity and all its components. Raises EntityNotFoundError if dead."""
        ...

    def entity_exists(self, entity: Entity) -> bool:
        """Check if entity is alive."""
        ...

    def all_entities(self) -> Iterator[Entity]:
        """Iterate all living entities."""
        ...

    def entity_count(self) -> int:
        """Number of living entities."""
        ...

    def get_component(self, entity: Entity, component_type: type[T]) -> Maybe[T]:
        """Get component from entity, or MISSING if absent or the entity is dead."""
        ...

    def set_component(self, entity: Entity, component: Any) -> None:
        """Set/update component on entity. Raises EntityNotFoundError if dead."""
        ...

    def remove_component(self, entity: Entity, component_type: type[T]) -> Maybe[T]:
        """Remove component from entity. Returns the removed value, or MISSING
        without touching the store if there was nothing to remove."""
        ...

    def has_component(self, entity: Entity, component_type: type) -> bool:
        """Check if entity has component."""
        ...

    def get_component_types(self, entity: Entity) -> frozenset[type]:
        """Get all component types on entity."""
        ...

    def query(self, query: Query) -> list[Entity]:
        """Materialized list of live entities matching the query."""
        ...

    def count(self, query: Query) -> int:
        """Number of live entities matching the query."""
        ...
