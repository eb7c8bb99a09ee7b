"""Local in-memory storage implementation.

Table-of-tables storage: one dict per component type, keyed by entity index.
Tables are created lazily the first time a component type is stored, so any
Python class can be used as a component without registration.

Usage:
    storage = LocalStorage()
    entity = storage.create_entity()
    storage.set_component(entity, Position(0, 0))
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from typing import Any, TypeVar, cast

from slotecs.core.errors import EntityNotFoundError
from slotecs.core.identity import Entity
from slotecs.core.query import Query, match_entities
from slotecs.storage.allocator import EntityAllocator
from slotecs.storage.protocol import MISSING, Maybe

logger = logging.getLogger(__name__)

T = TypeVar("T")


class LocalStorage:
    """In-memory storage using per-type tables.

    Structure:
        _tables[component_type][entity.index] = component_instance
        _entity_types[entity.index] = {component_type, ...}

    Only live entities appear in either map, so a lookup keyed by a stale
    handle is rejected by the allocator before any table is touched.

    Args:
        allocator: Entity allocator to use (a fresh one by default).
    """

    def __init__(self, allocator: EntityAllocator | None = None):
        self._allocator = allocator or EntityAllocator()
        self._tables: dict[type, dict[int, Any]] = {}
        self._entity_types: dict[int, set[type]] = {}

    @property
    def allocator(self) -> EntityAllocator:
        return self._allocator

    def create_entity(self) -> Entity:
        """Create a new entity and return its ID."""
        entity = self._allocator.allocate()
        self._entity_types[entity.index] = set()
        return entity

    def destroy_entity(self, entity: Entity) -> None:
        """Destroy an entity and remove all its components.

        Raises:
            EntityNotFoundError: If the entity is not alive.
        """
        if not self._allocator.is_alive(entity):
            raise EntityNotFoundError(entity)
        for component_type in self._entity_types.pop(entity.index, ()):
            table = self._tables.get(component_type)
            if table is not None:
                table.pop(entity.index, None)
        self._allocator.deallocate(entity)

    def entity_exists(self, entity: Entity) -> bool:
        return self._allocator.is_alive(entity)

    def all_entities(self) -> Iterator[Entity]:
        return self._allocator.live_entities()

    def entity_count(self) -> int:
        return len(self._allocator)

    def get_component(self, entity: Entity, component_type: type[T]) -> Maybe[T]:
        """Get a component from an entity.

        Returns:
            The stored instance (not a copy), or MISSING if not present.
        """
        if not self._allocator.is_alive(entity):
            return MISSING
        table = self._tables.get(component_type)
        if table is None:
            return MISSING
        return cast("Maybe[T]", table.get(entity.index, MISSING))

    def set_component(self, entity: Entity, component: Any) -> None:
        """Set or update a component on an entity; last write wins.

        Raises:
            EntityNotFoundError: If the entity is not alive.
        """
        if not self._allocator.is_alive(entity):
            raise EntityNotFoundError(entity)
        component_type = type(component)
        table = self._tables.get(component_type)
        if table is None:
            logger.debug("Creating component table for %s", component_type.__qualname__)
            table = self._tables.setdefault(component_type, {})
        table[entity.index] = component
        self._entity_types[entity.index].add(component_type)

    def remove_component(self, entity: Entity, component_type: type[T]) -> Maybe[T]:
        """Remove a component from an entity.

        Returns:
            The removed component, or MISSING if the entity is dead or lacked it.
        """
        if not self._allocator.is_alive(entity):
            return MISSING
        table = self._tables.get(component_type)
        if table is None or entity.index not in table:
            return MISSING
        self._entity_types[entity.index].discard(component_type)
        return cast(T, table.pop(entity.index))

    def has_component(self, entity: Entity, component_type: type) -> bool:
        if not self._allocator.is_alive(entity):
            return False
        return component_type in self._entity_types[entity.index]

    def get_component_types(self, entity: Entity) -> frozenset[type]:
        """Get all component types present on an entity (empty if dead)."""
        if not self._allocator.is_alive(entity):
            return frozenset()
        return frozenset(self._entity_types[entity.index])

    def query(self, query: Query) -> list[Entity]:
        """Find live entities matching the query.

        An empty query matches every live entity minus exclusions.

        Returns:
            Materialized snapshot; later mutations do not change it.
        """
        if query.is_empty():
            return [
                entity
                for entity in self._allocator.live_entities()
                if query.matches(self._entity_types[entity.index])
            ]
        return [self._allocator.entity_at(index) for index in match_entities(self._tables, query)]

    def count(self, query: Query) -> int:
        if query.is_empty() or len(query.required) > 1 or query.excluded:
            return len(self.query(query))
        return len(self._tables.get(query.required[0], ()))
