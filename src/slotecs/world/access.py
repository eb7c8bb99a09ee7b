"""Restricted views handed to systems during prestep and per-entity steps.

Usage:
    # prestep: read anything, write nothing
    def prestep(self, view):
        for entity, pos in view(Position):
            self.seen.append(pos.x)

    # single_entity_step: one entity only
    def single_entity_step(self, entity):
        entity[Position].x += entity[Velocity].x
        if Frozen in entity:
            del entity[Velocity]
"""

from __future__ import annotations

import threading
from collections.abc import Iterator
from contextlib import AbstractContextManager, nullcontext
from typing import TYPE_CHECKING, Any, TypeVar

from slotecs.core.errors import EntityNotFoundError
from slotecs.core.identity import Entity
from slotecs.core.query import QuerySpec, query_from_args
from slotecs.core.types import Copy

if TYPE_CHECKING:
    from slotecs.world.entities import EntitiesAndComponents

T = TypeVar("T")


class ReadOnlyAccess:
    """Read-only view over EntitiesAndComponents for prestep.

    Exposes no method that changes entity or component membership, so many
    readers can share it. Component instances returned are the stored ones;
    systems must treat them as read-only here and keep what they need in
    their own fields.

    Args:
        entities_and_components: The aggregate to read from.
    """

    __slots__ = ("_ec",)

    def __init__(self, entities_and_components: EntitiesAndComponents):
        self._ec = entities_and_components

    def is_alive(self, entity: Entity) -> bool:
        return self._ec.is_alive(entity)

    def get_entities(self) -> list[Entity]:
        return self._ec.get_entities()

    def get_nth_entity(self, index: int) -> Entity | None:
        return self._ec.get_nth_entity(index)

    def get_entity_count(self) -> int:
        return self._ec.get_entity_count()

    def get_component(self, entity: Entity, component_type: type[T]) -> T:
        return self._ec.get_component(entity, component_type)

    def get_component_copy(self, entity: Entity, component_type: type[T]) -> Copy[T]:
        return self._ec.get_component_copy(entity, component_type)

    def try_get_component(self, entity: Entity, component_type: type[T]) -> T | None:
        return self._ec.try_get_component(entity, component_type)

    def get_components(self, entity: Entity, *component_types: type) -> tuple[Any, ...]:
        return self._ec.get_components(entity, *component_types)

    def try_get_components(self, entity: Entity, *component_types: type) -> tuple[Any, ...]:
        return self._ec.try_get_components(entity, *component_types)

    def has_component(self, entity: Entity, component_type: type) -> bool:
        return self._ec.has_component(entity, component_type)

    def get_entities_with_component(self, *query: QuerySpec) -> list[Entity]:
        return self._ec.get_entities_with_component(*query)

    def get_entity_count_with_component(self, *query: QuerySpec) -> int:
        return self._ec.get_entity_count_with_component(*query)

    def get_resource(self, resource_type: type[T]) -> T | None:
        return self._ec.get_resource(resource_type)

    def get_resource_required(self, resource_type: type[T]) -> T:
        return self._ec.get_resource_required(resource_type)

    def get_parent(self, entity: Entity) -> Entity | None:
        return self._ec.get_parent(entity)

    def get_children(self, entity: Entity) -> list[Entity]:
        return self._ec.get_children(entity)

    def __getitem__(self, key: tuple[Entity, type[T]]) -> T:
        """view[entity, Position] -> Position."""
        entity, component_type = key
        return self._ec.get_component(entity, component_type)

    def __contains__(self, key: tuple[Entity, type]) -> bool:
        """(entity, Position) in view."""
        entity, component_type = key
        return self._ec.has_component(entity, component_type)

    def __call__(self, *query: QuerySpec) -> Iterator[tuple[Any, ...]]:
        """Iterate (entity, comp1, comp2, ...) for entities matching the query.

        Example: for entity, pos, vel in view(Position, Velocity): ...
        """
        required = query_from_args(query).required
        for entity in self._ec.get_entities_with_component(*query):
            yield (entity, *self._ec.get_components(entity, *required))


class SingleMutEntity:
    """Mutable view of exactly one entity, used by single_entity_step.

    Only data belonging to this entity is reachable, which is what makes it
    safe to step disjoint entities from several threads. Changes to component
    membership go through `structure_lock` when one is provided; reading and
    mutating component values does not.

    Args:
        entities_and_components: The aggregate the entity lives in.
        entity: Entity this view is bound to.
        structure_lock: Lock serializing membership changes across workers.
    """

    __slots__ = ("_ec", "_entity", "_lock")

    def __init__(
        self,
        entities_and_components: EntitiesAndComponents,
        entity: Entity,
        structure_lock: threading.Lock | None = None,
    ):
        self._ec = entities_and_components
        self._entity = entity
        self._lock = structure_lock

    def _structural(self) -> AbstractContextManager[Any]:
        return self._lock if self._lock is not None else nullcontext()

    @property
    def entity(self) -> Entity:
        """The entity this view references; useful to relate prestep data."""
        return self._entity

    def is_alive(self) -> bool:
        return self._ec.is_alive(self._entity)

    def get_component(self, component_type: type[T]) -> T:
        return self._ec.get_component(self._entity, component_type)

    def try_get_component(self, component_type: type[T]) -> T | None:
        return self._ec.try_get_component(self._entity, component_type)

    def get_components(self, *component_types: type) -> tuple[Any, ...]:
        return self._ec.get_components(self._entity, *component_types)

    def try_get_components(self, *component_types: type) -> tuple[Any, ...]:
        return self._ec.try_get_components(self._entity, *component_types)

    def has_component(self, component_type: type) -> bool:
        return self._ec.has_component(self._entity, component_type)

    def get_resource(self, resource_type: type[T]) -> T | None:
        return self._ec.get_resource(resource_type)

    def get_resource_required(self, resource_type: type[T]) -> T:
        """Read a resource; raises ResourceNotFoundError if absent."""
        return self._ec.get_resource_required(resource_type)

    def add_component(self, component: Any) -> None:
        """Attach or overwrite a component on this entity."""
        with self._structural():
            self._ec.add_component_to(self._entity, component)

    def remove_component(self, component_type: type[T]) -> T:
        """Detach a component from this entity and return it."""
        with self._structural():
            return self._ec.remove_component_from(self._entity, component_type)

    def remove_entity(self) -> None:
        """Remove this entity. The view is unusable afterwards."""
        with self._structural():
            self._ec.remove_entity(self._entity)

    def __getitem__(self, component_type: type[T]) -> T:
        """entity[Position] -> Position, raising ComponentNotFoundError."""
        return self.get_component(component_type)

    def __setitem__(self, component_type: type, value: Any) -> None:
        """entity[Position] = new_pos."""
        if type(value) is not component_type:
            raise TypeError(
                f"Cannot store {type(value).__name__} under {component_type.__name__}"
            )
        self.add_component(value)

    def __delitem__(self, component_type: type) -> None:
        """del entity[Position]."""
        self.remove_component(component_type)

    def __contains__(self, component_type: type) -> bool:
        """Position in entity."""
        return self.has_component(component_type)

    def __repr__(self) -> str:
        return f"SingleMutEntity({self._entity!r})"


def bind_entity(
    entities_and_components: EntitiesAndComponents,
    entity: Entity,
    structure_lock: threading.Lock | None = None,
) -> SingleMutEntity:
    """Create a SingleMutEntity, refusing dead entities.

    Raises:
        EntityNotFoundError: If the entity is not alive.
    """
    if not entities_and_components.is_alive(entity):
        raise EntityNotFoundError(entity)
    return SingleMutEntity(entities_and_components, entity, structure_lock)
