"""EntitiesAndComponents: the entity registry, component store and resources.

Usage:
    ec = EntitiesAndComponents()

    entity = ec.add_entity_with(Position(0, 0), Velocity(1, 1))
    ec.add_component_to(entity, Health(10))

    # Live reference; mutating it mutates the store
    ec.get_component(entity, Position).x += 1

    # Dict-style access
    pos = ec[entity, Position]
    ec[entity, Position] = Position(3, 4)
    del ec[entity, Health]
    if (entity, Velocity) in ec:
        ...

    # Snapshot query
    for entity in ec.get_entities_with_component(Position, Velocity):
        ...
"""

from __future__ import annotations

import copy as cp
import warnings
from dataclasses import dataclass, field
from typing import Any, TypeVar

from slotecs.core.errors import ComponentNotFoundError, EntityNotFoundError, ResourceNotFoundError
from slotecs.core.identity import Entity
from slotecs.core.query import QuerySpec, query_from_args
from slotecs.core.types import Copy
from slotecs.storage.local import LocalStorage
from slotecs.storage.protocol import MISSING, Storage

T = TypeVar("T")


class Resource:
    """Singleton data not tied to any entity.

    Resources are stored by type. `update` is called once at the start of
    every World.run(), before any system.
    """

    def update(self) -> None:
        """Per-run hook; does nothing by default."""


@dataclass(slots=True)
class Parent:
    """Hierarchy link from a child to its parent."""

    entity: Entity


@dataclass(slots=True)
class Children:
    """Hierarchy links from a parent to its children, in attach order."""

    entities: list[Entity] = field(default_factory=list)


class EntitiesAndComponents:
    """All entities, their components, and resources.

    Kept separate from World so systems can be handed full data access
    without access to the system list.

    Args:
        storage: Storage backend (LocalStorage by default).
    """

    def __init__(self, storage: Storage | None = None):
        self._storage: Storage = storage or LocalStorage()
        self._resources: dict[type, Any] = {}

    # Entities

    def add_entity(self) -> Entity:
        """Adds an empty entity and returns it."""
        return self._storage.create_entity()

    def add_entity_with(self, *components: Any) -> Entity:
        """Adds an entity carrying the given components.

        Equivalent to add_entity followed by one add_component_to per
        component. Duplicate types keep the last instance.
        """
        entity = self._storage.create_entity()
        seen_types: set[type] = set()
        for component in components:
            component_type = type(component)
            if component_type in seen_types:
                warnings.warn(
                    f"add_entity_with() received multiple components of type "
                    f"{component_type.__name__}. Only the last one will be kept.",
                    stacklevel=2,
                )
            seen_types.add(component_type)
            self._storage.set_component(entity, component)
        return entity

    def remove_entity(self, entity: Entity) -> None:
        """Removes an entity and every component it holds.

        The entity is detached from its parent and its children become roots.

        Raises:
            EntityNotFoundError: If the entity is dead or never existed.
        """
        if not self._storage.entity_exists(entity):
            raise EntityNotFoundError(entity)
        self.remove_parent(entity)
        for child in self.get_children(entity):
            self.remove_parent(child)
        self._storage.destroy_entity(entity)

    def is_alive(self, entity: Entity) -> bool:
        return self._storage.entity_exists(entity)

    def get_entities(self) -> list[Entity]:
        """All live entities in slot order. Should rarely be needed."""
        return list(self._storage.all_entities())

    def get_nth_entity(self, index: int) -> Entity | None:
        """The entity at position `index` of get_entities(), or None."""
        for position, entity in enumerate(self._storage.all_entities()):
            if position == index:
                return entity
        return None

    def get_entity_count(self) -> int:
        return self._storage.entity_count()

    # Components

    def add_component_to(self, entity: Entity, component: Any) -> None:
        """Attach a component, overwriting any existing one of the same type.

        Raises:
            EntityNotFoundError: If the entity is dead or never existed.
        """
        self._storage.set_component(entity, component)

    def remove_component_from(self, entity: Entity, component_type: type[T]) -> T:
        """Detach a component and return its last value.

        Raises:
            ComponentNotFoundError: If the entity does not hold the type or is dead.
        """
        removed = self._storage.remove_component(entity, component_type)
        if removed is MISSING:
            raise ComponentNotFoundError(entity, component_type)
        return removed

    def get_component(self, entity: Entity, component_type: type[T]) -> T:
        """Get the stored component instance.

        The returned object is the one held by the store: mutating it mutates
        the entity. Do not keep it past removal of the component or entity.

        Raises:
            ComponentNotFoundError: If absent, or the entity is dead.
        """
        component = self._storage.get_component(entity, component_type)
        if component is MISSING:
            raise ComponentNotFoundError(entity, component_type)
        return component

    def get_component_copy(self, entity: Entity, component_type: type[T]) -> Copy[T]:
        """Get a deep copy of a component, detached from the store.

        Raises:
            ComponentNotFoundError: If absent, or the entity is dead.
        """
        return cp.deepcopy(self.get_component(entity, component_type))

    def try_get_component(self, entity: Entity, component_type: type[T]) -> T | None:
        """Get the stored component instance, or None if absent."""
        component = self._storage.get_component(entity, component_type)
        return None if component is MISSING else component

    def get_components(self, entity: Entity, *component_types: type) -> tuple[Any, ...]:
        """Get several components of one entity at once.

        Fails as a whole if any requested type is missing.

        Raises:
            ComponentNotFoundError: Naming the first missing type.
        """
        return tuple(self.get_component(entity, t) for t in component_types)

    def try_get_components(self, entity: Entity, *component_types: type) -> tuple[Any, ...]:
        """Like get_components, with None in place of each missing component."""
        return tuple(self.try_get_component(entity, t) for t in component_types)

    def has_component(self, entity: Entity, component_type: type) -> bool:
        return self._storage.has_component(entity, component_type)

    def get_component_types(self, entity: Entity) -> frozenset[type]:
        return self._storage.get_component_types(entity)

    # Queries

    def get_entities_with_component(self, *query: QuerySpec) -> list[Entity]:
        """Every live entity holding all of the given component types.

        Accepts component types as positional arguments or a single Query.
        The result is a snapshot: adding or removing components afterwards
        does not change it, so it is safe to mutate while iterating. Re-check
        membership if earlier iterations may have changed it.
        """
        return self._storage.query(query_from_args(query))

    def get_entity_count_with_component(self, *query: QuerySpec) -> int:
        return self._storage.count(query_from_args(query))

    def get_entity_with_component(self, index: int, *query: QuerySpec) -> Entity | None:
        """The `index`-th entity matching the query, or None. O(n)."""
        matches = self._storage.query(query_from_args(query))
        if 0 <= index < len(matches):
            return matches[index]
        return None

    # Resources

    def add_resource(self, resource: Any) -> None:
        """Store a resource, replacing any existing one of the same type."""
        self._resources[type(resource)] = resource

    def get_resource(self, resource_type: type[T]) -> T | None:
        return self._resources.get(resource_type)

    def get_resource_required(self, resource_type: type[T]) -> T:
        """Get a resource that must exist.

        Raises:
            ResourceNotFoundError: If no resource of that type was added.
        """
        try:
            return self._resources[resource_type]
        except KeyError:
            raise ResourceNotFoundError(resource_type) from None

    def remove_resource(self, resource_type: type) -> bool:
        """Remove a resource. Returns True if it existed."""
        if resource_type not in self._resources:
            return False
        del self._resources[resource_type]
        return True

    def update_resources(self) -> None:
        """Call update() on every Resource, in insertion order."""
        for resource in self._resources.values():
            if isinstance(resource, Resource):
                resource.update()

    # Hierarchy

    def get_parent(self, entity: Entity) -> Entity | None:
        """Parent of an entity, or None for a root entity."""
        parent = self._storage.get_component(entity, Parent)
        return None if parent is MISSING else parent.entity

    def get_children(self, entity: Entity) -> list[Entity]:
        """Copy of the entity's children list."""
        children = self._storage.get_component(entity, Children)
        return [] if children is MISSING else list(children.entities)

    def set_parent(self, child: Entity, parent: Entity) -> bool:
        """Make `parent` the parent of `child`, moving it from any old parent.

        Returns:
            False if the link would be self-referential or create a cycle,
            True once the relationship is in place.

        Raises:
            EntityNotFoundError: If either entity is dead.
        """
        for entity in (child, parent):
            if not self._storage.entity_exists(entity):
                raise EntityNotFoundError(entity)
        if child == parent:
            return False
        if self.get_parent(child) == parent:
            return True

        ancestor = self.get_parent(parent)
        while ancestor is not None:
            if ancestor == child:
                return False
            ancestor = self.get_parent(ancestor)

        self.remove_parent(child)
        children = self._storage.get_component(parent, Children)
        if children is MISSING:
            self._storage.set_component(parent, Children([child]))
        else:
            children.entities.append(child)
        self._storage.set_component(child, Parent(parent))
        return True

    def remove_parent(self, child: Entity) -> None:
        """Detach an entity from its parent, making it a root. No-op for roots."""
        parent = self._storage.remove_component(child, Parent)
        if parent is MISSING:
            return
        children = self._storage.get_component(parent.entity, Children)
        if children is MISSING:
            return
        children.entities = [e for e in children.entities if e != child]
        if not children.entities:
            self._storage.remove_component(parent.entity, Children)

    def get_entities_with_children(self) -> list[Entity]:
        return self.get_entities_with_component(Children)

    def get_entities_with_parent(self) -> list[Entity]:
        return self.get_entities_with_component(Parent)

    def format_tree(self) -> str:
        """Render entities and their component type names, children indented."""
        lines = ["Entities and Components Tree:"]
        roots = [e for e in sorted(self.get_entities()) if self.get_parent(e) is None]
        # Explicit stack: hierarchies may be deeper than the recursion limit
        pending = [(root, 0) for root in reversed(roots)]
        while pending:
            entity, depth = pending.pop()
            indent = "    " * depth
            lines.append(f"{indent}Entity: {entity!r}")
            names = sorted(
                t.__name__ for t in self.get_component_types(entity) if t not in (Parent, Children)
            )
            lines.extend(f"{indent}    {name}" for name in names)
            pending.extend((child, depth + 1) for child in reversed(self.get_children(entity)))
        return "\n".join(lines)

    def print_tree(self) -> None:
        """Debug helper: print format_tree() to stdout."""
        print(self.format_tree())

    # Dict-style access

    def __getitem__(self, key: tuple[Entity, type[T]]) -> T:
        """ec[entity, Position] -> Position, raising ComponentNotFoundError."""
        entity, component_type = key
        return self.get_component(entity, component_type)

    def __setitem__(self, key: tuple[Entity, type], value: Any) -> None:
        """ec[entity, Position] = Position(...)."""
        entity, component_type = key
        if type(value) is not component_type:
            raise TypeError(
                f"Cannot store {type(value).__name__} under {component_type.__name__}"
            )
        self.add_component_to(entity, value)

    def __delitem__(self, key: tuple[Entity, type]) -> None:
        """del ec[entity, Position]."""
        entity, component_type = key
        self.remove_component_from(entity, component_type)

    def __contains__(self, key: tuple[Entity, type]) -> bool:
        """(entity, Position) in ec."""
        entity, component_type = key
        return self.has_component(entity, component_type)
