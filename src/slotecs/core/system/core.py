"""System decorator for plain functions.

Usage:
    # Sequential pass with full access
    @system()
    def gravity(entities_and_components):
        for entity in entities_and_components.get_entities_with_component(Velocity):
            entities_and_components.get_component(entity, Velocity).y -= 1

    # Per-entity step, eligible for parallel stepping
    @system.per_entity(query=(Position, Velocity))
    def movement(entity):
        pos, vel = entity.get_components(Position, Velocity)
        pos.x += vel.x
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from slotecs.core.query import QuerySpec, normalize_query
from slotecs.core.system.models import System

if TYPE_CHECKING:
    from slotecs.world.access import SingleMutEntity
    from slotecs.world.entities import EntitiesAndComponents


class FunctionSystem(System):
    """System whose `run` hook is a plain function."""

    def __init__(self, fn: Callable[[EntitiesAndComponents], Any]) -> None:
        self._fn = fn

    @property
    def name(self) -> str:
        return self._fn.__name__

    def run(self, entities_and_components: EntitiesAndComponents) -> None:
        self._fn(entities_and_components)


class PerEntityFunctionSystem(System):
    """System whose `single_entity_step` hook is a plain function."""

    def __init__(self, fn: Callable[[SingleMutEntity], Any], query: QuerySpec) -> None:
        self._fn = fn
        # Instance attribute shadows the class-level default
        self.query = normalize_query(query)  # type: ignore[misc]

    @property
    def name(self) -> str:
        return self._fn.__name__

    def single_entity_step(self, entity: SingleMutEntity) -> None:
        self._fn(entity)


class _SystemDecorator:
    """System decorator factory. Used as @system() or @system.per_entity(...)."""

    def __call__(self) -> Callable[[Callable[[EntitiesAndComponents], Any]], FunctionSystem]:
        """Wrap a function taking EntitiesAndComponents as a sequential system."""

        def decorator(fn: Callable[[EntitiesAndComponents], Any]) -> FunctionSystem:
            return FunctionSystem(fn)

        return decorator

    def per_entity(
        self, query: QuerySpec = ()
    ) -> Callable[[Callable[[SingleMutEntity], Any]], PerEntityFunctionSystem]:
        """Wrap a function taking a SingleMutEntity as a per-entity system.

        Args:
            query: Component types an entity must hold to be stepped. Empty
                means every live entity.
        """

        def decorator(fn: Callable[[SingleMutEntity], Any]) -> PerEntityFunctionSystem:
            return PerEntityFunctionSystem(fn, query)

        return decorator


system = _SystemDecorator()
