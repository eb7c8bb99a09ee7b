"""System models: the System base class and registration handles."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar

from slotecs.core.query import Query, QuerySpec, normalize_query

if TYPE_CHECKING:
    from slotecs.world.access import ReadOnlyAccess, SingleMutEntity
    from slotecs.world.entities import EntitiesAndComponents


class System:
    """Base class for update logic invoked by the scheduler.

    Override any of the three hooks; the scheduler only calls the ones a
    subclass actually overrides.

    - `prestep` sees a read-only view and may gather data into `self`.
    - `single_entity_step` is called once per entity matching `query`,
      possibly from several worker threads at once. It must only touch the
      entity it is handed.
    - `run` gets full access to entities and components and runs last.

    Usage:
        class Movement(System):
            query = (Position, Velocity)

            def single_entity_step(self, entity):
                pos, vel = entity.get_components(Position, Velocity)
                pos.x += vel.x
                pos.y += vel.y
    """

    query: ClassVar[QuerySpec] = ()
    """Component types an entity must hold to be passed to single_entity_step."""

    def prestep(self, view: ReadOnlyAccess) -> None:
        """Collect data before per-entity steps; no writes allowed."""

    def single_entity_step(self, entity: SingleMutEntity) -> None:
        """Update one entity. Called in parallel across disjoint entities."""

    def run(self, entities_and_components: EntitiesAndComponents) -> None:
        """Sequential pass with unrestricted access."""

    @property
    def name(self) -> str:
        return type(self).__name__

    def resolved_query(self) -> Query:
        """The normalized form of `query`."""
        return normalize_query(self.query)

    def implements_prestep(self) -> bool:
        return _overrides(self, "prestep")

    def implements_single_entity_step(self) -> bool:
        return _overrides(self, "single_entity_step")

    def implements_run(self) -> bool:
        return _overrides(self, "run")


def _overrides(system: System, hook: str) -> bool:
    return getattr(type(system), hook) is not getattr(System, hook)


@dataclass(frozen=True, slots=True)
class SystemHandle:
    """Opaque key for a registered system, returned by add_system.

    Most of the time you will not need it; it exists so a specific system can
    be removed or stepped explicitly.
    """

    system_id: int
