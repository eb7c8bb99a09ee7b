"""Query models.

Usage:
    # All entities holding both components
    Query(Position, Velocity)

    # Narrow further
    Query(Position).having(PlayerTag)

    # Exclusions
    Query(Position).excluding(FrozenTag)
    Query(Position, excluded=(FrozenTag,))
"""

from __future__ import annotations

from collections.abc import Iterable, Set
from dataclasses import dataclass


def _distinct_types(candidates: Iterable[object], role: str) -> tuple[type, ...]:
    # dict keeps first-seen order
    distinct: dict[type, None] = {}
    for candidate in candidates:
        if not isinstance(candidate, type):
            raise TypeError(f"Query {role} types must be classes, got {candidate!r}")
        distinct[candidate] = None
    return tuple(distinct)


@dataclass(frozen=True, slots=True, init=False)
class Query:
    """Component-type filter evaluated against the per-type tables.

    An entity matches when it holds every `required` type and none of the
    `excluded` ones. Both tuples hold each type once, in first-seen order.

    Args:
        *required: Component classes an entity must hold.
        excluded: Component classes an entity must not hold.

    Raises:
        TypeError: If any argument is not a class.
        ValueError: If a type is both required and excluded.
    """

    required: tuple[type, ...]
    excluded: tuple[type, ...]

    def __init__(self, *required: type, excluded: Iterable[type] = ()) -> None:
        wanted = _distinct_types(required, "required")
        unwanted = _distinct_types(excluded, "excluded")
        conflicting = set(wanted).intersection(unwanted)
        if conflicting:
            names = ", ".join(sorted(t.__name__ for t in conflicting))
            raise ValueError(f"Query cannot both require and exclude {names}")
        object.__setattr__(self, "required", wanted)
        object.__setattr__(self, "excluded", unwanted)

    def having(self, *component_types: type) -> Query:
        """A copy that additionally requires `component_types`."""
        return Query(*self.required, *component_types, excluded=self.excluded)

    def excluding(self, *component_types: type) -> Query:
        """A copy that additionally rejects holders of `component_types`."""
        return Query(*self.required, excluded=(*self.excluded, *component_types))

    def is_empty(self) -> bool:
        return not self.required

    def matches(self, held: Set[type]) -> bool:
        """Whether an entity holding exactly `held` satisfies this query."""
        return held.issuperset(self.required) and held.isdisjoint(self.excluded)


QuerySpec = type | tuple[type, ...] | Query
"""Anything accepted where a query is expected."""
