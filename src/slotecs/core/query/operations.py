"""Query operations: spec normalization and table intersection."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from slotecs.core.query.models import Query, QuerySpec


def normalize_query(spec: QuerySpec | None) -> Query:
    """Convert the accepted query specifications to a Query.

    Handles multiple input formats:
    - None or empty tuple -> empty Query
    - Query -> passthrough
    - Single type -> Query with one required type
    - Tuple of types -> Query requiring all of them

    Args:
        spec: Query specification in one of the formats above.

    Returns:
        Normalized Query.

    Raises:
        TypeError: If spec is not a recognized query specification, or a
            tuple holds something other than classes.
    """
    if spec is None or spec == ():
        return Query()
    if isinstance(spec, Query):
        return spec
    if isinstance(spec, type):
        return Query(spec)
    if isinstance(spec, tuple):
        return Query(*spec)
    raise TypeError(f"Invalid query specification: {spec!r}")


def query_from_args(args: tuple[Any, ...]) -> Query:
    """Build a Query from positional arguments: `(Query,)` or `(A, B, ...)`."""
    if len(args) == 1:
        return normalize_query(args[0])
    return normalize_query(tuple(args))


def match_entities(tables: Mapping[type, Mapping[int, Any]], query: Query) -> list[int]:
    """Return indices of entities present in every required table.

    Scans the smallest required table and probes the others, so the cost is
    bounded by the rarest component type rather than by the entity count.
    Order follows the scanned table's insertion order.

    Args:
        tables: Per-type tables, component type -> entity index -> component.
        query: Query to evaluate. Must require at least one type.

    Returns:
        Materialized list of matching entity indices.
    """
    if query.is_empty():
        return []

    candidates: list[Mapping[int, Any]] = []
    for component_type in query.required:
        table = tables.get(component_type)
        if not table:
            return []
        candidates.append(table)

    candidates.sort(key=len)
    smallest, others = candidates[0], candidates[1:]
    excluded = [tables[t] for t in query.excluded if tables.get(t)]

    return [
        index
        for index in smallest
        if all(index in table for table in others)
        and not any(index in table for table in excluded)
    ]
