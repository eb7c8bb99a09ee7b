"""Core type definitions for slotecs."""

from typing import TypeAlias, TypeVar

T = TypeVar("T")

Copy: TypeAlias = T
"""Type alias indicating a value is a copy detached from the store.

When you see `Copy[T]` in a return type, the returned value is a deep copy.
Mutations to this copy do NOT affect stored components. To persist changes,
write back via `add_component_to(entity, component)`.
"""
