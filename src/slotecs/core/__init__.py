"""Core functionalities: stateless primitives and protocols.

Architecture Note:
    core/ contains pure, stateless building blocks: identifiers, errors,
    query models and the System base class. For stateful services, see
    world/, storage/, and scheduling/.
"""

from slotecs.core.errors import (
    ComponentNotFoundError,
    EcsError,
    EntityNotFoundError,
    ResourceNotFoundError,
)
from slotecs.core.identity import Entity
from slotecs.core.query import Query, QuerySpec, match_entities, normalize_query
from slotecs.core.system import System, SystemHandle, system
from slotecs.core.types import Copy

__all__ = [
    # Types
    "Copy",
    # Identity
    "Entity",
    # Errors
    "EcsError",
    "EntityNotFoundError",
    "ComponentNotFoundError",
    "ResourceNotFoundError",
    # Query
    "Query",
    "QuerySpec",
    "match_entities",
    "normalize_query",
    # System
    "System",
    "SystemHandle",
    "system",
]
