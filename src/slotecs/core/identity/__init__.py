"""Entity identity functionality: lightweight generational IDs."""

from slotecs.core.identity.models import Entity

__all__ = [
    "Entity",
]
