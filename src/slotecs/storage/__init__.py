"""Storage backends."""

from slotecs.storage.allocator import MAX_GENERATION, EntityAllocator
from slotecs.storage.local import LocalStorage
from slotecs.storage.protocol import MISSING, Storage

__all__ = [
    "Storage",
    "MISSING",
    "LocalStorage",
    "EntityAllocator",
    "MAX_GENERATION",
]
