"""Entity identity models.

Usage:
    entity = Entity(index=42, generation=1)
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True, order=True)
class Entity:
    """Lightweight entity identifier with generation for safe handle reuse.

    The entity holds no data. It is a key into EntitiesAndComponents, valid
    only while its generation matches the one recorded for its index.
    """

    index: int = 0
    generation: int = 0

    def __hash__(self) -> int:
        return hash((self.index, self.generation))

    def __repr__(self) -> str:
        return f"Entity({self.index}v{self.generation})"
