"""
Base building blocks:
optional identity that is only assigned once an entity is persisted.
"""

from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID, uuid4


def new_id() -> UUID:
    return uuid4()


@dataclass(eq=False, kw_only=True)
class Entity:
    """Entity whose identity is absent until persisted.

    ``id is None`` marks a new entity. Any UUID, including the nil UUID, is a
    present identity.
    """

    id: UUID | None = None

    @property
    def is_new(self) -> bool:
        return self.id is None

    def same_identity(self, other: Entity) -> bool:
        """Return whether both entities carry the same non-empty identity."""
        return self.id is not None and self.id == other.id
