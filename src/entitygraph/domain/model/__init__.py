"""Domain model for parent/child entity graphs."""

from __future__ import annotations

from .base import Entity, new_id
from .graph import Child, Parent

__all__ = [
    "Child",
    "Entity",
    "Parent",
    "new_id",
]
