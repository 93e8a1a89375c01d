"""Domain port definitions for adapters."""

from __future__ import annotations

from .persistence import ParentRepository
from .unit_of_work import ParentUnitOfWork

__all__ = [
    "ParentRepository",
    "ParentUnitOfWork",
]
