"""SQLAlchemy adapter package."""

from __future__ import annotations

from .mappings import (
    child_table,
    create_all_tables,
    mapper_registry,
    parent_table,
    start_mappers,
)
from .repositories import SqlAlchemyParentRepository
from .unit_of_work import (
    SqlAlchemyParentUnitOfWork,
    StartupError,
    configured_engine,
    is_started,
    shutdown,
    startup,
)

__all__ = [
    "SqlAlchemyParentRepository",
    "SqlAlchemyParentUnitOfWork",
    "StartupError",
    "child_table",
    "configured_engine",
    "create_all_tables",
    "is_started",
    "mapper_registry",
    "parent_table",
    "shutdown",
    "start_mappers",
    "startup",
]
