"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from typing import TYPE_CHECKING, cast

from sqlalchemy import select

from entitygraph.adapters.sqlalchemy.mappings import parent_table
from entitygraph.domain.model import Parent, new_id

if TYPE_CHECKING:
    from collections.abc import Sequence
    from uuid import UUID

    from sqlalchemy.orm import Session


class SqlAlchemyParentRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: Parent) -> None:
        self._assign_identities(entity)
        self.session.add(entity)

    def get(self, parent_id: UUID) -> Parent | None:
        return self.session.get(Parent, parent_id)

    def list_all(self) -> Sequence[Parent]:
        stmt = select(Parent).order_by(parent_table.c.id)
        return self.session.execute(stmt).scalars().all()

    def remove(self, entity: Parent) -> None:
        self.session.delete(entity)

    @staticmethod
    def _assign_identities(entity: Parent) -> None:
        if entity.id is None:
            entity.id = new_id()
        for child in entity.children:
            if child.id is None:
                child.id = new_id()


if TYPE_CHECKING:
    from entitygraph.domain.ports.persistence import ParentRepository

    _session_stub = cast("Session", object())
    _repo_check: ParentRepository = SqlAlchemyParentRepository(_session_stub)
