"""Ports for persisting parent aggregates."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence
    from uuid import UUID

    from entitygraph.domain.model import Parent


@runtime_checkable
class ParentRepository(Protocol):
    """Persistence contract for parents and their owned children."""

    def add(self, entity: Parent) -> None: ...

    def get(self, parent_id: UUID) -> Parent | None: ...

    def list_all(self) -> Sequence[Parent]: ...

    def remove(self, entity: Parent) -> None: ...
