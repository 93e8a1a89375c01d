"""Transaction boundary around the parent repository."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, Self, runtime_checkable

if TYPE_CHECKING:
    from types import TracebackType

    from entitygraph.domain.ports.persistence import ParentRepository


@runtime_checkable
class ParentUnitOfWork(Protocol):
    """Scope in which parent graphs are loaded, changed and committed together.

    Nothing is stored until ``commit``. Leaving the block with an exception
    rolls back everything done inside it.
    """

    @property
    def parents(self) -> ParentRepository: ...

    def __enter__(self) -> Self: ...

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> bool: ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...
