"""Parent/child aggregate."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from entitygraph.domain.model.base import Entity

if TYPE_CHECKING:
    from collections.abc import Iterable
    from uuid import UUID


@dataclass(eq=False, kw_only=True)
class Child(Entity):
    """Leaf owned by exactly one parent."""

    value: str | None


@dataclass(eq=False, kw_only=True)
class Parent(Entity):
    """Aggregate root owning an ordered child collection."""

    name: str | None = None

    _children: list[Child] = field(default_factory=list["Child"], repr=False)

    @classmethod
    def with_children(
        cls,
        children: Iterable[Child],
        *,
        id: UUID | None = None,  # noqa: A002
        name: str | None = None,
    ) -> Parent:
        parent = cls(id=id, name=name)
        for child in children:
            parent.add_child(child)
        return parent

    @property
    def children(self) -> tuple[Child, ...]:
        return tuple(self._children)

    def add_child(self, child: Child) -> None:
        if any(existing is child for existing in self._children):
            raise ValueError("child already belongs to this parent")
        self._children.append(child)

    def remove_child(self, child: Child) -> None:
        for index, existing in enumerate(self._children):
            if existing is child:
                del self._children[index]
                return
        raise ValueError("child does not belong to this parent")

    def child_by_id(self, child_id: UUID) -> Child | None:
        for child in self._children:
            if child.id == child_id:
                return child
        return None
