"""Shared reconciliation contract components.

This module holds only:
- the explicit per-entity field lists compared during reconciliation
- the tagged ``ChildMutation`` variant and its ``MutationKind`` discriminator
- the aggregate ``ReconciliationResult``
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Final, Literal

if TYPE_CHECKING:
    from uuid import UUID

    from entitygraph.domain.model import Child, Parent


CHILD_FIELDS: Final[tuple[str, ...]] = ("value",)
PARENT_FIELDS: Final[tuple[str, ...]] = ("name",)


class MutationKind(StrEnum):
    """Classification of one child across the tracked/incoming boundary."""

    INSERT = "insert"
    UPDATE = "update"
    REMOVE = "remove"
    UNCHANGED = "unchanged"


@dataclass(frozen=True, slots=True)
class FieldChange:
    """One scalar field whose incoming value differs from the tracked value."""

    field: str
    old: object
    new: object


@dataclass(frozen=True, slots=True, kw_only=True)
class InsertChild:
    """New child; ``child`` is the merged instance carrying the placeholder id."""

    child: Child
    kind: Literal[MutationKind.INSERT] = MutationKind.INSERT

    @property
    def placeholder_id(self) -> UUID:
        if self.child.id is None:
            raise ValueError("inserted child is missing its placeholder id")
        return self.child.id


@dataclass(frozen=True, slots=True, kw_only=True)
class UpdateChild:
    """Tracked child whose fields differ from the incoming copy."""

    target: Child
    changes: tuple[FieldChange, ...]
    kind: Literal[MutationKind.UPDATE] = MutationKind.UPDATE

    def __post_init__(self) -> None:
        if not self.changes:
            raise ValueError("Update mutation must include at least one field change")

    @property
    def new_values(self) -> dict[str, object]:
        return {change.field: change.new for change in self.changes}


@dataclass(frozen=True, slots=True, kw_only=True)
class RemoveChild:
    """Tracked child absent from the incoming graph."""

    target: Child
    kind: Literal[MutationKind.REMOVE] = MutationKind.REMOVE


@dataclass(frozen=True, slots=True, kw_only=True)
class UnchangedChild:
    """Tracked child matched by identity with no field differences."""

    target: Child
    kind: Literal[MutationKind.UNCHANGED] = MutationKind.UNCHANGED


type ChildMutation = InsertChild | UpdateChild | RemoveChild


@dataclass(frozen=True, slots=True, kw_only=True)
class ReconciliationResult:
    """Merged graph plus the ordered delta needed to reach it.

    ``mutations`` lists removals first (tracked order), then updates (tracked
    order), then inserts (incoming order). ``root_changes`` reports scalar
    fields of the root itself and is kept apart from the child delta.
    """

    merged: Parent
    mutations: tuple[ChildMutation, ...]
    unchanged: tuple[UnchangedChild, ...] = ()
    root_changes: tuple[FieldChange, ...] = ()

    @property
    def parent_id(self) -> UUID:
        if self.merged.id is None:
            raise ValueError("merged root is missing its identity")
        return self.merged.id

    @property
    def inserts(self) -> tuple[InsertChild, ...]:
        return tuple(m for m in self.mutations if isinstance(m, InsertChild))

    @property
    def updates(self) -> tuple[UpdateChild, ...]:
        return tuple(m for m in self.mutations if isinstance(m, UpdateChild))

    @property
    def removes(self) -> tuple[RemoveChild, ...]:
        return tuple(m for m in self.mutations if isinstance(m, RemoveChild))

    @property
    def is_empty(self) -> bool:
        return not self.mutations and not self.root_changes
