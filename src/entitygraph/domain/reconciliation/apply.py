"""Apply a reconciliation result to the tracked parent in memory.

Responsibilities of this stage:
- mutate the tracked (usually ORM-attached) parent so it matches ``result.merged``
- avoid direct commit/transaction control

Removed children are detached from the parent's collection; the persistence
adapter turns that into a delete. Inserted children keep their placeholder id.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from entitygraph.domain.model import Child

from .contracts import CHILD_FIELDS, InsertChild, RemoveChild, UpdateChild

if TYPE_CHECKING:
    from uuid import UUID

    from entitygraph.domain.model import Parent

    from .contracts import ReconciliationResult


@dataclass(slots=True)
class ApplyResult:
    """Summary of in-memory mutations performed on the tracked parent."""

    inserted_ids: tuple[UUID, ...] = ()
    updated: int = 0
    removed: int = 0
    root_fields: tuple[str, ...] = ()

    @property
    def inserted(self) -> int:
        return len(self.inserted_ids)

    @property
    def changed(self) -> bool:
        return bool(self.inserted_ids or self.updated or self.removed or self.root_fields)


def apply_reconciliation(parent: Parent, result: ReconciliationResult) -> ApplyResult:
    """Mutate ``parent`` in place: removes, then updates, then inserts, then root fields."""

    if parent.id != result.parent_id:
        raise ValueError(
            f"reconciliation result for parent {result.parent_id} applied to parent {parent.id}"
        )

    inserted_ids: list[UUID] = []
    updated = 0
    removed = 0
    for mutation in result.mutations:
        match mutation:
            case RemoveChild(target=target):
                parent.remove_child(_owned_child(parent, target))
                removed += 1
            case UpdateChild(target=target, changes=changes):
                child = _owned_child(parent, target)
                for change in changes:
                    setattr(child, change.field, change.new)
                updated += 1
            case InsertChild(child=merged_child):
                values = {name: getattr(merged_child, name) for name in CHILD_FIELDS}
                parent.add_child(Child(id=merged_child.placeholder_id, **values))
                inserted_ids.append(merged_child.placeholder_id)

    for change in result.root_changes:
        setattr(parent, change.field, change.new)

    return ApplyResult(
        inserted_ids=tuple(inserted_ids),
        updated=updated,
        removed=removed,
        root_fields=tuple(change.field for change in result.root_changes),
    )


def _owned_child(parent: Parent, target: Child) -> Child:
    if target.id is None:
        raise ValueError("cannot apply a mutation to an unidentified child")
    child = parent.child_by_id(target.id)
    if child is None:
        raise ValueError(f"child {target.id} is not owned by parent {parent.id}")
    return child
