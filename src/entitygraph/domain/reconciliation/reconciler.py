"""Merge a detached, client-modified parent graph into its tracked version.

The reconciler is a pure computation: it never touches the caller's ``tracked``
or ``incoming`` instances and knows nothing about persistence. Children are
matched by identity only, using an explicit index built from the tracked
graph, and compared field by field using the explicit field lists in
``contracts``.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from entitygraph.domain.model import Child, Parent, new_id

from .contracts import (
    CHILD_FIELDS,
    PARENT_FIELDS,
    FieldChange,
    InsertChild,
    ReconciliationResult,
    RemoveChild,
    UnchangedChild,
    UpdateChild,
)
from .errors import (
    DuplicateChildReferenceError,
    IdentityMismatchError,
    UnknownChildReferenceError,
    UntrackedRootError,
)

if TYPE_CHECKING:
    from collections.abc import Sequence
    from uuid import UUID

log = logging.getLogger(__name__)

type IdFactory = Callable[[], UUID]


def diff_fields(
    tracked: object,
    incoming: object,
    fields: Sequence[str],
) -> tuple[FieldChange, ...]:
    """Return the listed fields whose values differ between both objects."""

    changes: list[FieldChange] = []
    for name in fields:
        old = getattr(tracked, name)
        new = getattr(incoming, name)
        if old != new:
            changes.append(FieldChange(field=name, old=old, new=new))
    return tuple(changes)


@dataclass(slots=True)
class GraphReconciler:
    """Compute the merged graph and ordered child delta for one parent."""

    id_factory: IdFactory = field(default=new_id)

    def reconcile(self, tracked: Parent, incoming: Parent) -> ReconciliationResult:
        parent_id = self._check_roots(tracked, incoming)

        index: dict[UUID, Child] = {}
        for child in tracked.children:
            if child.id is None:
                log.warning(
                    "Ignoring unidentified child %r tracked under parent %s", child, parent_id
                )
                continue
            index[child.id] = child

        matched: set[UUID] = set()
        updates_by_id: dict[UUID, UpdateChild] = {}
        unchanged_by_id: dict[UUID, UnchangedChild] = {}
        pending_inserts: list[Child] = []

        for child in incoming.children:
            if child.id is None:
                pending_inserts.append(child)
                continue
            if child.id in matched:
                raise DuplicateChildReferenceError(parent_id=parent_id, child_id=child.id)
            tracked_child = index.pop(child.id, None)
            if tracked_child is None:
                raise UnknownChildReferenceError(parent_id=parent_id, child_id=child.id)
            matched.add(child.id)
            changes = diff_fields(tracked_child, child, CHILD_FIELDS)
            if changes:
                updates_by_id[child.id] = UpdateChild(target=tracked_child, changes=changes)
            else:
                unchanged_by_id[child.id] = UnchangedChild(target=tracked_child)

        # Anything still indexed was dropped by the incoming graph.
        removes = tuple(RemoveChild(target=child) for child in index.values())

        merged = Parent(id=parent_id, name=tracked.name)
        updates: list[UpdateChild] = []
        unchanged: list[UnchangedChild] = []
        for tracked_child in tracked.children:
            if tracked_child.id is None or tracked_child.id in index:
                continue
            update = updates_by_id.get(tracked_child.id)
            if update is not None:
                updates.append(update)
                merged.add_child(_copy_child(tracked_child, update.new_values))
            else:
                unchanged.append(unchanged_by_id[tracked_child.id])
                merged.add_child(_copy_child(tracked_child))

        inserts: list[InsertChild] = []
        for child in pending_inserts:
            inserted = _copy_child(child, {"id": self.id_factory()})
            merged.add_child(inserted)
            inserts.append(InsertChild(child=inserted))

        root_changes = diff_fields(tracked, incoming, PARENT_FIELDS)
        for change in root_changes:
            setattr(merged, change.field, change.new)

        log.debug(
            "Reconciled parent %s: removed=%s, updated=%s, inserted=%s, unchanged=%s, root=%s",
            parent_id,
            len(removes),
            len(updates),
            len(inserts),
            len(unchanged),
            [change.field for change in root_changes],
        )

        return ReconciliationResult(
            merged=merged,
            mutations=(*removes, *updates, *inserts),
            unchanged=tuple(unchanged),
            root_changes=root_changes,
        )

    @staticmethod
    def _check_roots(tracked: Parent, incoming: Parent) -> UUID:
        if tracked.id is None:
            raise UntrackedRootError
        if incoming.id is not None and incoming.id != tracked.id:
            raise IdentityMismatchError(tracked_id=tracked.id, incoming_id=incoming.id)
        return tracked.id


def _copy_child(child: Child, overrides: dict[str, object] | None = None) -> Child:
    values: dict[str, object] = {"id": child.id}
    values.update({name: getattr(child, name) for name in CHILD_FIELDS})
    if overrides:
        values.update(overrides)
    return Child(**values)  # pyright: ignore[reportArgumentType]


def reconcile(tracked: Parent, incoming: Parent) -> ReconciliationResult:
    """Reconcile ``incoming`` into ``tracked`` with the default placeholder factory."""

    return GraphReconciler().reconcile(tracked, incoming)
