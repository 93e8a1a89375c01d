"""Application services for reconciling detached parent graphs into storage."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from entitygraph.domain.reconciliation import GraphReconciler, apply_reconciliation

if TYPE_CHECKING:
    from collections.abc import Callable
    from uuid import UUID

    from entitygraph.domain.model import Parent
    from entitygraph.domain.ports.unit_of_work import ParentUnitOfWork
    from entitygraph.domain.reconciliation import FieldChange

log = logging.getLogger(__name__)


class ParentNotFoundError(LookupError):
    """Raised when no persisted parent exists for the requested identity."""

    def __init__(self, parent_id: UUID) -> None:
        self.parent_id = parent_id
        super().__init__(f"parent {parent_id} does not exist")


@dataclass(slots=True)
class SyncParentResult:
    """Outcome of reconciling one incoming parent graph."""

    parent_id: UUID
    inserted_ids: tuple[UUID, ...]
    updated: int
    removed: int
    unchanged: int
    root_changes: tuple[FieldChange, ...]
    committed: bool

    @property
    def inserted(self) -> int:
        return len(self.inserted_ids)


def store_parent(
    parent: Parent,
    *,
    unit_of_work_factory: Callable[[], ParentUnitOfWork],
) -> Parent:
    """Persist a brand new parent graph and return it with identities assigned."""

    with unit_of_work_factory() as uow:
        uow.parents.add(parent)
        uow.commit()
    log.info("Stored parent %s with %s children", parent.id, len(parent.children))
    return parent


def load_parent(
    parent_id: UUID,
    *,
    unit_of_work_factory: Callable[[], ParentUnitOfWork],
) -> Parent:
    """Return the persisted parent for ``parent_id`` or raise ``ParentNotFoundError``."""

    with unit_of_work_factory() as uow:
        parent = uow.parents.get(parent_id)
        if parent is None:
            raise ParentNotFoundError(parent_id)
        # touch the collection so it is loaded before the session closes
        _ = parent.children
    return parent


def sync_parent(
    incoming: Parent,
    *,
    unit_of_work_factory: Callable[[], ParentUnitOfWork],
    reconciler: GraphReconciler | None = None,
) -> SyncParentResult:
    """Reconcile ``incoming`` against its persisted version and commit the delta.

    Loading, applying and committing happen inside one unit of work: either the
    whole delta is stored or, on any error, nothing is.
    """

    if incoming.id is None:
        raise ValueError("incoming parent has no identity; store it as a new parent instead")

    effective_reconciler = reconciler or GraphReconciler()
    with unit_of_work_factory() as uow:
        tracked = uow.parents.get(incoming.id)
        if tracked is None:
            raise ParentNotFoundError(incoming.id)

        result = effective_reconciler.reconcile(tracked, incoming)
        if result.is_empty:
            log.info("Parent %s is already up to date", incoming.id)
            return SyncParentResult(
                parent_id=incoming.id,
                inserted_ids=(),
                updated=0,
                removed=0,
                unchanged=len(result.unchanged),
                root_changes=(),
                committed=False,
            )

        applied = apply_reconciliation(tracked, result)
        uow.commit()

    log.info(
        "Synced parent %s: inserted=%s, updated=%s, removed=%s, root_fields=%s",
        incoming.id,
        applied.inserted,
        applied.updated,
        applied.removed,
        list(applied.root_fields),
    )
    return SyncParentResult(
        parent_id=incoming.id,
        inserted_ids=applied.inserted_ids,
        updated=applied.updated,
        removed=applied.removed,
        unchanged=len(result.unchanged),
        root_changes=result.root_changes,
        committed=True,
    )
