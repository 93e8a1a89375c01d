"""Application orchestration entry points."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from entitygraph.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyParentUnitOfWork,
    is_started,
    startup,
)
from entitygraph.adapters.transport import decode_parent, encode_parent
from entitygraph.domain.graph_sync import (
    SyncParentResult,
    load_parent,
    store_parent,
    sync_parent,
)
from entitygraph.domain.model import Child, Parent
from entitygraph.domain.ports.unit_of_work import ParentUnitOfWork

if TYPE_CHECKING:
    from collections.abc import Iterable
    from uuid import UUID

UnitOfWorkFactory = Callable[[], ParentUnitOfWork]


log = getLogger(__name__)


@dataclass(slots=True)
class DemoResult:
    """Outcome of the create, round-trip, modify and reconcile demo."""

    created: Parent
    payload: str
    sync: SyncParentResult
    stored: Parent


def _effective_uow(unit_of_work_factory: UnitOfWorkFactory | None) -> UnitOfWorkFactory:
    if unit_of_work_factory is not None:
        return unit_of_work_factory
    if not is_started():
        startup()
    return SqlAlchemyParentUnitOfWork


def create_parent(
    values: Iterable[str],
    *,
    name: str | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> Parent:
    """Persist a new parent owning one child per value."""

    parent = Parent.with_children((Child(value=value) for value in values), name=name)
    return store_parent(parent, unit_of_work_factory=_effective_uow(unit_of_work_factory))


def get_parent(
    parent_id: UUID,
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> Parent:
    """Load a persisted parent graph."""

    return load_parent(parent_id, unit_of_work_factory=_effective_uow(unit_of_work_factory))


def export_parent(
    parent_id: UUID,
    *,
    indent: int | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> str:
    """Return the JSON payload of a persisted parent graph."""

    parent = get_parent(parent_id, unit_of_work_factory=unit_of_work_factory)
    return encode_parent(parent, indent=indent)


def sync_parent_payload(
    payload: str | bytes,
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> SyncParentResult:
    """Decode a JSON payload and reconcile it into storage."""

    incoming = decode_parent(payload)
    return sync_parent(incoming, unit_of_work_factory=_effective_uow(unit_of_work_factory))


def run_round_trip_demo(
    *,
    initial_values: Iterable[str] = ("X1",),
    added_values: Iterable[str] = ("X2",),
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> DemoResult:
    """Store a parent, read it back, send it through JSON, add children and sync.

    This mirrors an API client fetching a graph, appending new children without
    identities and posting the whole graph back.
    """

    effective_uow = _effective_uow(unit_of_work_factory)
    created = create_parent(initial_values, unit_of_work_factory=effective_uow)
    if created.id is None:
        raise RuntimeError("Stored parent did not receive an identity")

    payload = export_parent(created.id, unit_of_work_factory=effective_uow)
    incoming = decode_parent(payload)
    for value in added_values:
        incoming.add_child(Child(value=value))

    log.info("Posting parent %s back with %s children", incoming.id, len(incoming.children))
    result = sync_parent(incoming, unit_of_work_factory=effective_uow)
    stored = get_parent(created.id, unit_of_work_factory=effective_uow)
    return DemoResult(created=created, payload=payload, sync=result, stored=stored)
