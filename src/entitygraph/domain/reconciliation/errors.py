"""Validation failures raised before a reconciliation produces any output."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from uuid import UUID


class ReconciliationError(ValueError):
    """Base class for reconciliation failures.

    Callers should treat these as a stale or invalid view of the graph: re-fetch
    the tracked graph and reconcile again from scratch.
    """


class UntrackedRootError(ReconciliationError):
    """Raised when the tracked root has never been persisted."""

    def __init__(self) -> None:
        super().__init__("tracked root has no identity")


class IdentityMismatchError(ReconciliationError):
    """Raised when the incoming root denotes a different root than the tracked one."""

    def __init__(self, *, tracked_id: UUID, incoming_id: UUID) -> None:
        self.tracked_id = tracked_id
        self.incoming_id = incoming_id
        super().__init__(f"incoming root {incoming_id} does not match tracked root {tracked_id}")


class UnknownChildReferenceError(ReconciliationError):
    """Raised when an incoming child references an identity the root does not own."""

    def __init__(self, *, parent_id: UUID, child_id: UUID, reason: str | None = None) -> None:
        self.parent_id = parent_id
        self.child_id = child_id
        detail = reason or "is not owned by"
        super().__init__(f"child {child_id} {detail} parent {parent_id}")


class DuplicateChildReferenceError(UnknownChildReferenceError):
    """Raised when the incoming graph lists the same child identity twice."""

    def __init__(self, *, parent_id: UUID, child_id: UUID) -> None:
        super().__init__(
            parent_id=parent_id,
            child_id=child_id,
            reason="is referenced more than once under",
        )
