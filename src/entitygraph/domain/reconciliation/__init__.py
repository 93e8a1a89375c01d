"""Reconciliation of detached parent/child graphs into their tracked version.

Layered flow:
1) ``reconciler`` computes the merged graph and the ordered child delta (pure)
2) ``apply`` mutates the tracked parent in memory to match
3) a unit of work persists the mutated parent and commits once
"""

from __future__ import annotations

from .apply import ApplyResult, apply_reconciliation
from .contracts import (
    CHILD_FIELDS,
    PARENT_FIELDS,
    ChildMutation,
    FieldChange,
    InsertChild,
    MutationKind,
    ReconciliationResult,
    RemoveChild,
    UnchangedChild,
    UpdateChild,
)
from .errors import (
    DuplicateChildReferenceError,
    IdentityMismatchError,
    ReconciliationError,
    UnknownChildReferenceError,
    UntrackedRootError,
)
from .reconciler import GraphReconciler, diff_fields, reconcile

__all__ = [
    "CHILD_FIELDS",
    "PARENT_FIELDS",
    "ApplyResult",
    "ChildMutation",
    "DuplicateChildReferenceError",
    "FieldChange",
    "GraphReconciler",
    "IdentityMismatchError",
    "InsertChild",
    "MutationKind",
    "ReconciliationError",
    "ReconciliationResult",
    "RemoveChild",
    "UnchangedChild",
    "UnknownChildReferenceError",
    "UntrackedRootError",
    "UpdateChild",
    "apply_reconciliation",
    "diff_fields",
    "reconcile",
]
