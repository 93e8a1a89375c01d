from __future__ import annotations

from uuid import UUID

import pytest

from entitygraph.domain.model import Child, Parent
from entitygraph.domain.reconciliation import (
    DuplicateChildReferenceError,
    FieldChange,
    GraphReconciler,
    IdentityMismatchError,
    InsertChild,
    MutationKind,
    RemoveChild,
    UnknownChildReferenceError,
    UntrackedRootError,
    UpdateChild,
    reconcile,
)
from tests.helpers.graphs import PARENT_ID, child_id, make_parent, sequential_ids, snapshot


def test_identical_graphs_produce_no_mutations() -> None:
    tracked = make_parent([(child_id(1), "X1"), (child_id(2), "X2")], name="P")
    incoming = make_parent([(child_id(1), "X1"), (child_id(2), "X2")], name="P")

    result = reconcile(tracked, incoming)

    assert result.mutations == ()
    assert result.root_changes == ()
    assert result.is_empty
    assert snapshot(result.merged) == snapshot(tracked)
    assert [item.target.id for item in result.unchanged] == [child_id(1), child_id(2)]


def test_new_child_is_inserted_with_placeholder_identity() -> None:
    tracked = make_parent([(child_id(1), "X1")])
    incoming = make_parent([(child_id(1), "X1"), (None, "X2")])

    result = GraphReconciler(id_factory=sequential_ids(9000)).reconcile(tracked, incoming)

    assert len(result.mutations) == 1
    insert = result.mutations[0]
    assert isinstance(insert, InsertChild)
    assert insert.kind is MutationKind.INSERT
    assert insert.child.value == "X2"
    assert insert.placeholder_id == UUID(int=9000)
    assert snapshot(result.merged) == [(child_id(1), "X1"), (UUID(int=9000), "X2")]


def test_each_new_child_yields_one_insert_in_incoming_order() -> None:
    tracked = make_parent([(child_id(1), "X1")])
    incoming = make_parent([(None, "A"), (child_id(1), "X1"), (None, "B"), (None, "C")])

    result = GraphReconciler(id_factory=sequential_ids()).reconcile(tracked, incoming)

    assert [m.child.value for m in result.inserts] == ["A", "B", "C"]
    assert len(result.merged.children) == len(tracked.children) + 3
    # tracked order first, inserts appended
    assert [child.value for child in result.merged.children] == ["X1", "A", "B", "C"]


def test_changed_value_is_reported_as_update() -> None:
    tracked = make_parent([(child_id(1), "X1"), (child_id(2), "X2")])
    incoming = make_parent([(child_id(1), "X1"), (child_id(2), "changed")])

    result = reconcile(tracked, incoming)

    assert len(result.mutations) == 1
    update = result.mutations[0]
    assert isinstance(update, UpdateChild)
    assert update.target is tracked.children[1]
    assert update.changes == (FieldChange(field="value", old="X2", new="changed"),)
    assert update.new_values == {"value": "changed"}
    assert snapshot(result.merged) == [(child_id(1), "X1"), (child_id(2), "changed")]


def test_cleared_value_is_an_update_to_none() -> None:
    tracked = make_parent([(child_id(1), "X1")])
    incoming = make_parent([(child_id(1), None)])

    result = reconcile(tracked, incoming)

    assert [m.changes for m in result.updates] == [
        (FieldChange(field="value", old="X1", new=None),)
    ]
    assert snapshot(result.merged) == [(child_id(1), None)]


def test_missing_children_are_removed_in_tracked_order() -> None:
    tracked = make_parent([(child_id(1), "X1"), (child_id(2), "X2"), (child_id(3), "X3")])
    incoming = make_parent([(child_id(2), "X2")])

    result = reconcile(tracked, incoming)

    assert all(isinstance(m, RemoveChild) for m in result.mutations)
    assert [m.target.id for m in result.removes] == [child_id(1), child_id(3)]
    assert snapshot(result.merged) == [(child_id(2), "X2")]


def test_mutations_are_ordered_removes_updates_inserts() -> None:
    tracked = make_parent(
        [(child_id(1), "keep"), (child_id(2), "old"), (child_id(3), "drop"), (child_id(4), "x")]
    )
    incoming = make_parent(
        [(None, "new-1"), (child_id(4), "y"), (child_id(2), "new"), (None, "new-2")]
    )

    result = GraphReconciler(id_factory=sequential_ids()).reconcile(tracked, incoming)

    kinds = [m.kind for m in result.mutations]
    assert kinds == [
        MutationKind.REMOVE,
        MutationKind.REMOVE,
        MutationKind.UPDATE,
        MutationKind.UPDATE,
        MutationKind.INSERT,
        MutationKind.INSERT,
    ]
    assert [m.target.id for m in result.removes] == [child_id(1), child_id(3)]
    # updates follow tracked order, not incoming order
    assert [m.target.id for m in result.updates] == [child_id(2), child_id(4)]
    assert [m.child.value for m in result.inserts] == ["new-1", "new-2"]
    assert [child.value for child in result.merged.children] == ["new", "y", "new-1", "new-2"]


def test_merged_graph_still_carries_unresolved_placeholders() -> None:
    tracked = make_parent([(child_id(1), "X1"), (child_id(2), "X2")], name="before")
    incoming = make_parent([(child_id(2), "X2*"), (None, "X3")], name="after")

    first = GraphReconciler(id_factory=sequential_ids(700)).reconcile(tracked, incoming)

    # placeholders only become known once the delta is applied to the tracked graph
    with pytest.raises(UnknownChildReferenceError) as exc:
        reconcile(tracked, first.merged)
    assert exc.value.child_id == UUID(int=700)


def test_reconcile_does_not_mutate_inputs() -> None:
    tracked = make_parent([(child_id(1), "X1"), (child_id(2), "X2")], name="tracked")
    incoming = make_parent([(child_id(1), "changed"), (None, "X3")], name="incoming")
    tracked_before = snapshot(tracked)
    incoming_before = snapshot(incoming)

    result = reconcile(tracked, incoming)

    assert snapshot(tracked) == tracked_before
    assert snapshot(incoming) == incoming_before
    assert tracked.name == "tracked"
    assert incoming.children[1].id is None
    assert result.merged is not tracked
    assert all(
        merged is not original
        for merged in result.merged.children
        for original in (*tracked.children, *incoming.children)
    )


def test_root_field_changes_are_reported_separately() -> None:
    tracked = make_parent([(child_id(1), "X1")], name="old")
    incoming = make_parent([(child_id(1), "X1")], name="new")

    result = reconcile(tracked, incoming)

    assert result.mutations == ()
    assert result.root_changes == (FieldChange(field="name", old="old", new="new"),)
    assert result.merged.name == "new"
    assert not result.is_empty


def test_incoming_without_root_identity_is_accepted() -> None:
    tracked = make_parent([(child_id(1), "X1")])
    incoming = make_parent([(child_id(1), "X1")], parent_id=None)

    result = reconcile(tracked, incoming)

    assert result.merged.id == PARENT_ID
    assert result.mutations == ()


def test_root_identity_mismatch_fails() -> None:
    tracked = make_parent([(child_id(1), "X1")])
    incoming = make_parent([(child_id(1), "X1")], parent_id=UUID(int=2))

    with pytest.raises(IdentityMismatchError) as exc:
        reconcile(tracked, incoming)

    assert exc.value.tracked_id == PARENT_ID
    assert exc.value.incoming_id == UUID(int=2)


def test_untracked_root_fails() -> None:
    tracked = make_parent([(None, "X1")], parent_id=None)
    incoming = make_parent([(None, "X1")], parent_id=None)

    with pytest.raises(UntrackedRootError):
        reconcile(tracked, incoming)


def test_unknown_child_reference_fails() -> None:
    tracked = make_parent([(child_id(1), "X1")])
    incoming = make_parent([(child_id(1), "X1"), (child_id(99), "ghost")])

    with pytest.raises(UnknownChildReferenceError, match="is not owned by") as exc:
        reconcile(tracked, incoming)

    assert exc.value.child_id == child_id(99)
    assert exc.value.parent_id == PARENT_ID


def test_duplicate_child_reference_fails() -> None:
    tracked = make_parent([(child_id(1), "X1")])
    incoming = make_parent([(child_id(1), "X1"), (child_id(1), "X1 again")])

    with pytest.raises(DuplicateChildReferenceError, match="more than once"):
        reconcile(tracked, incoming)


def test_nil_uuid_is_an_identity_not_an_empty_one() -> None:
    tracked = make_parent([(child_id(1), "X1")])
    incoming = make_parent([(child_id(1), "X1"), (UUID(int=0), "X2")])

    with pytest.raises(UnknownChildReferenceError):
        reconcile(tracked, incoming)


def test_unidentified_tracked_children_are_left_out(caplog: pytest.LogCaptureFixture) -> None:
    tracked = Parent(id=PARENT_ID)
    tracked.add_child(Child(id=child_id(1), value="X1"))
    tracked.add_child(Child(value="stray"))
    incoming = make_parent([(child_id(1), "X1")])

    with caplog.at_level("WARNING"):
        result = reconcile(tracked, incoming)

    assert result.mutations == ()
    assert snapshot(result.merged) == [(child_id(1), "X1")]
    assert "unidentified child" in caplog.text


def test_original_program_scenario() -> None:
    p1 = UUID("3f1c2f8e-1d8e-4e39-9a0a-6a2b7a8c0001")
    c1 = UUID("3f1c2f8e-1d8e-4e39-9a0a-6a2b7a8c00c1")
    tracked = make_parent([(c1, "X1")], parent_id=p1)
    incoming = make_parent([(c1, "X1"), (None, "X2")], parent_id=p1)

    result = reconcile(tracked, incoming)

    assert [m.kind for m in result.mutations] == [MutationKind.INSERT]
    assert result.inserts[0].child.value == "X2"
    assert len(result.merged.children) == 2
    assert result.merged.children[0].id == c1
    assert result.merged.children[1].id is not None
    assert result.merged.children[1].id == result.inserts[0].placeholder_id
