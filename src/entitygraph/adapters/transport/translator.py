"""Translate between domain parents and their JSON payloads."""

from __future__ import annotations

from pydantic import ValidationError

from entitygraph.domain.model import Child, Parent

from .schema import ChildPayload, ParentPayload


class PayloadDecodeError(ValueError):
    """Raised when a payload cannot be decoded into a parent graph."""


def parent_to_payload(parent: Parent) -> ParentPayload:
    return ParentPayload(
        id=parent.id,
        name=parent.name,
        children=[ChildPayload(id=child.id, value=child.value) for child in parent.children],
    )


def payload_to_parent(payload: ParentPayload) -> Parent:
    return Parent.with_children(
        (Child(id=child.id, value=child.value) for child in payload.children),
        id=payload.id,
        name=payload.name,
    )


def encode_parent(parent: Parent, *, indent: int | None = None) -> str:
    """Serialise ``parent`` and its children to JSON text."""

    return parent_to_payload(parent).model_dump_json(by_alias=True, indent=indent)


def decode_parent(text: str | bytes) -> Parent:
    """Decode JSON text into a detached parent graph."""

    try:
        payload = ParentPayload.model_validate_json(text)
    except ValidationError as exc:
        raise PayloadDecodeError(f"Invalid parent payload: {exc}") from exc
    return payload_to_parent(payload)


def round_trip(parent: Parent) -> Parent:
    """Return a detached copy of ``parent`` that went through JSON and back."""

    return decode_parent(encode_parent(parent))

