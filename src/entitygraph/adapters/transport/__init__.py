"""JSON transport adapter for parent graphs."""

from __future__ import annotations

from .schema import ChildPayload, ParentPayload
from .translator import (
    PayloadDecodeError,
    decode_parent,
    encode_parent,
    parent_to_payload,
    payload_to_parent,
    round_trip,
)

__all__ = [
    "ChildPayload",
    "ParentPayload",
    "PayloadDecodeError",
    "decode_parent",
    "encode_parent",
    "parent_to_payload",
    "payload_to_parent",
    "round_trip",
]
