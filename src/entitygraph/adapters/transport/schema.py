"""Pydantic models describing the JSON representation of a parent graph.

Wire names are PascalCase (``Id``, ``Name``, ``Children``, ``Value``) as sent by
the API layer; field names are accepted as well. A missing or ``null`` ``Id``
means "not yet persisted"; an empty string is rejected rather than coerced.
"""

from __future__ import annotations

from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_pascal


class TransportBaseModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_pascal,
        populate_by_name=True,
        extra="ignore",
    )


class ChildPayload(TransportBaseModel):
    id: UUID | None = None
    value: str | None


class ParentPayload(TransportBaseModel):
    id: UUID | None = None
    name: str | None = None
    children: list[ChildPayload] = Field(default_factory=list["ChildPayload"])
