"""Shared schema plumbing: camelCase wire names and the response envelope."""

from __future__ import annotations

from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class CamelModel(BaseModel):
    """camelCase on the wire, snake_case in Python. Both are accepted on input."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class OkResponse(BaseModel, Generic[T]):
    ok: bool = True
    result: T


class DeleteResult(BaseModel):
    success: bool = True
