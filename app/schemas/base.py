"""
Base Pydantic schemas with common fields.

These are templates that other schemas inherit from. Field names are
snake_case in Python and camelCase on the wire.
"""

from datetime import datetime
from typing import Annotated, Generic, List, TypeVar

from pydantic import AfterValidator, BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from app.utils.time import as_utc


T = TypeVar("T")

# SQLite hands back naive datetimes; everything leaving the API is UTC-aware.
UtcDatetime = Annotated[datetime, AfterValidator(as_utc)]


class ApiModel(BaseModel):
    """
    Base schema for request/response bodies.

    Accepts both ``page_size`` and ``pageSize`` on input and serializes
    camelCase by alias.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class StrictApiModel(ApiModel):
    """Request body that rejects unknown fields."""

    model_config = ConfigDict(extra="forbid")


class Page(ApiModel, Generic[T]):
    """One page of a filtered, sorted listing."""

    items: List[T]
    total: int
    page: int
    page_size: int
    total_pages: int

    @classmethod
    def build(cls, items: List[T], total: int, page: int, page_size: int) -> "Page[T]":
        total_pages = (total + page_size - 1) // page_size if page_size else 0
        return cls(
            items=items,
            total=total,
            page=page,
            page_size=page_size,
            total_pages=total_pages,
        )
