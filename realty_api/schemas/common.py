"""
Shared schema building blocks: camelCase JSON models and pagination metadata.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import List
import math


class CamelModel(BaseModel):
    """Base schema exposing snake_case attributes as camelCase JSON keys."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class PaginationParams(BaseModel):
    """Validated page/limit pair."""

    page: int = Field(1, ge=1)
    limit: int = Field(10, ge=1)

    @property
    def skip(self) -> int:
        """Number of records before the requested page."""
        return (self.page - 1) * self.limit


def total_pages(total: int, limit: int) -> int:
    """Number of pages needed to show `total` records `limit` at a time."""
    return math.ceil(total / limit) if limit else 0


class PropertyPagination(CamelModel):
    """Pagination block returned with property pages."""

    current_page: int
    total_pages: int
    total_properties: int
    limit: int
    has_next: bool
    has_prev: bool

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "PropertyPagination":
        pages = total_pages(total, limit)
        return cls(
            current_page=page,
            total_pages=pages,
            total_properties=total,
            limit=limit,
            has_next=page < pages,
            has_prev=page > 1,
        )


class UserPagination(CamelModel):
    """Pagination block returned with user pages."""

    current_page: int
    total_pages: int
    total_users: int
    has_next_page: bool
    has_prev_page: bool
    limit: int

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "UserPagination":
        pages = total_pages(total, limit)
        return cls(
            current_page=page,
            total_pages=pages,
            total_users=total,
            has_next_page=page < pages,
            has_prev_page=page > 1,
            limit=limit,
        )


class MessageResponse(BaseModel):
    """Plain confirmation message."""

    message: str


class NotFoundResponse(CamelModel):
    """Body returned for unmatched API paths."""

    message: str
    available_endpoints: List[str]
