"""Pydantic schemas for list queries and paginated results."""

from datetime import datetime
from typing import Generic, List, Literal, Optional, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class ListQuery(BaseModel):
    """Validated pagination, filter and sort parameters of a listing request."""

    page_size: Optional[int] = None  # None means unbounded
    page: int = 1
    skip: int = 0
    user_id: Optional[str] = None
    user_name: Optional[str] = None
    resource_id: Optional[str] = None
    resource_name: Optional[str] = None
    description: Optional[str] = None
    starts_before: Optional[datetime] = None
    starts_after: Optional[datetime] = None
    ends_before: Optional[datetime] = None
    ends_after: Optional[datetime] = None
    sort_col: str
    sort_dir: Literal["asc", "desc"] = "asc"


class Page(BaseModel, Generic[T]):
    items: List[T]
    total: int
    page: int
    page_size: Optional[int] = None
    total_pages: int

    @classmethod
    def build(cls, items: List[T], total: int, query: ListQuery) -> "Page[T]":
        if query.page_size:
            total_pages = (total + query.page_size - 1) // query.page_size
        else:
            total_pages = 1 if total else 0
        return cls(
            items=items,
            total=total,
            page=query.page,
            page_size=query.page_size,
            total_pages=total_pages,
        )
