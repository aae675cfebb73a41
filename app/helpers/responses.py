# app/helpers/responses.py
from math import ceil
from typing import Generic, Optional, TypeVar

from fastapi import Query
from pydantic import BaseModel, Field

T = TypeVar("T")


class Pagination(BaseModel):
    current_page: int
    total_pages: int
    total_items: int
    items_per_page: int


class PageParams(BaseModel):
    page: int = Field(1, ge=1)
    limit: int = Field(10, ge=1, le=100)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def page_params(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
) -> PageParams:
    """Query-string dependency: ?page=&limit="""
    return PageParams(page=page, limit=limit)


class ApiResponse(BaseModel, Generic[T]):
    """Envelope shared by every endpoint: {success, data?, message?, pagination?}."""

    success: bool = True
    message: Optional[str] = None
    data: Optional[T] = None
    pagination: Optional[Pagination] = None


def paginate(total: int, params: PageParams) -> Pagination:
    return Pagination(
        current_page=params.page,
        total_pages=ceil(total / params.limit) if total else 0,
        total_items=total,
        items_per_page=params.limit,
    )
