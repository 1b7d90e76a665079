"""Pagination window and paginated result models.

A Window is validated once at the service boundary; everything downstream
(cache keys, SQL LIMIT/OFFSET, hasMore) trusts it.
"""

from dataclasses import dataclass
from typing import Generic, TypeVar

from pydantic import BaseModel

from src.bl_common.errors import InvalidPaginationError

DEFAULT_LIMIT = 10
MAX_LIMIT = 100

T = TypeVar("T")


@dataclass(frozen=True)
class Window:
    limit: int
    offset: int

    @classmethod
    def of(cls, limit: int = DEFAULT_LIMIT, offset: int = 0) -> "Window":
        if limit < 1 or limit > MAX_LIMIT:
            raise InvalidPaginationError(f"limit must be between 1 and {MAX_LIMIT}, got {limit}")
        if offset < 0:
            raise InvalidPaginationError(f"offset must be >= 0, got {offset}")
        return cls(limit=limit, offset=offset)


class PaginationInfo(BaseModel):
    total: int
    limit: int
    offset: int
    has_more: bool

    @classmethod
    def for_window(cls, total: int, window: Window) -> "PaginationInfo":
        return cls(
            total=total,
            limit=window.limit,
            offset=window.offset,
            has_more=window.offset + window.limit < total,
        )


class Page(BaseModel, Generic[T]):
    items: list[T]
    pagination: PaginationInfo
