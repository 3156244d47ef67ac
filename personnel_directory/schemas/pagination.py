from typing import Generic, TypeVar
from pydantic import BaseModel

T = TypeVar("T")


class PaginationMeta(BaseModel):
    """Pagination metadata"""
    total: int
    page: int
    limit: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    def has_more(self, returned: int) -> bool:
        return self.offset + returned < self.total


class RowsResponse(BaseModel, Generic[T]):
    """Page of rows plus the total matching before truncation"""
    success: bool = True
    total: int
    page: int
    limit: int
    rowsReturned: int
    hasMore: bool
    rows: list[T]

    @classmethod
    def build(cls, rows: list[T], meta: PaginationMeta) -> "RowsResponse[T]":
        return cls(
            total=meta.total,
            page=meta.page,
            limit=meta.limit,
            rowsReturned=len(rows),
            hasMore=meta.has_more(len(rows)),
            rows=rows,
        )
