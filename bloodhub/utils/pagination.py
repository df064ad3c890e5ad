# Create pagination dependency
import math
from typing import Annotated

from fastapi import Query
from pydantic import BaseModel, Field

# (MAX_PAGE - 1) * 100 fits a signed 64-bit offset
MAX_PAGE = 1_000_000


class PaginationParams(BaseModel):
    page: int = Field(default=1, ge=1, le=MAX_PAGE, description="Page number (1-based)")
    limit: int = Field(default=10, ge=1, le=100, description="Items per page (max 100)")

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    def total_pages(self, total_items: int) -> int:
        return math.ceil(total_items / self.limit)


def get_pagination_params(
    page: Annotated[
        int, Query(ge=1, le=MAX_PAGE, description="Page number (1-based)")
    ] = 1,
    limit: Annotated[
        int, Query(ge=1, le=100, description="Items per page (max 100)")
    ] = 10,
) -> PaginationParams:
    return PaginationParams(page=page, limit=limit)
