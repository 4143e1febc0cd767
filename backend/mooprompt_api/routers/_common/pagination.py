"""
Page-based pagination for list endpoints.

Usage:
    from mooprompt_api.routers._common.pagination import PageParams, get_page_params

    @router.get("/users")
    def list_users(paging: PageParams = Depends(get_page_params)):
        items, total = service.list(page=paging.page, limit=paging.limit)
        return {"users": items, "pagination": paging.to_pagination(total)}
"""

from dataclasses import dataclass

from fastapi import Query

from shared.config.constants import Limits
from shared.utils.flow_schemas import Pagination


@dataclass
class PageParams:
    """
    Page number (1-indexed) and page size.

    Values are clamped rather than rejected: page below 1 becomes 1,
    limit is kept within 1..max_limit.
    """

    page: int
    limit: int
    max_limit: int = Limits.MAX_PAGE_SIZE

    def __post_init__(self):
        self.page = max(1, self.page)
        self.limit = min(max(1, self.limit), self.max_limit)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    def to_pagination(self, total: int) -> Pagination:
        total_pages = (total + self.limit - 1) // self.limit if total else 0
        return Pagination(page=self.page, limit=self.limit, total=total, total_pages=total_pages)


def get_page_params(
    page: int = Query(default=1, description="Page number, starting at 1"),
    limit: int = Query(default=Limits.DEFAULT_PAGE_SIZE, description="Items per page"),
) -> PageParams:
    """FastAPI dependency for page-based pagination."""
    return PageParams(page=page, limit=limit)
