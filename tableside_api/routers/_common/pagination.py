"""
Standardized pagination for list endpoints.

Out-of-range values are clamped rather than rejected: ``limit`` to
[1, MAX_PAGE_SIZE] and ``offset`` to >= 0.

Usage:
    from tableside_api.routers._common.pagination import Pagination, get_pagination

    @router.get("/option-groups")
    def list_option_groups(pagination: Pagination = Depends(get_pagination), ...):
        service.list_groups(limit=pagination.limit, offset=pagination.offset)
"""

from dataclasses import dataclass

from fastapi import Query

from tableside_shared.config.constants import Limits


@dataclass
class Pagination:
    """
    Pagination parameters.

    Attributes:
        limit: Maximum items per page (1 to max_limit)
        offset: Number of items to skip
        max_limit: Maximum allowed limit
    """

    limit: int
    offset: int
    max_limit: int = Limits.MAX_PAGE_SIZE

    def __post_init__(self):
        self.limit = min(max(1, self.limit), self.max_limit)
        self.offset = max(0, self.offset)

    @property
    def page(self) -> int:
        """Current page number (1-indexed)."""
        return (self.offset // self.limit) + 1


def get_pagination(
    limit: int = Query(
        default=Limits.DEFAULT_PAGE_SIZE,
        description="Maximum number of items to return (clamped to 1..100)",
    ),
    offset: int = Query(
        default=0,
        description="Number of items to skip",
    ),
) -> Pagination:
    """FastAPI dependency for pagination."""
    return Pagination(limit=limit, offset=offset)
