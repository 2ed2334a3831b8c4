"""
Utilities for pagination.
"""

import math
from typing import Any, Dict, Optional

from fastapi import Query, Request

from library_api.core.config import Settings, get_settings

# Keeps the row offset inside a 64-bit integer for any page size
MAX_PAGE = 1_000_000


class PaginationParams:
    """
    Paging and sorting query parameters shared by the list endpoints.

    ``page`` and ``limit`` are clamped rather than rejected: page below 1
    becomes 1 and limit is kept within ``[1, MAX_PAGE_SIZE]``. Only a page above
    ``MAX_PAGE`` is rejected (422). The services only ever see the resulting
    ``skip``/``limit``.
    """

    def __init__(
        self,
        request: Request,
        page: int = Query(1, le=MAX_PAGE, description="Page number, starting from 1"),
        limit: Optional[int] = Query(None, description="Number of items per page"),
        sort_by: Optional[str] = Query(None, alias="sortBy", description="Field to sort by"),
        sort_order: str = Query(
            "asc", alias="sortOrder", pattern="^(asc|desc)$", description="asc or desc"
        ),
    ):
        settings: Settings = getattr(request.app.state, "settings", None) or get_settings()
        self.page = max(1, page)
        size = settings.DEFAULT_PAGE_SIZE if limit is None else limit
        self.size = min(settings.MAX_PAGE_SIZE, max(1, size))
        self.sort_by = sort_by
        self.sort_order = sort_order

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.size

    @property
    def limit(self) -> int:
        return self.size

    def meta(self, total: int) -> Dict[str, Any]:
        """Pagination block for list responses."""
        return {
            "page": self.page,
            "limit": self.size,
            "total": total,
            "totalPages": math.ceil(total / self.size) if total else 0,
        }
