import math
from typing import Any, Dict


class CustomPaginator:
    """
    Page/limit window over a known total.

    Pages past the end are not an error: they produce an empty window with
    accurate metadata.
    """
    page_size = 15

    def __init__(self, page: int = 1, limit: int = None):
        self.page = page
        self.limit = limit if limit is not None else self.page_size

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    def total_pages(self, total: int) -> int:
        if self.limit <= 0:
            return 0
        return math.ceil(total / self.limit)

    def get_paginated_data(self, total: int, total_key: str = 'totalItems') -> Dict[str, Any]:
        total_pages = self.total_pages(total)
        return {
            'page': self.page,
            'limit': self.limit,
            total_key: total,
            'totalPages': total_pages,
            'hasNext': self.page < total_pages,
            'hasPrev': self.page > 1,
        }

