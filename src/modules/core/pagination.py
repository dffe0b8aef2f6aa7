"""Page/limit pagination shared by every list endpoint.

Query parameters:

- ``page``: 1-based page number (default 1, clamped to >= 1).
- ``limit``: page size (default 10, clamped to 1..50).

Non-numeric values fall back to the defaults instead of failing the request.
Pages past the end answer with an empty ``results`` list.

Response shape::

    {
        "results": [...],
        "pagination": {
            "total": 42, "pages": 5, "current": 1,
            "hasNext": true, "hasPrev": false, "limit": 10
        }
    }
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

from rest_framework.pagination import BasePagination
from rest_framework.response import Response

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 50


@dataclass(frozen=True)
class PaginationParams:
    page: int
    limit: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def _parse_int(value: Optional[str], default: int) -> int:
    if value is None:
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def get_pagination_params(
    page: Optional[str] = None, limit: Optional[str] = None
) -> PaginationParams:
    """Normalise raw ``page`` / ``limit`` query values."""
    page_num = max(1, _parse_int(page, DEFAULT_PAGE))
    limit_num = max(1, min(MAX_LIMIT, _parse_int(limit, DEFAULT_LIMIT)))
    return PaginationParams(page=page_num, limit=limit_num)


def get_paging_data(
    total: int, results: Sequence[Any], page: int, limit: int
) -> Dict[str, Any]:
    """Build the paginated envelope for an already-sliced page of results."""
    pages = math.ceil(total / limit)
    return {
        "results": list(results),
        "pagination": {
            "total": total,
            "pages": pages,
            "current": page,
            "hasNext": page < pages,
            "hasPrev": page > 1,
            "limit": limit,
        },
    }


class StandardResultsSetPagination(BasePagination):
    """DRF adapter around ``get_pagination_params`` / ``get_paging_data``."""

    page_query_param = "page"
    limit_query_param = "limit"

    def paginate_queryset(self, queryset, request, view=None) -> List[Any]:
        self.params = get_pagination_params(
            request.query_params.get(self.page_query_param),
            request.query_params.get(self.limit_query_param),
        )
        if isinstance(queryset, (list, tuple)):
            self.total = len(queryset)
        else:
            self.total = queryset.count()
        start = self.params.offset
        return list(queryset[start : start + self.params.limit])

    def get_paginated_response(self, data) -> Response:
        return Response(
            get_paging_data(self.total, data, self.params.page, self.params.limit)
        )

    def get_paginated_response_schema(self, schema: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "type": "object",
            "required": ["results", "pagination"],
            "properties": {
                "results": schema,
                "pagination": {
                    "type": "object",
                    "properties": {
                        "total": {"type": "integer"},
                        "pages": {"type": "integer"},
                        "current": {"type": "integer"},
                        "hasNext": {"type": "boolean"},
                        "hasPrev": {"type": "boolean"},
                        "limit": {"type": "integer"},
                    },
                },
            },
        }
