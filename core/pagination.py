"""Pagination helpers shared by list endpoints."""

import math

from rest_framework.pagination import PageNumberPagination

from core.views import api_response


def pagination_meta(page: int, limit: int, total: int) -> dict:
    return {
        "page": page,
        "limit": limit,
        "total": total,
        "totalPages": math.ceil(total / limit) if limit else 0,
    }


class CampusPagination(PageNumberPagination):
    """Page-number pagination using ``?page=`` and ``?limit=``."""

    page_size = 10
    page_size_query_param = "limit"
    max_page_size = 100

    def get_paginated_response(self, data, message: str = "OK"):
        return api_response(
            message,
            {
                "items": data,
                "pagination": pagination_meta(
                    self.page.number, self.page.paginator.per_page, self.page.paginator.count
                ),
            },
        )
