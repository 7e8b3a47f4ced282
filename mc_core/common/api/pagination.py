# mc_core/common/api/pagination.py
from __future__ import annotations

from django.conf import settings
from rest_framework.pagination import PageNumberPagination
from rest_framework.response import Response


class DefaultPagination(PageNumberPagination):
    page_size = getattr(settings, "MC_PAGE_SIZE", 20)
    page_size_query_param = "page_size"
    max_page_size = 200


def paginate(request, queryset, serializer_class) -> Response:
    """
    List endpoints always answer {count, next, previous, results}.
    ViewSet (non-generic) views call this instead of relying on
    DEFAULT_PAGINATION_CLASS, which only GenericAPIView honours.
    """
    paginator = DefaultPagination()
    page = paginator.paginate_queryset(queryset, request)
    return paginator.get_paginated_response(serializer_class(page, many=True).data)
