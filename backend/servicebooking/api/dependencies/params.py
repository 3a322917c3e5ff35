"""Query parameter dependencies."""

from fastapi import Query

from ...core.constants import DEFAULT_PAGE_SIZE
from ...schemas.common import QueryParameters


def get_query_parameters(
    page_number: int = Query(1, ge=1, description="1-based page index"),
    page_size: int = Query(DEFAULT_PAGE_SIZE, ge=1, description="Items per page (capped)"),
) -> QueryParameters:
    return QueryParameters(page_number=page_number, page_size=page_size)
