"""Helpers turning a PagedResult into a list response."""

import json
from typing import Any, Callable, TypeVar

from fastapi import Response

from ...core.constants import PAGINATION_HEADER
from ...core.pagination import PagedResult
from ...schemas.base_responses import PaginatedResponse

T = TypeVar("T")


def paginated_response(
    response: Response, paged: PagedResult[T], to_item: Callable[[T], Any]
) -> PaginatedResponse[Any]:
    """Build the response body and mirror its metadata in the X-Pagination header."""
    response.headers[PAGINATION_HEADER] = json.dumps(paged.metadata())
    return PaginatedResponse.from_paged(paged, [to_item(item) for item in paged.items])
