"""
Base response schemas for standardized API responses.

These schemas ensure consistent response formats across all API endpoints.
"""

from typing import Any, Generic, List, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from ..core.pagination import PagedResult

T = TypeVar("T")


class PaginatedResponse(BaseModel, Generic[T]):
    """
    Standard paginated response for all list endpoints.

    The same metadata is also sent as JSON in the ``X-Pagination`` header.
    """

    items: List[T] = Field(description="List of items")
    total: int = Field(description="Total number of items", ge=0)
    page: int = Field(default=1, description="Current page number", ge=1)
    per_page: int = Field(default=10, description="Items per page", ge=1)
    total_pages: int = Field(description="Total number of pages", ge=0)
    has_next: bool = Field(description="Whether there's a next page")
    has_prev: bool = Field(description="Whether there's a previous page")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "items": ["..."],
                "total": 42,
                "page": 1,
                "per_page": 10,
                "total_pages": 5,
                "has_next": True,
                "has_prev": False,
            }
        }
    )

    @classmethod
    def from_paged(cls, paged: PagedResult[Any], items: List[Any]) -> "PaginatedResponse[Any]":
        return cls(
            items=items,
            total=paged.total_count,
            page=paged.page_number,
            per_page=paged.page_size,
            total_pages=paged.total_pages,
            has_next=paged.has_next_page,
            has_prev=paged.has_previous_page,
        )


class TokenResponse(BaseModel):
    """Bearer token issued on login."""

    access_token: str
    token_type: str = "bearer"
    expires_in: int = Field(description="Token lifetime in seconds")


class HealthResponse(BaseModel):
    status: str = Field(description="Service health status")
    service: str = Field(description="Service name")
    version: str = Field(description="API version")
    database: str = Field(description="Database connectivity")
