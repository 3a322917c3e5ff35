"""Shared request parameters."""

from pydantic import Field, field_validator

from ..core.constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from ._strict_base import StrictRequestModel


class QueryParameters(StrictRequestModel):
    """
    Page request for list operations.

    Page sizes above the maximum are clamped rather than rejected.
    """

    page_number: int = Field(default=1, ge=1, description="1-based page index")
    page_size: int = Field(default=DEFAULT_PAGE_SIZE, ge=1, description="Items per page")

    @field_validator("page_size")
    @classmethod
    def _clamp_page_size(cls, v: int) -> int:
        return min(v, MAX_PAGE_SIZE)
