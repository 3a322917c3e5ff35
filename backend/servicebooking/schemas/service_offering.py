"""Service offering schemas."""

from typing import List, Optional

from pydantic import Field

from ..core.constants import MAX_DESCRIPTION_LENGTH, MAX_NAME_LENGTH
from ._strict_base import ORMResponseModel, StrictRequestModel


class ServiceOfferingCreate(StrictRequestModel):
    name: str = Field(..., min_length=1, max_length=MAX_NAME_LENGTH)
    description: Optional[str] = Field(None, max_length=MAX_DESCRIPTION_LENGTH)
    total_hours: Optional[int] = Field(None, ge=1, description="Booking length in hours (default 1)")


class ServiceOfferingUpdate(StrictRequestModel):
    """Partial update; blank strings are ignored."""

    name: Optional[str] = Field(None, max_length=MAX_NAME_LENGTH)
    description: Optional[str] = Field(None, max_length=MAX_DESCRIPTION_LENGTH)
    total_hours: Optional[int] = Field(None, ge=1)


class ServiceProvidersUpdate(StrictRequestModel):
    """Replace the set of providers offering a service."""

    provider_ids: Optional[List[int]] = Field(..., description="Complete new set of provider ids")


class ProviderSummary(ORMResponseModel):
    id: int
    name: str
    concurrent_capacity: int


class ServiceOfferingResponse(ORMResponseModel):
    id: int
    name: str
    description: Optional[str] = None
    total_hours: int


class ServiceOfferingDetailResponse(ServiceOfferingResponse):
    providers: List[ProviderSummary] = Field(default_factory=list)
