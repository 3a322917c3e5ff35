"""Provider schemas."""

from typing import List, Optional

from pydantic import EmailStr, Field

from ..core.constants import (
    MAX_DESCRIPTION_LENGTH,
    MAX_NAME_LENGTH,
    MAX_PASSWORD_LENGTH,
    MIN_PASSWORD_LENGTH,
)
from ._strict_base import ORMResponseModel, StrictRequestModel


class ProviderCreate(StrictRequestModel):
    """Register a provider together with the user account that manages it."""

    user_name: str = Field(..., min_length=1, max_length=MAX_NAME_LENGTH)
    email: EmailStr
    password: str = Field(..., min_length=MIN_PASSWORD_LENGTH, max_length=MAX_PASSWORD_LENGTH)
    name: str = Field(..., min_length=1, max_length=MAX_NAME_LENGTH)
    description: Optional[str] = Field(None, max_length=MAX_DESCRIPTION_LENGTH)
    logo_url: Optional[str] = Field(None, max_length=500)
    concurrent_capacity: Optional[int] = Field(None, ge=1)


class ProviderUpdate(StrictRequestModel):
    """Partial update; blank strings are ignored."""

    name: Optional[str] = Field(None, max_length=MAX_NAME_LENGTH)
    description: Optional[str] = Field(None, max_length=MAX_DESCRIPTION_LENGTH)
    logo_url: Optional[str] = Field(None, max_length=500)
    concurrent_capacity: Optional[int] = Field(None, ge=1)


class ProviderServicesUpdate(StrictRequestModel):
    """Replace the set of services a provider offers."""

    service_ids: Optional[List[int]] = Field(..., description="Complete new set of service ids")


class ServiceSummary(ORMResponseModel):
    id: int
    name: str
    total_hours: int


class ProviderResponse(ORMResponseModel):
    id: int
    name: str
    description: Optional[str] = None
    logo_url: Optional[str] = None
    concurrent_capacity: int
    user_id: Optional[int] = None


class ProviderDetailResponse(ProviderResponse):
    services: List[ServiceSummary] = Field(default_factory=list)
