# backend/servicebooking/schemas/booking.py
"""
Booking schemas.

Request datetimes may carry an offset; they are normalized to naive UTC
before reaching the service layer.
"""

from datetime import datetime
from typing import Optional

from pydantic import ConfigDict, Field, field_validator

from ..core.enums import BookingStatus
from ..core.timezone_utils import to_naive_utc, to_naive_utc_optional
from ._strict_base import ORMResponseModel, StrictRequestModel


class BookingCreate(StrictRequestModel):
    """Reserve a provider for a service starting at ``initial_date``."""

    service_offering_id: int = Field(..., ge=1, description="Service being booked")
    provider_id: int = Field(..., ge=1, description="Provider to book")
    initial_date: datetime = Field(..., description="Start of the booking window")

    @field_validator("initial_date")
    @classmethod
    def _normalize_initial_date(cls, v: datetime) -> datetime:
        return to_naive_utc(v)


class BookingReschedule(StrictRequestModel):
    """
    Move a booking to another provider and/or start time.

    Omitted or null fields keep the booking's current value.
    """

    provider_id: Optional[int] = Field(None, ge=1, description="New provider")
    initial_date: Optional[datetime] = Field(None, description="New start of the window")

    @field_validator("initial_date")
    @classmethod
    def _normalize_initial_date(cls, v: Optional[datetime]) -> Optional[datetime]:
        return to_naive_utc_optional(v)


class BookingResponse(ORMResponseModel):
    id: int
    status: BookingStatus
    initial_date: datetime
    final_date: datetime
    provider_id: int
    provider_name: Optional[str] = None
    service_offering_id: int
    service_offering_name: Optional[str] = None
    user_id: int
    user_name: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)

    @classmethod
    def from_booking(cls, booking) -> "BookingResponse":
        return cls(
            id=booking.id,
            status=booking.status,
            initial_date=booking.initial_date,
            final_date=booking.final_date,
            provider_id=booking.provider_id,
            provider_name=booking.provider.name if booking.provider else None,
            service_offering_id=booking.service_offering_id,
            service_offering_name=(
                booking.service_offering.name if booking.service_offering else None
            ),
            user_id=booking.user_id,
            user_name=booking.user.name if booking.user else None,
        )
