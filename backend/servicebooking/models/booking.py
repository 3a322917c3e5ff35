# backend/servicebooking/models/booking.py
"""
Booking model for the service booking platform.

A booking reserves one unit of a provider's concurrent capacity over the
half-open window ``[initial_date, final_date)``. Bookings are never deleted:
cancellation is a status transition, and cancelled bookings stop holding
capacity.

Dates are stored as naive UTC.
"""

from datetime import datetime
import logging
from typing import Any

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Index, Integer, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..core.enums import BookingStatus
from ..database import Base

logger = logging.getLogger(__name__)

__all__ = ["Booking", "BookingStatus"]


class Booking(Base):
    """
    Reservation of provider capacity by a user for a service offering.

    Status lifecycle: pending -> confirmed, any non-terminal -> cancelled,
    reschedule resets to pending. ``completed`` is terminal and reserved.
    """

    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, autoincrement=True)

    service_offering_id = Column(Integer, ForeignKey("service_offerings.id"), nullable=False)
    provider_id = Column(Integer, ForeignKey("providers.id"), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    status = Column(String(20), nullable=False, default=BookingStatus.PENDING.value, index=True)
    initial_date = Column(DateTime, nullable=False)
    final_date = Column(DateTime, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    service_offering = relationship("ServiceOffering", back_populates="bookings")
    provider = relationship("Provider", back_populates="bookings")
    user = relationship("User", back_populates="bookings")

    __table_args__ = (
        CheckConstraint("final_date > initial_date", name="ck_bookings_window_positive"),
        CheckConstraint(
            "status IN ('pending', 'confirmed', 'cancelled', 'completed')",
            name="ck_bookings_status",
        ),
        Index("ix_bookings_provider_window", "provider_id", "initial_date", "final_date"),
    )

    def __init__(self, **kwargs: Any) -> None:
        kwargs.setdefault("status", BookingStatus.PENDING.value)
        super().__init__(**kwargs)

    def __repr__(self) -> str:
        return (
            f"<Booking {self.id} provider={self.provider_id} user={self.user_id} "
            f"{self.initial_date}-{self.final_date} {self.status}>"
        )

    @property
    def is_terminal(self) -> bool:
        return self.status == BookingStatus.COMPLETED

    @property
    def is_confirmable(self) -> bool:
        return self.status == BookingStatus.PENDING

    def reschedule(self, provider_id: int, initial_date: datetime, final_date: datetime) -> None:
        """Move the booking to a new provider/window; it needs confirmation again."""
        self.provider_id = provider_id
        self.initial_date = initial_date
        self.final_date = final_date
        self.status = BookingStatus.PENDING.value
        logger.info("Booking %s rescheduled to provider %s at %s", self.id, provider_id, initial_date)
