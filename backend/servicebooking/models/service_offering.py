# backend/servicebooking/models/service_offering.py
"""Service offering model: a bookable service with a fixed duration."""

from sqlalchemy import CheckConstraint, Column, Integer, String
from sqlalchemy.orm import relationship

from ..core.constants import MAX_DESCRIPTION_LENGTH, MAX_NAME_LENGTH
from ..database import Base
from .provider import provider_services


class ServiceOffering(Base):
    """
    Bookable service.

    ``total_hours`` fixes the length of every booking made for this service:
    ``final_date = initial_date + total_hours``.
    """

    __tablename__ = "service_offerings"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(MAX_NAME_LENGTH), nullable=False, unique=True)
    description = Column(String(MAX_DESCRIPTION_LENGTH), nullable=True)
    total_hours = Column(Integer, nullable=False, default=1)

    providers = relationship(
        "Provider",
        secondary=provider_services,
        back_populates="services",
        order_by="Provider.id",
    )
    bookings = relationship("Booking", back_populates="service_offering", passive_deletes=True)

    __table_args__ = (
        CheckConstraint("total_hours >= 1", name="ck_service_offerings_hours_positive"),
    )

    def __repr__(self) -> str:
        return f"<ServiceOffering {self.id} {self.name!r} {self.total_hours}h>"
