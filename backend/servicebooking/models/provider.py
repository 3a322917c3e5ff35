# backend/servicebooking/models/provider.py
"""
Provider model.

A provider offers one or more service offerings and can hold at most
``concurrent_capacity`` bookings whose time windows overlap.
"""

from sqlalchemy import CheckConstraint, Column, ForeignKey, Integer, String, Table
from sqlalchemy.orm import relationship

from ..core.constants import MAX_DESCRIPTION_LENGTH, MAX_NAME_LENGTH
from ..database import Base

provider_services = Table(
    "provider_services",
    Base.metadata,
    Column("provider_id", Integer, ForeignKey("providers.id", ondelete="CASCADE"), primary_key=True),
    Column(
        "service_offering_id",
        Integer,
        ForeignKey("service_offerings.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)


class Provider(Base):
    """
    Bookable provider.

    Attributes:
        id: Primary key
        name: Unique provider name
        description: Optional description
        logo_url: Optional logo reference
        concurrent_capacity: Max simultaneous bookings in any overlapping window (>= 1)
        user_id: Owning user, nullable (catalog entries may exist without a login)
    """

    __tablename__ = "providers"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(MAX_NAME_LENGTH), nullable=False, unique=True)
    description = Column(String(MAX_DESCRIPTION_LENGTH), nullable=True)
    logo_url = Column(String(500), nullable=True)
    concurrent_capacity = Column(Integer, nullable=False, default=1)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True, unique=True)

    user = relationship("User", back_populates="provider_profile")
    services = relationship(
        "ServiceOffering",
        secondary=provider_services,
        back_populates="providers",
        order_by="ServiceOffering.id",
    )
    bookings = relationship("Booking", back_populates="provider", passive_deletes=True)

    __table_args__ = (
        CheckConstraint("concurrent_capacity >= 1", name="ck_providers_capacity_positive"),
    )

    def __repr__(self) -> str:
        return f"<Provider {self.id} {self.name!r} capacity={self.concurrent_capacity}>"
