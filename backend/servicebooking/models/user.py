# backend/servicebooking/models/user.py
"""
User model for the service booking platform.

A single table serves clients, providers and admins; the role column
decides what the principal may do. Provider users additionally own a
Provider profile (see models/provider.py).
"""

import logging
from typing import Optional

from sqlalchemy import CheckConstraint, Column, DateTime, Integer, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..core.constants import MAX_NAME_LENGTH
from ..core.enums import RoleName
from ..database import Base

logger = logging.getLogger(__name__)


class User(Base):
    """
    Authentication identity.

    Attributes:
        id: Primary key
        name: Display name
        email: Unique email address used for login
        hashed_password: Bcrypt hashed password
        role: One of RoleName values
        created_at: Account creation timestamp

    Relationships:
        provider_profile: Provider owned by this user (provider role only)
        bookings: Bookings made by this user
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(MAX_NAME_LENGTH), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    hashed_password = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False, default=RoleName.CLIENT.value)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    provider_profile = relationship("Provider", back_populates="user", uselist=False)
    bookings = relationship("Booking", back_populates="user")

    __table_args__ = (
        CheckConstraint("role IN ('client', 'provider', 'admin')", name="ck_users_role"),
    )

    @property
    def role_name(self) -> Optional[RoleName]:
        try:
            return RoleName(self.role)
        except ValueError:
            logger.warning("User %s has unknown role %r", self.id, self.role)
            return None

    def __repr__(self) -> str:
        return f"<User {self.email} ({self.role})>"
