# backend/servicebooking/core/enums.py
"""
Core enums for the service booking platform.

Roles are stored on the user row as plain strings; these enums are the
authoritative set of values accepted by the API and the token claims.
"""

from enum import Enum


class RoleName(str, Enum):
    """
    Roles a principal can act under.

    Clients book services, providers confirm and cancel bookings against
    their own profile, admins manage the provider/service catalog.
    """

    CLIENT = "client"
    PROVIDER = "provider"
    ADMIN = "admin"


class BookingStatus(str, Enum):
    """Booking lifecycle statuses."""

    PENDING = "pending"  # Initial state, awaiting provider confirmation
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"  # Reserved for a future scheduled job, never set by the API

    @classmethod
    def active(cls) -> tuple["BookingStatus", ...]:
        """Statuses that hold provider capacity."""
        return (cls.PENDING, cls.CONFIRMED, cls.COMPLETED)
