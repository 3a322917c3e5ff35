"""
Database models for the service booking platform.

- User: authentication identity with a single role
- Provider: bookable provider with a concurrent capacity, optionally owned by a user
- ServiceOffering: bookable service with a fixed duration in hours
- Booking: a reservation of provider capacity by a user for a service
"""

from .booking import Booking, BookingStatus
from .provider import Provider, provider_services
from .service_offering import ServiceOffering
from .user import User

__all__ = [
    "Booking",
    "BookingStatus",
    "Provider",
    "ServiceOffering",
    "User",
    "provider_services",
]
