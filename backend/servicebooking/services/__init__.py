"""
Service layer for the service booking platform.

Services hold the business rules and own the commit boundary; repositories
below them only query and flush.
"""

from .base import BaseService
from .booking_service import BookingService
from .capacity_checker import CapacityChecker
from .provider_service import ProviderService
from .service_offering_service import ServiceOfferingService
from .user_service import UserService

__all__ = [
    "BaseService",
    "BookingService",
    "CapacityChecker",
    "ProviderService",
    "ServiceOfferingService",
    "UserService",
]
