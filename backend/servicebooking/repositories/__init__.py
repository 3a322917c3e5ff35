"""
Repository layer for the service booking platform.

Repositories encapsulate every query; they flush but never commit.
"""

from .base_repository import BaseRepository, IRepository
from .booking_repository import BookingRepository
from .conflict_checker_repository import ConflictCheckerRepository
from .factory import RepositoryFactory
from .provider_repository import ProviderRepository
from .service_offering_repository import ServiceOfferingRepository
from .user_repository import UserRepository

__all__ = [
    "BaseRepository",
    "BookingRepository",
    "ConflictCheckerRepository",
    "IRepository",
    "ProviderRepository",
    "RepositoryFactory",
    "ServiceOfferingRepository",
    "UserRepository",
]
