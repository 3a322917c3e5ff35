# backend/servicebooking/repositories/factory.py
"""
Repository Factory for the service booking platform.

Provides centralized creation of repository instances,
ensuring consistent initialization and dependency injection.
"""

from typing import TYPE_CHECKING

from sqlalchemy.orm import Session

# Avoid circular imports
if TYPE_CHECKING:
    from .booking_repository import BookingRepository
    from .conflict_checker_repository import ConflictCheckerRepository
    from .provider_repository import ProviderRepository
    from .service_offering_repository import ServiceOfferingRepository
    from .user_repository import UserRepository


class RepositoryFactory:
    """
    Factory class for creating repository instances.

    Centralizes repository creation to ensure consistent initialization
    and makes it easy to swap implementations if needed.
    """

    @staticmethod
    def create_conflict_checker_repository(db: Session) -> "ConflictCheckerRepository":
        """Create repository for conflict checking queries."""
        from .conflict_checker_repository import ConflictCheckerRepository

        return ConflictCheckerRepository(db)

    @staticmethod
    def create_booking_repository(db: Session) -> "BookingRepository":
        """Create repository for booking operations."""
        from .booking_repository import BookingRepository

        return BookingRepository(db)

    @staticmethod
    def create_provider_repository(db: Session) -> "ProviderRepository":
        """Create repository for provider operations."""
        from .provider_repository import ProviderRepository

        return ProviderRepository(db)

    @staticmethod
    def create_service_offering_repository(db: Session) -> "ServiceOfferingRepository":
        """Create repository for service offering operations."""
        from .service_offering_repository import ServiceOfferingRepository

        return ServiceOfferingRepository(db)

    @staticmethod
    def create_user_repository(db: Session) -> "UserRepository":
        """Create repository for user operations."""
        from .user_repository import UserRepository

        return UserRepository(db)
