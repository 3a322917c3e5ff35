# backend/servicebooking/api/dependencies/services.py
"""
Service layer dependencies for dependency injection.

This module provides factory functions that create service instances
with their required dependencies properly injected.
"""

import logging

from fastapi import Depends
from sqlalchemy.orm import Session

from ...core.provider_lock import get_provider_lock_manager
from ...services.booking_service import BookingService
from ...services.provider_service import ProviderService
from ...services.service_offering_service import ServiceOfferingService
from ...services.user_service import UserService
from .database import get_db

logger = logging.getLogger(__name__)


def get_booking_service(db: Session = Depends(get_db)) -> BookingService:
    """
    Get booking service instance for dependency injection.

    The provider admission lock manager is process-wide; everything else is
    bound to the request session.
    """
    return BookingService(db, lock_manager=get_provider_lock_manager())


def get_provider_service(db: Session = Depends(get_db)) -> ProviderService:
    return ProviderService(db, lock_manager=get_provider_lock_manager())


def get_service_offering_service(db: Session = Depends(get_db)) -> ServiceOfferingService:
    return ServiceOfferingService(db)


def get_user_service(db: Session = Depends(get_db)) -> UserService:
    return UserService(db)
