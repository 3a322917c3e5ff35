# backend/servicebooking/api/dependencies/__init__.py
"""
Centralized dependency injection for FastAPI routes.
"""

from .auth import (
    get_current_principal,
    require_admin,
    require_client,
    require_provider_or_admin,
    require_roles,
)
from .database import get_db
from .params import get_query_parameters
from .services import (
    get_booking_service,
    get_provider_service,
    get_service_offering_service,
    get_user_service,
)

__all__ = [
    "get_booking_service",
    "get_current_principal",
    "get_db",
    "get_provider_service",
    "get_query_parameters",
    "get_service_offering_service",
    "get_user_service",
    "require_admin",
    "require_client",
    "require_provider_or_admin",
    "require_roles",
]
