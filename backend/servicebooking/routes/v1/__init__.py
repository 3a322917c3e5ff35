# backend/servicebooking/routes/v1/__init__.py
"""
API v1 Routes

Versioned API endpoints under /api/v1.
"""

from . import auth, bookings, health, providers, services, users

__all__ = [
    "auth",
    "bookings",
    "health",
    "providers",
    "services",
    "users",
]
