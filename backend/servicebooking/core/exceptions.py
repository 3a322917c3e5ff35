# backend/servicebooking/core/exceptions.py
"""
Domain-specific exceptions for the service booking platform.

These exceptions provide clear, business-focused error messages
that can be caught and handled appropriately at the API layer.
"""

from typing import Any, Dict, Optional

from fastapi import HTTPException, status


class DomainException(Exception):
    """Base exception for all domain-specific errors."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_http_exception(self) -> HTTPException:
        """Convert to an HTTPException carrying the structured detail payload."""
        return HTTPException(
            status_code=self.status_code,
            detail={
                "message": self.message,
                "code": self.code,
                "details": self.details,
            },
        )


class ValidationException(DomainException):
    """Raised when business validation fails."""

    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundException(DomainException):
    """Raised when a requested resource is not found."""

    status_code = status.HTTP_404_NOT_FOUND


class ConflictException(DomainException):
    """Raised when there's a conflict with existing data."""

    status_code = status.HTTP_409_CONFLICT


class UnauthorizedException(DomainException):
    """Raised when user is not authenticated."""

    status_code = status.HTTP_401_UNAUTHORIZED


class ForbiddenException(DomainException):
    """Raised when user lacks permission for an action."""

    status_code = status.HTTP_403_FORBIDDEN


class ServiceException(DomainException):
    """Raised when a service operation fails."""

    def to_http_exception(self) -> HTTPException:
        return HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "message": "An error occurred processing your request",
                "code": self.code,
                "details": {},
            },
        )


# Specific business exceptions


class BookingConflictException(ConflictException):
    """Raised when a booking conflicts with existing bookings."""

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        code: str = "BOOKING_CONFLICT",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message=message or "This time slot conflicts with an existing booking",
            code=code,
            details=details or {},
        )


class SlotUnavailableException(BookingConflictException):
    """Raised when a provider has no remaining capacity for the requested window."""

    def __init__(self, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message="This time slot is not available for the selected provider",
            code="SLOT_UNAVAILABLE",
            details=details,
        )


class NotAProviderException(ForbiddenException):
    """Raised when the acting user has no provider profile."""

    def __init__(self, user_id: int):
        super().__init__(
            message="The current user is not associated with a provider profile",
            code="NOT_A_PROVIDER",
            details={"user_id": user_id},
        )


class NotBookingOwnerException(ForbiddenException):
    """Raised when a provider acts on a booking made against another provider."""

    def __init__(self, booking_id: int, provider_id: int):
        super().__init__(
            message="This booking does not belong to your provider profile",
            code="NOT_BOOKING_OWNER",
            details={"booking_id": booking_id, "provider_id": provider_id},
        )


class InvalidBookingStateException(ConflictException):
    """Raised when a transition is not allowed from the booking's current status."""

    _PAST_TENSE = {"confirm": "confirmed", "cancel": "cancelled", "reschedule": "rescheduled"}

    def __init__(self, booking_id: int, current_status: str, action: str):
        verb = self._PAST_TENSE.get(action, action)
        super().__init__(
            message=f"Booking cannot be {verb} from status '{current_status}'",
            code=f"CANNOT_{action.upper()}",
            details={"booking_id": booking_id, "status": current_status},
        )


class RepositoryException(Exception):
    """
    Exception raised for repository layer errors.

    This exception is used when data access operations fail,
    such as database connection issues, query failures, or
    constraint violations.
    """
