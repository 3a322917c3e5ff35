# backend/servicebooking/routes/v1/bookings.py
"""
Booking routes - API v1

Versioned booking endpoints under /api/v1/bookings.
All business logic delegated to BookingService.

Endpoints:
    GET / - The current client's bookings (paginated)
    GET /provider-schedule - The current provider's bookings (paginated)
    GET /{booking_id} - Booking details (admin)
    POST / - Create a booking
    PUT /{booking_id} - Reschedule a booking
    PUT /{booking_id}/confirm - Confirm a booking (provider)
    DELETE /{booking_id} - Cancel a booking
"""

import logging

from fastapi import APIRouter, Depends, Path, Response, status

from ...api.dependencies import (
    get_booking_service,
    get_current_principal,
    get_query_parameters,
    require_admin,
    require_client,
    require_provider_or_admin,
)
from ...core.exceptions import NotAProviderException, NotFoundException
from ...principal import Principal
from ...schemas.base_responses import PaginatedResponse
from ...schemas.booking import BookingCreate, BookingReschedule, BookingResponse
from ...schemas.common import QueryParameters
from ...services.booking_service import BookingService
from ._pagination import paginated_response

logger = logging.getLogger(__name__)

# V1 router - no prefix here, will be added when mounting in main.py
router = APIRouter(tags=["bookings-v1"])


def _booking_not_found(booking_id: int) -> NotFoundException:
    return NotFoundException(
        "Booking not found", code="BOOKING_NOT_FOUND", details={"booking_id": booking_id}
    )


@router.get("", response_model=PaginatedResponse[BookingResponse])
def list_my_bookings(
    response: Response,
    params: QueryParameters = Depends(get_query_parameters),
    principal: Principal = Depends(require_client),
    booking_service: BookingService = Depends(get_booking_service),
) -> PaginatedResponse[BookingResponse]:
    """List the current client's bookings, earliest first."""
    paged = booking_service.get_bookings_for_user(principal.user_id, params)
    return paginated_response(response, paged, BookingResponse.from_booking)


@router.get("/provider-schedule", response_model=PaginatedResponse[BookingResponse])
def get_provider_schedule(
    response: Response,
    params: QueryParameters = Depends(get_query_parameters),
    principal: Principal = Depends(require_provider_or_admin),
    booking_service: BookingService = Depends(get_booking_service),
) -> PaginatedResponse[BookingResponse]:
    """List the bookings made against the current user's provider profile."""
    paged = booking_service.get_bookings_for_provider(principal.user_id, params)
    if paged is None:
        raise NotAProviderException(principal.user_id)
    return paginated_response(response, paged, BookingResponse.from_booking)


@router.get("/{booking_id}", response_model=BookingResponse)
def get_booking(
    booking_id: int = Path(..., ge=1),
    _: Principal = Depends(require_admin),
    booking_service: BookingService = Depends(get_booking_service),
) -> BookingResponse:
    booking = booking_service.get_booking(booking_id)
    if booking is None:
        raise _booking_not_found(booking_id)
    return BookingResponse.from_booking(booking)


@router.post("", response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
def create_booking(
    payload: BookingCreate,
    response: Response,
    principal: Principal = Depends(require_client),
    booking_service: BookingService = Depends(get_booking_service),
) -> BookingResponse:
    """
    Book a provider for a service.

    Returns 409 SLOT_UNAVAILABLE when the provider is fully booked in the window.
    """
    booking = booking_service.create_booking(payload, principal.user_id)
    response.headers["Location"] = f"/api/v1/bookings/{booking.id}"
    return BookingResponse.from_booking(booking)


@router.put("/{booking_id}", response_model=BookingResponse)
def reschedule_booking(
    payload: BookingReschedule,
    booking_id: int = Path(..., ge=1),
    principal: Principal = Depends(require_client),
    booking_service: BookingService = Depends(get_booking_service),
) -> BookingResponse:
    booking = booking_service.update_booking(booking_id, principal.user_id, payload)
    if booking is None:
        raise _booking_not_found(booking_id)
    return BookingResponse.from_booking(booking)


@router.put("/{booking_id}/confirm", response_model=BookingResponse)
def confirm_booking(
    booking_id: int = Path(..., ge=1),
    principal: Principal = Depends(require_provider_or_admin),
    booking_service: BookingService = Depends(get_booking_service),
) -> BookingResponse:
    booking = booking_service.confirm_booking(booking_id, principal.user_id)
    if booking is None:
        raise _booking_not_found(booking_id)
    return BookingResponse.from_booking(booking)


@router.delete("/{booking_id}", status_code=status.HTTP_204_NO_CONTENT)
def cancel_booking(
    booking_id: int = Path(..., ge=1),
    principal: Principal = Depends(get_current_principal),
    booking_service: BookingService = Depends(get_booking_service),
) -> Response:
    """Cancel a booking as its client, or as its provider when signed in as one."""
    cancelled = booking_service.cancel_booking(
        booking_id, principal.user_id, acting_as_provider=principal.is_provider
    )
    if not cancelled:
        raise _booking_not_found(booking_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
