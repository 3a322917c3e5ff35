# backend/servicebooking/services/booking_service.py
"""
Booking Service for the service booking platform.

Handles the booking lifecycle:
- Creating bookings against a provider's concurrent capacity
- Rescheduling (provider and/or start time), which re-enters admission
- Provider confirmation
- Cancellation by the booking's client or provider
- Booking queries (single, a client's bookings, a provider's schedule)

Admission (capacity check plus write) runs under the provider's admission
lock and inside one unit of work; the lock is released only after commit.
"""

from contextlib import contextmanager
from datetime import datetime, timedelta
import logging
from typing import Any, Dict, Iterator, Optional

from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.exceptions import (
    InvalidBookingStateException,
    NotAProviderException,
    NotBookingOwnerException,
    NotFoundException,
    RepositoryException,
    ServiceException,
    SlotUnavailableException,
)
from ..core.pagination import PagedResult, paginate
from ..core.provider_lock import ProviderLockManager, get_provider_lock_manager
from ..core.timezone_utils import to_naive_utc
from ..models.booking import Booking, BookingStatus
from ..models.provider import Provider
from ..models.service_offering import ServiceOffering
from ..models.user import User
from ..monitoring.prometheus_metrics import prometheus_metrics
from ..repositories import RepositoryFactory
from ..repositories.booking_repository import BookingRepository
from ..repositories.provider_repository import ProviderRepository
from ..repositories.service_offering_repository import ServiceOfferingRepository
from ..repositories.user_repository import UserRepository
from ..schemas.booking import BookingCreate, BookingReschedule
from ..schemas.common import QueryParameters
from .base import BaseService
from .capacity_checker import CapacityChecker

logger = logging.getLogger(__name__)

# PostgreSQL SQLSTATEs that mean "another admission got there first"
_CONFLICT_SQLSTATES = {
    "23505",  # unique_violation
    "23P01",  # exclusion_violation
    "40001",  # serialization_failure
    "40P01",  # deadlock_detected
    "55P03",  # lock_not_available
}
_CONFLICT_MESSAGES = (
    "deadlock detected",
    "exclusion constraint",
    "could not serialize",
    "lock timeout",
    "database is locked",
)


class BookingService(BaseService):
    """
    Service layer for booking operations.

    Collaborators are injected through the constructor; anything not given
    is built from the session.
    """

    def __init__(
        self,
        db: Session,
        repository: Optional[BookingRepository] = None,
        provider_repository: Optional[ProviderRepository] = None,
        service_offering_repository: Optional[ServiceOfferingRepository] = None,
        user_repository: Optional[UserRepository] = None,
        capacity_checker: Optional[CapacityChecker] = None,
        lock_manager: Optional[ProviderLockManager] = None,
    ):
        super().__init__(db)
        self.repository = repository or RepositoryFactory.create_booking_repository(db)
        self.provider_repository = (
            provider_repository or RepositoryFactory.create_provider_repository(db)
        )
        self.service_offering_repository = (
            service_offering_repository or RepositoryFactory.create_service_offering_repository(db)
        )
        self.user_repository = user_repository or RepositoryFactory.create_user_repository(db)
        self.capacity_checker = capacity_checker or CapacityChecker(db)
        self.lock_manager = lock_manager or get_provider_lock_manager()

    # Conflict translation

    @staticmethod
    def _is_admission_conflict(exc: Optional[BaseException]) -> bool:
        """True for database errors raised when a concurrent admission won the race."""
        if exc is None:
            return False
        if isinstance(exc, IntegrityError):
            return True
        if isinstance(exc, OperationalError):
            orig = getattr(exc, "orig", None)
            pgcode = getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)
            if pgcode in _CONFLICT_SQLSTATES:
                return True
            message = str(exc).lower()
            return any(marker in message for marker in _CONFLICT_MESSAGES)
        return False

    @contextmanager
    def _provider_admission(
        self, provider_id: int, conflict_details: Dict[str, Any]
    ) -> Iterator[Provider]:
        """
        Serialize admission for one provider and run the body as one unit of work.

        Yields the provider row re-read (and row-locked where supported) inside
        the transaction. Losing a race in any form surfaces as SlotUnavailable.
        """
        with self.lock_manager.hold(provider_id) as acquired:
            if not acquired:
                prometheus_metrics.record_admission("slot_unavailable")
                raise SlotUnavailableException(
                    details={**conflict_details, "reason": "provider_busy"}
                )
            try:
                with self.transaction():
                    provider = self.provider_repository.lock_for_update(provider_id)
                    if provider is None:
                        raise NotFoundException(
                            "Provider not found",
                            code="PROVIDER_NOT_FOUND",
                            details={"provider_id": provider_id},
                        )
                    yield provider
            except SlotUnavailableException:
                prometheus_metrics.record_admission("slot_unavailable")
                raise
            except (ServiceException, RepositoryException) as exc:
                if self._is_admission_conflict(exc.__cause__):
                    prometheus_metrics.record_admission("slot_unavailable")
                    raise SlotUnavailableException(details=conflict_details) from exc
                raise
            except SQLAlchemyError as exc:
                if self._is_admission_conflict(exc):
                    prometheus_metrics.record_admission("slot_unavailable")
                    raise SlotUnavailableException(details=conflict_details) from exc
                raise
        prometheus_metrics.record_admission("admitted")

    # Lookups

    def _require_provider(self, provider_id: int) -> Provider:
        provider = self.provider_repository.get_by_id(provider_id, load_relationships=False)
        if provider is None:
            raise NotFoundException(
                "Provider not found",
                code="PROVIDER_NOT_FOUND",
                details={"provider_id": provider_id},
            )
        return provider

    def _require_service(self, service_offering_id: int) -> ServiceOffering:
        service = self.service_offering_repository.get_by_id(
            service_offering_id, load_relationships=False
        )
        if service is None:
            raise NotFoundException(
                "Service offering not found",
                code="SERVICE_OFFERING_NOT_FOUND",
                details={"service_offering_id": service_offering_id},
            )
        return service

    def _require_user(self, user_id: int) -> User:
        user = self.user_repository.get_by_id(user_id, load_relationships=False)
        if user is None:
            raise NotFoundException(
                "User not found", code="USER_NOT_FOUND", details={"user_id": user_id}
            )
        return user

    @staticmethod
    def _window_for(service: ServiceOffering, initial_date: datetime) -> tuple[datetime, datetime]:
        start = to_naive_utc(initial_date)
        return start, start + timedelta(hours=service.total_hours)

    # Commands

    @BaseService.measure_operation("create_booking")
    def create_booking(self, data: BookingCreate, user_id: int) -> Booking:
        """
        Create a pending booking if the provider has capacity left in the window.

        Args:
            data: Provider, service offering and start of the booking
            user_id: The client making the booking

        Returns:
            The created booking

        Raises:
            NotFoundException: Provider, service offering or user does not exist
            SlotUnavailableException: The provider is fully booked in the window
        """
        self.log_operation(
            "create_booking",
            user_id=user_id,
            provider_id=data.provider_id,
            service_offering_id=data.service_offering_id,
            initial_date=data.initial_date,
        )

        self._require_provider(data.provider_id)
        service = self._require_service(data.service_offering_id)
        user = self._require_user(user_id)
        initial_date, final_date = self._window_for(service, data.initial_date)

        conflict_details = {
            "provider_id": data.provider_id,
            "initial_date": initial_date.isoformat(),
            "final_date": final_date.isoformat(),
        }
        with self._provider_admission(data.provider_id, conflict_details) as provider:
            self.capacity_checker.ensure_capacity(provider, initial_date, final_date)
            booking = self.repository.create(
                service_offering_id=service.id,
                provider_id=provider.id,
                user_id=user.id,
                status=BookingStatus.PENDING.value,
                initial_date=initial_date,
                final_date=final_date,
            )

        self.logger.info(
            "Booking %s created for provider %s [%s, %s)",
            booking.id,
            booking.provider_id,
            initial_date,
            final_date,
        )
        return booking

    @BaseService.measure_operation("update_booking")
    def update_booking(
        self, booking_id: int, user_id: int, data: BookingReschedule
    ) -> Optional[Booking]:
        """
        Reschedule a client's booking to a new provider and/or start time.

        Omitted fields keep the booking's current value. The window length always
        comes from the booking's service offering. A successful reschedule puts the
        booking back to pending.

        Returns:
            The rescheduled booking, or None if the user has no such booking

        Raises:
            InvalidBookingStateException: The booking is completed
            NotFoundException: The requested provider does not exist
            SlotUnavailableException: The effective provider has no capacity left
        """
        self.log_operation(
            "update_booking",
            booking_id=booking_id,
            user_id=user_id,
            provider_id=data.provider_id,
            initial_date=data.initial_date,
        )

        booking = self.repository.get_by_id_and_user(booking_id, user_id)
        if booking is None:
            return None
        if booking.is_terminal:
            raise InvalidBookingStateException(booking.id, booking.status, "reschedule")

        effective_provider_id = data.provider_id or booking.provider_id
        if effective_provider_id != booking.provider_id:
            self._require_provider(effective_provider_id)
        initial_date, final_date = self._window_for(
            booking.service_offering, data.initial_date or booking.initial_date
        )

        conflict_details = {
            "booking_id": booking.id,
            "provider_id": effective_provider_id,
            "initial_date": initial_date.isoformat(),
            "final_date": final_date.isoformat(),
        }
        with self._provider_admission(effective_provider_id, conflict_details) as provider:
            self.capacity_checker.ensure_capacity(
                provider, initial_date, final_date, exclude_booking_id=booking.id
            )
            booking.reschedule(provider.id, initial_date, final_date)
            self.repository.flush()

        # provider_id changed under the relationship; reload it for callers
        self.db.refresh(booking)
        return booking

    @BaseService.measure_operation("confirm_booking")
    def confirm_booking(self, booking_id: int, user_id: int) -> Optional[Booking]:
        """
        Confirm a pending booking on behalf of the provider owning it.

        The pending check is repeated by the write itself, so a booking that was
        cancelled or moved to another provider after it was read is not confirmed.

        Returns:
            The confirmed booking, or None if the booking does not exist

        Raises:
            NotAProviderException: The user has no provider profile
            NotBookingOwnerException: The booking belongs to another provider
            InvalidBookingStateException: The booking is not pending
        """
        self.log_operation("confirm_booking", booking_id=booking_id, user_id=user_id)

        booking = self.repository.get_booking_with_details(booking_id)
        if booking is None:
            return None

        provider = self.provider_repository.get_by_user_id(user_id)
        if provider is None:
            raise NotAProviderException(user_id)
        if booking.provider_id != provider.id:
            raise NotBookingOwnerException(booking.id, provider.id)
        if not booking.is_confirmable:
            raise InvalidBookingStateException(booking.id, booking.status, "confirm")

        with self.transaction():
            confirmed = self.repository.transition_status(
                booking.id,
                (BookingStatus.PENDING,),
                BookingStatus.CONFIRMED,
                provider_id=provider.id,
            )
        self.db.refresh(booking)

        if not confirmed:
            if booking.provider_id != provider.id:
                raise NotBookingOwnerException(booking.id, provider.id)
            raise InvalidBookingStateException(booking.id, booking.status, "confirm")

        self.logger.info("Booking %s confirmed by provider %s", booking.id, provider.id)
        return booking

    @BaseService.measure_operation("cancel_booking")
    def cancel_booking(self, booking_id: int, user_id: int, acting_as_provider: bool) -> bool:
        """
        Cancel a booking as its client or as its provider.

        A booking the actor cannot see (missing, or owned by someone else) is
        reported the same way: False, with nothing changed. Cancelling an
        already-cancelled booking succeeds without writing.

        Raises:
            InvalidBookingStateException: The booking is completed
        """
        self.log_operation(
            "cancel_booking",
            booking_id=booking_id,
            user_id=user_id,
            acting_as_provider=acting_as_provider,
        )

        if acting_as_provider:
            provider = self.provider_repository.get_by_user_id(user_id)
            if provider is None:
                return False
            booking = self.repository.get_by_id_and_provider(booking_id, provider.id)
            scope = {"provider_id": provider.id}
        else:
            booking = self.repository.get_by_id_and_user(booking_id, user_id)
            scope = {"user_id": user_id}

        if booking is None:
            return False
        if booking.is_terminal:
            raise InvalidBookingStateException(booking.id, booking.status, "cancel")
        if booking.status == BookingStatus.CANCELLED:
            return True

        with self.transaction():
            cancelled = self.repository.transition_status(
                booking.id,
                (BookingStatus.PENDING, BookingStatus.CONFIRMED),
                BookingStatus.CANCELLED,
                **scope,
            )
        self.db.refresh(booking)

        if not cancelled:
            # Changed since it was read: moved away from this provider, or no longer active
            if acting_as_provider and booking.provider_id != scope["provider_id"]:
                return False
            if booking.is_terminal:
                raise InvalidBookingStateException(booking.id, booking.status, "cancel")
            return booking.status == BookingStatus.CANCELLED

        self.logger.info("Booking %s cancelled", booking.id)
        return True

    # Queries

    @BaseService.measure_operation("get_booking")
    def get_booking(self, booking_id: int) -> Optional[Booking]:
        return self.repository.get_booking_with_details(booking_id)

    @BaseService.measure_operation("get_bookings_for_user")
    def get_bookings_for_user(self, user_id: int, params: QueryParameters) -> PagedResult[Booking]:
        """A client's bookings, earliest first."""
        return paginate(
            self.repository.user_bookings_query(user_id), params.page_number, params.page_size
        )

    @BaseService.measure_operation("get_bookings_for_provider")
    def get_bookings_for_provider(
        self, user_id: int, params: QueryParameters
    ) -> Optional[PagedResult[Booking]]:
        """
        The schedule of the provider owned by ``user_id``.

        Returns None when the user has no provider profile.
        """
        provider = self.provider_repository.get_by_user_id(user_id)
        if provider is None:
            return None
        return paginate(
            self.repository.provider_bookings_query(provider.id),
            params.page_number,
            params.page_size,
        )
