# backend/servicebooking/repositories/booking_repository.py
"""
Booking Repository for the service booking platform.

Implements data access for booking management:
- Booking CRUD operations (inherited)
- Ownership-scoped lookups for clients and providers
- Booking relationships eager loading
- Ordered list queries consumed by the pagination engine
"""

import logging
from typing import Any, Iterable, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Query, Session, joinedload

from ..core.exceptions import RepositoryException
from ..models.booking import Booking, BookingStatus
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class BookingRepository(BaseRepository[Booking]):
    """Repository for booking data access."""

    def __init__(self, db: Session):
        super().__init__(db, Booking)
        self.logger = logging.getLogger(__name__)

    def create(self, **kwargs: Any) -> Booking:
        """Create a booking, exposing integrity errors for conflict handling."""
        try:
            return super().create(**kwargs)
        except RepositoryException as exc:
            if isinstance(exc.__cause__, IntegrityError):
                raise exc.__cause__
            raise

    # Ownership-scoped lookups

    def get_by_id_and_user(self, booking_id: int, user_id: int) -> Optional[Booking]:
        """Booking made by ``user_id``, or None (missing and foreign look the same)."""
        try:
            return (
                self._apply_eager_loading(self.db.query(Booking))
                .filter(Booking.id == booking_id, Booking.user_id == user_id)
                .first()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting booking {booking_id} for user {user_id}: {str(e)}")
            raise RepositoryException(f"Failed to get booking: {str(e)}") from e

    def get_by_id_and_provider(self, booking_id: int, provider_id: int) -> Optional[Booking]:
        """Booking made against ``provider_id``, or None."""
        try:
            return (
                self._apply_eager_loading(self.db.query(Booking))
                .filter(Booking.id == booking_id, Booking.provider_id == provider_id)
                .first()
            )
        except SQLAlchemyError as e:
            self.logger.error(
                f"Error getting booking {booking_id} for provider {provider_id}: {str(e)}"
            )
            raise RepositoryException(f"Failed to get booking: {str(e)}") from e

    def get_booking_with_details(self, booking_id: int) -> Optional[Booking]:
        """Get booking with provider, service offering and user loaded."""
        return self.get_by_id(booking_id, load_relationships=True)

    # Guarded status writes

    def transition_status(
        self,
        booking_id: int,
        from_statuses: Iterable[BookingStatus],
        to_status: BookingStatus,
        **scope: Any,
    ) -> bool:
        """
        Move a booking to ``to_status`` only if it is still in one of ``from_statuses``.

        The status test and the write are one UPDATE, so a transition that
        raced another writer matches no row. ``scope`` adds equality filters
        (user_id, provider_id) that must also still hold.

        Returns:
            True if the row was updated
        """
        try:
            query = self.db.query(Booking).filter(
                Booking.id == booking_id,
                Booking.status.in_([status.value for status in from_statuses]),
            )
            if scope:
                query = query.filter_by(**scope)
            result = query.update({Booking.status: to_status.value}, synchronize_session=False)
            return result > 0
        except SQLAlchemyError as e:
            self.logger.error(f"Error moving booking {booking_id} to {to_status.value}: {str(e)}")
            raise RepositoryException(f"Failed to update booking status: {str(e)}") from e

    # List queries

    def user_bookings_query(self, user_id: int) -> Query:
        """Bookings made by a user, earliest window first."""
        return (
            self._apply_eager_loading(self.db.query(Booking))
            .filter(Booking.user_id == user_id)
            .order_by(Booking.initial_date, Booking.id)
        )

    def provider_bookings_query(self, provider_id: int) -> Query:
        """A provider's schedule, earliest window first."""
        return (
            self._apply_eager_loading(self.db.query(Booking))
            .filter(Booking.provider_id == provider_id)
            .order_by(Booking.initial_date, Booking.id)
        )

    def has_bookings_for_provider(self, provider_id: int) -> bool:
        return self.exists(provider_id=provider_id)

    def has_bookings_for_service(self, service_offering_id: int) -> bool:
        return self.exists(service_offering_id=service_offering_id)

    def _apply_eager_loading(self, query: Query) -> Query:
        return query.options(
            joinedload(Booking.provider),
            joinedload(Booking.service_offering),
            joinedload(Booking.user),
        )
