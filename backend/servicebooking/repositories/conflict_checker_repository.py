# backend/servicebooking/repositories/conflict_checker_repository.py
"""
ConflictChecker Repository for the service booking platform.

Read-only queries answering "how many active bookings of this provider
overlap this window". Windows are half-open, so a booking ending exactly
when another starts does not overlap it.
"""

from datetime import datetime
import logging
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Query, Session

from ..models.booking import Booking, BookingStatus
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class ConflictCheckerRepository(BaseRepository[Booking]):
    """Repository for conflict checking data access."""

    def __init__(self, db: Session):
        """Initialize with Booking model as primary."""
        super().__init__(db, Booking)
        self.logger = logging.getLogger(__name__)

    def _overlapping(
        self,
        query: Query,
        provider_id: int,
        window_start: datetime,
        window_end: datetime,
        exclude_booking_id: Optional[int],
    ) -> Query:
        query = query.filter(
            Booking.provider_id == provider_id,
            Booking.status != BookingStatus.CANCELLED.value,
            Booking.initial_date < window_end,
            Booking.final_date > window_start,
        )
        if exclude_booking_id is not None:
            query = query.filter(Booking.id != exclude_booking_id)
        return query

    def count_conflicting_bookings(
        self,
        provider_id: int,
        window_start: datetime,
        window_end: datetime,
        exclude_booking_id: Optional[int] = None,
    ) -> int:
        """
        Count active bookings of a provider overlapping ``[window_start, window_end)``.

        Args:
            provider_id: Provider whose capacity is being checked
            window_start: Inclusive start of the requested window (naive UTC)
            window_end: Exclusive end of the requested window (naive UTC)
            exclude_booking_id: Booking to ignore, used when rescheduling it

        Returns:
            Number of overlapping non-cancelled bookings
        """
        query = self._overlapping(
            self.db.query(func.count(Booking.id)),
            provider_id,
            window_start,
            window_end,
            exclude_booking_id,
        )
        return int(self._execute_scalar(query) or 0)
