# backend/servicebooking/services/capacity_checker.py
"""
Capacity Checker Service for the service booking platform.

Answers whether a provider can take one more booking in a time window:
a window is admissible while the number of active bookings overlapping it
stays below the provider's concurrent capacity. Read-only; the caller holds
whatever lock makes the answer stable until it writes.
"""

from datetime import datetime
import logging
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from ..core.exceptions import SlotUnavailableException
from ..models.provider import Provider
from ..repositories import RepositoryFactory
from ..repositories.conflict_checker_repository import ConflictCheckerRepository
from .base import BaseService

logger = logging.getLogger(__name__)


class CapacityChecker(BaseService):
    """Service for checking provider capacity against overlapping bookings."""

    def __init__(self, db: Session, repository: Optional[ConflictCheckerRepository] = None):
        """
        Initialize capacity checker service.

        Args:
            db: Database session
            repository: Optional ConflictCheckerRepository instance
        """
        super().__init__(db)
        self.logger = logging.getLogger(__name__)
        self.repository = repository or RepositoryFactory.create_conflict_checker_repository(db)

    @BaseService.measure_operation("conflicting_count")
    def conflicting_count(
        self,
        provider_id: int,
        window_start: datetime,
        window_end: datetime,
        exclude_booking_id: Optional[int] = None,
    ) -> int:
        """
        Count active bookings of a provider overlapping ``[window_start, window_end)``.

        Args:
            provider_id: Provider to check
            window_start: Start of the window (naive UTC)
            window_end: End of the window (naive UTC), exclusive
            exclude_booking_id: Booking to leave out, the one being rescheduled

        Returns:
            Number of overlapping bookings whose status is not cancelled
        """
        return self.repository.count_conflicting_bookings(
            provider_id, window_start, window_end, exclude_booking_id
        )

    def ensure_capacity(
        self,
        provider: Provider,
        window_start: datetime,
        window_end: datetime,
        exclude_booking_id: Optional[int] = None,
    ) -> None:
        """
        Raise when admitting one more booking would exceed the provider's capacity.

        Raises:
            SlotUnavailableException: conflicting_count >= concurrent_capacity
        """
        count = self.conflicting_count(provider.id, window_start, window_end, exclude_booking_id)
        if count >= provider.concurrent_capacity:
            details: Dict[str, Any] = {
                "provider_id": provider.id,
                "initial_date": window_start.isoformat(),
                "final_date": window_end.isoformat(),
                "concurrent_capacity": provider.concurrent_capacity,
                "conflicting_bookings": count,
            }
            self.logger.info("Provider %s has no capacity left: %s", provider.id, details)
            raise SlotUnavailableException(details=details)
