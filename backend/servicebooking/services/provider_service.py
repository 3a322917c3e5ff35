# backend/servicebooking/services/provider_service.py
"""
Provider Service for the service booking platform.

Catalog management for providers: registration (with the user account that
manages the provider), lookups, partial updates, deletion and the set of
services a provider offers.
"""

from contextlib import contextmanager, nullcontext
import logging
from typing import Iterator, Optional

from sqlalchemy.orm import Session

from ..auth import get_password_hash
from ..core.enums import RoleName
from ..core.exceptions import ConflictException
from ..core.pagination import PagedResult, paginate
from ..core.provider_lock import ProviderLockManager, get_provider_lock_manager
from ..models.provider import Provider
from ..repositories import RepositoryFactory
from ..repositories.booking_repository import BookingRepository
from ..repositories.provider_repository import ProviderRepository
from ..repositories.service_offering_repository import ServiceOfferingRepository
from ..repositories.user_repository import UserRepository
from ..schemas.common import QueryParameters
from ..schemas.provider import ProviderCreate, ProviderServicesUpdate, ProviderUpdate
from ._catalog import blank_to_none, replace_members, resolve_requested_ids
from .base import BaseService

logger = logging.getLogger(__name__)


class ProviderService(BaseService):
    """Service layer for provider catalog operations."""

    def __init__(
        self,
        db: Session,
        repository: Optional[ProviderRepository] = None,
        service_offering_repository: Optional[ServiceOfferingRepository] = None,
        user_repository: Optional[UserRepository] = None,
        booking_repository: Optional[BookingRepository] = None,
        lock_manager: Optional[ProviderLockManager] = None,
    ):
        super().__init__(db)
        self.repository = repository or RepositoryFactory.create_provider_repository(db)
        self.service_offering_repository = (
            service_offering_repository or RepositoryFactory.create_service_offering_repository(db)
        )
        self.user_repository = user_repository or RepositoryFactory.create_user_repository(db)
        self.booking_repository = booking_repository or RepositoryFactory.create_booking_repository(db)
        self.lock_manager = lock_manager or get_provider_lock_manager()

    @contextmanager
    def _hold_admissions(self, provider_id: int) -> Iterator[None]:
        """Keep bookings for this provider from being admitted while capacity changes."""
        with self.lock_manager.hold(provider_id) as acquired:
            if not acquired:
                raise ConflictException(
                    "Provider is busy admitting bookings, retry the update",
                    code="PROVIDER_BUSY",
                    details={"provider_id": provider_id},
                )
            yield

    def _ensure_name_available(self, name: str, provider_id: Optional[int] = None) -> None:
        existing = self.repository.get_by_name(name)
        if existing is not None and existing.id != provider_id:
            raise ConflictException(
                "A provider with this name already exists",
                code="PROVIDER_NAME_TAKEN",
                details={"name": name},
            )

    @BaseService.measure_operation("register_provider")
    def register_provider(self, data: ProviderCreate) -> Provider:
        """
        Create a provider and the provider-role user that manages it, atomically.

        Raises:
            ConflictException: Provider name or email already registered
        """
        self.log_operation("register_provider", name=data.name, email=data.email)

        self._ensure_name_available(data.name)
        if self.user_repository.email_exists(data.email):
            raise ConflictException(
                "This email is already registered",
                code="EMAIL_TAKEN",
                details={"email": data.email},
            )

        with self.transaction():
            user = self.user_repository.create(
                name=data.user_name,
                email=data.email.lower(),
                hashed_password=get_password_hash(data.password),
                role=RoleName.PROVIDER.value,
            )
            provider = self.repository.create(
                name=data.name,
                description=data.description,
                logo_url=data.logo_url,
                concurrent_capacity=data.concurrent_capacity or 1,
                user_id=user.id,
            )

        self.logger.info("Provider %s registered for user %s", provider.id, user.id)
        return provider

    @BaseService.measure_operation("get_provider")
    def get_provider(self, provider_id: int) -> Optional[Provider]:
        return self.repository.get_with_services(provider_id)

    @BaseService.measure_operation("list_providers")
    def list_providers(self, params: QueryParameters) -> PagedResult[Provider]:
        return paginate(self.repository.list_query(), params.page_number, params.page_size)

    @BaseService.measure_operation("update_provider")
    def update_provider(self, provider_id: int, data: ProviderUpdate) -> Optional[Provider]:
        """
        Partially update a provider. Omitted, null and blank fields keep their value.

        Returns:
            The updated provider, or None if it does not exist
        """
        provider = self.repository.get_by_id(provider_id, load_relationships=False)
        if provider is None:
            return None

        changes = blank_to_none(data.model_dump(exclude_unset=True))
        if "name" in changes:
            self._ensure_name_available(changes["name"], provider_id)

        capacity_changes = "concurrent_capacity" in changes
        with self._hold_admissions(provider_id) if capacity_changes else nullcontext():
            with self.transaction():
                if capacity_changes:
                    self.repository.lock_for_update(provider_id)
                self.repository.update(provider_id, **changes)

        self.log_operation("update_provider", provider_id=provider_id, fields=sorted(changes))
        return provider

    @BaseService.measure_operation("delete_provider")
    def delete_provider(self, provider_id: int) -> bool:
        """
        Delete a provider that has never been booked.

        Raises:
            ConflictException: The provider has bookings
        """
        if not self.repository.exists(id=provider_id):
            return False
        if self.booking_repository.has_bookings_for_provider(provider_id):
            raise ConflictException(
                "Provider has bookings and cannot be deleted",
                code="PROVIDER_HAS_BOOKINGS",
                details={"provider_id": provider_id},
            )
        with self.transaction():
            deleted = self.repository.delete(provider_id)
        return deleted

    @BaseService.measure_operation("update_provider_services")
    def update_provider_services(
        self, provider_id: int, data: ProviderServicesUpdate
    ) -> Optional[Provider]:
        """
        Replace the services a provider offers with exactly ``data.service_ids``.

        Returns:
            The provider with its new services, or None if it does not exist

        Raises:
            ValidationException: The id list is null or contains unknown ids
        """
        provider = self.repository.get_with_services(provider_id)
        if provider is None:
            return None

        requested = data.service_ids
        found = self.service_offering_repository.get_by_ids(list(set(requested or [])))
        _, services = resolve_requested_ids(requested, found, "service_ids")

        with self.transaction():
            added, removed = replace_members(provider.services, services)
            self.repository.flush()

        self.log_operation(
            "update_provider_services", provider_id=provider_id, added=added, removed=removed
        )
        return provider
