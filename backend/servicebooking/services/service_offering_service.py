# backend/servicebooking/services/service_offering_service.py
"""
Service Offering Service for the service booking platform.

Catalog management for service offerings. ``total_hours`` fixes the length
of every booking window made for the service.
"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from ..core.exceptions import ConflictException
from ..core.pagination import PagedResult, paginate
from ..models.service_offering import ServiceOffering
from ..repositories import RepositoryFactory
from ..repositories.booking_repository import BookingRepository
from ..repositories.provider_repository import ProviderRepository
from ..repositories.service_offering_repository import ServiceOfferingRepository
from ..schemas.common import QueryParameters
from ..schemas.service_offering import (
    ServiceOfferingCreate,
    ServiceOfferingUpdate,
    ServiceProvidersUpdate,
)
from ._catalog import blank_to_none, replace_members, resolve_requested_ids
from .base import BaseService

logger = logging.getLogger(__name__)


class ServiceOfferingService(BaseService):
    """Service layer for service offering catalog operations."""

    def __init__(
        self,
        db: Session,
        repository: Optional[ServiceOfferingRepository] = None,
        provider_repository: Optional[ProviderRepository] = None,
        booking_repository: Optional[BookingRepository] = None,
    ):
        super().__init__(db)
        self.repository = repository or RepositoryFactory.create_service_offering_repository(db)
        self.provider_repository = (
            provider_repository or RepositoryFactory.create_provider_repository(db)
        )
        self.booking_repository = booking_repository or RepositoryFactory.create_booking_repository(db)

    def _ensure_name_available(self, name: str, service_id: Optional[int] = None) -> None:
        existing = self.repository.get_by_name(name)
        if existing is not None and existing.id != service_id:
            raise ConflictException(
                "A service with this name already exists",
                code="SERVICE_NAME_TAKEN",
                details={"name": name},
            )

    @BaseService.measure_operation("register_service")
    def register_service(self, data: ServiceOfferingCreate) -> ServiceOffering:
        """
        Create a service offering; total_hours defaults to 1.

        Raises:
            ConflictException: Name already registered
        """
        self._ensure_name_available(data.name)
        with self.transaction():
            service = self.repository.create(
                name=data.name,
                description=data.description,
                total_hours=data.total_hours or 1,
            )
        self.log_operation("register_service", service_id=service.id, name=service.name)
        return service

    @BaseService.measure_operation("get_service")
    def get_service(self, service_id: int) -> Optional[ServiceOffering]:
        return self.repository.get_with_providers(service_id)

    @BaseService.measure_operation("list_services")
    def list_services(self, params: QueryParameters) -> PagedResult[ServiceOffering]:
        return paginate(self.repository.list_query(), params.page_number, params.page_size)

    @BaseService.measure_operation("update_service")
    def update_service(
        self, service_id: int, data: ServiceOfferingUpdate
    ) -> Optional[ServiceOffering]:
        """
        Partially update a service offering.

        Existing bookings keep their windows; only new and rescheduled bookings
        use the new total_hours.
        """
        service = self.repository.get_by_id(service_id, load_relationships=False)
        if service is None:
            return None

        changes = blank_to_none(data.model_dump(exclude_unset=True))
        if "name" in changes:
            self._ensure_name_available(changes["name"], service_id)

        with self.transaction():
            self.repository.update(service_id, **changes)
        return service

    @BaseService.measure_operation("delete_service")
    def delete_service(self, service_id: int) -> bool:
        """
        Delete a service offering that no booking references.

        Raises:
            ConflictException: Bookings reference the service
        """
        if not self.repository.exists(id=service_id):
            return False
        if self.booking_repository.has_bookings_for_service(service_id):
            raise ConflictException(
                "Service has bookings and cannot be deleted",
                code="SERVICE_HAS_BOOKINGS",
                details={"service_offering_id": service_id},
            )
        with self.transaction():
            deleted = self.repository.delete(service_id)
        return deleted

    @BaseService.measure_operation("update_service_providers")
    def update_service_providers(
        self, service_id: int, data: ServiceProvidersUpdate
    ) -> Optional[ServiceOffering]:
        """
        Replace the providers offering a service with exactly ``data.provider_ids``.

        Raises:
            ValidationException: The id list is null or contains unknown ids
        """
        service = self.repository.get_with_providers(service_id)
        if service is None:
            return None

        requested = data.provider_ids
        found = self.provider_repository.get_by_ids(list(set(requested or [])))
        _, providers = resolve_requested_ids(requested, found, "provider_ids")

        with self.transaction():
            added, removed = replace_members(service.providers, providers)
            self.repository.flush()

        self.log_operation(
            "update_service_providers", service_id=service_id, added=added, removed=removed
        )
        return service
