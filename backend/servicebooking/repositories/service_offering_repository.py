# backend/servicebooking/repositories/service_offering_repository.py
"""Service offering repository."""

import logging
from typing import Optional

from sqlalchemy.orm import Query, Session, selectinload

from ..models.service_offering import ServiceOffering
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class ServiceOfferingRepository(BaseRepository[ServiceOffering]):
    """Repository for service offering data access."""

    def __init__(self, db: Session):
        super().__init__(db, ServiceOffering)
        self.logger = logging.getLogger(__name__)

    def get_by_name(self, name: str) -> Optional[ServiceOffering]:
        return self.find_one_by(name=name)

    def get_with_providers(self, service_id: int) -> Optional[ServiceOffering]:
        return self.get_by_id(service_id, load_relationships=True)

    def _apply_eager_loading(self, query: Query) -> Query:
        return query.options(selectinload(ServiceOffering.providers))
