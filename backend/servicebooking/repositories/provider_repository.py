# backend/servicebooking/repositories/provider_repository.py
"""
Provider Repository for the service booking platform.

Besides plain lookups, exposes the row lock the booking service takes on a
provider while it admits a booking against that provider's capacity.
"""

import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Query, Session, selectinload

from ..core.exceptions import RepositoryException
from ..database.session_utils import supports_row_locks
from ..models.provider import Provider
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class ProviderRepository(BaseRepository[Provider]):
    """Repository for provider data access."""

    def __init__(self, db: Session):
        super().__init__(db, Provider)
        self.logger = logging.getLogger(__name__)

    def get_by_user_id(self, user_id: int) -> Optional[Provider]:
        """Provider profile owned by a user, or None when the user is not a provider."""
        return self.find_one_by(user_id=user_id)

    def get_by_name(self, name: str) -> Optional[Provider]:
        return self.find_one_by(name=name)

    def get_with_services(self, provider_id: int) -> Optional[Provider]:
        return self.get_by_id(provider_id, load_relationships=True)

    def lock_for_update(self, provider_id: int) -> Optional[Provider]:
        """
        Re-read a provider row, holding a row lock until the transaction ends.

        Concurrent admissions for the same provider queue behind this lock on
        server databases. SQLite has no row locks; the plain read is returned.
        """
        try:
            query = self.db.query(Provider).filter(Provider.id == provider_id)
            if supports_row_locks(self.db):
                query = query.with_for_update()
            else:
                query = query.populate_existing()
            return query.first()
        except SQLAlchemyError as e:
            self.logger.error(f"Error locking provider {provider_id}: {str(e)}")
            raise RepositoryException(f"Failed to lock provider: {str(e)}") from e

    def _apply_eager_loading(self, query: Query) -> Query:
        return query.options(selectinload(Provider.services))
