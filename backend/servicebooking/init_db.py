"""
Create every table directly from the models.

Production schemas are managed by Alembic (``alembic upgrade head``); this is
for throwaway local SQLite databases.
"""

import logging

from servicebooking.database import Base, engine
from servicebooking.models import Booking, Provider, ServiceOffering, User  # noqa: F401

logger = logging.getLogger(__name__)


def init_db() -> None:
    logger.info("Creating database tables on %s", engine.url.render_as_string(hide_password=True))
    Base.metadata.create_all(bind=engine)


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    init_db()
