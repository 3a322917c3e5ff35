"""
Unit of work: the single commit boundary for one logical operation.

Repositories only flush; a service stages every mutation of an operation and
then commits once through this object. Failures roll the whole operation back.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from sqlalchemy import event
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)

_STAGED_KEY = "staged_changes"


@event.listens_for(Session, "before_flush")
def _count_staged_changes(session: Session, flush_context: Any, instances: Any) -> None:
    """Accumulate the number of entity changes each flush sends to the database."""
    modified = [obj for obj in session.dirty if session.is_modified(obj)]
    session.info[_STAGED_KEY] = (
        session.info.get(_STAGED_KEY, 0) + len(session.new) + len(modified) + len(session.deleted)
    )


class UnitOfWork:
    """
    Commit boundary wrapping one session.

    Usage:
        uow = UnitOfWork(db)
        ...stage changes through repositories...
        changes = uow.commit()
    """

    def __init__(self, db: Session) -> None:
        self.db = db
        self._committed = False

    @property
    def committed(self) -> bool:
        return self._committed

    def staged_changes(self) -> int:
        value = self.db.info.get(_STAGED_KEY, 0)
        return value if isinstance(value, int) else 0

    def commit(self) -> int:
        """
        Flush outstanding changes and commit.

        Returns:
            Number of entity inserts/updates/deletes committed
        """
        if self._committed:
            raise RuntimeError("Unit of work already committed")
        self.db.flush()
        changes = self.staged_changes()
        self.db.commit()
        self.db.info[_STAGED_KEY] = 0
        self._committed = True
        logger.debug("Unit of work committed %d change(s)", changes)
        return changes

    def rollback(self, reason: Optional[BaseException] = None) -> None:
        self.db.rollback()
        self.db.info[_STAGED_KEY] = 0
        if reason is not None:
            logger.debug("Unit of work rolled back: %s", reason)
