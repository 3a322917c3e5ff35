# backend/tests/unit/test_unit_of_work.py
"""Tests for UnitOfWork and BaseService.transaction."""

from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from servicebooking.core.exceptions import ServiceException, ValidationException
from servicebooking.database.unit_of_work import UnitOfWork
from servicebooking.models import ServiceOffering
from servicebooking.services.base import BaseService


class TestUnitOfWork:
    def test_commit_counts_staged_changes(self, db):
        uow = UnitOfWork(db)
        db.add(ServiceOffering(name="Massage", total_hours=1))
        db.add(ServiceOffering(name="Facial", total_hours=1))

        assert uow.commit() == 2
        assert uow.committed is True
        assert uow.staged_changes() == 0

    def test_commit_twice_is_an_error(self, db):
        uow = UnitOfWork(db)
        uow.commit()
        with pytest.raises(RuntimeError):
            uow.commit()

    def test_rollback_discards_changes(self, db):
        uow = UnitOfWork(db)
        db.add(ServiceOffering(name="Massage", total_hours=1))
        db.flush()

        uow.rollback()

        assert db.query(ServiceOffering).count() == 0
        assert uow.staged_changes() == 0

    def test_non_integer_counter_reads_as_zero(self):
        session = MagicMock()
        session.info = {"staged_changes": "garbage"}
        assert UnitOfWork(session).staged_changes() == 0


class TestServiceTransaction:
    def test_commits_once_on_success(self, db):
        service = BaseService(db)

        with service.transaction():
            db.add(ServiceOffering(name="Massage", total_hours=1))

        assert service.last_committed_changes == 1
        db.expire_all()
        assert db.query(ServiceOffering).count() == 1

    def test_domain_errors_roll_back_and_propagate(self, db):
        service = BaseService(db)

        with pytest.raises(ValidationException):
            with service.transaction():
                db.add(ServiceOffering(name="Massage", total_hours=1))
                db.flush()
                raise ValidationException("nope")

        assert db.query(ServiceOffering).count() == 0

    def test_database_errors_become_service_exceptions(self, db):
        service = BaseService(db)
        failure = OperationalError("UPDATE", {}, Exception("disk full"))

        with pytest.raises(ServiceException) as exc_info:
            with service.transaction():
                raise failure

        assert exc_info.value.__cause__ is failure
