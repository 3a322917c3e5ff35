# backend/tests/unit/test_repositories.py
"""Tests for the repository layer: repositories flush, services commit."""

from datetime import timedelta
from unittest.mock import patch

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from servicebooking.core.exceptions import RepositoryException
from servicebooking.models import BookingStatus, ServiceOffering
from servicebooking.repositories import RepositoryFactory


class TestBaseRepository:
    def test_create_flushes_without_commit(self, db):
        repository = RepositoryFactory.create_service_offering_repository(db)

        service = repository.create(name="Yoga", total_hours=1)

        assert service.id is not None
        db.rollback()
        assert db.query(ServiceOffering).count() == 0

    def test_create_wraps_integrity_errors(self, db, service):
        repository = RepositoryFactory.create_service_offering_repository(db)

        with pytest.raises(RepositoryException) as exc_info:
            repository.create(name=service.name, total_hours=1)
        assert isinstance(exc_info.value.__cause__, IntegrityError)

    def test_get_by_ids_skips_unknown_and_orders(self, db, make_service):
        first, second = make_service(), make_service()
        repository = RepositoryFactory.create_service_offering_repository(db)

        found = repository.get_by_ids([second.id, 999, first.id])

        assert [s.id for s in found] == [first.id, second.id]
        assert repository.get_by_ids([]) == []

    def test_update_only_touches_given_fields(self, db, service):
        repository = RepositoryFactory.create_service_offering_repository(db)

        updated = repository.update(service.id, total_hours=6)

        assert updated.total_hours == 6
        assert updated.name == "Consultation"
        assert repository.update(999, total_hours=1) is None

    def test_delete(self, db, make_service):
        doomed = make_service()
        repository = RepositoryFactory.create_service_offering_repository(db)

        assert repository.delete(doomed.id) is True
        assert repository.delete(doomed.id) is False

    def test_exists_count_and_find_one(self, db, make_service):
        make_service(name="Alpha", total_hours=2)
        make_service(name="Beta", total_hours=2)
        repository = RepositoryFactory.create_service_offering_repository(db)

        assert repository.exists(name="Alpha") is True
        assert repository.exists(name="Gamma") is False
        assert repository.count(total_hours=2) == 2
        assert repository.find_one_by(name="Beta").total_hours == 2

    def test_query_failures_become_repository_exceptions(self, db):
        repository = RepositoryFactory.create_service_offering_repository(db)
        failure = OperationalError("SELECT", {}, Exception("connection lost"))

        with patch.object(db, "query", side_effect=failure):
            with pytest.raises(RepositoryException):
                repository.get_by_id(1)


class TestBookingRepository:
    def test_create_exposes_raw_integrity_error(self, db, client_user, service, base_time):
        repository = RepositoryFactory.create_booking_repository(db)

        with pytest.raises(IntegrityError):
            repository.create(
                user_id=client_user.id,
                provider_id=999,
                service_offering_id=service.id,
                initial_date=base_time,
                final_date=base_time + timedelta(hours=1),
            )

    def test_scoped_lookups(self, db, provider, service, client_user, make_booking):
        booking = make_booking(client_user, provider, service)
        repository = RepositoryFactory.create_booking_repository(db)

        assert repository.get_by_id_and_user(booking.id, client_user.id) is booking
        assert repository.get_by_id_and_user(booking.id, client_user.id + 100) is None
        assert repository.get_by_id_and_provider(booking.id, provider.id) is booking
        assert repository.get_by_id_and_provider(booking.id, provider.id + 100) is None

    def test_transition_status_only_from_expected_states(
        self, db, provider, service, client_user, make_booking
    ):
        booking = make_booking(client_user, provider, service, status=BookingStatus.CANCELLED)
        repository = RepositoryFactory.create_booking_repository(db)

        moved = repository.transition_status(
            booking.id, (BookingStatus.PENDING,), BookingStatus.CONFIRMED
        )

        assert moved is False
        db.refresh(booking)
        assert booking.status == BookingStatus.CANCELLED

    def test_transition_status_honours_scope(self, db, provider, service, client_user, make_booking):
        booking = make_booking(client_user, provider, service)
        repository = RepositoryFactory.create_booking_repository(db)

        assert repository.transition_status(
            booking.id, (BookingStatus.PENDING,), BookingStatus.CONFIRMED, provider_id=provider.id + 100
        ) is False
        assert repository.transition_status(
            booking.id, (BookingStatus.PENDING,), BookingStatus.CONFIRMED, provider_id=provider.id
        ) is True
        db.refresh(booking)
        assert booking.status == BookingStatus.CONFIRMED

    def test_has_bookings(self, db, provider, make_provider, service, client_user, make_booking):
        idle = make_provider()
        make_booking(client_user, provider, service)
        repository = RepositoryFactory.create_booking_repository(db)

        assert repository.has_bookings_for_provider(provider.id) is True
        assert repository.has_bookings_for_provider(idle.id) is False
        assert repository.has_bookings_for_service(service.id) is True


class TestConflictCheckerRepository:
    def test_count_skips_cancelled_and_excluded(
        self, db, make_provider, service, client_user, make_booking, base_time
    ):
        provider = make_provider(concurrent_capacity=3)
        early = make_booking(client_user, provider, service, initial_date=base_time)
        make_booking(client_user, provider, service, initial_date=base_time + timedelta(hours=1))
        make_booking(
            client_user,
            provider,
            service,
            initial_date=base_time + timedelta(minutes=30),
            status=BookingStatus.CANCELLED,
        )
        repository = RepositoryFactory.create_conflict_checker_repository(db)
        window = (base_time + timedelta(minutes=90), base_time + timedelta(hours=3))

        assert repository.count_conflicting_bookings(provider.id, *window) == 2
        assert repository.count_conflicting_bookings(provider.id, *window, exclude_booking_id=early.id) == 1

    def test_count_failure_becomes_repository_exception(self, db, provider, base_time):
        repository = RepositoryFactory.create_conflict_checker_repository(db)
        failure = OperationalError("SELECT", {}, Exception("connection lost"))

        with patch("sqlalchemy.orm.Query.scalar", side_effect=failure):
            with pytest.raises(RepositoryException):
                repository.count_conflicting_bookings(
                    provider.id, base_time, base_time + timedelta(hours=1)
                )


class TestProviderRepository:
    def test_lock_for_update_rereads_row(self, db, provider):
        repository = RepositoryFactory.create_provider_repository(db)
        provider.concurrent_capacity = 9  # unflushed local change

        locked = repository.lock_for_update(provider.id)

        assert locked is provider
        assert locked.concurrent_capacity == 1

    def test_lock_for_update_missing(self, db):
        assert RepositoryFactory.create_provider_repository(db).lock_for_update(999) is None

    def test_get_by_user_id(self, db, provider, client_user):
        repository = RepositoryFactory.create_provider_repository(db)

        assert repository.get_by_user_id(provider.user_id) is provider
        assert repository.get_by_user_id(client_user.id) is None


class TestUserRepository:
    def test_email_lookup_is_case_insensitive(self, db, client_user):
        repository = RepositoryFactory.create_user_repository(db)

        assert repository.get_by_email("  Client@EXAMPLE.com ") is client_user
        assert repository.email_exists("nobody@example.com") is False
