# backend/tests/unit/test_provider_service.py
"""Tests for ProviderService catalog operations."""

import pytest

from servicebooking.auth import verify_password
from servicebooking.core.enums import RoleName
from servicebooking.core.exceptions import ConflictException, ValidationException
from servicebooking.core.provider_lock import ProviderLockManager
from servicebooking.models import Provider, User
from servicebooking.schemas.common import QueryParameters
from servicebooking.schemas.provider import ProviderCreate, ProviderServicesUpdate, ProviderUpdate
from servicebooking.services.provider_service import ProviderService


@pytest.fixture
def provider_service(db, lock_manager):
    return ProviderService(db, lock_manager=lock_manager)


def _registration(**overrides):
    data = {
        "user_name": "Pat Provider",
        "email": "Pat@Example.com",
        "password": "secret123",
        "name": "Pat's Workshop",
        "description": "Bike repairs",
    }
    data.update(overrides)
    return ProviderCreate(**data)


class TestRegisterProvider:
    def test_creates_provider_and_managing_user(self, db, provider_service):
        provider = provider_service.register_provider(_registration(concurrent_capacity=3))

        user = db.get(User, provider.user_id)
        assert provider.name == "Pat's Workshop"
        assert provider.concurrent_capacity == 3
        assert user.role == RoleName.PROVIDER.value
        assert user.email == "pat@example.com"
        assert verify_password("secret123", user.hashed_password)

    def test_capacity_defaults_to_one(self, provider_service):
        provider = provider_service.register_provider(_registration())
        assert provider.concurrent_capacity == 1

    def test_duplicate_name(self, provider_service, provider):
        with pytest.raises(ConflictException) as exc_info:
            provider_service.register_provider(_registration(name=provider.name))
        assert exc_info.value.code == "PROVIDER_NAME_TAKEN"

    def test_duplicate_email_creates_nothing(self, db, provider_service, client_user):
        with pytest.raises(ConflictException) as exc_info:
            provider_service.register_provider(_registration(email="CLIENT@example.com"))

        assert exc_info.value.code == "EMAIL_TAKEN"
        assert db.query(Provider).count() == 0


class TestProviderQueries:
    def test_get_provider_with_services(self, provider_service, provider, service):
        found = provider_service.get_provider(provider.id)
        assert [s.id for s in found.services] == [service.id]

    def test_get_missing_provider(self, provider_service):
        assert provider_service.get_provider(999) is None

    def test_list_providers_in_id_order(self, provider_service, make_provider):
        created = [make_provider() for _ in range(3)]

        paged = provider_service.list_providers(QueryParameters(page_size=2))

        assert [p.id for p in paged.items] == [created[0].id, created[1].id]
        assert paged.total_count == 3


class TestUpdateProvider:
    def test_partial_update_ignores_blank_and_null(self, provider_service, provider):
        updated = provider_service.update_provider(
            provider.id, ProviderUpdate(name="", description=None, concurrent_capacity=4)
        )

        assert updated.name == "Acme Clinic"
        assert updated.description == "A bookable provider"
        assert updated.concurrent_capacity == 4

    def test_rename(self, provider_service, provider):
        updated = provider_service.update_provider(provider.id, ProviderUpdate(name="Acme Health"))
        assert updated.name == "Acme Health"

    def test_rename_to_taken_name(self, provider_service, provider, make_provider):
        other = make_provider()
        with pytest.raises(ConflictException):
            provider_service.update_provider(provider.id, ProviderUpdate(name=other.name))

    def test_keeping_own_name_is_allowed(self, provider_service, provider):
        updated = provider_service.update_provider(provider.id, ProviderUpdate(name=provider.name))
        assert updated.name == provider.name

    def test_missing_provider(self, provider_service):
        assert provider_service.update_provider(999, ProviderUpdate(name="Ghost")) is None

    def test_capacity_change_waits_for_admissions(self, db, provider):
        lock_manager = ProviderLockManager(wait_seconds=0.05)
        provider_service = ProviderService(db, lock_manager=lock_manager)

        with lock_manager.hold(provider.id) as acquired:
            assert acquired
            with pytest.raises(ConflictException) as exc_info:
                provider_service.update_provider(provider.id, ProviderUpdate(concurrent_capacity=3))

        assert exc_info.value.code == "PROVIDER_BUSY"
        db.refresh(provider)
        assert provider.concurrent_capacity == 1

    def test_rename_does_not_need_the_admission_lock(self, db, provider):
        lock_manager = ProviderLockManager(wait_seconds=0.05)
        provider_service = ProviderService(db, lock_manager=lock_manager)

        with lock_manager.hold(provider.id):
            updated = provider_service.update_provider(provider.id, ProviderUpdate(name="Acme Health"))

        assert updated.name == "Acme Health"

    def test_capacity_change_releases_the_lock(self, provider_service, provider, lock_manager):
        provider_service.update_provider(provider.id, ProviderUpdate(concurrent_capacity=2))

        with lock_manager.hold(provider.id) as acquired:
            assert acquired is True


class TestDeleteProvider:
    def test_delete_unbooked_provider(self, db, provider_service, make_provider):
        provider = make_provider()
        assert provider_service.delete_provider(provider.id) is True
        assert db.get(Provider, provider.id) is None

    def test_delete_missing_provider(self, provider_service):
        assert provider_service.delete_provider(999) is False

    def test_booked_provider_cannot_be_deleted(
        self, provider_service, provider, service, client_user, make_booking
    ):
        make_booking(client_user, provider, service)

        with pytest.raises(ConflictException) as exc_info:
            provider_service.delete_provider(provider.id)
        assert exc_info.value.code == "PROVIDER_HAS_BOOKINGS"


class TestUpdateProviderServices:
    def test_replaces_service_set(self, provider_service, provider, service, make_service):
        first = make_service()
        second = make_service()

        updated = provider_service.update_provider_services(
            provider.id, ProviderServicesUpdate(service_ids=[second.id, first.id])
        )

        assert {s.id for s in updated.services} == {first.id, second.id}
        assert service.id not in {s.id for s in updated.services}

    def test_duplicates_are_collapsed(self, provider_service, provider, service):
        updated = provider_service.update_provider_services(
            provider.id, ProviderServicesUpdate(service_ids=[service.id, service.id])
        )
        assert [s.id for s in updated.services] == [service.id]

    def test_empty_list_clears_services(self, provider_service, provider):
        updated = provider_service.update_provider_services(
            provider.id, ProviderServicesUpdate(service_ids=[])
        )
        assert updated.services == []

    def test_null_list_is_rejected(self, provider_service, provider):
        with pytest.raises(ValidationException) as exc_info:
            provider_service.update_provider_services(
                provider.id, ProviderServicesUpdate(service_ids=None)
            )
        assert exc_info.value.code == "IDS_REQUIRED"

    def test_unknown_ids_change_nothing(self, provider_service, provider, service):
        with pytest.raises(ValidationException) as exc_info:
            provider_service.update_provider_services(
                provider.id, ProviderServicesUpdate(service_ids=[service.id, 998, 999])
            )

        assert exc_info.value.code == "UNKNOWN_IDS"
        assert exc_info.value.details["unknown_ids"] == [998, 999]
        assert [s.id for s in provider_service.get_provider(provider.id).services] == [service.id]

    def test_missing_provider(self, provider_service):
        assert (
            provider_service.update_provider_services(999, ProviderServicesUpdate(service_ids=[]))
            is None
        )
