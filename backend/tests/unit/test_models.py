# backend/tests/unit/test_models.py
"""Tests for model behavior and database constraints."""

from datetime import datetime

import pytest
from sqlalchemy.exc import IntegrityError

from servicebooking.core.enums import RoleName
from servicebooking.models import Booking, BookingStatus, Provider, ServiceOffering, User


def _booking(**overrides):
    values = {
        "user_id": 1,
        "provider_id": 1,
        "service_offering_id": 1,
        "initial_date": datetime(2030, 1, 1, 9),
        "final_date": datetime(2030, 1, 1, 11),
    }
    values.update(overrides)
    return Booking(**values)


class TestBooking:
    def test_new_booking_is_pending(self):
        booking = _booking()
        assert booking.status == BookingStatus.PENDING
        assert booking.is_confirmable is True
        assert booking.is_terminal is False

    @pytest.mark.parametrize(
        "status", [BookingStatus.CONFIRMED, BookingStatus.CANCELLED, BookingStatus.COMPLETED]
    )
    def test_only_pending_is_confirmable(self, status):
        assert _booking(status=status.value).is_confirmable is False

    def test_reschedule_resets_to_pending(self):
        booking = _booking(status=BookingStatus.CONFIRMED.value)

        booking.reschedule(2, datetime(2030, 2, 1, 9), datetime(2030, 2, 1, 10))

        assert booking.status == BookingStatus.PENDING
        assert booking.provider_id == 2
        assert booking.initial_date == datetime(2030, 2, 1, 9)
        assert booking.final_date == datetime(2030, 2, 1, 10)

    def test_completed_is_terminal(self):
        assert _booking(status=BookingStatus.COMPLETED.value).is_terminal is True

    def test_window_must_be_positive(self, db, provider, service, client_user):
        start = datetime(2030, 1, 1, 9)
        db.add(
            _booking(
                user_id=client_user.id,
                provider_id=provider.id,
                service_offering_id=service.id,
                initial_date=start,
                final_date=start,
            )
        )
        with pytest.raises(IntegrityError):
            db.flush()

    def test_status_must_be_known(self, db, provider, service, client_user):
        db.add(
            _booking(
                user_id=client_user.id,
                provider_id=provider.id,
                service_offering_id=service.id,
                status="archived",
            )
        )
        with pytest.raises(IntegrityError):
            db.flush()


class TestCatalogConstraints:
    def test_provider_capacity_must_be_positive(self, db):
        db.add(Provider(name="Zero", concurrent_capacity=0))
        with pytest.raises(IntegrityError):
            db.flush()

    def test_service_hours_must_be_positive(self, db):
        db.add(ServiceOffering(name="Instant", total_hours=0))
        with pytest.raises(IntegrityError):
            db.flush()

    def test_provider_name_is_unique(self, db, provider):
        db.add(Provider(name=provider.name, concurrent_capacity=1))
        with pytest.raises(IntegrityError):
            db.flush()

    def test_many_to_many_links(self, db, make_provider, make_service):
        first, second = make_service(), make_service()
        provider = make_provider(services=[first, second])

        db.refresh(first)
        assert [p.id for p in first.providers] == [provider.id]
        assert [s.id for s in provider.services] == [first.id, second.id]


class TestUser:
    def test_role_name(self, client_user):
        assert client_user.role_name == RoleName.CLIENT

    def test_unknown_role_is_none(self):
        assert User(name="x", email="x@example.com", hashed_password="x", role="guest").role_name is None

    def test_role_must_be_known(self, db):
        db.add(User(name="x", email="x@example.com", hashed_password="x", role="guest"))
        with pytest.raises(IntegrityError):
            db.flush()

    def test_provider_profile_backref(self, provider):
        assert provider.user.provider_profile is provider
