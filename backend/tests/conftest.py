# backend/tests/conftest.py
"""
Pytest configuration for the service booking backend.

Tests run against an in-memory SQLite database shared by every session of a
test (StaticPool), so the API client and the fixtures see the same rows.
Tables are created fresh for each test.
"""

import os

# Set testing mode BEFORE any servicebooking imports
os.environ["IS_TESTING"] = "true"
os.environ["ENVIRONMENT"] = "test"
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ.pop("REDIS_URL", None)

from datetime import datetime, timedelta
from typing import Callable, Dict, Iterator, Optional

from fastapi.testclient import TestClient
import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from servicebooking.api.dependencies.database import get_db
from servicebooking.auth import create_access_token, get_password_hash
from servicebooking.core.enums import RoleName
from servicebooking.core.provider_lock import ProviderLockManager
from servicebooking.database import Base
from servicebooking.main import app
from servicebooking.models import Booking, BookingStatus, Provider, ServiceOffering, User

TEST_PASSWORD = "TestPassword123!"
# bcrypt is deliberately slow; hash the shared test password once
TEST_PASSWORD_HASH = get_password_hash(TEST_PASSWORD)

BASE_TIME = datetime(2030, 1, 7, 9, 0)

test_engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
    future=True,
)


@event.listens_for(test_engine, "connect")
def _enable_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


TestSessionLocal = sessionmaker(
    autocommit=False, autoflush=False, bind=test_engine, expire_on_commit=False
)


@pytest.fixture(scope="function")
def db() -> Iterator[Session]:
    """Fresh schema and session for each test."""
    Base.metadata.create_all(bind=test_engine)
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()
        Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def client(db: Session) -> Iterator[TestClient]:
    """Create a test client bound to the test session."""

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    test_client = TestClient(app)

    yield test_client

    app.dependency_overrides.clear()
    test_client.close()


@pytest.fixture
def lock_manager() -> ProviderLockManager:
    """In-process admission locks, isolated per test."""
    return ProviderLockManager(wait_seconds=2.0)


# Factories


@pytest.fixture
def make_user(db: Session) -> Callable[..., User]:
    counter = {"n": 0}

    def _make_user(
        role: RoleName = RoleName.CLIENT, email: Optional[str] = None, name: str = "Test User"
    ) -> User:
        counter["n"] += 1
        user = User(
            name=name,
            email=email or f"user{counter['n']}.{role.value}@example.com",
            hashed_password=TEST_PASSWORD_HASH,
            role=role.value,
        )
        db.add(user)
        db.commit()
        return user

    return _make_user


@pytest.fixture
def make_service(db: Session) -> Callable[..., ServiceOffering]:
    counter = {"n": 0}

    def _make_service(name: Optional[str] = None, total_hours: int = 1) -> ServiceOffering:
        counter["n"] += 1
        service = ServiceOffering(
            name=name or f"Test Service {counter['n']}",
            description="A bookable service",
            total_hours=total_hours,
        )
        db.add(service)
        db.commit()
        return service

    return _make_service


@pytest.fixture
def make_provider(db: Session, make_user) -> Callable[..., Provider]:
    counter = {"n": 0}

    def _make_provider(
        name: Optional[str] = None,
        concurrent_capacity: int = 1,
        with_user: bool = True,
        services=(),
    ) -> Provider:
        counter["n"] += 1
        owner = make_user(RoleName.PROVIDER, name=f"Provider Owner {counter['n']}") if with_user else None
        provider = Provider(
            name=name or f"Test Provider {counter['n']}",
            description="A bookable provider",
            concurrent_capacity=concurrent_capacity,
            user_id=owner.id if owner else None,
        )
        provider.services.extend(services)
        db.add(provider)
        db.commit()
        return provider

    return _make_provider


@pytest.fixture
def make_booking(db: Session) -> Callable[..., Booking]:
    """Insert a booking directly, bypassing admission."""

    def _make_booking(
        user: User,
        provider: Provider,
        service: ServiceOffering,
        initial_date: datetime = BASE_TIME,
        status: BookingStatus = BookingStatus.PENDING,
    ) -> Booking:
        booking = Booking(
            user_id=user.id,
            provider_id=provider.id,
            service_offering_id=service.id,
            initial_date=initial_date,
            final_date=initial_date + timedelta(hours=service.total_hours),
            status=status.value,
        )
        db.add(booking)
        db.commit()
        return booking

    return _make_booking


# Common actors


@pytest.fixture
def client_user(make_user) -> User:
    return make_user(RoleName.CLIENT, email="client@example.com", name="Casey Client")


@pytest.fixture
def admin_user(make_user) -> User:
    return make_user(RoleName.ADMIN, email="admin@example.com", name="Ada Admin")


@pytest.fixture
def service(make_service) -> ServiceOffering:
    return make_service(name="Consultation", total_hours=2)


@pytest.fixture
def provider(make_provider, service) -> Provider:
    return make_provider(name="Acme Clinic", concurrent_capacity=1, services=[service])


# Auth headers


def auth_headers_for(user: User) -> Dict[str, str]:
    token = create_access_token({"sub": str(user.id), "email": user.email, "role": user.role})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def client_headers(client_user: User) -> Dict[str, str]:
    return auth_headers_for(client_user)


@pytest.fixture
def admin_headers(admin_user: User) -> Dict[str, str]:
    return auth_headers_for(admin_user)


@pytest.fixture
def provider_headers(provider: Provider) -> Dict[str, str]:
    return auth_headers_for(provider.user)


@pytest.fixture
def auth_headers() -> Callable[[User], Dict[str, str]]:
    """Bearer headers for any user."""
    return auth_headers_for


@pytest.fixture
def base_time() -> datetime:
    return BASE_TIME


@pytest.fixture
def test_password() -> str:
    """Plain-text password of every factory-made user."""
    return TEST_PASSWORD
