# backend/tests/unit/test_user_service.py
"""Tests for UserService: registration, authentication and lookup."""

import pytest

from servicebooking.auth import decode_access_token
from servicebooking.core.enums import RoleName
from servicebooking.core.exceptions import ConflictException, UnauthorizedException
from servicebooking.schemas.user import UserCreate
from servicebooking.services.user_service import UserService


@pytest.fixture
def user_service(db):
    return UserService(db)


def _signup(**overrides):
    data = {
        "name": "Robin Client",
        "email": "Robin@Example.com",
        "password": "secret123",
        "confirm_password": "secret123",
    }
    data.update(overrides)
    return UserCreate(**data)


class TestRegisterUser:
    def test_registers_client(self, user_service):
        user = user_service.register_user(_signup())

        assert user.id is not None
        assert user.role == RoleName.CLIENT.value
        assert user.email == "robin@example.com"
        assert user.hashed_password != "secret123"

    def test_duplicate_email_is_case_insensitive(self, user_service):
        user_service.register_user(_signup())

        with pytest.raises(ConflictException) as exc_info:
            user_service.register_user(_signup(email="ROBIN@example.com"))
        assert exc_info.value.code == "EMAIL_TAKEN"

    def test_password_mismatch_is_rejected_by_schema(self):
        with pytest.raises(ValueError):
            _signup(confirm_password="different")


class TestAuthenticate:
    def test_token_carries_identity_and_role(self, user_service, client_user, test_password):
        token = user_service.authenticate("client@example.com", test_password)

        claims = decode_access_token(token)
        assert claims["sub"] == str(client_user.id)
        assert claims["role"] == "client"
        assert claims["email"] == "client@example.com"
        assert claims["name"] == "Casey Client"

    def test_email_lookup_ignores_case(self, user_service, client_user, test_password):
        assert user_service.authenticate("CLIENT@Example.com", test_password)

    def test_wrong_password(self, user_service, client_user):
        with pytest.raises(UnauthorizedException) as exc_info:
            user_service.authenticate("client@example.com", "wrong-password")
        assert exc_info.value.code == "INVALID_CREDENTIALS"

    def test_unknown_email_looks_like_wrong_password(self, user_service):
        with pytest.raises(UnauthorizedException) as exc_info:
            user_service.authenticate("nobody@example.com", "whatever")
        assert exc_info.value.message == "Invalid email or password"
        assert exc_info.value.code == "INVALID_CREDENTIALS"


class TestGetUser:
    def test_found(self, user_service, client_user):
        assert user_service.get_user(client_user.id).email == "client@example.com"

    def test_missing(self, user_service):
        assert user_service.get_user(999) is None
