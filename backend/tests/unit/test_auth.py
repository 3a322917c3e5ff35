# backend/tests/unit/test_auth.py
"""Tests for password hashing, access tokens and principal resolution."""

from datetime import datetime, timedelta, timezone

import jwt
import pytest

from servicebooking.auth import (
    create_access_token,
    decode_access_token,
    get_password_hash,
    verify_password,
)
from servicebooking.core.config import settings
from servicebooking.core.enums import RoleName
from servicebooking.principal import InvalidPrincipalClaims, Principal


class TestPasswords:
    def test_hash_and_verify(self):
        hashed = get_password_hash("hunter22")

        assert hashed != "hunter22"
        assert verify_password("hunter22", hashed) is True
        assert verify_password("hunter23", hashed) is False

    def test_malformed_hash_is_a_mismatch(self):
        assert verify_password("hunter22", "not-a-bcrypt-hash") is False


class TestAccessTokens:
    def test_round_trip_claims(self):
        token = create_access_token({"sub": "12", "role": "admin"})

        claims = decode_access_token(token)

        assert claims["sub"] == "12"
        assert claims["role"] == "admin"
        assert claims["iss"] == settings.jwt_issuer
        assert claims["aud"] == settings.jwt_audience

    def test_expired_token(self):
        token = create_access_token({"sub": "12", "role": "client"}, expires_delta=timedelta(seconds=-5))

        with pytest.raises(jwt.ExpiredSignatureError):
            decode_access_token(token)

    def test_wrong_audience(self):
        now = datetime.now(timezone.utc)
        token = jwt.encode(
            {
                "sub": "12",
                "role": "client",
                "exp": now + timedelta(minutes=5),
                "iss": settings.jwt_issuer,
                "aud": "someone-else",
            },
            settings.secret_key.get_secret_value(),
            algorithm=settings.algorithm,
        )

        with pytest.raises(jwt.InvalidAudienceError):
            decode_access_token(token)

    def test_wrong_signature(self):
        token = jwt.encode(
            {"sub": "12", "exp": datetime.now(timezone.utc) + timedelta(minutes=5)},
            "another-secret",
            algorithm="HS256",
        )

        with pytest.raises(jwt.PyJWTError):
            decode_access_token(token)


class TestPrincipal:
    def test_from_claims(self):
        principal = Principal.from_claims({"sub": "7", "role": "provider"})

        assert principal == Principal(user_id=7, role=RoleName.PROVIDER)
        assert principal.is_provider is True
        assert principal.is_admin is False
        assert principal.has_any_role(RoleName.ADMIN, RoleName.PROVIDER) is True

    @pytest.mark.parametrize(
        "claims",
        [
            {"sub": "abc", "role": "client"},
            {"sub": "0", "role": "client"},
            {"role": "client"},
            {"sub": "7", "role": "superuser"},
            {"sub": "7"},
        ],
    )
    def test_rejects_unusable_claims(self, claims):
        with pytest.raises(InvalidPrincipalClaims):
            Principal.from_claims(claims)
