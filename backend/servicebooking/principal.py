"""The authenticated caller, as seen by the booking core."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from .core.enums import RoleName


class InvalidPrincipalClaims(ValueError):
    """Token claims do not describe a usable principal."""


@dataclass(frozen=True)
class Principal:
    """User id and role resolved from a verified access token."""

    user_id: int
    role: RoleName

    @property
    def is_provider(self) -> bool:
        return self.role == RoleName.PROVIDER

    @property
    def is_admin(self) -> bool:
        return self.role == RoleName.ADMIN

    def has_any_role(self, *roles: RoleName) -> bool:
        return self.role in roles

    @classmethod
    def from_claims(cls, claims: Mapping[str, Any]) -> "Principal":
        """
        Build a principal from decoded token claims.

        Raises:
            InvalidPrincipalClaims: ``sub`` is not an integer id or ``role`` is unknown
        """
        subject = claims.get("sub")
        try:
            user_id = int(str(subject))
        except (TypeError, ValueError) as exc:
            raise InvalidPrincipalClaims("Token subject is not a user id") from exc
        if user_id < 1:
            raise InvalidPrincipalClaims("Token subject is not a user id")

        try:
            role = RoleName(claims.get("role"))
        except ValueError as exc:
            raise InvalidPrincipalClaims("Token role is missing or unknown") from exc
        return cls(user_id=user_id, role=role)
