# backend/servicebooking/api/dependencies/auth.py
"""
Authentication and authorization dependencies.

Every problem with the bearer token (missing, expired, bad signature, wrong
issuer or audience, malformed claims) produces the same 401 before any
service code runs.
"""

import logging
from typing import Callable, Optional

from fastapi import Depends, HTTPException, status
import jwt

from ...auth import decode_access_token, oauth2_scheme_optional
from ...core.enums import RoleName
from ...principal import InvalidPrincipalClaims, Principal

logger = logging.getLogger(__name__)


def _credentials_exception() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail={"message": "Could not validate credentials", "code": "NOT_AUTHENTICATED"},
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_principal(token: Optional[str] = Depends(oauth2_scheme_optional)) -> Principal:
    """Resolve the bearer token into a Principal, or fail with 401."""
    if not token:
        raise _credentials_exception()
    try:
        claims = decode_access_token(token)
        principal = Principal.from_claims(claims)
    except jwt.PyJWTError as e:
        logger.info(f"JWT validation error: {str(e)}")
        raise _credentials_exception() from e
    except InvalidPrincipalClaims as e:
        logger.warning(f"Token claims rejected: {str(e)}")
        raise _credentials_exception() from e
    return principal


def require_roles(*roles: RoleName) -> Callable[[Principal], Principal]:
    """
    Dependency factory restricting an endpoint to the given roles.

    Usage:
        principal: Principal = Depends(require_roles(RoleName.ADMIN))
    """

    def dependency(principal: Principal = Depends(get_current_principal)) -> Principal:
        if not principal.has_any_role(*roles):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail={
                    "message": "You do not have permission to perform this action",
                    "code": "FORBIDDEN",
                    "details": {"required_roles": [role.value for role in roles]},
                },
            )
        return principal

    return dependency


require_client = require_roles(RoleName.CLIENT)
require_admin = require_roles(RoleName.ADMIN)
require_provider_or_admin = require_roles(RoleName.PROVIDER, RoleName.ADMIN)
