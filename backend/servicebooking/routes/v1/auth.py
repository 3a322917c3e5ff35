# backend/servicebooking/routes/v1/auth.py
"""
Authentication routes - API v1

Endpoints:
    POST /login - Exchange email and password for a bearer token
"""

import logging

from fastapi import APIRouter, Depends

from ...api.dependencies import get_user_service
from ...core.config import settings
from ...schemas.base_responses import TokenResponse
from ...schemas.user import LoginRequest
from ...services.user_service import UserService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth-v1"])


@router.post("/login", response_model=TokenResponse)
def login(
    payload: LoginRequest,
    user_service: UserService = Depends(get_user_service),
) -> TokenResponse:
    """
    Login with email and password.

    Unknown emails and wrong passwords get the same 401.
    """
    token = user_service.authenticate(payload.email, payload.password)
    return TokenResponse(
        access_token=token,
        token_type="bearer",
        expires_in=settings.access_token_expire_minutes * 60,
    )
