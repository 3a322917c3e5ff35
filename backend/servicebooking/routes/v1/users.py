# backend/servicebooking/routes/v1/users.py
"""
User routes - API v1

Endpoints:
    POST / - Register a client account (public)
    GET /{user_id} - User profile (authenticated)
"""

import logging

from fastapi import APIRouter, Depends, Path, Response, status

from ...api.dependencies import get_current_principal, get_user_service
from ...core.exceptions import NotFoundException
from ...principal import Principal
from ...schemas.user import UserCreate, UserResponse
from ...services.user_service import UserService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["users-v1"])


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def register_user(
    payload: UserCreate,
    response: Response,
    user_service: UserService = Depends(get_user_service),
) -> UserResponse:
    user = user_service.register_user(payload)
    response.headers["Location"] = f"/api/v1/users/{user.id}"
    return UserResponse.from_user(user)


@router.get("/{user_id}", response_model=UserResponse)
def get_user(
    user_id: int = Path(..., ge=1),
    _: Principal = Depends(get_current_principal),
    user_service: UserService = Depends(get_user_service),
) -> UserResponse:
    user = user_service.get_user(user_id)
    if user is None:
        raise NotFoundException("User not found", code="USER_NOT_FOUND", details={"user_id": user_id})
    return UserResponse.from_user(user)
