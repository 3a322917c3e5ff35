# backend/servicebooking/services/user_service.py
"""
User Service for the service booking platform.

Client registration, credential checks and token issuance.
"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from ..auth import (
    DUMMY_HASH_FOR_TIMING_ATTACK,
    create_access_token,
    get_password_hash,
    verify_password,
)
from ..core.enums import RoleName
from ..core.exceptions import ConflictException, UnauthorizedException
from ..models.user import User
from ..repositories import RepositoryFactory
from ..repositories.user_repository import UserRepository
from ..schemas.user import UserCreate
from .base import BaseService

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS_MESSAGE = "Invalid email or password"


class UserService(BaseService):
    """Service layer for user accounts."""

    def __init__(self, db: Session, repository: Optional[UserRepository] = None):
        super().__init__(db)
        self.repository = repository or RepositoryFactory.create_user_repository(db)

    @BaseService.measure_operation("register_user")
    def register_user(self, data: UserCreate) -> User:
        """
        Register a client account.

        Raises:
            ConflictException: Email already registered
        """
        if self.repository.email_exists(data.email):
            raise ConflictException(
                "This email is already registered",
                code="EMAIL_TAKEN",
                details={"email": data.email},
            )

        with self.transaction():
            user = self.repository.create(
                name=data.name,
                email=data.email.lower(),
                hashed_password=get_password_hash(data.password),
                role=RoleName.CLIENT.value,
            )
        self.log_operation("register_user", user_id=user.id)
        return user

    @BaseService.measure_operation("authenticate")
    def authenticate(self, email: str, password: str) -> str:
        """
        Check credentials and issue an access token.

        Unknown email and wrong password are indistinguishable to the caller.

        Raises:
            UnauthorizedException: Credentials do not match an account
        """
        user = self.repository.get_by_email(email)
        if user is None:
            # Keep response time independent of whether the email exists
            verify_password(password, DUMMY_HASH_FOR_TIMING_ATTACK)
            self.logger.info("Login failed: unknown email")
            raise UnauthorizedException(INVALID_CREDENTIALS_MESSAGE, code="INVALID_CREDENTIALS")

        if not verify_password(password, user.hashed_password):
            self.logger.info("Login failed for user %s", user.id)
            raise UnauthorizedException(INVALID_CREDENTIALS_MESSAGE, code="INVALID_CREDENTIALS")

        return create_access_token(
            {"sub": str(user.id), "email": user.email, "name": user.name, "role": user.role}
        )

    @BaseService.measure_operation("get_user")
    def get_user(self, user_id: int) -> Optional[User]:
        return self.repository.get_by_id(user_id, load_relationships=False)
