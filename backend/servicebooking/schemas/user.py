"""User and authentication schemas."""

from typing import Optional

from pydantic import EmailStr, Field, model_validator

from ..core.constants import MAX_NAME_LENGTH, MAX_PASSWORD_LENGTH, MIN_PASSWORD_LENGTH
from ..core.enums import RoleName
from ._strict_base import ORMResponseModel, StrictRequestModel


class UserCreate(StrictRequestModel):
    name: str = Field(..., min_length=1, max_length=MAX_NAME_LENGTH)
    email: EmailStr
    password: str = Field(..., min_length=MIN_PASSWORD_LENGTH, max_length=MAX_PASSWORD_LENGTH)
    confirm_password: str

    @model_validator(mode="after")
    def _passwords_match(self) -> "UserCreate":
        if self.password != self.confirm_password:
            raise ValueError("Passwords do not match")
        return self


class LoginRequest(StrictRequestModel):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class UserResponse(ORMResponseModel):
    id: int
    name: str
    email: str
    role: RoleName
    provider_id: Optional[int] = None

    @classmethod
    def from_user(cls, user) -> "UserResponse":
        profile = user.provider_profile
        return cls(
            id=user.id,
            name=user.name,
            email=user.email,
            role=user.role,
            provider_id=profile.id if profile is not None else None,
        )
