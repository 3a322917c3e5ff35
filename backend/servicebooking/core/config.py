# backend/servicebooking/core/config.py
import logging
import os
from pathlib import Path
from typing import Literal, Optional

from dotenv import load_dotenv
from pydantic import Field, SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE


def is_running_tests() -> bool:
    """
    Detect if code is running under pytest.

    PYTEST_CURRENT_TEST is set automatically by pytest during test runs, and is
    not expected to be present in production environments.
    """
    return os.getenv("PYTEST_CURRENT_TEST") is not None


logger = logging.getLogger(__name__)

_BACKEND_ROOT = Path(__file__).resolve().parents[2]

# Load .env file only if not in CI
if not os.getenv("CI"):
    env_path = _BACKEND_ROOT / ".env"
    logger.debug("[CONFIG] Looking for .env at: %s (exists=%s)", env_path, env_path.exists())
    load_dotenv(env_path)

_DEV_SECRET_KEY = SecretStr("dev-only-secret-key-change-me")


class Settings(BaseSettings):
    environment: Literal["development", "test", "production"] = Field(
        default="development",
        description="Deployment environment name",
    )
    is_testing: bool = Field(default=False, description="Set by the test suite")
    log_level: str = Field(default="INFO", description="Root log level")

    # Database
    database_url: str = Field(
        default=f"sqlite:///{_BACKEND_ROOT / 'servicebooking.db'}",
        description="SQLAlchemy database URL",
    )
    database_echo: bool = Field(default=False, description="Echo SQL statements")

    # Auth
    secret_key: SecretStr = Field(
        default=_DEV_SECRET_KEY,
        description="Secret key for JWT tokens",
    )
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60
    jwt_issuer: str = Field(default="servicebooking-api", description="Issuer claim for access tokens")
    jwt_audience: str = Field(default="servicebooking-clients", description="Audience claim for access tokens")

    # Pagination
    default_page_size: int = Field(default=DEFAULT_PAGE_SIZE, ge=1)
    max_page_size: int = Field(default=MAX_PAGE_SIZE, ge=1)

    # Provider admission lock
    redis_url: Optional[str] = Field(
        default=None,
        description="Redis URL for the cross-process provider admission lock (in-process lock when unset)",
    )
    provider_lock_ttl_seconds: int = Field(default=30, ge=1)
    provider_lock_wait_seconds: float = Field(
        default=5.0,
        gt=0,
        description="Maximum time a booking request waits for a provider's admission lock",
    )

    model_config = SettingsConfigDict(
        env_file=".env" if not os.getenv("CI") else None,
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        return value.strip().upper() or "INFO"

    @model_validator(mode="after")
    def _check_production_secrets(self) -> "Settings":
        if self.environment == "production" and (
            self.secret_key.get_secret_value() == _DEV_SECRET_KEY.get_secret_value()
        ):
            raise ValueError("SECRET_KEY must be set in production")
        if self.default_page_size > self.max_page_size:
            raise ValueError("DEFAULT_PAGE_SIZE cannot exceed MAX_PAGE_SIZE")
        return self

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")


settings = Settings()
