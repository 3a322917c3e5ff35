# backend/servicebooking/main.py
"""
FastAPI application for the service booking platform.
"""

from contextlib import asynccontextmanager
import logging
from typing import AsyncGenerator

from fastapi import APIRouter, FastAPI

from .core.config import is_running_tests, settings
from .core.constants import API_VERSION, BRAND_NAME
from .errors import register_error_handlers
from .routes.v1 import (
    auth as auth_v1,
    bookings as bookings_v1,
    health as health_v1,
    providers as providers_v1,
    services as services_v1,
    users as users_v1,
)

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

logger = logging.getLogger(__name__)

API_TITLE = f"{BRAND_NAME} API"
API_DESCRIPTION = (
    "Providers, service offerings and bookings admitted against each provider's "
    "concurrent capacity."
)


@asynccontextmanager
async def app_lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Handle application startup/shutdown without deprecated events."""
    logger.info(f"{BRAND_NAME} API starting up...")
    logger.info(f"Environment: {settings.environment}")
    if is_running_tests():
        logger.info("Running under pytest")
    if not settings.redis_url:
        logger.info("REDIS_URL not set; provider admission locks are per process")
    yield
    logger.info(f"{BRAND_NAME} API shutting down...")


def create_app() -> FastAPI:
    application = FastAPI(
        title=API_TITLE,
        description=API_DESCRIPTION,
        version=API_VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=app_lifespan,
    )
    # Register unified error envelope handlers
    register_error_handlers(application)

    api_v1 = APIRouter(prefix="/api/v1")
    api_v1.include_router(auth_v1.router, prefix="/auth")
    api_v1.include_router(users_v1.router, prefix="/users")
    api_v1.include_router(providers_v1.router, prefix="/providers")
    api_v1.include_router(services_v1.router, prefix="/services")
    api_v1.include_router(bookings_v1.router, prefix="/bookings")
    application.include_router(api_v1)
    application.include_router(health_v1.router)
    return application


app = create_app()
