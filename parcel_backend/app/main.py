"""
FastAPI Application Entry Point.

This is the main application file for the Parcel Delivery Backend.
"""

import logging
from contextlib import asynccontextmanager
from fastapi import Depends, FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from parcel_backend.app.core.config import settings
from parcel_backend.app.api.v1.router import router as api_v1_router
from parcel_backend.app.core.observability import ObservabilityMiddleware
from parcel_backend.app.core.redis_client import get_redis, ping_redis
from parcel_backend.app.db.session import engine, Base
from parcel_backend.app.services.container import build_services
from parcel_backend.app.core.exceptions import (
    AppException,
    app_exception_handler,
    http_exception_handler,
    validation_exception_handler,
    generic_exception_handler
)

# Import models to ensure they are registered with Base
from parcel_backend.app.models.user import User
from parcel_backend.app.models.parcel import Parcel
from parcel_backend.app.models.rider import Rider
from parcel_backend.app.models.payment import Payment
from parcel_backend.app.models.tracking_event import TrackingEvent
from parcel_backend.app.models.audit_log import AuditLog

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for application startup/shutdown.

    1. Creates database tables on startup.
    2. Builds the identity verifier and payment gateway clients.
    3. Disposes the engine on shutdown.
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    app.state.services = build_services(settings)
    logger.info("%s started (%s)", settings.app_name, settings.environment)
    yield
    await engine.dispose()


# Initialize FastAPI application
app = FastAPI(
    title=settings.app_name,
    debug=settings.debug,
    description="REST backend for parcel booking, rider assignment, tracking and payments",
    lifespan=lifespan,
)

app.add_middleware(ObservabilityMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register global exception handlers
app.add_exception_handler(AppException, app_exception_handler)
app.add_exception_handler(HTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, generic_exception_handler)


@app.get("/health", tags=["Health"])
async def health_check(redis=Depends(get_redis)):
    """
    Health check endpoint.

    Redis being down only degrades logout revocation, so it is reported
    but does not fail the check.

    Returns:
        dict: Status and application information
    """
    return {
        "status": "healthy",
        "app_name": settings.app_name,
        "environment": settings.environment,
        "redis": "up" if await ping_redis(redis) else "down",
    }


@app.get("/", tags=["Root"])
async def root():
    return {
        "message": "Parcel server is running",
        "docs": "/docs",
        "health": "/health",
    }


# Routes are served from the root path
app.include_router(api_v1_router)
