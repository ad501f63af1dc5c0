"""
Service-level endpoints: root banner, liveness and database health.
"""

from fastapi import APIRouter
from datetime import datetime, timezone
import logging

from realty_api.config import settings
from realty_api.database import test_database_connection
from realty_api.utils.exceptions import ServiceUnavailableError

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

API_ENDPOINTS = ["/api/properties", "/api/users"]


@router.get("/")
async def root():
    """Basic API information."""
    return {
        "message": "API is running...",
        "version": settings.app_version,
        "environment": settings.environment,
        "documentation": {
            "swagger_ui": "/docs",
            "redoc": "/redoc",
            "openapi_json": "/openapi.json"
        },
    }


@router.get("/health")
async def health_check():
    """Liveness check listing the mounted API prefixes."""
    return {
        "status": "OK",
        "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
        "endpoints": API_ENDPOINTS,
    }


@router.get("/health/db")
async def database_health_check():
    """
    Dedicated database health check endpoint.
    Responds 503 when the store cannot be reached.
    """
    if not await test_database_connection():
        logger.error("Database health check failed")
        raise ServiceUnavailableError("Database connection failed")

    return {
        "status": "healthy",
        "database": "connected",
        "database_url": settings.database_url.split("@")[1] if "@" in settings.database_url else "hidden"
    }
