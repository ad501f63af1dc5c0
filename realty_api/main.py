"""
FastAPI application entry point.
Main application setup and configuration.
"""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from contextlib import asynccontextmanager
import logging

from realty_api.config import settings
from realty_api.database import test_database_connection, create_tables, close_db_connection
from realty_api.routers import properties_router, users_router, health_router
from realty_api.schemas.common import NotFoundResponse
from realty_api.services.error_handler import register_exception_handlers
from realty_api.middleware.performance import PerformanceMonitoringMiddleware

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

AVAILABLE_ENDPOINTS = [
    "GET /api/properties",
    "POST /api/properties",
    "GET /api/properties/:id",
    "PUT /api/properties/:id",
    "DELETE /api/properties/:id",
    "GET /api/users",
    "POST /api/users",
    "GET /api/users/:id",
    "PUT /api/users/:id",
    "DELETE /api/users/:id",
]


class UploadsStaticFiles(StaticFiles):
    """Static files with permissive cross-origin headers so images load from any site."""

    async def get_response(self, path: str, scope):
        response = await super().get_response(path, scope)
        response.headers["Access-Control-Allow-Origin"] = "*"
        response.headers["Access-Control-Allow-Methods"] = "GET"
        response.headers["Access-Control-Allow-Headers"] = "Content-Type"
        return response


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.
    Handles startup and shutdown events.
    """
    # Startup
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"Environment: {settings.environment}")

    # A failed connection is logged and the API keeps serving
    db_connected = await test_database_connection()
    if db_connected:
        await create_tables()
    else:
        logger.error("Failed to connect to database on startup")

    logger.info(f"Properties: {settings.app_url}{settings.api_prefix}/properties")
    logger.info(f"Users: {settings.app_url}{settings.api_prefix}/users")

    yield

    # Shutdown
    logger.info("Shutting down application")
    await close_db_connection()


# Create FastAPI application instance
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="""
    Staff-facing API for real-estate property listings and staff records.

    ## Features

    * **Properties**: CRUD, featured listings, filtered search and pagination
    * **Users**: staff records with roles, departments, skills and text search
    * **Images**: multipart image uploads attached to properties and users,
      served from the uploads directory
    """,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_tags=[
        {
            "name": "Properties",
            "description": "Property listing management and search operations"
        },
        {
            "name": "Users",
            "description": "Staff user management and search"
        },
        {
            "name": "Health",
            "description": "System health endpoints"
        }
    ],
    lifespan=lifespan,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=False,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID", "X-Processing-Time"],
)

# Add performance monitoring middleware
app.add_middleware(
    PerformanceMonitoringMiddleware,
    slow_request_threshold=2.0,  # Log requests slower than 2 seconds
)

register_exception_handlers(app)

# Uploaded images
app.mount(
    settings.uploads_url_path,
    UploadsStaticFiles(directory=settings.upload_dir, check_dir=False),
    name="uploads",
)

# Include API routers
app.include_router(health_router)
app.include_router(properties_router, prefix=settings.api_prefix)
app.include_router(users_router, prefix=settings.api_prefix)


@app.api_route(
    f"{settings.api_prefix}/{{path:path}}",
    methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
    include_in_schema=False,
)
async def api_not_found(request: Request, path: str):
    """Unmatched API paths list the endpoints that do exist."""
    return JSONResponse(
        status_code=404,
        content=NotFoundResponse(
            message=f"API endpoint {request.url.path} not found",
            available_endpoints=AVAILABLE_ENDPOINTS,
        ).model_dump(by_alias=True),
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "realty_api.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug
    )
