"""
FastAPI application entry point.
Main application setup and configuration.
"""

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from contextlib import asynccontextmanager
from pathlib import Path
import logging

from bayhomes import models  # noqa: F401  registers tables on Base.metadata
from bayhomes.config import settings
from bayhomes.database import test_database_connection, create_tables, close_db_connection
from bayhomes.middleware import RequestContextMiddleware
from bayhomes.routers import (
    users_router,
    areas_router,
    developers_router,
    projects_router,
    properties_router
)
from bayhomes.services.blob_store import build_blob_store
from bayhomes.services.error_handler import register_exception_handlers

# Configure logging
logging.basicConfig(level=logging.DEBUG if settings.debug else logging.INFO)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.
    Checks the database, creates missing tables and builds the blob store.
    """
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"Environment: {settings.environment}, blob backend: {settings.blob_backend}")

    if await test_database_connection():
        await create_tables()
    else:
        logger.error("Failed to connect to database on startup")

    app.state.blob_store = build_blob_store(settings)

    yield

    logger.info("Shutting down application")
    await close_db_connection()


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="""
    Listing API behind the Bay Homes admin dashboard.

    ## Resources

    * **Properties**: listings with image galleries, archived or active
    * **Projects**: off-plan developments with floor plans
    * **Areas** and **Developers**: referenced by name from properties and projects
    * **Users**: created on first sign-in and referenced by email

    ## Lists

    List endpoints take `_start`, `_end`, `_sort` and `_order` and return the
    total match count in the `x-total-count` header.

    ## Images

    Image fields accept data URIs or base64 strings, which are uploaded, or
    URLs already in the blob store, which are kept.
    """,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_tags=[
        {"name": "Properties", "description": "Property listing management"},
        {"name": "Projects", "description": "Off-plan project management"},
        {"name": "Areas", "description": "Areas referenced by properties and projects"},
        {"name": "Developers", "description": "Developers referenced by projects"},
        {"name": "Users", "description": "Listing owners"},
        {"name": "Health", "description": "Service health endpoints"}
    ],
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["*"],
    expose_headers=["x-total-count", "X-Request-ID", "X-Processing-Time"],
)

app.add_middleware(
    RequestContextMiddleware,
    max_request_size=settings.max_request_size,
    enable_request_logging=not settings.is_testing
)

register_exception_handlers(app)

app.include_router(users_router, prefix=settings.api_v1_prefix)
app.include_router(areas_router, prefix=settings.api_v1_prefix)
app.include_router(developers_router, prefix=settings.api_v1_prefix)
app.include_router(projects_router, prefix=settings.api_v1_prefix)
app.include_router(properties_router, prefix=settings.api_v1_prefix)

if settings.blob_backend == "local":
    Path(settings.media_dir).mkdir(parents=True, exist_ok=True)
    app.mount("/media", StaticFiles(directory=settings.media_dir), name="media")


@app.get("/", tags=["Health"])
async def root():
    """Basic API information."""
    return {
        "message": f"Welcome to {settings.app_name}",
        "version": settings.app_version,
        "environment": settings.environment,
        "status": "healthy",
        "documentation": {
            "swagger_ui": "/docs",
            "redoc": "/redoc",
            "openapi_json": "/openapi.json"
        },
        "api_prefix": settings.api_v1_prefix
    }


@app.get("/health", tags=["Health"])
async def health_check():
    """
    Health check endpoint with database connectivity test.
    Used by container health checks and load balancers.
    """
    if not await test_database_connection():
        logger.error("Health check failed: database unreachable")
        raise HTTPException(status_code=503, detail="Database connection failed")

    return {
        "status": "healthy",
        "service": settings.app_name,
        "version": settings.app_version,
        "environment": settings.environment,
        "database": "connected",
        "blob_backend": settings.blob_backend
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "bayhomes.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug
    )
