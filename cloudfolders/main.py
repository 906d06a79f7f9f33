"""FastAPI application for CloudFolders.

This module provides the main FastAPI application with health endpoints,
API routes, error mapping and lifecycle management.

Run with:
    uvicorn cloudfolders.main:app --reload

Examples:
    >>> # Health check
    >>> curl http://localhost:8000/health

    >>> # API docs (DEBUG only)
    >>> # Open http://localhost:8000/docs

Tests:
    - tests/integration/test_main.py
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from pydantic import BaseModel

from cloudfolders import __version__
from cloudfolders.api.v1 import router as v1_router
from cloudfolders.config import BlobBackend, get_settings
from cloudfolders.database import check_db_connection, close_db, init_db
from cloudfolders.errors import (
    CloudFoldersError,
    DuplicateNameError,
    ExpiredOrInvalidTokenError,
    InvalidParametersError,
    NotFoundError,
    UnauthorizedError,
    UpstreamStorageError,
)
from cloudfolders.storage.backends.local import BLOB_ROUTE

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Domain error -> HTTP status. Checked in order, first match wins.
ERROR_STATUS: list[tuple[type[CloudFoldersError], int]] = [
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (DuplicateNameError, status.HTTP_409_CONFLICT),
    (UnauthorizedError, status.HTTP_403_FORBIDDEN),
    (InvalidParametersError, status.HTTP_400_BAD_REQUEST),
    (ExpiredOrInvalidTokenError, status.HTTP_401_UNAUTHORIZED),
    (UpstreamStorageError, status.HTTP_502_BAD_GATEWAY),
]


# Response models
class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str
    database: bool
    blob_backend: str


class ErrorResponse(BaseModel):
    """Error response model."""

    error: str
    detail: str | None = None


def status_for(exc: CloudFoldersError) -> int:
    """HTTP status code for a domain error."""
    for error_type, code in ERROR_STATUS:
        if isinstance(exc, error_type):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager.

    Creates tables on startup and disposes the engine on shutdown.
    """
    logger.info(f"Starting CloudFolders v{__version__}")

    try:
        await init_db()
        logger.info("Database initialized")
    except Exception as e:
        logger.error(f"Database initialization failed: {e}")
        # Continue anyway - schema may be managed by alembic

    yield

    logger.info("Shutting down CloudFolders")
    await close_db()


# Create FastAPI app
settings = get_settings()

app = FastAPI(
    title="CloudFolders",
    description="Path-addressed folder trees with shareable read-only links",
    version=__version__,
    lifespan=lifespan,
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url="/redoc" if settings.DEBUG else None,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.DEBUG else [settings.PUBLIC_BASE_URL],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API v1 routes
app.include_router(v1_router)

# Locally stored blobs are served straight from disk
if settings.BLOB_BACKEND == BlobBackend.LOCAL:
    app.mount(
        BLOB_ROUTE,
        StaticFiles(directory=settings.BLOB_LOCAL_ROOT, check_dir=False),
        name="blobs",
    )


# Exception handlers
@app.exception_handler(CloudFoldersError)
async def domain_exception_handler(request, exc: CloudFoldersError):
    """Map domain errors to status codes."""
    code = status_for(exc)
    if code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error(f"Failure on {request.url.path}: {exc.to_dict()}")
    return JSONResponse(
        status_code=code,
        content={"error": exc.message, "detail": exc.error_type},
    )


@app.exception_handler(HTTPException)
async def http_exception_handler(request, exc: HTTPException):
    """Handle HTTP exceptions with consistent response format."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail, "detail": None},
        headers=exc.headers,
    )


@app.exception_handler(Exception)
async def general_exception_handler(request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.exception(f"Unexpected error: {exc}")

    if settings.DEBUG:
        detail = str(exc)
    else:
        detail = None

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error", "detail": detail},
    )


# Health endpoints
@app.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check() -> HealthResponse:
    """Check application health.

    Returns:
        HealthResponse with database status and the active blob backend.
    """
    db_healthy = await check_db_connection()

    return HealthResponse(
        status="healthy" if db_healthy else "degraded",
        version=__version__,
        database=db_healthy,
        blob_backend=settings.BLOB_BACKEND.value,
    )


@app.get("/", tags=["Root"])
async def root() -> dict[str, str]:
    """Root endpoint with basic info."""
    return {
        "name": "CloudFolders",
        "version": __version__,
        "docs": "/docs",
        "health": "/health",
    }


# Entry point for development
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "cloudfolders.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
    )
