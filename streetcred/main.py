"""
GetStreetCred Backend API

Main FastAPI application entry point.
"""

import logging
import time
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from streetcred.api import api_router
from streetcred.api.deps import get_storage
from streetcred.core.config import get_settings
from streetcred.core.errors import StreetCredError
from streetcred.storage import SqlStorage, StorageBackend, build_storage

# Load settings
settings = get_settings()

logging.basicConfig(
    level=logging.DEBUG if settings.debug else settings.log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Build the storage backend once, share it for the process lifetime,
    and close it at shutdown.
    """
    storage = build_storage(settings)
    if isinstance(storage, SqlStorage) and settings.create_tables_on_startup:
        await storage.create_tables()
    app.state.storage = storage
    logger.info(f"Storage backend ready: {type(storage).__name__}")
    try:
        yield
    finally:
        await storage.close()
        app.state.storage = None


app = FastAPI(
    title="GetStreetCred API",
    description="Browse, rate and review notable infrastructure projects",
    version=settings.version,
    lifespan=lifespan,
)


# =============================================================================
# Middleware
# =============================================================================


@app.middleware("http")
async def limit_request_body_size(request: Request, call_next):
    """
    Middleware to enforce maximum request body size.

    Rejects requests whose Content-Length exceeds MAX_REQUEST_SIZE.
    """
    content_length = request.headers.get("content-length")

    if content_length and content_length.isdigit():
        if int(content_length) > settings.max_request_size:
            return JSONResponse(
                status_code=413,
                content={
                    "error": f"Request body too large. Maximum size: {settings.max_request_size} bytes",
                    "kind": "request_entity_too_large",
                },
            )

    return await call_next(request)


@app.middleware("http")
async def log_api_requests(request: Request, call_next):
    """Log method, path, status and duration of every /api request."""
    start = time.perf_counter()
    response = await call_next(request)
    if request.url.path.startswith("/api"):
        duration_ms = (time.perf_counter() - start) * 1000
        logger.info(
            f"{request.method} {request.url.path} {response.status_code} in {duration_ms:.0f}ms"
        )
    return response


# CORS configuration (loaded from environment)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Exception Handlers
# =============================================================================


@app.exception_handler(StreetCredError)
async def handle_streetcred_error(request: Request, exc: StreetCredError) -> JSONResponse:
    """Map domain errors to their HTTP status with a {error, kind} body."""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.kind}: {exc.message}")
    else:
        logger.warning(f"{request.method} {request.url.path} rejected: {exc.kind}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def handle_request_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Malformed bodies are a 400 validation_error, not FastAPI's default 422."""
    return JSONResponse(
        status_code=400,
        content={
            "error": "Invalid request",
            "kind": "validation_error",
            "details": jsonable_encoder(exc.errors()),
        },
    )


@app.exception_handler(Exception)
async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=500,
        content={"error": "Internal Server Error", "kind": "internal_error"},
    )


# Include API routes
app.include_router(api_router, prefix="/api")


@app.get("/")
async def root():
    """Root endpoint - API info."""
    return {
        "name": settings.app_name,
        "version": settings.version,
        "status": "running",
    }


@app.get("/health")
async def health_check(storage: StorageBackend = Depends(get_storage)):
    """
    Health check endpoint for Docker/orchestration.

    Pings the storage backend and reports overall status.
    """
    checks = {}
    healthy = True

    try:
        await storage.ping()
        checks["storage"] = {"status": "healthy"}
    except StreetCredError as e:
        checks["storage"] = {"status": "unhealthy", "error": e.message}
        healthy = False

    return JSONResponse(
        status_code=200 if healthy else 503,
        content={
            "status": "healthy" if healthy else "unhealthy",
            "checks": checks,
            "version": settings.version,
        },
    )
