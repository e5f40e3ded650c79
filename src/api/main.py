"""CityGuide API - Main FastAPI Application.

This module provides the main FastAPI application for CityGuide.
It includes:
- CORS middleware configuration
- API versioning (/api/v1)
- Health check endpoints
- Guide, collection, admin and preference endpoints
- Prometheus metrics at /metrics
- Container initialization on startup

Usage:
    # Run with uvicorn
    uvicorn src.api.main:app --reload

    # Or run directly
    python -m src.api.main
"""

from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncGenerator, Optional

import structlog
from fastapi import APIRouter, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from src.api.models import ErrorResponse, ValidationErrorDetail, ValidationErrorResponse
from src.api.routes.admin import router as admin_router
from src.api.routes.businesses import router as businesses_router
from src.api.routes.collections import router as collections_router
from src.api.routes.collections import shared_router
from src.api.routes.gift_cards import router as gift_cards_router
from src.api.routes.guide import router as guide_router
from src.api.routes.health import API_VERSION, router as health_router, set_server_start_time
from src.api.routes.pages import router as pages_router
from src.api.routes.preferences import router as preferences_router
from src.api.routes.taxonomy import router as taxonomy_router
from src.config.settings import get_settings
from src.core.container import initialize_container, shutdown_container
from src.core.exceptions import (
    AdminRequired,
    AuthenticationRequired,
    BackendError,
    NotFoundError,
    ValidationFailure,
)
from src.models.schemas import TRY_AGAIN, Notice
from src.monitoring.metrics import get_metrics_app, track_api_request

logger = structlog.get_logger(__name__)

# API metadata for OpenAPI documentation
API_TITLE = "CityGuide API"
API_DESCRIPTION = """
## Eat, Stay, Drink and Play guides for cities worldwide

CityGuide walks visitors through a category, region, country and city and
returns a list of places to go, which they can export, save into
collections and share.

### Getting Started

1. **Start a session**: `POST /api/v1/guide/sessions`
2. **Choose**: set category, region, country and city, then a result count
3. **Search**: `POST /api/v1/guide/sessions/{id}/search`
4. **Keep**: download CSV or save listings into a collection

### Authentication

Send the Supabase access token as `Authorization: Bearer <token>` on
collection, preference and admin routes. Without it those routes answer 401
with `redirect_to` pointing at the sign-in page.
"""


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan manager.

    Handles startup and shutdown events:
    - Startup: Create the container (Supabase client, session store)
    - Shutdown: Drop guide sessions, release the container
    """
    # Startup
    logger.info("application_starting")
    set_server_start_time()

    await initialize_container()

    logger.info("application_started")

    yield

    # Shutdown
    logger.info("application_stopping")
    await shutdown_container()
    logger.info("application_stopped")


# Create FastAPI application
app = FastAPI(
    title=API_TITLE,
    description=API_DESCRIPTION,
    version=API_VERSION,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    openapi_tags=[
        {"name": "Health", "description": "System health and status endpoints"},
        {"name": "Taxonomy", "description": "Regions, countries and cities"},
        {"name": "Guide", "description": "Selection, search, CSV export and rendering"},
        {"name": "Collections", "description": "Saved listings, collections and share links"},
        {"name": "Gift Cards", "description": "Gift card purchase"},
        {"name": "Preferences", "description": "Member amenity preferences"},
        {"name": "Admin", "description": "Business, plan, gift card and amenity management"},
        {"name": "Pages", "description": "Page route table for the browser client"},
    ],
)

# Configure CORS middleware (from settings)
_settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=_settings.cors_allowed_origins,
    allow_credentials=_settings.cors_allow_credentials,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
    allow_headers=["Content-Type", "Authorization", "Accept"],
    expose_headers=["Content-Disposition"],
)


@app.middleware("http")
async def record_request_metrics(request: Request, call_next):
    """Time each request, labelled by its route template."""
    with track_api_request(request.method, request.url.path) as ctx:
        response = await call_next(request)
        route = request.scope.get("route")
        if route is not None:
            ctx["endpoint"] = route.path
        ctx["status_code"] = response.status_code
    return response


# =============================================================================
# Exception Handlers
# =============================================================================


def _error_response(
    request: Request,
    status_code: int,
    error: str,
    message: str,
    notice: Optional[Notice] = None,
    redirect_to: Optional[str] = None,
) -> JSONResponse:
    response = ErrorResponse(
        error=error,
        message=message,
        notice=notice,
        redirect_to=redirect_to,
        path=request.url.path,
        timestamp=datetime.now(timezone.utc),
    )
    return JSONResponse(status_code=status_code, content=response.model_dump(mode="json"))


@app.exception_handler(ValidationFailure)
async def validation_failure_handler(request: Request, exc: ValidationFailure) -> JSONResponse:
    """Product-rule violations become an inline notice."""
    logger.info("validation_failure", path=request.url.path, title=exc.notice.title)
    return _error_response(
        request,
        status.HTTP_400_BAD_REQUEST,
        "validation_failure",
        exc.message,
        notice=exc.notice,
    )


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    return _error_response(
        request,
        status.HTTP_404_NOT_FOUND,
        "not_found",
        exc.message,
        notice=Notice.error("Not Found", f"That {exc.resource.replace('_', ' ')} could not be found."),
    )


@app.exception_handler(BackendError)
async def backend_error_handler(request: Request, exc: BackendError) -> JSONResponse:
    """Remote failures all look the same to the user: try again."""
    logger.error("backend_error", path=request.url.path, operation=exc.operation, error=exc.message)
    return _error_response(
        request,
        status.HTTP_502_BAD_GATEWAY,
        "backend_error",
        "The backend request failed",
        notice=TRY_AGAIN,
    )


@app.exception_handler(AuthenticationRequired)
async def authentication_required_handler(
    request: Request, exc: AuthenticationRequired
) -> JSONResponse:
    return _error_response(
        request,
        status.HTTP_401_UNAUTHORIZED,
        "authentication_required",
        exc.message,
        notice=Notice.error("Authentication Required", exc.message),
        redirect_to=exc.redirect_to,
    )


@app.exception_handler(AdminRequired)
async def admin_required_handler(request: Request, exc: AdminRequired) -> JSONResponse:
    return _error_response(
        request,
        status.HTTP_403_FORBIDDEN,
        "admin_required",
        exc.message,
        notice=Notice.error("Access Denied", exc.message),
        redirect_to=exc.redirect_to,
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Handle Pydantic validation errors with detailed response."""
    errors = []
    for error in exc.errors():
        field = ".".join(str(loc) for loc in error["loc"])
        errors.append(ValidationErrorDetail(
            field=field,
            message=error["msg"],
            value=error.get("input"),
        ))

    response = ValidationErrorResponse(
        errors=errors,
        timestamp=datetime.now(timezone.utc),
    )

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=response.model_dump(mode="json"),
    )


@app.exception_handler(Exception)
async def generic_exception_handler(
    request: Request, exc: Exception
) -> JSONResponse:
    """Handle unexpected exceptions."""
    logger.error(
        "unhandled_exception",
        path=request.url.path,
        method=request.method,
        error=str(exc),
        error_type=type(exc).__name__,
    )

    response = ErrorResponse(
        error="internal_server_error",
        message="An unexpected error occurred",
        detail=str(exc) if get_settings().debug else None,
        notice=TRY_AGAIN,
        path=request.url.path,
        timestamp=datetime.now(timezone.utc),
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=response.model_dump(mode="json"),
    )


# =============================================================================
# Root Endpoints
# =============================================================================


@app.get("/", include_in_schema=False)
async def root() -> dict:
    """Root endpoint - points at the API documentation."""
    return {
        "name": API_TITLE,
        "version": API_VERSION,
        "docs": "/docs",
        "health": "/health",
        "api": "/api/v1",
    }


# =============================================================================
# Include Routers
# =============================================================================

# Health endpoints at root level
app.include_router(health_router)

# Create API v1 router for versioned endpoints
api_v1_router = APIRouter(prefix="/api/v1")
api_v1_router.include_router(taxonomy_router)
api_v1_router.include_router(guide_router)
api_v1_router.include_router(collections_router)
api_v1_router.include_router(shared_router)
api_v1_router.include_router(gift_cards_router)
api_v1_router.include_router(preferences_router)
api_v1_router.include_router(businesses_router)
api_v1_router.include_router(admin_router)
api_v1_router.include_router(pages_router)

# Include the versioned router
app.include_router(api_v1_router)

# Prometheus scrape endpoint
app.mount("/metrics", get_metrics_app())


@app.get("/api/v1", include_in_schema=False)
async def api_v1_root() -> dict:
    """API v1 root - shows available endpoints."""
    return {
        "version": "v1",
        "endpoints": {
            "taxonomy": "/api/v1/taxonomy",
            "guide": "/api/v1/guide/sessions",
            "collections": "/api/v1/collections",
            "shared": "/api/v1/shared/{token}",
            "gift_cards": "/api/v1/gift-cards",
            "preferences": "/api/v1/preferences",
            "admin": "/api/v1/admin",
            "routes": "/api/v1/routes",
        },
        "documentation": "/docs",
    }


# =============================================================================
# Development Server
# =============================================================================


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()

    uvicorn.run(
        "src.api.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.is_development,
        log_level=settings.log_level.lower(),
    )
