# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the Academy Console API.
# It configures the FastAPI application with middleware, routers, and handlers.
#
# Usage:
#   uvicorn app.main:app --reload
# =============================================================================

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import settings
from app.exceptions import (
    ConsoleException,
    console_exception_handler,
    validation_exception_handler,
)
from app.routers import entities, health, users

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    The Supabase client is created lazily on first use.
    """
    logger.info(f"Starting Academy Console API in {settings.ENVIRONMENT} mode")
    logger.info(
        f"Store batch limit: {settings.STORE_BATCH_LIMIT}, "
        f"batch retries: {settings.MIGRATION_BATCH_RETRIES}, "
        f"verify before delete: {settings.VERIFY_BEFORE_DELETE}"
    )

    yield

    logger.info("Shutting down Academy Console API")


# Create FastAPI application
app = FastAPI(
    title="Academy Console API",
    description="""
## Sales-Training Admin Console API

### Deleting avatars and categories

Challenges reference avatars (`avatar`) and categories (`category_id`) by id.
The store enforces no foreign keys, so deletes go through a check first:

1. `GET /api/v1/entities/{kind}/{id}/dependents` - count references
2. No dependents: `DELETE /api/v1/entities/{kind}/{id}`
3. Dependents: `POST /api/v1/entities/{kind}/{id}/transfer` with a replacement id

Transfers commit in batches. If a batch fails the entity is kept and the
response says how many dependents were moved.

### Users

`GET /api/v1/users` returns newest users first; pass `next_cursor` back as
`cursor` to load more.
""",
    version=health.VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    openapi_tags=[
        {
            "name": "Entities",
            "description": "Avatar and category deletion with dependent transfer",
        },
        {
            "name": "Users",
            "description": "Paginated users list",
        },
        {
            "name": "Health",
            "description": "API health and readiness checks",
        },
    ],
)


# =============================================================================
# Middleware
# =============================================================================

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list if settings.is_production else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Exception Handlers
# =============================================================================

@app.exception_handler(ConsoleException)
async def handle_console_exception(request: Request, exc: ConsoleException):
    """Handle custom console exceptions."""
    return await console_exception_handler(request, exc)


@app.exception_handler(RequestValidationError)
async def handle_validation_exception(request: Request, exc: RequestValidationError):
    """Handle request validation errors."""
    return await validation_exception_handler(request, exc)


@app.exception_handler(Exception)
async def handle_general_exception(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.exception(f"Unexpected error: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "detail": "An unexpected error occurred",
            "code": "INTERNAL_ERROR",
        }
    )


# =============================================================================
# Routers
# =============================================================================

# Health check endpoints
app.include_router(
    health.router,
    prefix="/api/v1",
    tags=["Health"]
)

# Avatar / category deletion endpoints
app.include_router(
    entities.router,
    prefix="/api/v1/entities",
    tags=["Entities"]
)

# Users list endpoints
app.include_router(
    users.router,
    prefix="/api/v1/users",
    tags=["Users"]
)


# =============================================================================
# Root Endpoint
# =============================================================================

@app.get("/", tags=["Root"])
async def root():
    """
    Root endpoint - returns API info.
    """
    return {
        "name": "Academy Console API",
        "version": health.VERSION,
        "docs": "/docs",
        "health": "/api/v1/health",
    }
