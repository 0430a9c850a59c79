# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the Indus Skylab API.
# It configures the FastAPI application with middleware, routers, and handlers.
#
# Usage:
#   uvicorn app.main:app --reload
# =============================================================================

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import settings
from app.exceptions import (
    SkylabException,
    application_error_handler,
    skylab_exception_handler,
)
from app.routers import (
    analytics,
    assistant,
    curriculum,
    health,
    orders,
    products,
    profiles,
    uploads,
)
from app.auth import routes as auth_routes
from lib.utils import ApplicationError

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

    Startup logs the effective configuration; nothing needs tearing down.
    """
    logger.info(f"Starting Indus Skylab API in {settings.ENVIRONMENT} mode")
    logger.info(f"Data backend: {settings.DATA_BACKEND}")
    logger.info(f"CORS origins: {settings.cors_origins_list}")
    if not settings.OPENAI_API_KEY:
        logger.warning("OPENAI_API_KEY is not set; the assistant will report itself unavailable")

    yield

    logger.info("Shutting down Indus Skylab API")


# Create FastAPI application
app = FastAPI(
    title="Indus Skylab API",
    description="""
## Drone Curriculum & Shop API

Grade 9-12 drone curriculum modules, a small hardware shop and an AI
assistant, backed by Supabase.

### Access Model

Every request acts as a **requester**: anonymous, or the user named by a
Supabase access token. Row visibility follows per-table rules:

| Table | Read | Write |
|-------|------|-------|
| **profiles** | own row, admins all | own row (no role change), admins all |
| **curriculum** | published, admins all | admins |
| **products** | everyone | admins |
| **orders** | own orders, admins all | place own; admins update/delete |
| **analytics** | admins | admins |

Rows you cannot see behave exactly like rows that do not exist.

### Quick Start

```bash
# Browse published modules
curl http://localhost:8000/api/v1/curriculum?grade=Grade%209

# Place an order
curl -X POST http://localhost:8000/api/v1/orders \\
  -H "Authorization: Bearer $TOKEN" \\
  -H "Content-Type: application/json" \\
  -d '{"items": [{"product_id": "...", "qty": 1}]}'
```
""",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    openapi_tags=[
        {
            "name": "Auth",
            "description": "Verify Supabase tokens and read the current user",
        },
        {
            "name": "Profiles",
            "description": "Principal profiles and roles",
        },
        {
            "name": "Curriculum",
            "description": "Drone curriculum modules and generated quizzes",
        },
        {
            "name": "Products",
            "description": "Shop catalog",
        },
        {
            "name": "Orders",
            "description": "Place and track orders",
        },
        {
            "name": "Analytics",
            "description": "Analytics events and dashboard statistics (admin)",
        },
        {
            "name": "Uploads",
            "description": "Upload product images and curriculum files (admin)",
        },
        {
            "name": "Assistant",
            "description": "AI assistant chat and quiz scoring",
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

# CORS middleware - allows cross-origin requests
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

@app.exception_handler(SkylabException)
async def handle_skylab_exception(request: Request, exc: SkylabException):
    """Handle custom Skylab exceptions."""
    return await skylab_exception_handler(request, exc)


@app.exception_handler(ApplicationError)
async def handle_application_error(request: Request, exc: ApplicationError):
    """Handle row store and Supabase client errors."""
    logger.error(f"Backend error: {exc.code} {exc.message}")
    return await application_error_handler(request, exc)


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

# Authentication endpoints (router carries its own /auth prefix)
app.include_router(
    auth_routes.router,
    prefix="/api/v1",
)

# Health check endpoints
app.include_router(
    health.router,
    prefix="/api/v1",
    tags=["Health"]
)

# Profile endpoints
app.include_router(
    profiles.router,
    prefix="/api/v1/profiles",
    tags=["Profiles"]
)

# Curriculum endpoints
app.include_router(
    curriculum.router,
    prefix="/api/v1/curriculum",
    tags=["Curriculum"]
)

# Shop endpoints
app.include_router(
    products.router,
    prefix="/api/v1/products",
    tags=["Products"]
)

app.include_router(
    orders.router,
    prefix="/api/v1/orders",
    tags=["Orders"]
)

# Analytics and dashboard endpoints
app.include_router(
    analytics.router,
    prefix="/api/v1",
    tags=["Analytics"]
)

# Storage upload endpoints
app.include_router(
    uploads.router,
    prefix="/api/v1",
    tags=["Uploads"]
)

# AI assistant endpoints
app.include_router(
    assistant.router,
    prefix="/api/v1",
    tags=["Assistant"]
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
        "name": "Indus Skylab API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/api/v1/health",
    }
