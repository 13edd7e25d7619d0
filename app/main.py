# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the ScholarStream API.
# It configures the FastAPI application with middleware, routers, and handlers.
#
# Usage:
#   poetry run uvicorn app.main:app --reload
# =============================================================================

import logging
from contextlib import asynccontextmanager

import stripe
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from pymongo.errors import PyMongoError

from app.config import settings
from app.exceptions import (
    ScholarStreamException,
    payment_exception_handler,
    scholarstream_exception_handler,
    store_exception_handler,
    unhandled_exception_handler,
)
from app.logging_utils import configure_logging
from app.middleware import RequestIDMiddleware
from app.routers import applications, health, reviews, scholarships, users
from app.auth import routes as auth_routes
from lib.mongo_client import MongoStore
from lib.stripe_client import StripeGateway

# Configure logging
configure_logging(debug=settings.DEBUG)
logger = logging.getLogger(__name__)

API_VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    - Startup: open the MongoDB connection, ensure indexes, build the
      Stripe gateway, and keep both on app.state for injection
    - Shutdown: close the MongoDB connection
    """
    logger.info(f"Starting ScholarStream API in {settings.ENVIRONMENT} mode")
    logger.info(f"CORS origins: {settings.cors_origins_list}")

    store = MongoStore.connect(
        settings.MONGODB_URI,
        settings.MONGODB_DB,
        timeout_ms=settings.MONGODB_TIMEOUT_MS,
    )
    try:
        store.ensure_indexes()
    except PyMongoError as e:
        # Serve anyway; /health/ready reports the database state
        logger.error(f"Could not ensure MongoDB indexes at startup: {e}")

    app.state.store = store
    app.state.payment_gateway = StripeGateway(
        api_key=settings.STRIPE_SECRET_KEY,
        currency=settings.STRIPE_CURRENCY,
        timeout_seconds=settings.STRIPE_TIMEOUT_SECONDS,
    )

    yield

    logger.info("Shutting down ScholarStream API")
    store.close()


# Create FastAPI application
app = FastAPI(
    title="ScholarStream API",
    description="""
## Scholarship Management API

Manage users, scholarship listings, paid applications and reviews.

### Roles

| Role | Can |
|------|-----|
| **student** | Pay for and track applications, write and delete own reviews |
| **moderator** | See all applications and set their status |
| **admin** | Manage scholarships and users, see application statistics |

### Authentication

1. `POST /getToken` with `{"email": "..."}` after signing in
2. Send `Authorization: Bearer <token>` on protected routes (tokens last one hour)

### Applying

1. `POST /application` - returns a Stripe checkout URL
2. Pay on the hosted page
3. `POST /application-success?session_id=...` - creates the application (safe to retry)
""",
    version=API_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    openapi_tags=[
        {"name": "Auth", "description": "Access token issuing and verification"},
        {"name": "Users", "description": "Registration and role management"},
        {"name": "Scholarships", "description": "Scholarship catalog"},
        {"name": "Applications", "description": "Paid applications and moderation"},
        {"name": "Reviews", "description": "Scholarship reviews"},
        {"name": "Health", "description": "API health and readiness checks"},
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

app.add_middleware(RequestIDMiddleware)


# =============================================================================
# Exception Handlers
# =============================================================================

@app.exception_handler(ScholarStreamException)
async def handle_scholarstream_exception(request: Request, exc: ScholarStreamException):
    """Handle custom ScholarStream exceptions."""
    return await scholarstream_exception_handler(request, exc)


@app.exception_handler(PyMongoError)
async def handle_store_exception(request: Request, exc: PyMongoError):
    """Handle MongoDB driver failures."""
    return await store_exception_handler(request, exc)


@app.exception_handler(stripe.StripeError)
async def handle_payment_exception(request: Request, exc: stripe.StripeError):
    """Handle Stripe API failures."""
    return await payment_exception_handler(request, exc)


@app.exception_handler(Exception)
async def handle_general_exception(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    return await unhandled_exception_handler(request, exc)


# =============================================================================
# Routers
# =============================================================================

app.include_router(auth_routes.router, tags=["Auth"])
app.include_router(users.router, tags=["Users"])
app.include_router(scholarships.router, tags=["Scholarships"])
app.include_router(applications.router, tags=["Applications"])
app.include_router(reviews.router, tags=["Reviews"])
app.include_router(health.router, tags=["Health"])


# =============================================================================
# Root Endpoint
# =============================================================================

@app.get("/", tags=["Root"])
async def root():
    """
    Root endpoint - returns API info.
    """
    return {
        "name": "ScholarStream API",
        "message": "Hello from scholar stream server",
        "version": API_VERSION,
        "docs": "/docs",
        "health": "/health",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app.main:app", host=settings.API_HOST, port=settings.PORT, reload=settings.DEBUG)
