"""
FastAPI application factory and configuration.

This module creates the FastAPI application instance,
configures middleware, logging, and lifespan events.
"""

import logging
from collections.abc import AsyncGenerator, Awaitable, Callable
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware

from src.api.dependencies import build_registry
from src.api.v1 import router as v1_router
from src.config.settings import get_settings

logger = logging.getLogger(__name__)

# OpenAPI tags for documentation grouping
tags_metadata = [
    {
        "name": "v1",
        "description": "Account Activation API v1 - Register, activate and inspect email activations",
    },
]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    FastAPI lifespan context manager.

    Manages application startup and shutdown:
    - Applies the configured log level
    - Creates the in-memory activation registry on startup
    """
    settings = get_settings()
    logging.getLogger("src").setLevel(settings.log_level.upper())

    logger.info("Starting application...")

    # Store registry in app state for dependency injection
    app.state.registry = build_registry(settings)
    logger.info(
        "Activation registry ready (ttl=%ss, sweep grace=%ss)",
        settings.activation_ttl_seconds,
        settings.sweep_grace_seconds,
    )

    yield

    # Shutdown - records are memory-resident and are dropped here
    logger.info("Shutting down application...")
    app.state.registry = None


app = FastAPI(
    title="activation-registry",
    description="Account Activation API - Email activation by link token or 6-digit code",
    version="0.1.0",
    openapi_tags=tags_metadata,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_allow_origins,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type"],
)


@app.middleware("http")
async def no_store(request: Request, call_next: Callable[[Request], Awaitable[Response]]) -> Response:
    """Mark every response as non-cacheable (they carry credentials)."""
    response = await call_next(request)
    response.headers["Cache-Control"] = "no-store"
    return response


# Include v1 API routes
app.include_router(v1_router, prefix="/v1")


@app.get("/")
async def index() -> dict:
    """Describe the service and its endpoints."""
    return {
        "name": app.title,
        "version": app.version,
        "endpoints": {
            "register": {"method": "POST", "path": "/v1/register", "body": {"email": "string"}},
            "activateByLink": {"method": "GET", "path": "/v1/activate?token=..."},
            "activateByCode": {
                "method": "POST",
                "path": "/v1/activate",
                "body": {"email": "string", "code": "6-digit string"},
            },
            "status": {"method": "GET", "path": "/v1/status?email=..."},
            "resend": {"method": "POST", "path": "/v1/resend", "body": {"email": "string"}},
        },
    }


@app.get("/health")
async def health_check(request: Request) -> dict[str, str]:
    """
    Health check endpoint.

    Returns 200 OK once the activation registry has been initialized.
    """
    if getattr(request.app.state, "registry", None) is None:
        return {"status": "starting"}
    return {"status": "healthy"}
