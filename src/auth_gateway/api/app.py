"""FastAPI application factory.

Creates and configures the FastAPI application with all routes and middleware.

## Usage

```python
from auth_gateway.api import create_app

app = create_app()

# Run with uvicorn
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
```

## Configuration

The app is configured via environment variables. See `auth_gateway.config`
for available settings. Tests pass `settings` and an httpx `transport`
directly to `create_app`.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.sessions import SessionMiddleware

from auth_gateway.api.middleware import SecurityHeadersMiddleware
from auth_gateway.auth.dispatcher import AuthDispatcher
from auth_gateway.auth.registry import build_registry
from auth_gateway.config import Settings, get_settings
from auth_gateway.errors import register_exception_handlers
from auth_gateway.upstream.client import UpstreamClient

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Logs startup and closes the shared upstream HTTP client on shutdown.
    """
    settings: Settings = app.state.settings

    logger.info(f"Starting {settings.app_name} v{settings.app_version} ({settings.environment})")
    logger.info(f"Upstream API: {settings.api_url}")

    yield

    logger.info("Shutting down")
    await app.state.upstream.aclose()


def create_app(
    settings: Settings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Settings to use (default: cached environment settings)
        transport: Optional httpx transport for the upstream client

    Returns:
        Configured FastAPI application
    """
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Authentication gateway for the movies API",
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        openapi_url="/openapi.json" if settings.debug else None,
        lifespan=lifespan,
    )

    upstream = UpstreamClient(
        settings.api_url,
        api_key_token=settings.api_key_token,
        timeout=settings.upstream_timeout_seconds,
        transport=transport,
    )
    registry = build_registry(settings, upstream)

    app.state.settings = settings
    app.state.upstream = upstream
    app.state.registry = registry
    app.state.dispatcher = AuthDispatcher(registry, settings)

    # OAuth state/nonce between initiate and callback
    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.session_secret,
        same_site="lax",
        https_only=settings.is_production,
    )

    app.add_middleware(SecurityHeadersMiddleware, enforce_https=settings.is_production)

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "DELETE"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # Include routers
    from auth_gateway.api.routes import auth, movies

    app.include_router(auth.router, prefix="/auth", tags=["Authentication"])
    app.include_router(movies.router, tags=["Movies"])

    # Health check endpoint
    @app.get("/health", tags=["Health"])
    async def health_check():
        """Health check endpoint."""
        return {
            "status": "healthy",
            "version": settings.app_version,
            "providers": sorted(registry.providers),
        }

    return app
