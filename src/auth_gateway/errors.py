"""Gateway error taxonomy and the boundary error handlers.

Strategies and the resource proxy raise one of the errors below; the
handlers registered by `register_exception_handlers` turn them into HTTP
responses. Responses carry only the mapped status and a generic reason,
never the upstream body.

| Error | Status | Raised when |
|-------|--------|-------------|
| Unauthorized | 401 | Bad credentials, failed provider exchange |
| BadImplementation | 500 | Upstream answered a proxy call with an unexpected status |
| Unexpected | 500 | Network failure or an uncaught exception in an adapter |
"""

from __future__ import annotations

import logging
from http import HTTPStatus

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from auth_gateway.upstream.client import UpstreamError, UpstreamUnavailable

logger = logging.getLogger(__name__)


class GatewayError(Exception):
    """Base exception for errors surfaced to the client."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    reason: str = "Internal Server Error"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.reason)
        self.message = message or self.reason


class Unauthorized(GatewayError):
    """Raised when credentials or a provider result cannot be accepted."""

    status_code = status.HTTP_401_UNAUTHORIZED
    reason = "Unauthorized"


class BadImplementation(GatewayError):
    """Raised when the upstream API breaks its response contract."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    reason = "An internal server error occurred"


class Unexpected(GatewayError):
    """Raised for failures nobody planned for (network, adapter bugs)."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    reason = "An internal server error occurred"


async def gateway_error_handler(request: Request, exc: GatewayError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{type(exc).__name__} on {request.method} {request.url.path}: {exc.message}")
    else:
        logger.info(f"{type(exc).__name__} on {request.method} {request.url.path}")

    return JSONResponse(status_code=exc.status_code, content={"detail": exc.reason})


async def upstream_error_handler(request: Request, exc: UpstreamError) -> JSONResponse:
    """Propagate the upstream status code without leaking its body."""
    logger.error(
        f"Upstream {exc.method} {exc.path} failed with {exc.status_code}: {exc.response_body}"
    )

    try:
        reason = HTTPStatus(exc.status_code).phrase
    except ValueError:
        reason = "Upstream request failed"

    return JSONResponse(status_code=exc.status_code, content={"detail": reason})


async def upstream_unavailable_handler(
    request: Request, exc: UpstreamUnavailable
) -> JSONResponse:
    return await gateway_error_handler(request, Unexpected(str(exc)))


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}", exc_info=exc)
    return JSONResponse(
        status_code=Unexpected.status_code,
        content={"detail": Unexpected.reason},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install the boundary error translation on the application."""
    app.add_exception_handler(GatewayError, gateway_error_handler)
    app.add_exception_handler(UpstreamError, upstream_error_handler)
    app.add_exception_handler(UpstreamUnavailable, upstream_unavailable_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
