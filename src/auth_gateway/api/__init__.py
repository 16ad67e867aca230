"""FastAPI application and routes.

This module provides the HTTP surface of the authentication gateway.

## API Structure

- /auth - Sign-in, sign-up and provider flows
- /movies, /user-movies - Movie resources proxied to the upstream API
- /health - Health check

## Authentication

Resource routes read the upstream token from the `token` cookie set at
sign-in and forward it as a bearer credential.

## Security

- All communication should be over HTTPS in production
- Session cookies are httpOnly and Secure in production
- Security headers on every response
"""

from auth_gateway.api.app import create_app

__all__ = ["create_app"]
