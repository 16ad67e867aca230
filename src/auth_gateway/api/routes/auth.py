"""Authentication routes.

Handles local sign-in, sign-up, and the external provider flows.

## Endpoints

1. POST /auth/sign-in - Local sign-in (body or HTTP Basic credentials)
2. POST /auth/sign-up - Account creation, forwarded to the upstream API
3. GET /auth/{provider} - Redirect to the provider consent screen
4. GET /auth/{provider}/callback - Handle the provider callback

Providers: google, google-oauth, twitter, linkedin, facebook.

## Session Management

A successful sign-in stores the upstream token in the `token` cookie and
returns the user object without the token.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, Request, Response, status
from fastapi.security import HTTPBasic, HTTPBasicCredentials

from auth_gateway.auth.dependencies import get_dispatcher, get_upstream
from auth_gateway.auth.dispatcher import AuthDispatcher
from auth_gateway.models.auth import Credential, SignInRequest
from auth_gateway.upstream.client import UpstreamClient

logger = logging.getLogger(__name__)

router = APIRouter()

basic_auth = HTTPBasic(auto_error=False)


@router.post("/sign-in")
async def sign_in(
    response: Response,
    body: SignInRequest | None = None,
    basic: HTTPBasicCredentials | None = Depends(basic_auth),
    dispatcher: AuthDispatcher = Depends(get_dispatcher),
) -> dict[str, Any]:
    """Sign in with an identifier and secret.

    `rememberMe` extends the session cookie from 2 hours to 30 days.
    """
    body = body or SignInRequest()

    credential = body.credential()
    if credential is None and basic is not None and basic.username and basic.password:
        credential = Credential(identifier=basic.username, secret=basic.password)

    return await dispatcher.sign_in(credential, body.remember_me, response)


@router.post("/sign-up", status_code=status.HTTP_201_CREATED)
async def sign_up(
    user: Any = Body(None),
    upstream: UpstreamClient = Depends(get_upstream),
) -> str:
    """Create an account. The body is forwarded to the upstream API as is.

    A request without a body is forwarded as `{}`; upstream validates it.
    """
    await upstream.sign_up(user if user is not None else {})
    return "user created"


@router.get("/{provider}")
async def provider_sign_in(
    provider: str,
    request: Request,
    dispatcher: AuthDispatcher = Depends(get_dispatcher),
) -> Response:
    """Initiate a provider sign-in.

    Redirects the user to the provider. After consent, the provider
    redirects back to /auth/{provider}/callback.
    """
    return await dispatcher.initiate(provider, request)


@router.get("/{provider}/callback")
async def provider_callback(
    provider: str,
    request: Request,
    response: Response,
    dispatcher: AuthDispatcher = Depends(get_dispatcher),
) -> dict[str, Any]:
    """Handle a provider callback and set the session cookie."""
    return await dispatcher.callback(provider, request, response)
