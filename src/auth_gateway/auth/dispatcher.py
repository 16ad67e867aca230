"""Authentication dispatcher.

Selects the strategy for a sign-in route, runs it, and turns the result into
a session cookie plus a token-free user body. Each sign-in ends either in
success (cookie set, user returned) or in an exception from
`auth_gateway.errors`; nothing in between is kept.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import HTTPException, status
from starlette.requests import Request
from starlette.responses import Response

from auth_gateway.auth.base import AuthStrategy
from auth_gateway.auth.providers.base import ProviderStrategy
from auth_gateway.auth.registry import StrategyRegistry
from auth_gateway.auth.session import set_session_cookie
from auth_gateway.config import Settings
from auth_gateway.errors import Unauthorized
from auth_gateway.models.auth import AuthResult, Credential

logger = logging.getLogger(__name__)


class AuthDispatcher:
    """Runs sign-in strategies and issues sessions."""

    def __init__(self, registry: StrategyRegistry, settings: Settings):
        self.registry = registry
        self.settings = settings

    def provider(self, key: str) -> ProviderStrategy:
        """Resolve a provider route key.

        Raises:
            HTTPException: 404 for an unknown provider, 501 if not configured
        """
        if not self.registry.is_known(key):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Not Found",
            )

        if not self.registry.is_configured(key):
            raise HTTPException(
                status_code=status.HTTP_501_NOT_IMPLEMENTED,
                detail=f"{key} sign-in not configured",
            )

        return self.registry.get_provider(key)

    async def sign_in(
        self,
        credential: Credential | None,
        remember_me: bool,
        response: Response,
    ) -> dict[str, Any]:
        """Local sign-in. Returns the user body; sets the cookie on success."""
        if credential is None:
            raise Unauthorized()

        result = await self.registry.local.exchange(credential)
        return self.issue_session(self.registry.local, result, response, remember_me)

    async def initiate(self, key: str, request: Request) -> Response:
        """Start a provider flow by redirecting to the provider."""
        strategy = self.provider(key)
        redirect_uri = strategy.callback_url(request, self.settings.public_url)
        return await strategy.authorize_redirect(request, redirect_uri)

    async def callback(self, key: str, request: Request, response: Response) -> dict[str, Any]:
        """Finish a provider flow and issue the session."""
        strategy = self.provider(key)

        raw = await strategy.fetch_profile(request)
        if not raw:
            logger.warning(f"{strategy.label} returned no profile")
            raise Unauthorized()

        result = await strategy.exchange(raw)
        return self.issue_session(strategy, result, response)

    def issue_session(
        self,
        strategy: AuthStrategy,
        result: AuthResult | None,
        response: Response,
        remember_me: bool = False,
    ) -> dict[str, Any]:
        """Set the session cookie and return the user without the token."""
        if result is None:
            raise Unauthorized()

        remember_me = remember_me and strategy.supports_remember_me
        set_session_cookie(response, result.token, self.settings, remember_me=remember_me)

        user = result.public_user()
        logger.info(f"Signed in user {user.get('id', '<unknown>')} via {strategy.name}")
        return user
