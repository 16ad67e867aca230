"""Base identity provider strategy.

This module defines the shared flow for external identity providers and
the canonical profile every provider must translate into.

## Flow

1. Initiate: `authorize_redirect()` hands the browser to the provider.
   Authlib builds the authorization URL and stores state in the session.
2. Callback: `fetch_profile()` lets Authlib validate state and exchange the
   code (or OAuth1 verifier) for a token, then loads the raw profile.
3. Exchange: `exchange()` maps the raw profile to a `ProviderProfile` and
   trades it for an upstream `AuthResult` via /api/auth/sign-provider.

Token exchange, signature and state validation are never reimplemented
here; they belong to Authlib.

## Translation Requirements

Each provider implements:
- `load_profile()` to fetch the raw profile once a token is available
- `map_profile()` to convert that raw profile into a `ProviderProfile`

## Failure Mapping

| Failure | Error |
|---------|-------|
| Authlib OAuthError (bad state, denied consent) | Unauthorized |
| Provider profile endpoint answered >= 400 | Unauthorized |
| Raw profile missing the user id | Unauthorized |
| Upstream rejected the exchange or returned no body | Unauthorized |
| Network failure, anything else | Unexpected |
"""

from __future__ import annotations

import logging
from abc import abstractmethod
from dataclasses import dataclass
from typing import Any, ClassVar

import httpx
from authlib.integrations.starlette_client import OAuth, OAuthError
from starlette.requests import Request
from starlette.responses import Response

from auth_gateway.auth.base import AuthStrategy
from auth_gateway.errors import GatewayError, Unauthorized, Unexpected
from auth_gateway.models.auth import AuthResult, ProviderProfile
from auth_gateway.upstream.client import UpstreamClient, UpstreamError, UpstreamUnavailable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProviderConfig:
    """Startup-time configuration for one provider."""

    client_id: str
    client_secret: str
    callback_path: str
    scopes: tuple[str, ...] = ()


class ProviderStrategy(AuthStrategy):
    """Abstract base class for external identity providers.

    Attributes:
        name: Route key, also the Authlib client name
        label: Human-readable provider name
        default_scopes: Scopes requested when the config does not override them
        endpoints: Authlib registration kwargs (metadata URL or explicit URLs)

    Example:
        ```python
        class MyProvider(ProviderStrategy):
            name = "my-provider"
            label = "My Provider"
            endpoints = {"server_metadata_url": "https://idp/.well-known/openid-configuration"}

            async def load_profile(self, token):
                return dict(token["userinfo"])

            def map_profile(self, raw):
                return ProviderProfile(provider_user_id=raw["sub"], email=raw.get("email"))
        ```
    """

    label: ClassVar[str]
    default_scopes: ClassVar[tuple[str, ...]] = ()
    endpoints: ClassVar[dict[str, str]] = {}

    def __init__(self, upstream: UpstreamClient, config: ProviderConfig):
        super().__init__(upstream)
        self.config = config
        self.client: Any = None

    @property
    def scopes(self) -> tuple[str, ...]:
        return self.config.scopes or self.default_scopes

    def client_kwargs(self) -> dict[str, Any]:
        """Extra kwargs for the underlying Authlib HTTP client."""
        if not self.scopes:
            return {}
        return {"scope": " ".join(self.scopes)}

    def register(self, oauth: OAuth) -> None:
        """Register this provider with an Authlib OAuth registry."""
        self.client = oauth.register(
            name=self.name,
            client_id=self.config.client_id,
            client_secret=self.config.client_secret,
            client_kwargs=self.client_kwargs(),
            **self.endpoints,
        )
        logger.info(f"Registered {self.label} sign-in at /auth/{self.name}")

    def callback_url(self, request: Request, public_url: str | None = None) -> str:
        """Absolute callback URL for this provider."""
        base = public_url or str(request.base_url)
        return base.rstrip("/") + self.config.callback_path

    async def authorize_redirect(self, request: Request, redirect_uri: str) -> Response:
        """Redirect the browser to the provider's consent screen."""
        return await self.client.authorize_redirect(request, redirect_uri)

    async def fetch_profile(self, request: Request) -> dict[str, Any]:
        """Complete the provider handshake and return the raw profile.

        Raises:
            Unauthorized: If the provider handshake or profile lookup is rejected
            Unexpected: If the provider cannot be reached
        """
        try:
            token = await self.client.authorize_access_token(request)
            return await self.load_profile(token)
        except OAuthError as e:
            logger.warning(f"{self.label} authorization failed: {e.error}")
            raise Unauthorized() from e
        except httpx.HTTPStatusError as e:
            logger.warning(f"{self.label} profile request failed: {e.response.status_code}")
            raise Unauthorized() from e
        except httpx.HTTPError as e:
            logger.error(f"{self.label} unreachable: {e!r}")
            raise Unexpected(f"{self.label} unreachable") from e

    @abstractmethod
    async def load_profile(self, token: dict[str, Any]) -> dict[str, Any]:
        """Fetch the raw provider profile using an access token."""
        pass

    @abstractmethod
    def map_profile(self, raw: dict[str, Any]) -> ProviderProfile:
        """Translate the provider-specific profile to a ProviderProfile.

        Raises:
            KeyError: If the profile lacks the provider user id
        """
        pass

    async def exchange(self, payload: dict[str, Any]) -> AuthResult:
        """Trade a raw provider profile for an upstream AuthResult."""
        try:
            return await self._exchange(payload)
        except GatewayError:
            raise
        except Exception as e:
            logger.exception(f"{self.label} sign-in failed unexpectedly")
            raise Unexpected(str(e)) from e

    async def _exchange(self, payload: dict[str, Any]) -> AuthResult:
        try:
            profile = self.map_profile(payload)
        except (KeyError, TypeError, ValueError) as e:
            logger.warning(f"{self.label} profile is missing required fields: {e}")
            raise Unauthorized() from e

        try:
            response = await self.upstream.sign_provider(
                name=profile.display_name,
                email=profile.email,
                password=profile.provider_user_id,
            )
        except UpstreamError as e:
            logger.warning(f"{self.label} sign-in rejected upstream with {e.status_code}")
            raise Unauthorized() from e
        except UpstreamUnavailable as e:
            raise Unexpected(str(e)) from e

        if response.status_code != 200 or not response.content:
            logger.warning(f"{self.label} sign-in got status {response.status_code} without a body")
            raise Unauthorized()

        try:
            return AuthResult.from_payload(response.json())
        except ValueError as e:
            logger.warning(f"{self.label} sign-in returned no usable token: {e}")
            raise Unauthorized() from e
