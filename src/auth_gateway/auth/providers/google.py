"""Google sign-in, over OpenID Connect and over plain OAuth 2.0.

## Endpoints

- Discovery: https://accounts.google.com/.well-known/openid-configuration
- Authorization: https://accounts.google.com/o/oauth2/v2/auth
- Token: https://oauth2.googleapis.com/token
- User Info: https://openidconnect.googleapis.com/v1/userinfo (OIDC),
  https://www.googleapis.com/oauth2/v3/userinfo (OAuth2)

Both flows use the same GOOGLE_CLIENT_ID / GOOGLE_CLIENT_SECRET.

## Profile Translation (Google -> ProviderProfile)

| Google claim | ProviderProfile field |
|--------------|-----------------------|
| sub | provider_user_id |
| name | display_name |
| email | email |

The OAuth2 flow does not request `openid`: without discovery metadata
Authlib has no JWKS to validate an ID token against, so the profile comes
from the userinfo endpoint instead.
"""

from __future__ import annotations

from typing import Any

from auth_gateway.auth.providers.base import ProviderStrategy
from auth_gateway.models.auth import ProviderProfile

GOOGLE_DISCOVERY_URL = "https://accounts.google.com/.well-known/openid-configuration"
GOOGLE_AUTHORIZE_URL = "https://accounts.google.com/o/oauth2/v2/auth"
GOOGLE_TOKEN_URL = "https://oauth2.googleapis.com/token"
GOOGLE_API_BASE_URL = "https://www.googleapis.com/"


def _profile_from_claims(claims: dict[str, Any]) -> ProviderProfile:
    return ProviderProfile(
        provider_user_id=str(claims["sub"]),
        display_name=claims.get("name"),
        email=claims.get("email"),
    )


class GoogleOIDCStrategy(ProviderStrategy):
    """Google sign-in via OpenID Connect discovery."""

    name = "google"
    label = "Google"
    default_scopes = ("openid", "email", "profile")
    endpoints = {"server_metadata_url": GOOGLE_DISCOVERY_URL}

    async def load_profile(self, token: dict[str, Any]) -> dict[str, Any]:
        # Authlib parses the ID token into "userinfo" when openid was requested
        userinfo = token.get("userinfo")
        if not userinfo:
            userinfo = await self.client.userinfo(token=token)
        return dict(userinfo)

    def map_profile(self, raw: dict[str, Any]) -> ProviderProfile:
        return _profile_from_claims(raw)


class GoogleOAuth2Strategy(ProviderStrategy):
    """Google sign-in via the plain OAuth 2.0 authorization code flow."""

    name = "google-oauth"
    label = "Google OAuth"
    default_scopes = ("email", "profile")
    endpoints = {
        "authorize_url": GOOGLE_AUTHORIZE_URL,
        "access_token_url": GOOGLE_TOKEN_URL,
        "api_base_url": GOOGLE_API_BASE_URL,
    }

    async def load_profile(self, token: dict[str, Any]) -> dict[str, Any]:
        response = await self.client.get("oauth2/v3/userinfo", token=token)
        response.raise_for_status()
        return response.json()

    def map_profile(self, raw: dict[str, Any]) -> ProviderProfile:
        return _profile_from_claims(raw)
