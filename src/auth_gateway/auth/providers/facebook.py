"""Facebook sign-in (OAuth 2.0 via the Graph API)."""

from __future__ import annotations

from typing import Any

from auth_gateway.auth.providers.base import ProviderStrategy
from auth_gateway.models.auth import ProviderProfile

FACEBOOK_GRAPH_VERSION = "v18.0"
FACEBOOK_AUTHORIZE_URL = f"https://www.facebook.com/{FACEBOOK_GRAPH_VERSION}/dialog/oauth"
FACEBOOK_TOKEN_URL = f"https://graph.facebook.com/{FACEBOOK_GRAPH_VERSION}/oauth/access_token"
FACEBOOK_API_BASE_URL = f"https://graph.facebook.com/{FACEBOOK_GRAPH_VERSION}/"


class FacebookStrategy(ProviderStrategy):
    """Facebook sign-in via OAuth 2.0."""

    name = "facebook"
    label = "Facebook"
    default_scopes = ("email",)
    endpoints = {
        "authorize_url": FACEBOOK_AUTHORIZE_URL,
        "access_token_url": FACEBOOK_TOKEN_URL,
        "api_base_url": FACEBOOK_API_BASE_URL,
    }

    async def load_profile(self, token: dict[str, Any]) -> dict[str, Any]:
        response = await self.client.get("me", params={"fields": "id,name,email"}, token=token)
        response.raise_for_status()
        return response.json()

    def map_profile(self, raw: dict[str, Any]) -> ProviderProfile:
        return ProviderProfile(
            provider_user_id=str(raw["id"]),
            display_name=raw.get("name"),
            email=raw.get("email"),
        )
