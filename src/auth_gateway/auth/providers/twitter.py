"""Twitter sign-in (OAuth 1.0a).

## Endpoints

- Request token: https://api.twitter.com/oauth/request_token
- Authorization: https://api.twitter.com/oauth/authenticate
- Access token: https://api.twitter.com/oauth/access_token
- Profile: https://api.twitter.com/1.1/account/verify_credentials.json

The consumer key and secret play the role of client id and secret.

## Profile Translation (Twitter -> ProviderProfile)

| Twitter field | ProviderProfile field | Notes |
|---------------|-----------------------|-------|
| id_str | provider_user_id | Falls back to str(id) |
| name | display_name | Falls back to screen_name |
| email | email | Only with elevated access; else <screen_name>@twitter.com |
"""

from __future__ import annotations

from typing import Any

from auth_gateway.auth.providers.base import ProviderStrategy
from auth_gateway.models.auth import ProviderProfile

TWITTER_REQUEST_TOKEN_URL = "https://api.twitter.com/oauth/request_token"
TWITTER_AUTHORIZE_URL = "https://api.twitter.com/oauth/authenticate"
TWITTER_ACCESS_TOKEN_URL = "https://api.twitter.com/oauth/access_token"
TWITTER_API_BASE_URL = "https://api.twitter.com/1.1/"


class TwitterStrategy(ProviderStrategy):
    """Twitter sign-in via OAuth 1.0a."""

    name = "twitter"
    label = "Twitter"
    endpoints = {
        "request_token_url": TWITTER_REQUEST_TOKEN_URL,
        "authorize_url": TWITTER_AUTHORIZE_URL,
        "access_token_url": TWITTER_ACCESS_TOKEN_URL,
        "api_base_url": TWITTER_API_BASE_URL,
    }

    async def load_profile(self, token: dict[str, Any]) -> dict[str, Any]:
        response = await self.client.get(
            "account/verify_credentials.json",
            params={"include_email": "true", "skip_status": "true"},
            token=token,
        )
        response.raise_for_status()
        return response.json()

    def map_profile(self, raw: dict[str, Any]) -> ProviderProfile:
        user_id = raw.get("id_str") or raw["id"]
        screen_name = raw.get("screen_name")

        email = raw.get("email")
        if not email and screen_name:
            email = f"{screen_name}@twitter.com"

        return ProviderProfile(
            provider_user_id=str(user_id),
            display_name=raw.get("name") or screen_name,
            email=email,
        )
