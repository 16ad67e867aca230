"""LinkedIn sign-in (OAuth 2.0).

## Endpoints

- Authorization: https://www.linkedin.com/oauth/v2/authorization
- Token: https://www.linkedin.com/oauth/v2/accessToken
- Profile: https://api.linkedin.com/v2/me
- Email: https://api.linkedin.com/v2/emailAddress?q=members&projection=(elements*(handle~))

LinkedIn expects the client secret in the token request body
(`client_secret_post`), not as HTTP Basic auth.

## Profile Translation (LinkedIn -> ProviderProfile)

| LinkedIn field | ProviderProfile field |
|----------------|-----------------------|
| id | provider_user_id |
| localizedFirstName + localizedLastName | display_name |
| elements[0]["handle~"].emailAddress | email |
"""

from __future__ import annotations

from typing import Any

from auth_gateway.auth.providers.base import ProviderStrategy
from auth_gateway.models.auth import ProviderProfile

LINKEDIN_AUTHORIZE_URL = "https://www.linkedin.com/oauth/v2/authorization"
LINKEDIN_TOKEN_URL = "https://www.linkedin.com/oauth/v2/accessToken"
LINKEDIN_API_BASE_URL = "https://api.linkedin.com/v2/"


class LinkedInStrategy(ProviderStrategy):
    """LinkedIn sign-in via OAuth 2.0."""

    name = "linkedin"
    label = "LinkedIn"
    default_scopes = ("r_emailaddress", "r_liteprofile")
    endpoints = {
        "authorize_url": LINKEDIN_AUTHORIZE_URL,
        "access_token_url": LINKEDIN_TOKEN_URL,
        "api_base_url": LINKEDIN_API_BASE_URL,
    }

    def client_kwargs(self) -> dict[str, Any]:
        kwargs = super().client_kwargs()
        kwargs["token_endpoint_auth_method"] = "client_secret_post"
        return kwargs

    async def load_profile(self, token: dict[str, Any]) -> dict[str, Any]:
        response = await self.client.get("me", token=token)
        response.raise_for_status()
        profile = response.json()

        response = await self.client.get(
            "emailAddress",
            params={"q": "members", "projection": "(elements*(handle~))"},
            token=token,
        )
        response.raise_for_status()
        profile["email"] = _primary_email(response.json())

        return profile

    def map_profile(self, raw: dict[str, Any]) -> ProviderProfile:
        parts = [raw.get("localizedFirstName"), raw.get("localizedLastName")]
        name = " ".join(p for p in parts if p) or None

        return ProviderProfile(
            provider_user_id=str(raw["id"]),
            display_name=name,
            email=raw.get("email"),
        )


def _primary_email(data: dict[str, Any]) -> str | None:
    for element in data.get("elements", []):
        handle = element.get("handle~") or {}
        if handle.get("emailAddress"):
            return handle["emailAddress"]
    return None
