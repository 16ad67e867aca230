"""Application configuration.

Configuration is loaded from environment variables using pydantic-settings.
Secrets (session secret, upstream API key, provider client secrets) should be
provided via environment variables, not config files.

## Required Environment Variables

- API_URL: Base URL of the upstream resource/identity API
- API_KEY_TOKEN: Static service key used for server-to-server sign-in calls
- SESSION_SECRET: Secret for signing the OAuth state cookie (min 32 chars)

## Optional Environment Variables

- ENVIRONMENT: development, staging or production (default: development)
- GOOGLE_CLIENT_ID / GOOGLE_CLIENT_SECRET: Google OIDC and OAuth2 sign-in
- TWITTER_CONSUMER_KEY / TWITTER_CONSUMER_SECRET: Twitter sign-in
- LINKEDIN_CLIENT_ID / LINKEDIN_CLIENT_SECRET: LinkedIn sign-in
- FACEBOOK_CLIENT_ID / FACEBOOK_CLIENT_SECRET: Facebook sign-in
- PUBLIC_URL: Externally visible base URL used to build OAuth callback URLs

## Example .env file

```
API_URL=http://localhost:3000
API_KEY_TOKEN=your-service-api-key
SESSION_SECRET=your-session-secret-at-least-32-characters
GOOGLE_CLIENT_ID=your-google-client-id.apps.googleusercontent.com
GOOGLE_CLIENT_SECRET=your-google-client-secret
```
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

TWO_HOURS_IN_SECONDS = 60 * 60 * 2
THIRTY_DAYS_IN_SECONDS = 60 * 60 * 24 * 30


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Auth Gateway"
    app_version: str = "0.1.0"
    debug: bool = False
    environment: Literal["development", "staging", "production"] = "development"
    log_level: str = "INFO"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    allowed_origins: list[str] = Field(
        default=["http://localhost:3000", "http://localhost:8000"],
        description="CORS allowed origins",
    )
    public_url: str | None = Field(
        default=None,
        description="Base URL for OAuth callbacks (defaults to the request URL)",
    )

    # Upstream API
    api_url: str = Field(..., description="Upstream API base URL")
    api_key_token: str = Field(
        ...,
        description="Service API key sent on server-to-server sign-in calls",
    )
    upstream_timeout_seconds: float = Field(default=30.0, gt=0)

    # Session
    session_secret: str = Field(
        ...,
        min_length=32,
        description="Secret for signing the OAuth state cookie (min 32 chars)",
    )
    session_cookie_name: str = "token"
    session_max_age_seconds: int = TWO_HOURS_IN_SECONDS
    remember_me_max_age_seconds: int = THIRTY_DAYS_IN_SECONDS

    # Identity providers
    google_client_id: str | None = None
    google_client_secret: str | None = None
    twitter_consumer_key: str | None = None
    twitter_consumer_secret: str | None = None
    linkedin_client_id: str | None = None
    linkedin_client_secret: str | None = None
    facebook_client_id: str | None = None
    facebook_client_secret: str | None = None

    @field_validator("api_url", mode="before")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalize the upstream base URL so paths can be appended."""
        if isinstance(v, str):
            return v.rstrip("/")
        return v

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    @property
    def cookie_secure(self) -> bool:
        """Session cookies are httpOnly and Secure only in production."""
        return self.is_production

    @property
    def google_configured(self) -> bool:
        return bool(self.google_client_id and self.google_client_secret)

    @property
    def twitter_configured(self) -> bool:
        return bool(self.twitter_consumer_key and self.twitter_consumer_secret)

    @property
    def linkedin_configured(self) -> bool:
        return bool(self.linkedin_client_id and self.linkedin_client_secret)

    @property
    def facebook_configured(self) -> bool:
        return bool(self.facebook_client_id and self.facebook_client_secret)


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Settings are loaded once and cached. To reload, clear the cache:
    ```python
    get_settings.cache_clear()
    ```
    """
    return Settings()

