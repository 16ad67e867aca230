"""Strategy registry: route key -> sign-in strategy.

The registry is built once by the application factory and stored on
`app.state`. Nothing registers itself at import time; adding a provider
means adding it to `PROVIDER_CLASSES` and to `provider_credentials`.
"""

from __future__ import annotations

import logging

from authlib.integrations.starlette_client import OAuth

from auth_gateway.auth.local import LocalStrategy
from auth_gateway.auth.providers import (
    FacebookStrategy,
    GoogleOAuth2Strategy,
    GoogleOIDCStrategy,
    LinkedInStrategy,
    ProviderConfig,
    ProviderStrategy,
    TwitterStrategy,
)
from auth_gateway.config import Settings
from auth_gateway.upstream.client import UpstreamClient

logger = logging.getLogger(__name__)

PROVIDER_CLASSES: dict[str, type[ProviderStrategy]] = {
    cls.name: cls
    for cls in (
        GoogleOIDCStrategy,
        GoogleOAuth2Strategy,
        TwitterStrategy,
        LinkedInStrategy,
        FacebookStrategy,
    )
}


class StrategyRegistry:
    """Startup-time map of every sign-in strategy.

    `providers` only holds configured providers; `is_known` tells an
    unconfigured provider (501) apart from a route that does not exist (404).
    """

    def __init__(
        self,
        local: LocalStrategy,
        providers: dict[str, ProviderStrategy],
    ):
        self.local = local
        self.providers = providers

    def is_known(self, key: str) -> bool:
        return key in PROVIDER_CLASSES

    def is_configured(self, key: str) -> bool:
        return key in self.providers

    def get_provider(self, key: str) -> ProviderStrategy:
        """Look up a configured provider.

        Raises:
            KeyError: If the provider is unknown or not configured
        """
        return self.providers[key]


def provider_credentials(settings: Settings) -> dict[str, tuple[str | None, str | None]]:
    return {
        GoogleOIDCStrategy.name: (settings.google_client_id, settings.google_client_secret),
        GoogleOAuth2Strategy.name: (settings.google_client_id, settings.google_client_secret),
        TwitterStrategy.name: (settings.twitter_consumer_key, settings.twitter_consumer_secret),
        LinkedInStrategy.name: (settings.linkedin_client_id, settings.linkedin_client_secret),
        FacebookStrategy.name: (settings.facebook_client_id, settings.facebook_client_secret),
    }


def build_registry(
    settings: Settings,
    upstream: UpstreamClient,
    oauth: OAuth | None = None,
) -> StrategyRegistry:
    """Construct every strategy from application settings."""
    oauth = oauth or OAuth()
    providers: dict[str, ProviderStrategy] = {}

    for key, (client_id, client_secret) in provider_credentials(settings).items():
        cls = PROVIDER_CLASSES[key]

        if not client_id or not client_secret:
            logger.warning(f"{cls.label} sign-in not configured - skipping")
            continue

        strategy = cls(
            upstream,
            ProviderConfig(
                client_id=client_id,
                client_secret=client_secret,
                callback_path=f"/auth/{key}/callback",
            ),
        )
        strategy.register(oauth)
        providers[key] = strategy

    return StrategyRegistry(
        local=LocalStrategy(upstream),
        providers=providers,
    )
