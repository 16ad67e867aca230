"""External identity provider strategies."""

from auth_gateway.auth.providers.base import ProviderConfig, ProviderStrategy
from auth_gateway.auth.providers.facebook import FacebookStrategy
from auth_gateway.auth.providers.google import GoogleOAuth2Strategy, GoogleOIDCStrategy
from auth_gateway.auth.providers.linkedin import LinkedInStrategy
from auth_gateway.auth.providers.twitter import TwitterStrategy

__all__ = [
    "ProviderConfig",
    "ProviderStrategy",
    "FacebookStrategy",
    "GoogleOAuth2Strategy",
    "GoogleOIDCStrategy",
    "LinkedInStrategy",
    "TwitterStrategy",
]
