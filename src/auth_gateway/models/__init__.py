"""Domain models for the auth gateway."""

from auth_gateway.models.auth import (
    AuthResult,
    BearerContext,
    Credential,
    ProviderProfile,
    SignInRequest,
)

__all__ = [
    "AuthResult",
    "BearerContext",
    "Credential",
    "ProviderProfile",
    "SignInRequest",
]
