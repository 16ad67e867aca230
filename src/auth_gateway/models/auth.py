"""Authentication models for the gateway.

Every value here is request-scoped: credentials and provider profiles are
discarded after the upstream exchange, an `AuthResult` is turned into a cookie
and a response body right away, and a `BearerContext` is rebuilt from the
cookie on every request.
"""

from __future__ import annotations

from typing import Any, Self

from pydantic import BaseModel, ConfigDict, Field


class Credential(BaseModel):
    """Local identifier/secret pair submitted at sign-in."""

    identifier: str = Field(..., min_length=1)
    secret: str = Field(..., min_length=1)

    def __repr__(self) -> str:
        return f"Credential(identifier={self.identifier!r}, secret='***')"


class SignInRequest(BaseModel):
    """Body of POST /auth/sign-in.

    Identifier and secret may instead arrive as HTTP Basic credentials.
    """

    model_config = ConfigDict(populate_by_name=True)

    identifier: str | None = None
    secret: str | None = None
    remember_me: bool = Field(default=False, alias="rememberMe")

    def credential(self) -> Credential | None:
        """Return the body credential, or None if it is incomplete."""
        if not self.identifier or not self.secret:
            return None
        return Credential(identifier=self.identifier, secret=self.secret)


class ProviderProfile(BaseModel):
    """Normalized identity from an external provider.

    The provider user id doubles as the password sent upstream, since
    provider-originated accounts have no real password.
    """

    provider_user_id: str = Field(..., min_length=1)
    display_name: str | None = None
    email: str | None = None


class AuthResult(BaseModel):
    """Canonical sign-in result returned by the upstream API.

    The token is only ever written to the session cookie; `public_user`
    is what goes into response bodies.
    """

    token: str = Field(..., min_length=1)
    user: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_payload(cls, data: Any) -> Self:
        """Parse an upstream sign-in response.

        Accepts both `{"token": ..., "user": {...}}` and a flat
        `{"token": ..., "id": ..., "name": ..., ...}` payload.

        Raises:
            ValueError: If the payload carries no token
        """
        if not isinstance(data, dict) or not data.get("token"):
            raise ValueError("Upstream payload has no token")

        user = data.get("user")
        if not isinstance(user, dict):
            user = {k: v for k, v in data.items() if k != "token"}

        return cls(token=data["token"], user=user)

    def public_user(self) -> dict[str, Any]:
        """User object safe to return to the client."""
        return {k: v for k, v in self.user.items() if k != "token"}


class BearerContext(BaseModel):
    """Session token taken from the request cookie.

    A missing cookie yields an empty token; the upstream API decides
    what that means.
    """

    model_config = ConfigDict(frozen=True)

    token: str = ""

    @property
    def authorization(self) -> str:
        # An empty token renders as a bare scheme, never with trailing whitespace
        return f"Bearer {self.token}".rstrip()

    def headers(self) -> dict[str, str]:
        return {"Authorization": self.authorization}
