"""Authentication for the gateway.

Provides local and external-provider sign-in, and session cookie issuance.

## Sign-in Flows

Local:
1. Client POSTs identifier/secret (or HTTP Basic) to /auth/sign-in
2. Credentials are verified by the upstream API
3. Upstream token is set as the `token` cookie, user returned without it

Provider (Google OIDC, Google OAuth2, Twitter, LinkedIn, Facebook):
1. GET /auth/{provider} redirects to the provider consent screen
2. Provider redirects back to /auth/{provider}/callback
3. Authlib exchanges the code for a token and the profile is loaded
4. Profile is exchanged for an upstream token via /api/auth/sign-provider
5. Upstream token is set as the `token` cookie, user returned without it

## Security

- The bearer token only ever travels in the cookie, never in a body
- Cookies are httpOnly and Secure in production
- OAuth state lives in a signed session cookie (Starlette SessionMiddleware)
"""

from auth_gateway.auth.base import AuthStrategy
from auth_gateway.auth.dispatcher import AuthDispatcher
from auth_gateway.auth.local import LocalStrategy
from auth_gateway.auth.registry import StrategyRegistry, build_registry
from auth_gateway.auth.session import set_session_cookie

__all__ = [
    "AuthStrategy",
    "AuthDispatcher",
    "LocalStrategy",
    "StrategyRegistry",
    "build_registry",
    "set_session_cookie",
]
