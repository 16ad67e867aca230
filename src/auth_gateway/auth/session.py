"""Session cookie issuance.

The session is the upstream token itself, stored in a cookie. There is no
server-side session table; the upstream API owns the token's meaning and
expiry.

## Cookie Flags

| Environment | httponly | secure | max_age |
|-------------|----------|--------|---------|
| production | True | True | 2 hours, or 30 days with remember-me |
| development, staging | False | False | same as production |

Plain-HTTP local testing needs the relaxed flags; the lifetime is the same
everywhere.
"""

from __future__ import annotations

import logging

from starlette.responses import Response

from auth_gateway.config import Settings

logger = logging.getLogger(__name__)


def session_max_age(settings: Settings, remember_me: bool = False) -> int:
    """Cookie lifetime in seconds."""
    if remember_me:
        return settings.remember_me_max_age_seconds
    return settings.session_max_age_seconds


def set_session_cookie(
    response: Response,
    token: str,
    settings: Settings,
    remember_me: bool = False,
) -> None:
    """Write the session token cookie onto a response.

    Args:
        response: Outgoing response
        token: Opaque bearer token from the upstream API
        settings: Application settings (cookie name, lifetimes, environment)
        remember_me: Use the extended lifetime
    """
    response.set_cookie(
        key=settings.session_cookie_name,
        value=token,
        max_age=session_max_age(settings, remember_me),
        httponly=settings.cookie_secure,
        secure=settings.cookie_secure,
        samesite="lax",
    )
