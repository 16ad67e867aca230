"""Local identifier/secret sign-in.

Credentials are never checked locally: the pair is sent to the upstream
sign-in endpoint as HTTP Basic auth together with the service API key, and
the upstream answer decides. One attempt only.
"""

from __future__ import annotations

import logging

from auth_gateway.auth.base import AuthStrategy
from auth_gateway.errors import Unauthorized
from auth_gateway.models.auth import AuthResult, Credential
from auth_gateway.upstream.client import UpstreamError, UpstreamUnavailable

logger = logging.getLogger(__name__)


class LocalStrategy(AuthStrategy):
    """Credential verifier backed by the upstream API."""

    name = "local"
    supports_remember_me = True

    async def exchange(self, payload: Credential) -> AuthResult:
        """Verify a credential pair.

        Args:
            payload: Identifier and secret from the sign-in request

        Returns:
            AuthResult from the upstream API

        Raises:
            Unauthorized: On any upstream rejection or network failure
        """
        try:
            response = await self.upstream.sign_in(payload.identifier, payload.secret)
        except UpstreamError as e:
            logger.warning(f"Local sign-in rejected upstream with {e.status_code}")
            raise Unauthorized() from e
        except UpstreamUnavailable as e:
            logger.error(f"Local sign-in could not reach upstream: {e}")
            raise Unauthorized() from e

        if response.status_code != 200:
            logger.warning(f"Local sign-in got unexpected status {response.status_code}")
            raise Unauthorized()

        try:
            return AuthResult.from_payload(response.json())
        except ValueError as e:
            logger.warning(f"Local sign-in returned no usable token: {e}")
            raise Unauthorized() from e
