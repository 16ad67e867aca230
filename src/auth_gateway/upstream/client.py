"""Async client for the upstream resource/identity API.

## Endpoints

| Method | Path | Auth |
|--------|------|------|
| POST | /api/auth/sign-in | HTTP Basic (identifier, secret) + apiKeyToken |
| POST | /api/auth/sign-up | none |
| POST | /api/auth/sign-provider | apiKeyToken in body |
| POST | /api/user-movies | Bearer token |
| DELETE | /api/user-movies/{id} | Bearer token |

## Failure Semantics

- HTTP status >= 400 raises `UpstreamError` (status and body kept for logs)
- Transport failures (DNS, refused connection, timeout) raise
  `UpstreamUnavailable`
- Requests are never retried; the caller decides what a failure means
"""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

import httpx

from auth_gateway.models.auth import BearerContext

logger = logging.getLogger(__name__)

SIGN_IN_PATH = "/api/auth/sign-in"
SIGN_UP_PATH = "/api/auth/sign-up"
SIGN_PROVIDER_PATH = "/api/auth/sign-provider"
USER_MOVIES_PATH = "/api/user-movies"


class UpstreamError(Exception):
    """Raised when the upstream API answers with an error status."""

    def __init__(
        self,
        message: str,
        method: str,
        path: str,
        status_code: int,
        response_body: str | None = None,
    ):
        super().__init__(message)
        self.method = method
        self.path = path
        self.status_code = status_code
        self.response_body = response_body


class UpstreamUnavailable(Exception):
    """Raised when the upstream API cannot be reached at all."""

    def __init__(self, message: str, method: str, path: str):
        super().__init__(message)
        self.method = method
        self.path = path


class UpstreamClient:
    """Thin async wrapper around the upstream API.

    One instance is shared by the whole application; it owns a single
    `httpx.AsyncClient` that is closed on shutdown.

    Example:
        ```python
        async with UpstreamClient("http://api:3000", api_key_token="key") as api:
            response = await api.sign_in("a@b.com", "secret")
            data = response.json()
        ```
    """

    def __init__(
        self,
        base_url: str,
        api_key_token: str,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the client.

        Args:
            base_url: Upstream API base URL
            api_key_token: Service key for server-to-server sign-in calls
            timeout: Request timeout in seconds
            transport: Optional transport override (tests use httpx.MockTransport)
        """
        self.base_url = base_url.rstrip("/")
        self.api_key_token = api_key_token
        self.timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> UpstreamClient:
        self._get_client()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.aclose()

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport,
                headers={"Accept": "application/json"},
            )
        return self._client

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        """Send one request upstream.

        Raises:
            UpstreamError: If upstream answers with status >= 400
            UpstreamUnavailable: If the request could not be completed
        """
        client = self._get_client()

        try:
            response = await client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"Upstream {method} {path} unreachable: {e!r}")
            raise UpstreamUnavailable(
                f"Upstream request failed: {e}", method=method, path=path
            ) from e

        if response.status_code >= 400:
            raise UpstreamError(
                f"Upstream request failed: {response.status_code}",
                method=method,
                path=path,
                status_code=response.status_code,
                response_body=response.text,
            )

        return response

    async def sign_in(self, identifier: str, secret: str) -> httpx.Response:
        """Verify a local credential pair."""
        return await self._request(
            "POST",
            SIGN_IN_PATH,
            auth=(identifier, secret),
            json={"apiKeyToken": self.api_key_token},
        )

    async def sign_up(self, user: Any) -> httpx.Response:
        """Create a local account; the body is forwarded verbatim."""
        return await self._request("POST", SIGN_UP_PATH, json=user)

    async def sign_provider(self, name: str | None, email: str | None, password: str) -> httpx.Response:
        """Exchange a provider identity for an upstream token."""
        return await self._request(
            "POST",
            SIGN_PROVIDER_PATH,
            json={
                "name": name,
                "email": email,
                "password": password,
                "apiKeyToken": self.api_key_token,
            },
        )

    async def create_user_movie(self, bearer: BearerContext, user_movie: Any) -> httpx.Response:
        return await self._request(
            "POST",
            USER_MOVIES_PATH,
            json=user_movie,
            headers=bearer.headers(),
        )

    async def delete_user_movie(self, bearer: BearerContext, user_movie_id: str) -> httpx.Response:
        """Delete a user movie. The id is always sent as a single path segment."""
        return await self._request(
            "DELETE",
            f"{USER_MOVIES_PATH}/{quote(user_movie_id, safe='')}",
            headers=bearer.headers(),
        )
