"""Pytest fixtures for auth gateway tests.

This module provides test fixtures that ensure:
1. No external API calls are made (upstream API, identity providers)
2. The upstream API is simulated with an httpx.MockTransport
3. Isolated test environment with controlled configuration
"""

import os
from typing import Any

import httpx
import pytest
from fastapi.testclient import TestClient

# Set test environment BEFORE importing application modules
os.environ.setdefault("API_URL", "http://upstream.test")
os.environ.setdefault("API_KEY_TOKEN", "test-service-api-key")
os.environ.setdefault("SESSION_SECRET", "test-session-secret-at-least-32-characters")
os.environ.setdefault("ENVIRONMENT", "development")

from auth_gateway.api.app import create_app
from auth_gateway.config import Settings
from auth_gateway.upstream.client import UpstreamClient


class FakeUpstream:
    """In-memory stand-in for the upstream API.

    Register canned answers with `respond()`; every request received is
    kept in `requests` for assertions. Unregistered routes answer 404.
    """

    def __init__(self):
        self.routes: dict[tuple[str, str], dict[str, Any] | Exception] = {}
        self.requests: list[httpx.Request] = []

    def respond(
        self,
        method: str,
        path: str,
        status_code: int = 200,
        json: Any = None,
        content: bytes | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        answer: dict[str, Any] = {"status_code": status_code, "headers": headers}
        if json is not None:
            answer["json"] = json
        else:
            answer["content"] = content
        self.routes[(method, path)] = answer

    def fail(self, method: str, path: str, exc: Exception) -> None:
        self.routes[(method, path)] = exc

    def last(self) -> httpx.Request:
        return self.requests[-1]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)

        route = self.routes.get((request.method, request.url.path))
        if route is None:
            return httpx.Response(404, json={"error": "Not Found"})
        if isinstance(route, Exception):
            raise route

        return httpx.Response(**route)


def token_cookie(response: httpx.Response) -> str | None:
    """Return the raw Set-Cookie header for the session token, if any."""
    for header in response.headers.get_list("set-cookie"):
        if header.startswith("token="):
            return header
    return None


# =============================================================================
# Configuration Fixtures
# =============================================================================


def make_settings(**overrides: Any) -> Settings:
    values: dict[str, Any] = {
        "api_url": "http://upstream.test",
        "api_key_token": "test-service-api-key",
        "session_secret": "test-session-secret-at-least-32-characters",
        "environment": "production",
        "google_client_id": "google-client-id",
        "google_client_secret": "google-client-secret",
        "twitter_consumer_key": "twitter-key",
        "twitter_consumer_secret": "twitter-secret",
        "linkedin_client_id": "linkedin-client-id",
        "linkedin_client_secret": "linkedin-client-secret",
        "facebook_client_id": "facebook-client-id",
        "facebook_client_secret": "facebook-client-secret",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture(autouse=True)
def reset_settings_cache():
    """Reset settings cache before each test to ensure clean state."""
    from auth_gateway.config import get_settings
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings() -> Settings:
    """Production settings with every provider configured."""
    return make_settings()


@pytest.fixture
def fake_upstream() -> FakeUpstream:
    return FakeUpstream()


@pytest.fixture
def upstream(fake_upstream: FakeUpstream) -> UpstreamClient:
    """Upstream client wired to the fake upstream."""
    return UpstreamClient(
        "http://upstream.test",
        api_key_token="test-service-api-key",
        transport=httpx.MockTransport(fake_upstream),
    )


@pytest.fixture
def app(settings: Settings, fake_upstream: FakeUpstream):
    return create_app(settings, transport=httpx.MockTransport(fake_upstream))


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


# =============================================================================
# Upstream Payload Fixtures
# =============================================================================


@pytest.fixture
def signed_in_payload() -> dict[str, Any]:
    """Upstream sign-in answer: token plus user."""
    return {
        "token": "upstream-bearer-token",
        "user": {"id": "user-1", "name": "Ada Lovelace", "email": "a@b.com"},
    }
