"""Tests for the authentication routes."""

import base64
import json
from unittest.mock import AsyncMock
from urllib.parse import parse_qs, urlparse

import httpx
import pytest
from fastapi.testclient import TestClient

from auth_gateway.api.app import create_app
from auth_gateway.errors import Unauthorized
from conftest import make_settings, token_cookie

SIGN_IN = "/api/auth/sign-in"


class TestLocalSignIn:
    """Tests for POST /auth/sign-in."""

    def test_remember_me_sets_thirty_day_cookie(self, client, fake_upstream, signed_in_payload):
        fake_upstream.respond("POST", SIGN_IN, 200, signed_in_payload)

        response = client.post(
            "/auth/sign-in",
            json={"identifier": "a@b.com", "secret": "x", "rememberMe": True},
        )

        assert response.status_code == 200
        assert response.json() == {"id": "user-1", "name": "Ada Lovelace", "email": "a@b.com"}
        cookie = token_cookie(response)
        assert cookie.startswith("token=upstream-bearer-token")
        assert "Max-Age=2592000" in cookie

    def test_default_cookie_lifetime(self, client, fake_upstream, signed_in_payload):
        fake_upstream.respond("POST", SIGN_IN, 200, signed_in_payload)

        response = client.post("/auth/sign-in", json={"identifier": "a@b.com", "secret": "x"})

        assert response.status_code == 200
        assert "Max-Age=7200" in token_cookie(response)

    def test_remember_me_false(self, client, fake_upstream, signed_in_payload):
        fake_upstream.respond("POST", SIGN_IN, 200, signed_in_payload)

        response = client.post(
            "/auth/sign-in",
            json={"identifier": "a@b.com", "secret": "x", "rememberMe": False},
        )

        assert "Max-Age=7200" in token_cookie(response)

    def test_token_never_in_body(self, client, fake_upstream):
        """Test that the token is stripped even from a flat upstream payload."""
        fake_upstream.respond(
            "POST", SIGN_IN, 200, {"token": "upstream-bearer-token", "id": "user-1"}
        )

        response = client.post("/auth/sign-in", json={"identifier": "a@b.com", "secret": "x"})

        assert response.json() == {"id": "user-1"}
        assert "upstream-bearer-token" not in response.text

    def test_production_cookie_flags(self, client, fake_upstream, signed_in_payload):
        fake_upstream.respond("POST", SIGN_IN, 200, signed_in_payload)

        response = client.post("/auth/sign-in", json={"identifier": "a@b.com", "secret": "x"})

        cookie = token_cookie(response).lower()
        assert "httponly" in cookie
        assert "secure" in cookie

    def test_development_cookie_flags(self, fake_upstream, signed_in_payload):
        """Test that development cookies work over plain HTTP."""
        app = create_app(
            make_settings(environment="development"),
            transport=httpx.MockTransport(fake_upstream),
        )
        fake_upstream.respond("POST", SIGN_IN, 200, signed_in_payload)

        with TestClient(app) as client:
            response = client.post(
                "/auth/sign-in",
                json={"identifier": "a@b.com", "secret": "x", "rememberMe": True},
            )

        cookie = token_cookie(response).lower()
        assert "httponly" not in cookie
        assert "secure" not in cookie
        assert "max-age=2592000" in cookie

    def test_credentials_forwarded_upstream(self, client, fake_upstream, signed_in_payload):
        fake_upstream.respond("POST", SIGN_IN, 200, signed_in_payload)

        client.post("/auth/sign-in", json={"identifier": "a@b.com", "secret": "x"})

        request = fake_upstream.last()
        expected = base64.b64encode(b"a@b.com:x").decode()
        assert request.headers["Authorization"] == f"Basic {expected}"

    def test_basic_auth_fallback(self, client, fake_upstream, signed_in_payload):
        """Test that HTTP Basic credentials work when the body has none."""
        fake_upstream.respond("POST", SIGN_IN, 200, signed_in_payload)

        response = client.post(
            "/auth/sign-in",
            json={"rememberMe": True},
            auth=("a@b.com", "x"),
        )

        assert response.status_code == 200
        assert "Max-Age=2592000" in token_cookie(response)

    def test_invalid_credentials(self, client, fake_upstream):
        fake_upstream.respond("POST", SIGN_IN, 401, {"error": "Unauthorized"})

        response = client.post("/auth/sign-in", json={"identifier": "a@b.com", "secret": "bad"})

        assert response.status_code == 401
        assert response.json() == {"detail": "Unauthorized"}
        assert token_cookie(response) is None

    def test_missing_credentials(self, client, fake_upstream):
        """Test that no credentials at all is a 401 without an upstream call."""
        response = client.post("/auth/sign-in", json={"rememberMe": True})

        assert response.status_code == 401
        assert token_cookie(response) is None
        assert fake_upstream.requests == []

    def test_upstream_unreachable(self, client, fake_upstream):
        fake_upstream.fail("POST", SIGN_IN, httpx.ConnectError("refused"))

        response = client.post("/auth/sign-in", json={"identifier": "a@b.com", "secret": "x"})

        assert response.status_code == 401
        assert token_cookie(response) is None


class TestSignUp:
    """Tests for POST /auth/sign-up."""

    def test_body_forwarded_verbatim(self, client, fake_upstream):
        fake_upstream.respond("POST", "/api/auth/sign-up", 201, {"data": "user-1"})
        body = {"name": "Ada", "email": "a@b.com", "password": "x", "isAdmin": False}

        response = client.post("/auth/sign-up", json=body)

        assert response.status_code == 201
        assert response.json() == "user created"
        assert json.loads(fake_upstream.last().content) == body

    def test_missing_body_forwarded_as_empty_object(self, client, fake_upstream):
        """Test that upstream, not the gateway, validates an empty sign-up."""
        fake_upstream.respond("POST", "/api/auth/sign-up", 400, {"message": "email required"})

        response = client.post("/auth/sign-up")

        assert response.status_code == 400
        assert response.json() == {"detail": "Bad Request"}
        assert len(fake_upstream.requests) == 1
        assert json.loads(fake_upstream.last().content) == {}

    def test_upstream_error_propagates(self, client, fake_upstream):
        """Test that the upstream status is kept but its body is not leaked."""
        fake_upstream.respond(
            "POST", "/api/auth/sign-up", 409, {"message": "duplicate key users_email_idx"}
        )

        response = client.post("/auth/sign-up", json={"email": "a@b.com"})

        assert response.status_code == 409
        assert response.json() == {"detail": "Conflict"}
        assert "users_email_idx" not in response.text

    def test_upstream_unreachable(self, client, fake_upstream):
        fake_upstream.fail("POST", "/api/auth/sign-up", httpx.ConnectError("refused"))

        response = client.post("/auth/sign-up", json={"email": "a@b.com"})

        assert response.status_code == 500


class TestProviderSignIn:
    """Tests for GET /auth/{provider} and its callback."""

    PROVIDERS = ["google", "google-oauth", "twitter", "linkedin", "facebook"]

    @pytest.mark.parametrize("provider", PROVIDERS)
    def test_callback_success(self, app, client, fake_upstream, signed_in_payload, provider):
        strategy = app.state.registry.get_provider(provider)
        strategy.fetch_profile = AsyncMock(
            return_value={"sub": "p-1", "id": "p-1", "name": "Ada", "email": "a@b.com"}
        )
        fake_upstream.respond("POST", "/api/auth/sign-provider", 200, signed_in_payload)

        response = client.get(f"/auth/{provider}/callback")

        assert response.status_code == 200
        assert response.json() == {"id": "user-1", "name": "Ada Lovelace", "email": "a@b.com"}
        cookie = token_cookie(response)
        assert cookie.startswith("token=upstream-bearer-token")
        # Provider sign-ins never get the remember-me lifetime
        assert "Max-Age=7200" in cookie
        assert json.loads(fake_upstream.last().content)["password"] == "p-1"

    def test_callback_rejected_upstream(self, app, client, fake_upstream):
        strategy = app.state.registry.get_provider("facebook")
        strategy.fetch_profile = AsyncMock(return_value={"id": "fb-1", "email": "a@b.com"})
        fake_upstream.respond("POST", "/api/auth/sign-provider", 401)

        response = client.get("/auth/facebook/callback")

        assert response.status_code == 401
        assert token_cookie(response) is None

    def test_callback_handshake_failure(self, app, client, fake_upstream):
        strategy = app.state.registry.get_provider("linkedin")
        strategy.fetch_profile = AsyncMock(side_effect=Unauthorized())

        response = client.get("/auth/linkedin/callback")

        assert response.status_code == 401
        assert fake_upstream.requests == []

    def test_callback_empty_profile(self, app, client, fake_upstream):
        strategy = app.state.registry.get_provider("twitter")
        strategy.fetch_profile = AsyncMock(return_value={})

        response = client.get("/auth/twitter/callback")

        assert response.status_code == 401
        assert fake_upstream.requests == []

    def test_initiate_redirects_to_provider(self, client):
        """Test that Authlib builds the consent redirect with our callback URL."""
        response = client.get("/auth/google-oauth", follow_redirects=False)

        assert response.status_code == 302
        location = urlparse(response.headers["location"])
        assert location.netloc == "accounts.google.com"
        query = parse_qs(location.query)
        assert query["client_id"] == ["google-client-id"]
        assert query["redirect_uri"] == ["http://testserver/auth/google-oauth/callback"]
        assert query["scope"] == ["email profile"]
        assert "state" in query

    def test_unknown_provider(self, client):
        assert client.get("/auth/myspace").status_code == 404
        assert client.get("/auth/myspace/callback").status_code == 404

    def test_unconfigured_provider(self, fake_upstream):
        app = create_app(
            make_settings(twitter_consumer_key=None),
            transport=httpx.MockTransport(fake_upstream),
        )

        with TestClient(app) as client:
            assert client.get("/auth/twitter").status_code == 501
            assert client.get("/auth/twitter/callback").status_code == 501


class TestHealth:
    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert "facebook" in response.json()["providers"]

    def test_security_headers(self, client):
        response = client.get("/health")

        assert response.headers["X-Frame-Options"] == "DENY"
        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert "Strict-Transport-Security" in response.headers
