"""Upstream API client."""

from auth_gateway.upstream.client import UpstreamClient, UpstreamError, UpstreamUnavailable

__all__ = [
    "UpstreamClient",
    "UpstreamError",
    "UpstreamUnavailable",
]
