"""Movie resource routes, proxied to the upstream API.

Every call carries the session token as `Authorization: Bearer <token>`.
Upstream must answer with exactly the expected status; anything else is
reported as a BadImplementation, never passed through. An expected answer
is relayed byte for byte with the upstream content type.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx
from fastapi import APIRouter, Body, Depends, HTTPException, Response, status

from auth_gateway.auth.dependencies import get_bearer_context, get_upstream
from auth_gateway.errors import BadImplementation
from auth_gateway.models.auth import BearerContext
from auth_gateway.upstream.client import UpstreamClient, UpstreamError, UpstreamUnavailable

logger = logging.getLogger(__name__)

router = APIRouter()

# Path segments a client could use to climb out of /api/user-movies upstream
DOT_SEGMENTS = {".", ".."}


def _passthrough(response: httpx.Response, expected_status: int) -> Response:
    """Relay an upstream body unchanged if the status is the expected one."""
    if response.status_code != expected_status:
        raise BadImplementation(
            f"Expected {expected_status} from upstream, got {response.status_code}"
        )

    return Response(
        content=response.content,
        status_code=expected_status,
        media_type=response.headers.get("content-type"),
    )


@router.get("/movies")
async def list_movies() -> None:
    """List movies. Not implemented."""
    raise HTTPException(
        status_code=status.HTTP_501_NOT_IMPLEMENTED,
        detail="Movie listing is not implemented",
    )


@router.post("/user-movies", status_code=status.HTTP_201_CREATED)
async def create_user_movie(
    user_movie: Any = Body(...),
    bearer: BearerContext = Depends(get_bearer_context),
    upstream: UpstreamClient = Depends(get_upstream),
) -> Response:
    """Add a movie to the current user's list."""
    try:
        response = await upstream.create_user_movie(bearer, user_movie)
    except (UpstreamError, UpstreamUnavailable) as e:
        raise BadImplementation(str(e)) from e

    return _passthrough(response, status.HTTP_201_CREATED)


@router.delete("/user-movies/{user_movie_id}")
async def delete_user_movie(
    user_movie_id: str,
    bearer: BearerContext = Depends(get_bearer_context),
    upstream: UpstreamClient = Depends(get_upstream),
) -> Response:
    """Remove a movie from the current user's list."""
    if user_movie_id in DOT_SEGMENTS:
        logger.warning(f"Rejected user movie id {user_movie_id!r}")
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not Found")

    try:
        response = await upstream.delete_user_movie(bearer, user_movie_id)
    except (UpstreamError, UpstreamUnavailable) as e:
        raise BadImplementation(str(e)) from e

    return _passthrough(response, status.HTTP_200_OK)
