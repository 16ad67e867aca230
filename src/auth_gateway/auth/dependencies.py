"""FastAPI dependencies for authentication.

Everything the routes need is built by the application factory and hung
off `app.state`; these dependencies hand it to route handlers.

## Usage

```python
from fastapi import Depends
from auth_gateway.auth.dependencies import get_bearer_context
from auth_gateway.models import BearerContext

@router.post("/user-movies")
async def create(bearer: BearerContext = Depends(get_bearer_context)):
    ...
```
"""

from __future__ import annotations

from fastapi import Depends, Request

from auth_gateway.auth.dispatcher import AuthDispatcher
from auth_gateway.config import Settings
from auth_gateway.models.auth import BearerContext
from auth_gateway.upstream.client import UpstreamClient


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_upstream(request: Request) -> UpstreamClient:
    return request.app.state.upstream


def get_dispatcher(request: Request) -> AuthDispatcher:
    return request.app.state.dispatcher


def get_bearer_context(
    request: Request,
    settings: Settings = Depends(get_app_settings),
) -> BearerContext:
    """Extract the bearer token from the session cookie.

    A missing cookie gives an empty token rather than a 401: the upstream
    API is the one that accepts or rejects it.
    """
    return BearerContext(token=request.cookies.get(settings.session_cookie_name, ""))
