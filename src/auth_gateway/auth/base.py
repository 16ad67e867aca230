"""Authentication strategy interface.

Every way of signing in (local credentials and each external identity
provider) is an `AuthStrategy`. The dispatcher only knows this interface:
it hands a strategy the payload for its flow and gets back an `AuthResult`
or an exception from `auth_gateway.errors`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, ClassVar

from auth_gateway.models.auth import AuthResult
from auth_gateway.upstream.client import UpstreamClient


class AuthStrategy(ABC):
    """Abstract base class for sign-in strategies.

    Attributes:
        name: Route key the strategy is registered under
        supports_remember_me: Whether the flow may extend the cookie lifetime
    """

    name: ClassVar[str]
    supports_remember_me: ClassVar[bool] = False

    def __init__(self, upstream: UpstreamClient):
        self.upstream = upstream

    @abstractmethod
    async def exchange(self, payload: Any) -> AuthResult:
        """Exchange a flow-specific payload for an upstream AuthResult.

        Raises:
            Unauthorized: If the payload is rejected
            Unexpected: If the exchange fails for any other reason
        """
        pass
