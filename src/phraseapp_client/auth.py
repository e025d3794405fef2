"""Credentials for PhraseApp API requests.

The executor calls the strategy once per attempt, right before the request is
sent, so retried requests are re-authenticated.
"""

from typing import Protocol

import httpx

from .exceptions import ConfigurationError
from .log_config import logger


class AuthStrategy(Protocol):
    """Anything that can put credentials on an outgoing httpx.Request."""

    async def async_authenticate(self, request: httpx.Request) -> None:
        """Add credentials to `request` in place.

        Raises:
            AuthError: If credentials cannot be provided. Any other exception
                is wrapped in AuthError by the executor; neither is retried.
        """
        ...

    async def async_close(self) -> None:
        """Release resources held by the strategy. Must be safe to call twice."""
        ...


class NoAuth:
    """Sends requests without credentials (public endpoints, tests)."""

    async def async_authenticate(self, request: httpx.Request) -> None:
        logger.trace(f"No credentials added to {request.method} {request.url}")

    async def async_close(self) -> None:
        pass


class TokenAuth:
    """Personal access token auth, as ``Authorization: token <access token>``.

    Attributes:
        _token: The access token.
        _scheme: Authorization scheme; PhraseApp expects "token".
    """

    def __init__(self, token: str | None, scheme: str = "token"):
        """
        Raises:
            ConfigurationError: If the token is None or empty.
        """
        if not token:
            raise ConfigurationError("TokenAuth requires a non-empty 'token'.")
        self._token: str = token
        self._scheme = scheme
        self._header_value = f"{scheme} {token}"

    def __repr__(self) -> str:
        # Never show the token itself; reprs end up in log lines.
        return f"{type(self).__name__}(scheme={self._scheme!r}, token='***')"

    async def async_authenticate(self, request: httpx.Request) -> None:
        request.headers["Authorization"] = self._header_value

    async def async_close(self) -> None:
        pass
