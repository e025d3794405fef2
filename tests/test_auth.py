"""Tests for the authentication strategies in phraseapp_client."""

import httpx
import pytest

from phraseapp_client.auth import AuthStrategy, NoAuth, TokenAuth
from phraseapp_client.exceptions import ConfigurationError


@pytest.mark.asyncio
async def test_no_auth_authenticate():
    """Test NoAuth strategy does not modify the request."""
    request = httpx.Request("GET", "http://example.com")
    original_headers = dict(request.headers)
    await NoAuth().async_authenticate(request)
    assert dict(request.headers) == original_headers


@pytest.mark.asyncio
async def test_no_auth_close():
    await NoAuth().async_close()


def test_token_auth_init_success():
    auth = TokenAuth(token="test_token")
    assert auth._token == "test_token"
    assert auth._scheme == "token"


@pytest.mark.parametrize("token", ["", None])
def test_token_auth_init_no_token(token):
    """Test TokenAuth raises ConfigurationError if no token is provided."""
    with pytest.raises(
        ConfigurationError, match="TokenAuth requires a non-empty 'token'."
    ):
        TokenAuth(token=token)


@pytest.mark.asyncio
async def test_token_auth_authenticate():
    """Test TokenAuth adds the Authorization header with the token scheme."""
    request = httpx.Request("GET", "http://example.com")
    await TokenAuth(token="test_token").async_authenticate(request)
    assert request.headers["Authorization"] == "token test_token"


@pytest.mark.asyncio
async def test_token_auth_custom_scheme():
    request = httpx.Request("GET", "http://example.com")
    await TokenAuth(token="test_token", scheme="Bearer").async_authenticate(request)
    assert request.headers["Authorization"] == "Bearer test_token"


@pytest.mark.asyncio
async def test_token_auth_overwrites_existing_authorization():
    request = httpx.Request(
        "GET", "http://example.com", headers={"Authorization": "Basic abc"}
    )
    await TokenAuth(token="test_token").async_authenticate(request)
    assert request.headers["Authorization"] == "token test_token"


@pytest.mark.asyncio
async def test_token_auth_close():
    await TokenAuth(token="test_token").async_close()


def test_strategies_satisfy_protocol():
    strategies: list[AuthStrategy] = [NoAuth(), TokenAuth("t")]
    for strategy in strategies:
        assert callable(strategy.async_authenticate)
        assert callable(strategy.async_close)


def test_token_auth_repr_hides_token():
    assert repr(TokenAuth(token="s3cret")) == "TokenAuth(scheme='token', token='***')"
