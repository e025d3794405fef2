# tests/conftest.py
import asyncio
import json
from collections.abc import Mapping
from typing import Any

import httpx
import pytest

from phraseapp_client.config import ClientSettings
from phraseapp_client.types import RequestDescriptor, ResponseEnvelope

BASE_URL = "https://api.example.com/api/v2"


class FakeExecutor:
    """Executor double serving canned responses keyed by request URL.

    Every call is recorded. When a `gate` event is given, each call waits for
    it before answering, which keeps a fetch "in flight" for as long as a test
    needs.
    """

    def __init__(
        self,
        responses: Mapping[str, ResponseEnvelope | Exception],
        *,
        gate: asyncio.Event | None = None,
    ):
        self.responses = dict(responses)
        self.calls: list[RequestDescriptor] = []
        self.gate = gate

    @property
    def urls(self) -> list[str]:
        return [call.url for call in self.calls]

    async def execute(self, descriptor: RequestDescriptor) -> ResponseEnvelope:
        self.calls.append(descriptor)
        if self.gate is not None:
            await self.gate.wait()
        result = self.responses[descriptor.url]
        if isinstance(result, Exception):
            raise result
        return result


def build_envelope(
    body: Any = None,
    *,
    status: int = 200,
    link: str | None = None,
    content_type: str | None = "application/json",
    raw_body: bytes | None = None,
    url: str | None = None,
) -> ResponseEnvelope:
    headers: dict[str, str] = {}
    if content_type:
        headers["content-type"] = content_type
    if link:
        headers["link"] = link
    if raw_body is None:
        raw_body = b"" if body is None else json.dumps(body).encode()
    return ResponseEnvelope(
        status=status, headers=httpx.Headers(headers), raw_body=raw_body, url=url
    )


def build_link_header(**relations: str) -> str:
    return ", ".join(f'<{url}>; rel="{rel}"' for rel, url in relations.items())


@pytest.fixture
def make_envelope():
    """Factory for ResponseEnvelope objects with JSON bodies."""
    return build_envelope


@pytest.fixture
def make_link_header():
    """Factory for Link header values: make_link_header(next=url, last=url)."""
    return build_link_header


@pytest.fixture
def fake_executor_cls():
    return FakeExecutor


@pytest.fixture
def settings() -> ClientSettings:
    """Settings with instant retries so retry tests do not sleep."""
    return ClientSettings(
        base_url=BASE_URL,
        access_token=None,
        max_retries=3,
        backoff_factor=0.0,
        max_retry_after=0.0,
    )


@pytest.fixture
def base_url() -> str:
    return BASE_URL
