# phraseapp_client/types.py
"""Core request/response data structures for the phraseapp_client library.

This module defines the request descriptor handed to the executor, the
response envelope it hands back, and the sentinel used for bodiless (204)
responses.
"""

import json
from datetime import UTC, datetime as dt
from email.utils import parsedate_to_datetime
from enum import Enum
from typing import Any, Literal

import httpx
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .constants import (
    JSON_CONTENT_TYPE,
    RATE_LIMIT_LIMIT_HEADER,
    RATE_LIMIT_REMAINING_HEADER,
    RATE_LIMIT_RESET_HEADER,
)

HttpMethod = Literal["GET", "POST", "PUT", "PATCH", "DELETE"]


class NoContent(Enum):
    """Sentinel type for responses that carry no body (HTTP 204)."""

    NO_CONTENT = "no content"

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "NO_CONTENT"


NO_CONTENT = NoContent.NO_CONTENT


class RequestDescriptor(BaseModel):
    """Everything needed to issue one logical request.

    The descriptor is immutable; following a pagination link produces a copy
    with a different URL via :meth:`with_url`.
    """

    url: str
    method: HttpMethod = "GET"
    headers: dict[str, str] = Field(default_factory=dict)
    body: Any | None = None

    model_config = ConfigDict(frozen=True)

    @field_validator("method", mode="before")
    @classmethod
    def _upper_method(cls, value: Any) -> Any:
        return value.upper() if isinstance(value, str) else value

    @field_validator("headers")
    @classmethod
    def _merge_header_case(cls, value: dict[str, str]) -> dict[str, str]:
        """Collapse names differing only in case; the last value wins."""
        merged = httpx.Headers()
        for name, header_value in value.items():
            merged[name] = header_value
        return {
            name.decode(merged.encoding): header_value.decode(merged.encoding)
            for name, header_value in merged.raw
        }

    def with_url(self, url: str) -> "RequestDescriptor":
        """Return a copy of this descriptor aimed at another URL."""
        return self.model_copy(update={"url": url})

    def encoded_body(self) -> str | bytes | None:
        """The body as sent on the wire; non-string values become JSON."""
        if self.body is None or isinstance(self.body, str | bytes):
            return self.body
        return json.dumps(self.body)

    def build_request(self, http_client: httpx.AsyncClient) -> httpx.Request:
        """Builds an httpx.Request, resolving relative URLs on the client's base_url."""
        headers = httpx.Headers(self.headers)
        content = self.encoded_body()
        if content is not None and "Content-Type" not in headers:
            headers["Content-Type"] = JSON_CONTENT_TYPE
        return http_client.build_request(
            method=self.method,
            url=self.url,
            headers=headers,
            content=content,
        )


class RateLimit(BaseModel):
    """Rate limit information reported by the server on a response."""

    limit: int | None = None
    remaining: int | None = None
    reset: float | None = None
    retry_after: float | None = None


def _parse_retry_after(value: str | None) -> float | None:
    if not value:
        return None
    value = value.strip()
    if value.isdigit():
        return float(value)
    try:
        retry_dt = parsedate_to_datetime(value)
    except (TypeError, ValueError):
        return None
    if retry_dt.tzinfo is None:
        retry_dt = retry_dt.replace(tzinfo=UTC)
    return max(0.0, (retry_dt - dt.now(UTC)).total_seconds())


def _parse_int(value: str | None) -> int | None:
    if value is not None and value.strip().isdigit():
        return int(value)
    return None


class ResponseEnvelope(BaseModel):
    """A received response: status, headers and the undecoded body."""

    status: int
    headers: httpx.Headers = Field(default_factory=httpx.Headers)
    raw_body: bytes = b""
    url: str | None = None

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    @classmethod
    def from_response(cls, response: httpx.Response) -> "ResponseEnvelope":
        return cls(
            status=response.status_code,
            headers=response.headers,
            raw_body=response.content,
            url=str(response.request.url),
        )

    @property
    def content_type(self) -> str | None:
        return self.headers.get("content-type")

    @property
    def link_header(self) -> str | None:
        return self.headers.get("link")

    @property
    def rate_limit(self) -> RateLimit:
        reset = _parse_int(self.headers.get(RATE_LIMIT_RESET_HEADER))
        return RateLimit(
            limit=_parse_int(self.headers.get(RATE_LIMIT_LIMIT_HEADER)),
            remaining=_parse_int(self.headers.get(RATE_LIMIT_REMAINING_HEADER)),
            reset=float(reset) if reset is not None else None,
            retry_after=_parse_retry_after(self.headers.get("Retry-After")),
        )
