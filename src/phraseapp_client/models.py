# phraseapp_client/models.py
"""Core models and protocols for paginated retrieval.

This module defines the structured form of the pagination metadata carried in
`Link` response headers, the page and progress records produced while
traversing a collection, and the `Executor` protocol that the aggregator and
the stream drive. Any object with a matching ``execute`` coroutine can stand
in for the real :class:`~phraseapp_client.executor.RequestExecutor`.
"""

from typing import Any, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field

from .types import RequestDescriptor, ResponseEnvelope


@runtime_checkable
class Executor(Protocol):
    """Protocol for the component that performs one request with retries."""

    async def execute(self, descriptor: RequestDescriptor) -> ResponseEnvelope:
        """Send the request described by `descriptor` and return the response.

        Implementations retry transient failures internally and raise only the
        final error; a status >= 400 must surface as an `HttpError`.
        """
        ...


class Link(BaseModel):
    """One relation from a `Link` header.

    Attributes:
        url: The absolute URL of the linked page.
        rel: The relation name (`first`, `prev`, `next` or `last`).
        page: The `page` query parameter, when present and a positive integer.
        per_page: The `per_page` query parameter, when present and a positive integer.
    """

    url: str
    rel: str
    page: int | None = Field(default=None, ge=1)
    per_page: int | None = Field(default=None, ge=1)

    model_config = ConfigDict(frozen=True)


class LinkSet(BaseModel):
    """The first/prev/next/last relations decoded from a `Link` header.

    `next` is present if and only if more pages remain.
    """

    first: Link | None = None
    prev: Link | None = None
    next: Link | None = None
    last: Link | None = None

    model_config = ConfigDict(frozen=True)

    @property
    def has_next(self) -> bool:
        return self.next is not None

    @property
    def estimated_total(self) -> int | None:
        """`last.page * last.per_page`, or None when either is unknown.

        This over-counts when the last page is not full.
        """
        if self.last is None or self.last.page is None or self.last.per_page is None:
            return None
        return self.last.page * self.last.per_page


class Page(BaseModel):
    """The decoded records of one response plus its pagination links."""

    records: list[Any] = Field(default_factory=list)
    links: LinkSet = Field(default_factory=LinkSet)


class Progress(BaseModel):
    current: int = Field(ge=1)
    total: int | None = None


class ProgressEnvelope(BaseModel):
    """One record emitted by a stream together with its running progress."""

    data: Any
    progress: Progress
