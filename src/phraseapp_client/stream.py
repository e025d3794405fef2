"""Lazy, demand-driven traversal of link-paginated collections.

PaginationStream is an async iterator that yields one ProgressEnvelope per
record. Pages are fetched only when the consumer asks for a record and the
current page has been fully emitted, so at most one page is buffered and at
most one request is in flight per stream.

Typical usage:
```python
async with client.open_stream("projects/abc/keys") as stream:
    async for item in stream:
        print(item.progress.current, item.progress.total, item.data["name"])
```
"""

import asyncio
from collections import deque
from enum import Enum
from typing import TYPE_CHECKING, Any, Self

from .exceptions import PaginationLimitError
from .links import rewrite_next_path
from .log_config import logger
from .models import Executor, LinkSet, Progress, ProgressEnvelope
from .pagination import fetch_page
from .types import RequestDescriptor

if TYPE_CHECKING:
    from loguru import Logger


class StreamState(Enum):
    """Lifecycle of a PaginationStream."""

    IDLE = "idle"
    FETCHING = "fetching"
    EMITTING = "emitting"
    EXHAUSTED = "exhausted"
    FAILED = "failed"
    CLOSED = "closed"


_TERMINAL_STATES = frozenset(
    [StreamState.EXHAUSTED, StreamState.FAILED, StreamState.CLOSED]
)


class PaginationStream:
    """Async iterator over the records of a paginated collection.

    The stream is finite and not restartable. A fetch error ends it: records
    emitted before the failure stay emitted, the next `__anext__` raises the
    error, and every call after that raises StopAsyncIteration. Consumers must
    treat such an early end as an incomplete collection.

    Attributes:
        _executor: Performs each page request (with retries).
        _start: The descriptor for the first page; follow-up requests reuse its
            method, headers and body.
        _rewrite_next_path: Whether followed `next` links get the start path.
        _max_pages: Optional limit on the number of pages fetched.
        _next_descriptor: The request for the next page, None when there is none.
        _buffer: Undelivered records of the current page.
        _fetch_task: The in-flight (or last) page fetch.
        _error: The fetch error waiting to be raised to the consumer.
        _current: Number of records emitted so far.
        _total: Estimated collection size from the first observed `last` link.
    """

    def __init__(
        self,
        executor: Executor,
        descriptor: RequestDescriptor,
        *,
        rewrite_next_path: bool = False,
        max_pages: int | None = None,
        log: "Logger | None" = None,
    ):
        self._executor = executor
        self._start = descriptor
        self._rewrite_next_path = rewrite_next_path
        self._max_pages = max_pages
        self._log = log or logger

        self._next_descriptor: RequestDescriptor | None = descriptor
        self._buffer: deque[Any] = deque()
        self._fetch_task: asyncio.Task[None] | None = None
        self._error: Exception | None = None
        self._state = StreamState.IDLE
        self._current = 0
        self._total: int | None = None
        self._pages_fetched = 0

    @property
    def state(self) -> StreamState:
        return self._state

    @property
    def current(self) -> int:
        """Number of records emitted so far."""
        return self._current

    @property
    def total(self) -> int | None:
        """Estimated number of records, None until a `last` link was seen."""
        return self._total

    @property
    def pages_fetched(self) -> int:
        return self._pages_fetched

    def _set_state(self, state: StreamState) -> None:
        if state is not self._state:
            self._log.trace(
                f"Stream {self._start.url}: {self._state.value} -> {state.value}"
            )
            self._state = state

    def _settle_state(self) -> None:
        if self._buffer:
            self._set_state(StreamState.EMITTING)
        elif self._next_descriptor is None:
            self._set_state(StreamState.EXHAUSTED)
        else:
            self._set_state(StreamState.IDLE)

    def _follow(self, links: LinkSet) -> RequestDescriptor | None:
        if links.next is None:
            return None
        next_url = links.next.url
        if self._rewrite_next_path:
            next_url = rewrite_next_path(next_url, self._start.url)
        self._log.debug(f"Following next page link {next_url}")
        return self._start.with_url(next_url)

    async def _fetch_next_page(self) -> None:
        """Fetch the next page into the buffer, recording any failure."""
        descriptor = self._next_descriptor
        if descriptor is None or self._state is StreamState.CLOSED:
            return
        self._set_state(StreamState.FETCHING)
        try:
            if self._max_pages is not None and self._pages_fetched >= self._max_pages:
                raise PaginationLimitError(
                    f"Pagination of {self._start.url} exceeded {self._max_pages} page(s)."
                )
            page = await fetch_page(self._executor, descriptor, log=self._log)
        except Exception as e:
            if self._state is StreamState.CLOSED:
                self._log.debug(f"Discarding failed fetch of closed stream: {e}")
                return
            self._log.error(f"Stream fetch of {descriptor.url} failed: {e}")
            self._error = e
            self._next_descriptor = None
            self._set_state(StreamState.FAILED)
            return

        self._pages_fetched += 1
        if self._state is StreamState.CLOSED:
            self._log.debug(f"Discarding page {descriptor.url} of closed stream")
            return
        if page is None:
            self._next_descriptor = None
            self._settle_state()
            return

        if self._total is None:
            self._total = page.links.estimated_total
        self._buffer.extend(page.records)
        self._next_descriptor = self._follow(page.links)
        self._settle_state()

    def _emit(self, record: Any) -> ProgressEnvelope:
        self._current += 1
        envelope = ProgressEnvelope(
            data=record,
            progress=Progress(current=self._current, total=self._total),
        )
        self._settle_state()
        return envelope

    def __aiter__(self) -> Self:
        return self

    async def __anext__(self) -> ProgressEnvelope:
        while True:
            if self._buffer:
                return self._emit(self._buffer.popleft())

            if self._state is StreamState.FAILED and self._error is not None:
                error, self._error = self._error, None
                raise error
            if self._state in _TERMINAL_STATES:
                raise StopAsyncIteration

            # Demand while a fetch is outstanding joins that fetch.
            task = self._fetch_task
            if task is None or task.done():
                task = asyncio.ensure_future(self._fetch_next_page())
                self._fetch_task = task
            await asyncio.shield(task)

    async def aclose(self) -> None:
        """Stop the stream. An in-flight fetch completes and is discarded."""
        if self._state is StreamState.CLOSED:
            return
        self._set_state(StreamState.CLOSED)
        self._buffer.clear()
        self._error = None
        task = self._fetch_task
        if task is not None and not task.done():
            self._log.debug(f"Waiting for in-flight fetch of {self._start.url}")
            await asyncio.wait([task])

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object | None,
    ) -> None:
        await self.aclose()
