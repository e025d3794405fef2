"""Eager traversal of link-paginated collections.

`fetch_all` follows the `next` relation of each response's `Link` header until
a page without one, and returns every record of every page in order. It is an
all-or-nothing operation: if any page fails, the error propagates and the
records gathered so far are discarded.
"""

from typing import TYPE_CHECKING, Any

from .exceptions import PaginationLimitError
from .executor import decode_json
from .links import parse_links
from .log_config import logger
from .models import Executor, Page
from .types import NO_CONTENT, RequestDescriptor

if TYPE_CHECKING:
    from loguru import Logger


async def fetch_page(
    executor: Executor,
    descriptor: RequestDescriptor,
    *,
    log: "Logger | None" = None,
) -> Page | None:
    """Fetch and decode a single page.

    A JSON array body becomes the page's records; any other JSON value becomes
    a page with that value as its only record.

    Returns:
        Page | None: The decoded page, or None if the server answered 204.
    """
    log = log or logger
    envelope = await executor.execute(descriptor)
    body = decode_json(envelope, log=log)
    if body is NO_CONTENT:
        return None

    records = body if isinstance(body, list) else [body]
    links = parse_links(envelope.link_header, log=log)
    log.debug(
        f"Fetched page from {descriptor.url}: {len(records)} record(s), "
        f"next={'yes' if links.has_next else 'no'}"
    )
    return Page(records=records, links=links)


async def fetch_all(
    executor: Executor,
    descriptor: RequestDescriptor,
    *,
    max_pages: int | None = None,
    log: "Logger | None" = None,
) -> list[Any] | None:
    """Collect every record of a paginated collection.

    Follow-up requests reuse the method, headers and body of `descriptor`;
    only the URL changes to the previous page's `next` link.

    Args:
        executor: Performs each request (with retries).
        descriptor: The request for the first page.
        max_pages: Abort with PaginationLimitError after this many pages.
        log: Optional logger; defaults to the package logger.

    Returns:
        list[Any] | None: All records in page order, or None when the first
            response is a 204.

    Raises:
        PhraseAppClientError: The error of the first page that failed.
        PaginationLimitError: If more than `max_pages` pages would be fetched.
    """
    log = log or logger
    page = await fetch_page(executor, descriptor, log=log)
    if page is None:
        return None

    records: list[Any] = list(page.records)
    pages_fetched = 1
    while page is not None and page.links.next is not None:
        if max_pages is not None and pages_fetched >= max_pages:
            raise PaginationLimitError(
                f"Pagination of {descriptor.url} exceeded {max_pages} page(s)."
            )
        next_url = page.links.next.url
        log.debug(f"Following next link {next_url}")
        page = await fetch_page(executor, descriptor.with_url(next_url), log=log)
        pages_fetched += 1
        if page is not None:
            records.extend(page.records)

    log.info(
        f"Fetched {len(records)} record(s) in {pages_fetched} page(s) "
        f"from {descriptor.url}"
    )
    return records
