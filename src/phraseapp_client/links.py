# phraseapp_client/links.py
"""Parsing of RFC 5988 style `Link` headers into a :class:`LinkSet`.

Only the subset the API uses is supported: comma separated
``<url>; rel="name"`` segments whose relation is one of ``first``, ``prev``,
``next`` or ``last``. Numeric pagination hints are read from the ``page`` and
``per_page`` query parameters of each URL.
"""

import re
from typing import TYPE_CHECKING

import httpx

from .constants import LINK_RELATIONS
from .exceptions import LinkParseError
from .log_config import logger
from .models import Link, LinkSet

if TYPE_CHECKING:
    from loguru import Logger

# A segment is everything from one "<" up to the next "<" (or the end).
_SEGMENT_RE = re.compile(r"<([^>]*)>([^<]*)")
_PARAM_SEPARATOR_RE = re.compile(r';(?=(?:[^"]*"[^"]*")*[^"]*$)')

_REL_ALIASES = {"previous": "prev"}


def _positive_int(value: str | None) -> int | None:
    if value is None:
        return None
    try:
        number = int(value)
    except ValueError:
        return None
    return number if number >= 1 else None


def _build_link(url: str, rel: str) -> Link:
    try:
        params = httpx.URL(url).params
    except httpx.InvalidURL:
        params = httpx.QueryParams()
    return Link(
        url=url,
        rel=rel,
        page=_positive_int(params.get("page")),
        per_page=_positive_int(params.get("per_page")),
    )


def _parse_params(params: str) -> dict[str, str]:
    """Map the `;`-separated parameters of a segment by lower-cased name.

    Separators inside quoted values are not split on; the first occurrence
    of a parameter wins.
    """
    parsed: dict[str, str] = {}
    for part in _PARAM_SEPARATOR_RE.split(params):
        name, sep, value = part.partition("=")
        name = name.strip().lower()
        if not sep or not name:
            continue
        value = value.strip().rstrip(",").strip()
        if len(value) >= 2 and value[0] == value[-1] == '"':
            value = value[1:-1]
        parsed.setdefault(name, value)
    return parsed


def _split_segments(header_value: str) -> list[tuple[str | None, str]]:
    """Split a header into (url, params) pairs; url is None for junk segments."""
    segments: list[tuple[str | None, str]] = []
    position = 0
    for match in _SEGMENT_RE.finditer(header_value):
        leading = header_value[position : match.start()].strip(" ,\t")
        if leading:
            segments.append((None, leading))
        segments.append((match.group(1).strip(), match.group(2)))
        position = match.end()
    trailing = header_value[position:].strip(" ,\t")
    if trailing:
        segments.append((None, trailing))
    return segments


def parse_links(
    header_value: str | None,
    *,
    strict: bool = False,
    log: "Logger | None" = None,
) -> LinkSet:
    """Parse a raw `Link` header value into a LinkSet.

    Args:
        header_value: The header value, or None when the response had none.
        strict: Raise LinkParseError for malformed segments instead of
            skipping them.
        log: Optional logger; defaults to the package logger.

    Returns:
        LinkSet: The recognised relations. Absent or empty input yields an
            empty LinkSet.

    Raises:
        LinkParseError: In strict mode, for a segment without a `<url>` or
            without a `rel` parameter.
    """
    log = log or logger
    if not header_value or not header_value.strip():
        return LinkSet()

    found: dict[str, Link] = {}
    for url, params in _split_segments(header_value):
        if not url:
            message = f"Link header segment without a URL: {params!r}"
            if strict:
                raise LinkParseError(message, segment=params)
            log.warning(message)
            continue

        rel_value = _parse_params(params).get("rel")
        if rel_value is None:
            message = f"Link header segment for {url} has no rel parameter"
            if strict:
                raise LinkParseError(message, segment=f"<{url}>{params}")
            log.warning(message)
            continue

        for rel in rel_value.lower().split():
            rel = _REL_ALIASES.get(rel, rel)
            if rel not in LINK_RELATIONS:
                log.trace(f"Ignoring Link relation {rel!r} for {url}")
                continue
            if rel in found:
                continue
            found[rel] = _build_link(url, rel)

    return LinkSet(**found)


def rewrite_next_path(next_url: str, start_url: str) -> str:
    """Return `next_url` with its path replaced by the path of `start_url`.

    The query string (and with it the cursor) of `next_url` is kept. This works
    around servers that hand out `next` links pointing at the wrong path.
    """
    # raw_path keeps percent-escapes such as %2F inside path parameters.
    start_path = httpx.URL(start_url).raw_path.split(b"?", 1)[0]
    next_link = httpx.URL(next_url)
    raw_path = start_path + b"?" + next_link.query if next_link.query else start_path
    return str(next_link.copy_with(raw_path=raw_path))
