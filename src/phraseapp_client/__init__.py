"""phraseapp_client: asynchronous client for the PhraseApp API.

The core of the package is a paginated retrieval engine: a request executor
with retry/backoff, a `Link` header navigator, an eager aggregator
(`fetch_all`) and a lazy, demand-driven record stream (`PaginationStream`).
`PhraseAppClient` wires them to httpx, authentication and configuration.
"""

__version__ = "0.1.0"

from . import (  # noqa: E402
    auth,
    client,
    config,
    endpoints,
    exceptions,
    executor,
    links,
    log_config,
    models,
    pagination,
    resources,
    stream,
    types,
)
from .client import PhraseAppClient  # noqa: E402
from .config import ClientSettings, get_settings  # noqa: E402
from .exceptions import (  # noqa: E402
    HttpError,
    MalformedResponseError,
    NetworkError,
    PhraseAppClientError,
    UnexpectedContentTypeError,
)
from .stream import PaginationStream  # noqa: E402
from .types import NO_CONTENT, RequestDescriptor  # noqa: E402

__all__ = [
    "NO_CONTENT",
    "ClientSettings",
    "HttpError",
    "MalformedResponseError",
    "NetworkError",
    "PaginationStream",
    "PhraseAppClient",
    "PhraseAppClientError",
    "RequestDescriptor",
    "UnexpectedContentTypeError",
    "__version__",
    "auth",
    "client",
    "config",
    "endpoints",
    "exceptions",
    "executor",
    "get_settings",
    "links",
    "log_config",
    "models",
    "pagination",
    "resources",
    "stream",
    "types",
]
