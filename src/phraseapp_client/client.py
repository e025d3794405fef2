"""Client for the PhraseApp API.

This module provides the PhraseAppClient, the entry point of the library. It
owns the httpx.AsyncClient, resolves authentication, turns paths into request
descriptors and exposes the three retrieval modes of the engine:

- `request` (and the `get`/`post`/`put`/`patch`/`delete` shortcuts) for a
  single request,
- `fetch_all` to collect every page of a collection,
- `open_stream` to consume a collection record by record.

Named API endpoints are dispatched through the table in `endpoints.py`.
"""

import ssl
from collections.abc import Mapping
from functools import partialmethod
from typing import TYPE_CHECKING, Any, Self

import certifi
import httpx

from .auth import AuthStrategy, NoAuth, TokenAuth
from .config import ClientSettings, get_settings
from .constants import JSON_CONTENT_TYPE
from .endpoints import Endpoint, get_endpoint
from .exceptions import ConfigurationError
from .executor import RequestExecutor, decode_json
from .log_config import logger
from .pagination import fetch_all
from .resources import ProjectScope
from .stream import PaginationStream
from .types import NO_CONTENT, HttpMethod, RequestDescriptor

if TYPE_CHECKING:
    from loguru import Logger


class PhraseAppClient:
    """Asynchronous client for the PhraseApp API.

    Authentication is resolved in this order: an explicit `auth_strategy`, then
    an `access_token` argument, then `settings.access_token`; without any of
    them requests are sent unauthenticated.

    Typical usage:
    ```python
    async with PhraseAppClient(access_token="...") as client:
        projects = await client.list_projects()
        keys = await client.project(projects[0]["id"]).list_keys()
    ```

    Attributes:
        _settings: Configuration settings for the client.
        _base_url: The base URL relative paths are joined onto.
        _auth_strategy: Authentication strategy instance.
        _http_client: The underlying httpx.AsyncClient.
        _should_close_client: Whether this instance owns `_http_client`.
        _executor: Performs requests with retries.
        _log: Logger handed to every traversal.
    """

    def __init__(
        self,
        settings: ClientSettings | None = None,
        auth_strategy: AuthStrategy | None = None,
        *,
        access_token: str | None = None,
        base_url: str | None = None,
        http_client: httpx.AsyncClient | None = None,
        retryable_status_codes: frozenset[
            int
        ] = RequestExecutor.DEFAULT_RETRYABLE_STATUS_CODES,
        log: "Logger | None" = None,
    ):
        """Initialize the PhraseAppClient.

        Args:
            settings: Optional settings; defaults to `get_settings()`.
            auth_strategy: Optional explicit authentication strategy.
            access_token: Optional access token, preferred over the one in settings.
            base_url: Optional base URL, preferred over the one in settings.
            http_client: Optional pre-configured httpx.AsyncClient. It is not
                closed by `aclose()`.
            retryable_status_codes: HTTP status codes treated as transient.
            log: Optional loguru logger (e.g. a bound one) used for this client.
        """
        self._settings = settings or get_settings()
        self._base_url: str = (base_url or self._settings.base_url).rstrip("/")
        self._log = log or logger

        if auth_strategy is not None:
            self._auth_strategy: AuthStrategy = auth_strategy
        elif token := access_token or self._settings.access_token:
            self._auth_strategy = TokenAuth(token)
        else:
            self._auth_strategy = NoAuth()
        self._log.info(
            f"Using authentication strategy: {type(self._auth_strategy).__name__}"
        )

        self._should_close_client = http_client is None
        self._http_client = http_client or self._create_default_http_client()
        self._executor = RequestExecutor(
            self._http_client,
            self._settings,
            self._auth_strategy,
            retryable_status_codes=retryable_status_codes,
            log=self._log,
        )
        self._log.debug(f"PhraseAppClient initialized for {self._base_url}.")

    def _create_default_http_client(self) -> httpx.AsyncClient:
        """Create a default httpx.AsyncClient with configured settings."""
        try:
            verify_ssl: ssl.SSLContext | bool = ssl.create_default_context(
                cafile=certifi.where()
            )
            self._log.debug("Using certifi SSL context.")
        except (OSError, ssl.SSLError):
            verify_ssl = True
            self._log.warning(
                "certifi bundle failed to load. Using default SSL verification."
            )

        return httpx.AsyncClient(
            timeout=self._settings.request_timeout,
            verify=verify_ssl,
            headers={"User-Agent": self._settings.user_agent},
        )

    @property
    def settings(self) -> ClientSettings:
        return self._settings

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def executor(self) -> RequestExecutor:
        return self._executor

    def join_url(self, path: str) -> str:
        """Join a relative path onto the base URL; absolute URLs pass through."""
        if httpx.URL(path).is_absolute_url:
            return path
        return f"{self._base_url}/{path.lstrip('/')}"

    def build_descriptor(
        self,
        method: HttpMethod,
        path: str,
        *,
        params: Mapping[str, Any] | None = None,
        body: Any | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> RequestDescriptor:
        """Build the request descriptor for `method` on `path`.

        Args:
            method: HTTP method.
            path: Path relative to the base URL, or an absolute URL.
            params: Query parameters merged into the URL.
            body: Request body; non-string values are sent as JSON.
            headers: Extra headers, applied over the default `Accept` header
                (names compare case-insensitively).
        """
        url = httpx.URL(self.join_url(path))
        if params:
            url = url.copy_merge_params(dict(params))
        return RequestDescriptor(
            url=str(url),
            method=method,
            headers={"Accept": JSON_CONTENT_TYPE, **(headers or {})},
            body=body,
        )

    async def request(
        self,
        method: HttpMethod,
        path: str,
        *,
        params: Mapping[str, Any] | None = None,
        body: Any | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> Any | None:
        """Perform a single request and decode its JSON body.

        Returns:
            The decoded JSON value, or None if the server answered 204.

        Raises:
            HttpError: For a status >= 400 (after retries for transient ones).
            NetworkError: If the transport failed on every attempt.
            UnexpectedContentTypeError: If a body is not JSON.
            MalformedResponseError: If a JSON body cannot be parsed.
        """
        descriptor = self.build_descriptor(
            method, path, params=params, body=body, headers=headers
        )
        envelope = await self._executor.execute(descriptor)
        data = decode_json(envelope, log=self._log)
        return None if data is NO_CONTENT else data

    get = partialmethod(request, "GET")
    post = partialmethod(request, "POST")
    put = partialmethod(request, "PUT")
    patch = partialmethod(request, "PATCH")
    delete = partialmethod(request, "DELETE")

    async def fetch_all(
        self,
        path: str,
        *,
        method: HttpMethod = "GET",
        params: Mapping[str, Any] | None = None,
        body: Any | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> list[Any] | None:
        """Collect every record of a paginated collection.

        Returns:
            list[Any] | None: All records in page order, or None if the first
                response is a 204. No partial result is ever returned.
        """
        descriptor = self.build_descriptor(
            method, path, params=params, body=body, headers=headers
        )
        return await fetch_all(
            self._executor,
            descriptor,
            max_pages=self._settings.max_pages,
            log=self._log,
        )

    def open_stream(
        self,
        path: str,
        *,
        method: HttpMethod = "GET",
        params: Mapping[str, Any] | None = None,
        body: Any | None = None,
        headers: Mapping[str, str] | None = None,
        rewrite_next_path: bool | None = None,
    ) -> PaginationStream:
        """Open a record-by-record stream over a paginated collection.

        Nothing is requested until the stream is iterated.

        Args:
            rewrite_next_path: Replace the path of followed `next` links with
                `path`. Defaults to `settings.rewrite_next_path`.
        """
        if rewrite_next_path is None:
            rewrite_next_path = self._settings.rewrite_next_path
        descriptor = self.build_descriptor(
            method, path, params=params, body=body, headers=headers
        )
        return PaginationStream(
            self._executor,
            descriptor,
            rewrite_next_path=rewrite_next_path,
            max_pages=self._settings.max_pages,
            log=self._log,
        )

    async def call(
        self,
        endpoint_name: str,
        /,
        *,
        params: Mapping[str, Any] | None = None,
        body: Any | None = None,
        **path_params: str,
    ) -> Any | None:
        """Call a named endpoint; paginated endpoints return every record.

        Raises:
            ConfigurationError: For an unknown endpoint or a missing path parameter.
        """
        endpoint = get_endpoint(endpoint_name)
        path = endpoint.path(**path_params)
        self._log.debug(f"Calling endpoint {endpoint.name}: {endpoint.method} {path}")
        if endpoint.paginated:
            return await self.fetch_all(
                path, method=endpoint.method, params=params, body=body
            )
        return await self.request(endpoint.method, path, params=params, body=body)

    def stream(
        self,
        endpoint_name: str,
        /,
        *,
        params: Mapping[str, Any] | None = None,
        body: Any | None = None,
        rewrite_next_path: bool | None = None,
        **path_params: str,
    ) -> PaginationStream:
        """Open a stream over a named paginated endpoint.

        Raises:
            ConfigurationError: If the endpoint is unknown or not paginated.
        """
        endpoint: Endpoint = get_endpoint(endpoint_name)
        if not endpoint.paginated:
            raise ConfigurationError(
                f"Endpoint '{endpoint.name}' is not paginated and cannot be streamed."
            )
        return self.open_stream(
            endpoint.path(**path_params),
            method=endpoint.method,
            params=params,
            body=body,
            rewrite_next_path=rewrite_next_path,
        )

    async def list_projects(
        self, *, params: Mapping[str, Any] | None = None
    ) -> list[Any] | None:
        return await self.call("list_projects", params=params)

    async def get_project(self, project_id: str) -> Any | None:
        return await self.call("get_project", project_id=project_id)

    def project(self, project_id: str) -> ProjectScope:
        """Return the operations scoped to one project."""
        return ProjectScope(self, project_id)

    async def aclose(self) -> None:
        """Close the underlying HTTP client (if owned) and the auth strategy."""
        if self._should_close_client and not self._http_client.is_closed:
            await self._http_client.aclose()
            self._log.debug("PhraseAppClient internal HTTP client closed.")
        await self._auth_strategy.async_close()

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object | None,
    ) -> None:
        await self.aclose()
