"""Request execution with retries, response classification and JSON decoding.

This module provides the RequestExecutor, which sends one logical request
through an httpx.AsyncClient and retries transient failures with exponential
backoff (tenacity). Callers only ever observe the final outcome: the response
envelope of the successful attempt, or the error of the last attempt.

Decoding is deliberately separate (`decode_json`): unexpected content types and
malformed bodies are programming-visible errors and are never retried.
"""

import json
import re
from http import HTTPStatus
from typing import TYPE_CHECKING, Any

import httpx
import tenacity
from tenacity import AsyncRetrying, stop_after_attempt, wait_exponential

from .auth import AuthStrategy, NoAuth
from .config import ClientSettings
from .exceptions import (
    AuthError,
    HttpError,
    MalformedResponseError,
    NetworkError,
    NotFoundError,
    PhraseAppClientError,
    RateLimitError,
    TimeoutError,
    UnexpectedContentTypeError,
)
from .log_config import logger
from .types import NO_CONTENT, NoContent, RequestDescriptor, ResponseEnvelope

if TYPE_CHECKING:
    from loguru import Logger

_JSON_CONTENT_TYPE_RE = re.compile(r"^\s*application/json", re.IGNORECASE)

TRANSIENT_TRANSPORT_ERRORS: tuple[type[Exception], ...] = (
    httpx.TimeoutException,
    httpx.NetworkError,
    httpx.RemoteProtocolError,
)
"""httpx errors worth another attempt (timeouts, resets, dropped connections)."""


class RequestExecutor:
    """Sends requests and retries transient failures.

    The executor holds no per-request state: concurrent traversals may share
    one instance, and only the httpx connection pool is shared between them.

    Attributes:
        _http_client: The httpx.AsyncClient used to send requests. Not owned.
        _settings: Retry, timeout and User-Agent configuration.
        _auth_strategy: Adds credentials to every attempt.
        _retryable_status_codes: Status codes treated as transient.
        _log: Logger used for request tracing.
    """

    DEFAULT_RETRYABLE_STATUS_CODES: frozenset[int] = frozenset(
        [429, 500, 502, 503, 504]
    )
    """Default set of HTTP status codes considered transient."""

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        settings: ClientSettings,
        auth_strategy: AuthStrategy | None = None,
        *,
        retryable_status_codes: frozenset[int] = DEFAULT_RETRYABLE_STATUS_CODES,
        log: "Logger | None" = None,
    ):
        self._http_client = http_client
        self._settings = settings
        self._auth_strategy: AuthStrategy = auth_strategy or NoAuth()
        self._retryable_status_codes = retryable_status_codes
        self._log = log or logger
        self._backoff = wait_exponential(
            multiplier=settings.backoff_factor, max=settings.max_backoff
        )

    async def _authenticate(self, request: httpx.Request) -> None:
        try:
            await self._auth_strategy.async_authenticate(request)
        except AuthError:
            raise
        except Exception as e:
            self._log.exception(f"Unexpected error during authentication: {e}")
            raise AuthError(f"Unexpected authentication error: {e}") from e

        user_agent = request.headers.get("User-Agent")
        if not user_agent or user_agent.startswith("python-httpx/"):
            request.headers["User-Agent"] = self._settings.user_agent

    async def _execute_single_request(
        self, descriptor: RequestDescriptor
    ) -> ResponseEnvelope:
        """Execute a single HTTP request attempt and classify the outcome.

        Raises:
            RateLimitError: If the API answered 429.
            NotFoundError: If the API answered 404.
            HttpError: For any other status >= 400.
            TimeoutError: If the request timed out.
            NetworkError: For other transport failures.
            AuthError: If the auth strategy failed.
        """
        request = descriptor.build_request(self._http_client)
        await self._authenticate(request)

        debug_text = f"{request.method} to {request.url}"
        if request.content:
            debug_text += f" with body {request.content.decode(errors='replace')}"
        self._log.debug(debug_text)

        try:
            response = await self._http_client.send(request)
        except httpx.TimeoutException as e:
            self._log.error(f"Request timed out: {request.url}")
            raise TimeoutError("Request timed out", request=request) from e
        except httpx.RequestError as e:
            self._log.error(f"Network error occurred for {request.url}: {e}")
            raise NetworkError(
                f"Network error for {request.url}: {e}", request=request
            ) from e

        status = response.status_code
        self._log.debug(f"Return status is {status} for {request.url}")

        if status >= HTTPStatus.BAD_REQUEST:
            message = (
                f"Error requesting {request.url}. Request returned http error {status}."
            )
            if status == HTTPStatus.TOO_MANY_REQUESTS:
                rate_limit = ResponseEnvelope.from_response(response).rate_limit
                raise RateLimitError(
                    message,
                    retry_after=rate_limit.retry_after,
                    response=response,
                    request=request,
                )
            if status == HTTPStatus.NOT_FOUND:
                raise NotFoundError(
                    message, status=status, response=response, request=request
                )
            raise HttpError(message, status=status, response=response, request=request)

        return ResponseEnvelope.from_response(response)

    def _should_retry_request(self, retry_state: tenacity.RetryCallState) -> bool:
        """Predicate for tenacity: should we retry this request?"""
        outcome = retry_state.outcome
        if outcome is None or not outcome.failed:
            return False

        exc = outcome.exception()
        if isinstance(exc, NetworkError):
            return isinstance(exc.__cause__, TRANSIENT_TRANSPORT_ERRORS)
        if isinstance(exc, HttpError):
            return exc.status in self._retryable_status_codes
        return False

    def _wait_before_retry(self, retry_state: tenacity.RetryCallState) -> float:
        """Exponential backoff, or the server's Retry-After hint on a 429."""
        exc = retry_state.outcome.exception() if retry_state.outcome else None
        if (
            self._settings.respect_retry_after
            and isinstance(exc, RateLimitError)
            and exc.retry_after is not None
        ):
            return min(exc.retry_after, self._settings.max_retry_after)
        return self._backoff(retry_state)

    async def _before_retry_sleep(self, retry_state: tenacity.RetryCallState) -> None:
        """Log details before tenacity sleeps between retries."""
        if not retry_state.outcome:
            return

        exc = retry_state.outcome.exception()
        request = getattr(exc, "request", None)
        request_info = f"for {request.method} {request.url}" if request else ""
        sleep_time = (
            getattr(retry_state.next_action, "sleep", 0)
            if retry_state.next_action
            else 0
        )
        self._log.warning(
            f"Retrying request {request_info} in {sleep_time:.2f} seconds "
            f"after {retry_state.attempt_number} attempt(s) due to: "
            f"{type(exc).__name__} - {exc}"
        )

    async def execute(self, descriptor: RequestDescriptor) -> ResponseEnvelope:
        """Send the described request, retrying transient failures.

        Args:
            descriptor: What to send.

        Returns:
            ResponseEnvelope: The response of the first successful attempt.

        Raises:
            NetworkError: The transport failed on every attempt.
            HttpError: The peer answered with a status >= 400 (after retries,
                for transient statuses).
            AuthError: The auth strategy could not prepare the request.
        """
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self._settings.max_retries + 1),
            wait=self._wait_before_retry,
            retry=self._should_retry_request,
            reraise=True,
            before_sleep=self._before_retry_sleep,
        )
        try:
            envelope = await retrying(self._execute_single_request, descriptor)
        except PhraseAppClientError as e:
            self._log.error(
                f"{descriptor.method} {descriptor.url} failed after "
                f"{retrying.statistics.get('attempt_number', 1)} attempt(s): {e}"
            )
            raise
        self._log.trace(
            f"{descriptor.method} {descriptor.url} succeeded after "
            f"{retrying.statistics.get('attempt_number', 1)} attempt(s)"
        )
        return envelope


def decode_json(
    envelope: ResponseEnvelope, *, log: "Logger | None" = None
) -> Any | NoContent:
    """Decode a response body as JSON.

    Args:
        envelope: The response to decode.
        log: Optional logger; defaults to the package logger.

    Returns:
        The decoded JSON value, or NO_CONTENT for a 204 response.

    Raises:
        UnexpectedContentTypeError: If the content type is not application/json.
        MalformedResponseError: If the body is not valid JSON.
    """
    log = log or logger
    if envelope.status == HTTPStatus.NO_CONTENT:
        log.debug(f"No content returned from {envelope.url}")
        return NO_CONTENT

    content_type = envelope.content_type
    if not content_type or not _JSON_CONTENT_TYPE_RE.match(content_type):
        raise UnexpectedContentTypeError(
            f"Unexpected content returned from {envelope.url}. "
            f"Returned content type {content_type}.",
            content_type=content_type,
        )

    try:
        return json.loads(envelope.raw_body)
    except ValueError as e:
        raise MalformedResponseError(
            f"Unable to parse JSON content from {envelope.url}. Got error {e}."
        ) from e
