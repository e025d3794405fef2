"""Custom exception classes for the phraseapp_client library."""

import httpx


class PhraseAppClientError(Exception):
    """Base exception class for all phraseapp_client errors."""

    def __init__(
        self,
        message: str,
        *,
        response: httpx.Response | None = None,
        request: httpx.Request | None = None,
    ):
        """Initializes the base exception.

        Args:
            message: The error message.
            response: Optional httpx.Response object associated with the error.
            request: Optional httpx.Request object associated with the error.
        """
        super().__init__(message)
        self.message = message
        self.response = response
        self.request = request

    def __str__(self) -> str:
        if self.response is not None:
            url_info = getattr(getattr(self.response, "request", None), "url", "N/A")
            return (
                f"{self.message} (Status: {self.response.status_code}, URL: {url_info})"
            )
        if isinstance(self.request, httpx.Request):
            return f"{self.message} (URL: {self.request.url})"
        return self.message


class NetworkError(PhraseAppClientError):
    """The transport could not complete the exchange (DNS, refused, reset, ...).

    Raised only once the executor has exhausted its retries.
    """

    def __init__(self, message: str, *, request: httpx.Request | None = None):
        super().__init__(message, request=request, response=None)


class TimeoutError(NetworkError):
    """The request did not complete within the configured timeout."""


class HttpError(PhraseAppClientError):
    """The peer answered with a status code >= 400."""

    def __init__(
        self,
        message: str,
        *,
        status: int,
        response: httpx.Response | None = None,
        request: httpx.Request | None = None,
    ):
        super().__init__(message, response=response, request=request)
        self.status = status

    def __str__(self) -> str:
        if self.response is None:
            return f"{self.message} (Status: {self.status})"
        return super().__str__()


class NotFoundError(HttpError):
    """Represents a resource not found error (404 Not Found)."""


class RateLimitError(HttpError):
    """Represents hitting the API rate limit (429 Too Many Requests)."""

    def __init__(
        self,
        message: str,
        *,
        status: int = 429,
        retry_after: float | None = None,
        response: httpx.Response | None = None,
        request: httpx.Request | None = None,
    ):
        super().__init__(message, status=status, response=response, request=request)
        self.retry_after = retry_after


class UnexpectedContentTypeError(PhraseAppClientError):
    """A successful, non-204 response did not carry a JSON content type."""

    def __init__(
        self,
        message: str,
        *,
        content_type: str | None,
        response: httpx.Response | None = None,
        request: httpx.Request | None = None,
    ):
        super().__init__(message, response=response, request=request)
        self.content_type = content_type


class MalformedResponseError(PhraseAppClientError):
    """A JSON response body could not be parsed."""


class LinkParseError(PhraseAppClientError):
    """A `Link` header segment could not be parsed.

    Only raised when link parsing runs in strict mode; the default parser skips
    the offending segment instead.
    """

    def __init__(self, message: str, *, segment: str | None = None):
        super().__init__(message)
        self.segment = segment


class PaginationLimitError(PhraseAppClientError):
    """A traversal followed more pages than the configured `max_pages`."""


class ConfigurationError(PhraseAppClientError):
    """Represents an error in the library's configuration or call-site usage."""

    def __init__(self, message: str):
        super().__init__(message, response=None)


class AuthError(PhraseAppClientError):
    """Raised when the authentication strategy fails to prepare a request."""
