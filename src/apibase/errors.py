"""Error types raised while building, sending, and validating requests."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .http.protocols import Response


class RequestErrorKind(str, Enum):
    """Kinds of failure produced by apibase itself."""

    INVALID_URL = "invalid_url"
    NON_HTTP_RESPONSE = "non_http_response"
    HTTP_FAILURE = "http_failure"
    CONTENT_TYPE_MISMATCH = "content_type_mismatch"


class RequestError(Exception):
    """
    Base class for request errors.

    Transport errors (aiohttp.ClientError, asyncio.TimeoutError, ...) are
    never wrapped in a RequestError; they reach the caller unchanged.
    """

    kind: RequestErrorKind


class InvalidURLError(RequestError):
    """The base URL, path and query items do not form a valid URL."""

    kind = RequestErrorKind.INVALID_URL

    def __init__(self, message: str, url: Optional[str] = None) -> None:
        super().__init__(message)
        self.url = url


class NonHTTPResponseError(RequestError):
    """The transport returned a response without an HTTP status line."""

    kind = RequestErrorKind.NON_HTTP_RESPONSE

    def __init__(self, message: str = "Response is not an HTTP response") -> None:
        super().__init__(message)


class HTTPFailureError(RequestError):
    """
    The response status code is outside the accepted set.

    Attributes:
        status: The status code the server actually returned
        response: The rejected response, when available
    """

    kind = RequestErrorKind.HTTP_FAILURE

    def __init__(self, status: int, response: Optional[Response] = None) -> None:
        super().__init__(f"HTTP {status}")
        self.status = status
        self.response = response


class ContentTypeMismatchError(RequestError):
    """A non-empty response body does not carry the expected Content-Type."""

    kind = RequestErrorKind.CONTENT_TYPE_MISMATCH

    def __init__(self, expected: str, actual: Optional[str]) -> None:
        super().__init__(f"Expected Content-Type {expected!r}, got {actual!r}")
        self.expected = expected
        self.actual = actual
