"""Transport-ready request descriptors."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import BinaryIO, Optional, Union

from multidict import CIMultiDict, CIMultiDictProxy

from .url import QueryItem, build_url


class HTTPMethod(str, Enum):
    """HTTP verbs supported by apibase."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"

    @classmethod
    def parse(cls, value: Union[str, HTTPMethod]) -> HTTPMethod:
        """
        Normalize a verb to an HTTPMethod.

        Raises:
            ValueError: If the verb is not supported
        """
        if isinstance(value, HTTPMethod):
            return value
        return cls(value.upper())


@dataclass(frozen=True)
class BodyStream:
    """
    A request body read lazily by the transport.

    Attributes:
        stream: Binary file-like object positioned at the start of the body
        length: Declared number of bytes the stream will yield
    """

    stream: BinaryIO
    length: int

    def __post_init__(self) -> None:
        if self.length < 0:
            raise ValueError(f"Stream length must be non-negative, got {self.length}")


@dataclass(frozen=True)
class RequestDescriptor:
    """
    Immutable, fully assembled HTTP request.

    At most one of ``body`` and ``body_stream`` is set. When either is set,
    the ``Content-Length`` header matches its length.

    Attributes:
        url: Target URL (already percent-encoded)
        method: HTTP verb
        headers: Case-insensitive read-only header map
        body: Buffered body bytes
        body_stream: Lazily read body
    """

    url: str
    method: HTTPMethod
    headers: CIMultiDictProxy[str]
    body: Optional[bytes] = None
    body_stream: Optional[BodyStream] = None

    @property
    def content_length(self) -> int:
        """Number of body bytes this request will upload."""
        if self.body is not None:
            return len(self.body)
        if self.body_stream is not None:
            return self.body_stream.length
        return 0

    @property
    def has_body(self) -> bool:
        return self.body is not None or self.body_stream is not None


def build_request(
    method: Union[str, HTTPMethod],
    base_url: Optional[str],
    path: str,
    query_items: Iterable[QueryItem] = (),
    content_type: Optional[str] = None,
    body: Optional[bytes] = None,
    body_stream: Optional[BodyStream] = None,
    headers: Optional[Mapping[str, str]] = None,
) -> RequestDescriptor:
    """
    Build a request descriptor. Performs no I/O.

    A buffered body takes priority over a stream when both are given.
    Body headers are applied after caller headers and replace them.

    Args:
        method: HTTP verb, case-insensitive
        base_url: Base URL to resolve the path against
        path: Path component; existing percent escapes are kept
        query_items: Ordered query parameters
        content_type: Content-Type for the body, omitted when None
        body: Buffered body bytes
        body_stream: Streamed body with its declared length
        headers: Additional request headers

    Returns:
        RequestDescriptor ready for a Transport

    Raises:
        InvalidURLError: If the URL cannot be assembled
        ValueError: If the method is not supported
    """
    url = build_url(base_url, path, query_items)
    verb = HTTPMethod.parse(method)

    request_headers: CIMultiDict[str] = CIMultiDict(headers or {})

    if body is not None:
        body = bytes(body)
        body_stream = None
        length = len(body)
    elif body_stream is not None:
        length = body_stream.length
    else:
        length = None

    if length is not None:
        if content_type is not None:
            request_headers["Content-Type"] = content_type
        else:
            request_headers.popall("Content-Type", None)
        request_headers["Content-Length"] = str(length)
    else:
        request_headers.popall("Content-Length", None)

    return RequestDescriptor(
        url=url,
        method=verb,
        headers=CIMultiDictProxy(request_headers),
        body=body,
        body_stream=body_stream,
    )
