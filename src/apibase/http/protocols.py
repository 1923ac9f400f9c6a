"""Protocol definitions for the transport boundary."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional, Protocol

from multidict import CIMultiDict, CIMultiDictProxy

if TYPE_CHECKING:
    from ..progress import TransferProgress
    from ..request import RequestDescriptor


def _empty_headers() -> CIMultiDictProxy[str]:
    return CIMultiDictProxy(CIMultiDict())


@dataclass(frozen=True)
class Response:
    """
    Immutable response produced by a Transport.

    Attributes:
        data: Raw response payload
        status: HTTP status code, or None if the response had no status line
        headers: Case-insensitive response headers
        url: Final URL of the response
    """

    data: bytes
    status: Optional[int]
    headers: CIMultiDictProxy[str] = field(default_factory=_empty_headers)
    url: str = ""

    @property
    def content_type(self) -> Optional[str]:
        """Content-Type header value, if present."""
        return self.headers.get("Content-Type")

    @property
    def is_http(self) -> bool:
        return isinstance(self.status, int)


class Transport(Protocol):
    """
    Protocol for HTTP transports.

    This abstraction allows for:
    - Stub implementations in tests
    - Different backends (aiohttp, httpx, etc.)
    - Explicit injection instead of a process-wide session
    """

    async def issue(
        self,
        descriptor: RequestDescriptor,
        progress: TransferProgress,
    ) -> Response:
        """
        Perform exactly one request.

        Implementations report cumulative bytes sent and received through
        ``progress`` while the request is outstanding.

        Args:
            descriptor: The request to send
            progress: Progress handle for this attempt

        Returns:
            Response with payload, status, and headers

        Raises:
            Exception: Transport-native errors, unchanged
        """
        ...

    async def close(self) -> None:
        """Release any resources held by the transport."""
        ...
