"""Declarative request configuration and the entity that sends it."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from types import TracebackType
from typing import Optional, Protocol, TypeVar, Union

from .errors import InvalidURLError
from .http.client import AiohttpTransport
from .http.protocols import Transport
from .invoker import Transfer, send
from .models.config import APIConfig
from .pipeline.base import ResponsePipeline
from .request import BodyStream, HTTPMethod, RequestDescriptor, build_request
from .url import QueryItem

logger = logging.getLogger(__name__)

T_co = TypeVar("T_co", covariant=True)


@dataclass
class APIRequest:
    """
    Data-only description of a request plus the pipeline for its response.

    Configure every field before sending; the request is read once per
    send to build a fresh descriptor.

    Attributes:
        path: Path component; existing percent escapes are kept
        method: HTTP verb
        base_url: Base URL; falls back to the APIBase default when None
        query_items: Ordered query parameters
        content_type: Content-Type of the body
        body: Buffered body (wins over body_stream)
        body_stream: Streamed body with declared length
        headers: Additional request headers
        pipeline: Validation steps applied to the response
    """

    path: str = ""
    method: Union[HTTPMethod, str] = HTTPMethod.GET
    base_url: Optional[str] = None
    query_items: list[QueryItem] = field(default_factory=list)
    content_type: Optional[str] = None
    body: Optional[bytes] = None
    body_stream: Optional[BodyStream] = None
    headers: dict[str, str] = field(default_factory=dict)
    pipeline: ResponsePipeline = field(default_factory=ResponsePipeline)

    def build(self, default_base_url: Optional[str] = None) -> RequestDescriptor:
        """
        Build a descriptor for this request.

        Raises:
            InvalidURLError: If the URL cannot be assembled
        """
        return build_request(
            method=self.method,
            base_url=self.base_url if self.base_url is not None else default_base_url,
            path=self.path,
            query_items=self.query_items,
            content_type=self.content_type,
            body=self.body,
            body_stream=self.body_stream,
            headers=self.headers,
        )


class Request(Protocol[T_co]):
    """
    Protocol for concrete request types.

    Example implementation:
        class PingRequest:
            def __init__(self, api: APIBase) -> None:
                self._api = api
                self._request = APIRequest(
                    path="/ping",
                    pipeline=ResponsePipeline().validate_status_code(range(200, 300)),
                )

            async def start(self) -> None:
                await self._api.send(self._request)
    """

    async def start(self) -> T_co:
        """Send the request and return its decoded outcome."""
        ...


class APIBase:
    """
    Sends APIRequests over an injected transport.

    Without an explicit transport, an AiohttpTransport is created from
    ``config.network``. Use as an async context manager, or call
    ``close()``, to release the transport.

    Example:
        async with APIBase(config=APIConfig(base_url="https://api.example.com")) as api:
            request = APIRequest(
                path="/status",
                query_items=[QueryItem("verbose", "1")],
                pipeline=ResponsePipeline().validate_status_code().has_content_type("text/plain"),
            )
            transfer = api.send(request)
            response = await transfer
            print(response.data, transfer.progress.download)
    """

    def __init__(
        self,
        transport: Optional[Transport] = None,
        config: Optional[APIConfig] = None,
    ) -> None:
        """
        Initialize the API entity.

        Args:
            transport: Transport used for every send
            config: Settings for the default transport and default base URL
        """
        self.config = config or APIConfig()
        self._transport: Transport = transport or AiohttpTransport(self.config.network)

    @property
    def transport(self) -> Transport:
        return self._transport

    @property
    def base_url(self) -> Optional[str]:
        return self.config.base_url

    def build_request(self, request: APIRequest) -> RequestDescriptor:
        """
        Build the descriptor for a request, applying the default base URL.

        Raises:
            InvalidURLError: If the URL cannot be assembled
        """
        return request.build(self.base_url)

    def send(self, request: APIRequest) -> Transfer:
        """
        Start sending a request.

        URL errors and unsupported methods are detected before any I/O and
        delivered through the returned transfer, so this never raises.

        Args:
            request: The request to send

        Returns:
            Transfer for this attempt; await it for the outcome
        """
        try:
            descriptor = self.build_request(request)
        except (InvalidURLError, ValueError) as e:
            logger.debug(f"Not sending request for path {request.path!r}: {e}")
            return Transfer.failed(e)
        return send(self._transport, descriptor, request.pipeline)

    async def close(self) -> None:
        await self._transport.close()

    async def __aenter__(self) -> APIBase:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.close()
