"""aiohttp transport with upload/download progress reporting."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator
from types import TracebackType
from typing import Callable, Optional

import aiohttp
from yarl import URL

from .. import __version__
from ..models.config import NetworkConfig
from ..progress import TransferProgress
from ..request import RequestDescriptor
from .protocols import Response

logger = logging.getLogger(__name__)

SessionFactory = Callable[[], aiohttp.ClientSession]


class AiohttpTransport:
    """
    Transport that issues requests through an aiohttp ClientSession.

    Features:
    - Exactly one request per call (no retries)
    - Upload progress measured as body chunks are written
    - Download progress measured as body chunks are read
    - Streamed bodies read lazily, off the event loop
    - aiohttp errors propagate unchanged

    The session is created on first use by ``session_factory`` (overridable),
    or can be injected. Injected sessions are not closed by the transport.

    Example:
        transport = AiohttpTransport(NetworkConfig(timeout=10))

        async with transport:
            progress = TransferProgress()
            response = await transport.issue(descriptor, progress)
            print(response.status, progress.download)
    """

    def __init__(
        self,
        config: Optional[NetworkConfig] = None,
        session: Optional[aiohttp.ClientSession] = None,
        session_factory: Optional[SessionFactory] = None,
    ) -> None:
        """
        Initialize the transport.

        Args:
            config: Network settings (timeouts, proxy, chunk size, User-Agent)
            session: Existing session to use instead of creating one
            session_factory: Callable creating the session on first use
        """
        self._config = config or NetworkConfig()
        self._session = session
        self._owns_session = session is None
        self._session_factory = session_factory or self._default_session

        user_agent = self._config.user_agent
        if user_agent is None:
            user_agent = f"apibase/{__version__} aiohttp/{aiohttp.__version__}"
        self._user_agent = user_agent

    @property
    def config(self) -> NetworkConfig:
        return self._config

    def _default_session(self) -> aiohttp.ClientSession:
        timeout = aiohttp.ClientTimeout(
            total=self._config.timeout,
            connect=self._config.connect_timeout,
        )
        return aiohttp.ClientSession(
            timeout=timeout,
            headers={"User-Agent": self._user_agent},
        )

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = self._session_factory()
            self._owns_session = True
        return self._session

    async def __aenter__(self) -> AiohttpTransport:
        """Enter async context and create session."""
        self._get_session()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Exit async context and close session."""
        await self.close()

    async def close(self) -> None:
        """Close the session if this transport created it."""
        if self._session is not None and self._owns_session:
            await self._session.close()
            self._session = None

    async def _upload_chunks(
        self,
        descriptor: RequestDescriptor,
        progress: TransferProgress,
    ) -> AsyncIterator[bytes]:
        """
        Yield the request body in chunks, reporting each chunk once written.

        aiohttp resumes the generator only after the previous chunk has been
        handed to the connection, so each report counts written bytes only.
        """
        total = descriptor.content_length
        chunk_size = self._config.chunk_size
        sent = 0

        if descriptor.body is not None:
            view = memoryview(descriptor.body)
            while sent < total:
                chunk = bytes(view[sent : sent + chunk_size])
                yield chunk
                sent += len(chunk)
                progress.report_upload(sent, total)
            return

        assert descriptor.body_stream is not None
        stream = descriptor.body_stream.stream
        loop = asyncio.get_running_loop()
        while sent < total:
            chunk = await loop.run_in_executor(None, stream.read, min(chunk_size, total - sent))
            if not chunk:
                raise ValueError(f"Body stream for {descriptor.url} ended after {sent} of {total} bytes")
            yield chunk
            sent += len(chunk)
            progress.report_upload(sent, total)

    async def issue(
        self,
        descriptor: RequestDescriptor,
        progress: TransferProgress,
    ) -> Response:
        """
        Perform one HTTP request.

        Args:
            descriptor: The request to send
            progress: Progress handle for this attempt

        Returns:
            Response with payload, status, and headers

        Raises:
            aiohttp.ClientError: On connection and protocol errors
            asyncio.TimeoutError: When the configured timeout expires
        """
        session = self._get_session()

        data = None
        if descriptor.has_body:
            progress.report_upload(0, descriptor.content_length)
            data = self._upload_chunks(descriptor, progress)

        # aiohttp would otherwise invent application/octet-stream
        skip_auto_headers = () if "Content-Type" in descriptor.headers else ("Content-Type",)

        logger.debug(f"{descriptor.method.value} {descriptor.url}")

        async with session.request(
            descriptor.method.value,
            URL(descriptor.url, encoded=True),
            headers=descriptor.headers,
            data=data,
            proxy=self._config.proxy,
            skip_auto_headers=skip_auto_headers,
        ) as response:
            expected = response.content_length or 0
            received = 0
            chunks: list[bytes] = []
            progress.report_download(0, expected)

            async for chunk in response.content.iter_chunked(self._config.chunk_size):
                chunks.append(chunk)
                received += len(chunk)
                progress.report_download(received, max(expected, received))

            if received:
                progress.report_download(received, received)

            logger.debug(f"{descriptor.method.value} {descriptor.url} -> {response.status} ({received} bytes)")

            return Response(
                data=b"".join(chunks),
                status=response.status,
                headers=response.headers,
                url=str(response.url),
            )
