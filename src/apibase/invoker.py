"""Issue a request on a transport and expose the in-flight attempt."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Generator
from typing import TYPE_CHECKING, Any, Optional

from .http.protocols import Response, Transport
from .pipeline.steps.http import is_http_response
from .progress import TransferProgress
from .request import RequestDescriptor

if TYPE_CHECKING:
    from .pipeline.base import ResponsePipeline

logger = logging.getLogger(__name__)


class Transfer:
    """
    Handle for one request attempt.

    Awaiting the transfer yields the outcome: the response after the
    pipeline has run, or the first error raised by the transport or a
    validation step. Progress for this attempt is available on
    ``progress`` and is closed before the outcome is delivered.

    Example:
        transfer = send(transport, descriptor)
        transfer.progress.subscribe(on_progress)
        try:
            response = await transfer
        except HTTPFailureError as e:
            print(f"Server said {e.status}")
    """

    def __init__(
        self,
        future: asyncio.Future[Any],
        progress: TransferProgress,
        descriptor: Optional[RequestDescriptor] = None,
    ) -> None:
        self._future = future
        self._progress = progress
        self._descriptor = descriptor
        self._cancel_requested = False

    @classmethod
    def failed(cls, error: BaseException) -> Transfer:
        """
        Create a transfer that has already failed without any I/O.

        Must be called with a running event loop.
        """
        future: asyncio.Future[Any] = asyncio.get_running_loop().create_future()
        future.set_exception(error)
        progress = TransferProgress()
        progress.close()
        return cls(future, progress)

    @property
    def progress(self) -> TransferProgress:
        return self._progress

    @property
    def descriptor(self) -> Optional[RequestDescriptor]:
        """The request being sent, or None if it could not be built."""
        return self._descriptor

    def cancel(self) -> bool:
        """
        Cancel the attempt and the underlying transport operation.

        No progress or outcome is delivered after a successful cancel;
        awaiting the transfer raises asyncio.CancelledError.

        Returns:
            True if this call canceled the attempt, False if it had already
            finished or was already canceled
        """
        if self._cancel_requested or self._future.done():
            return False
        self._cancel_requested = True
        self._progress.close()
        logger.debug(f"Canceling transfer for {self._descriptor.url if self._descriptor else '<unbuilt>'}")
        return self._future.cancel()

    def done(self) -> bool:
        return self._future.done()

    def cancelled(self) -> bool:
        return self._future.cancelled()

    def __await__(self) -> Generator[Any, None, Any]:
        return self._future.__await__()


async def _run(
    transport: Transport,
    descriptor: RequestDescriptor,
    progress: TransferProgress,
    pipeline: Optional[ResponsePipeline],
) -> Any:
    try:
        response: Response = await transport.issue(descriptor, progress)
    finally:
        progress.close()

    response = is_http_response(response)
    if pipeline is None:
        return response
    return pipeline.apply(response)


def send(
    transport: Transport,
    descriptor: RequestDescriptor,
    pipeline: Optional[ResponsePipeline] = None,
) -> Transfer:
    """
    Start sending a request and return immediately.

    The request runs as an asyncio task on the running loop. The transport
    is called exactly once; the response must carry an HTTP status and is
    then passed through ``pipeline``.

    Args:
        transport: Transport performing the I/O
        descriptor: The request to send
        pipeline: Validation steps applied to the response

    Returns:
        Transfer for the new attempt

    Raises:
        RuntimeError: If no event loop is running
    """
    loop = asyncio.get_running_loop()
    progress = TransferProgress()
    task = loop.create_task(_run(transport, descriptor, progress, pipeline))
    return Transfer(task, progress, descriptor)
