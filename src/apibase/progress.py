"""Observable upload/download progress for a single request attempt."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator
from dataclasses import dataclass
from typing import Callable, Optional

from .models.events import ProgressEvent, TransferDirection

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[ProgressEvent], None]


@dataclass(frozen=True)
class ProgressCounter:
    """Snapshot of bytes transferred so far against the expected total."""

    current: int = 0
    expected: int = 0

    @property
    def fraction(self) -> Optional[float]:
        """Completed fraction in [0, 1], or None while the total is unknown."""
        if self.expected <= 0:
            return None
        return min(self.current / self.expected, 1.0)

    @property
    def is_complete(self) -> bool:
        return self.expected > 0 and self.current >= self.expected


class TransferProgress:
    """
    Progress handle for one in-flight request.

    Each attempt gets a fresh handle, so nothing carries over between
    attempts. The transport is the only writer; any number of observers
    may read ``upload`` / ``download``, register callbacks, or iterate
    ``updates()``. Counters are immutable snapshots swapped in whole,
    so a reader on any thread sees a consistent pair.

    Once closed, further reports are ignored and no observer is notified.

    Example:
        transfer = api.send(request)
        transfer.progress.subscribe(lambda e: print(e.direction, e.current, e.expected))
        response = await transfer
        print(transfer.progress.download)
    """

    def __init__(self) -> None:
        self._upload = ProgressCounter()
        self._download = ProgressCounter()
        self._callbacks: list[ProgressCallback] = []
        self._queues: list[asyncio.Queue[Optional[ProgressEvent]]] = []
        self._closed = False

    @property
    def upload(self) -> ProgressCounter:
        """Bytes sent against bytes expected to send."""
        return self._upload

    @property
    def download(self) -> ProgressCounter:
        """Bytes received against bytes expected to receive."""
        return self._download

    @property
    def closed(self) -> bool:
        return self._closed

    def subscribe(self, callback: ProgressCallback) -> Callable[[], None]:
        """
        Register a callback invoked on every counter change.

        Args:
            callback: Called with a ProgressEvent in the writer's context

        Returns:
            A function that removes the callback
        """
        self._callbacks.append(callback)

        def unsubscribe() -> None:
            if callback in self._callbacks:
                self._callbacks.remove(callback)

        return unsubscribe

    def updates(self) -> AsyncIterator[ProgressEvent]:
        """
        Iterate progress events as they happen.

        The iterator ends when the attempt finishes, fails, or is canceled.
        Events published before this call are not replayed.
        """
        queue: asyncio.Queue[Optional[ProgressEvent]] = asyncio.Queue()
        if self._closed:
            queue.put_nowait(None)
        else:
            self._queues.append(queue)
        return self._drain(queue)

    async def _drain(self, queue: asyncio.Queue[Optional[ProgressEvent]]) -> AsyncIterator[ProgressEvent]:
        while True:
            event = await queue.get()
            if event is None:
                return
            yield event

    def report_upload(self, sent: int, expected: int) -> None:
        """Record cumulative bytes sent. Called by transports only."""
        counter = self._advance(self._upload, sent, expected)
        if counter is not None:
            self._upload = counter
            self._publish(ProgressEvent(TransferDirection.UPLOAD, counter.current, counter.expected))

    def report_download(self, received: int, expected: int) -> None:
        """Record cumulative bytes received. Called by transports only."""
        counter = self._advance(self._download, received, expected)
        if counter is not None:
            self._download = counter
            self._publish(ProgressEvent(TransferDirection.DOWNLOAD, counter.current, counter.expected))

    def _advance(self, old: ProgressCounter, current: int, expected: int) -> Optional[ProgressCounter]:
        if self._closed:
            return None
        # Counters never move backwards within an attempt
        if current < old.current:
            return None
        if current == old.current and expected == old.expected:
            return None
        return ProgressCounter(current=current, expected=expected)

    def _publish(self, event: ProgressEvent) -> None:
        for callback in list(self._callbacks):
            try:
                callback(event)
            except Exception as e:
                logger.warning(f"Progress observer {callback!r} failed: {e}")

        for queue in self._queues:
            queue.put_nowait(event)

    def close(self) -> None:
        """End the attempt. Idempotent."""
        if self._closed:
            return
        self._closed = True
        self._callbacks.clear()
        for queue in self._queues:
            queue.put_nowait(None)
        self._queues.clear()

    def __repr__(self) -> str:
        return (
            f"TransferProgress(upload={self._upload.current}/{self._upload.expected}, "
            f"download={self._download.current}/{self._download.expected}, closed={self._closed})"
        )
