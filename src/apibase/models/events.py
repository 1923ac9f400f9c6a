"""Progress events published while a request is in flight."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional


class TransferDirection(str, Enum):
    """Which side of the exchange a progress event describes."""

    UPLOAD = "upload"
    DOWNLOAD = "download"


@dataclass(frozen=True)
class ProgressEvent:
    """
    A change in one of the progress counters of a transfer.

    Example:
        transfer.progress.subscribe(
            lambda event: print(f"{event.direction.value}: {event.current}/{event.expected}")
        )
    """

    direction: TransferDirection
    current: int
    expected: int

    # Timestamp (always UTC)
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def progress_percent(self) -> Optional[float]:
        """Calculate progress percentage if the expected total is known."""
        if self.expected > 0:
            return (self.current / self.expected) * 100
        return None

    @property
    def is_upload(self) -> bool:
        return self.direction == TransferDirection.UPLOAD

    @property
    def is_download(self) -> bool:
        return self.direction == TransferDirection.DOWNLOAD
