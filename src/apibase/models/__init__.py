"""apibase configuration and event models."""

from .config import APIConfig, ByteSize, NetworkConfig
from .events import ProgressEvent, TransferDirection

__all__ = [
    # Config
    "APIConfig",
    "ByteSize",
    "NetworkConfig",
    # Events
    "ProgressEvent",
    "TransferDirection",
]
