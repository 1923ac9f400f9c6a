"""HTTP transport boundary for apibase."""

from .client import AiohttpTransport
from .protocols import Response, Transport

__all__ = [
    "AiohttpTransport",
    "Response",
    "Transport",
]
