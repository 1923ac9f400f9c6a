"""Response validation pipeline."""

from .base import Decoder, ResponsePipeline, ValidationStep

__all__ = ["Decoder", "ResponsePipeline", "ValidationStep"]
