"""Base classes for the response validation pipeline."""

from __future__ import annotations

import logging
from collections.abc import Collection
from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Protocol, runtime_checkable

from ..http.protocols import Response
from .steps import SUCCESS_STATUS_CODES, ContentTypeStep, IsHTTPStep, StatusCodeStep

logger = logging.getLogger(__name__)

# Final transform turning a validated response into a consumer value
Decoder = Callable[[Response], Any]


@runtime_checkable
class ValidationStep(Protocol):
    """
    Protocol for pipeline steps.

    Each step receives the response accepted by the previous step and
    either returns it unchanged or raises. Steps are synchronous and
    perform no I/O.

    Example implementation:
        class NonEmptyStep:
            name = "non_empty"

            def check(self, response: Response) -> Response:
                if not response.data:
                    raise ValueError("empty body")
                return response
    """

    name: str

    def check(self, response: Response) -> Response:
        """
        Validate a response.

        Args:
            response: The response accepted so far

        Returns:
            The same response
        """
        ...


@dataclass
class ResponsePipeline:
    """
    Ordered validation steps applied to a response.

    Steps run in order; the first one to raise stops the pipeline and its
    error becomes the outcome. An optional decoder runs last and turns the
    validated response into the value handed to the caller.

    Example:
        pipeline = (
            ResponsePipeline()
            .validate_status_code(range(200, 300))
            .has_content_type("application/json")
            .decode(lambda response: json.loads(response.data))
        )

        payload = pipeline.apply(response)
    """

    steps: list[ValidationStep] = field(default_factory=list)
    decoder: Optional[Decoder] = None

    def add_step(self, step: ValidationStep) -> ResponsePipeline:
        """
        Add a step to the pipeline (fluent API).

        Args:
            step: The step to add

        Returns:
            Self for chaining
        """
        self.steps.append(step)
        return self

    def is_http_response(self) -> ResponsePipeline:
        return self.add_step(IsHTTPStep())

    def validate_status_code(self, status_codes: Collection[int] = SUCCESS_STATUS_CODES) -> ResponsePipeline:
        return self.add_step(StatusCodeStep(status_codes))

    def has_content_type(self, expected: str) -> ResponsePipeline:
        return self.add_step(ContentTypeStep(expected))

    def decode(self, decoder: Decoder) -> ResponsePipeline:
        """Set the final transform applied after all steps pass."""
        self.decoder = decoder
        return self

    def apply(self, response: Response) -> Any:
        """
        Run every step against the response.

        Args:
            response: Response from the transport

        Returns:
            The response, or the decoder's result when a decoder is set

        Raises:
            RequestError: The first validation failure, unchanged
        """
        for step in self.steps:
            response = step.check(response)

        logger.debug(f"Response from {response.url} passed {len(self.steps)} step(s)")

        if self.decoder is not None:
            return self.decoder(response)
        return response
